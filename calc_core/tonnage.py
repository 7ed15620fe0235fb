"""
Per-operation press force models.

All inputs are millimetres and MPa; every model returns metric tons using
the MPa*mm^2/1000 convention. Empirical coefficients live in the tables
below so each operation family is evaluated by one generic routine.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Mapping

from .diagnostics import (
    DRAW_RATIO_EXCEEDS_LDR,
    DRAW_THICKNESS,
    FORM_DEPTH,
    INVALID_GEOMETRY,
    Diagnostics,
    warn,
)

logger = logging.getLogger(__name__)

TONNAGE_DIVISOR = 1000.0
DEFAULT_REVERSE_FACTOR = 0.7
DEFAULT_STRAIN_HARDENING = 0.2
DEFAULT_DRAW_FRICTION = 0.15
RECTANGULAR_HOLE_ASPECT = 0.8
MAX_FORM_DEPTH_RATIO = 4.0
MAX_BEND_ANGLE = 180.0


@dataclass(frozen=True)
class TypeFactor:
    """``base + slope * min(ratio / divisor, cap)``."""

    base: float
    slope: float
    divisor: float = 1.0
    cap: float = 1.0

    def __call__(self, ratio: float) -> float:
        return self.base + self.slope * min(ratio / self.divisor, self.cap)


BEND_TYPE_FACTORS = {
    "air-bend": 0.8,
    "bottoming": 1.2,
}

FORM_TYPE_FACTORS: Mapping[str, TypeFactor] = {
    "emboss": TypeFactor(1.2, 0.1, 3, 0.3),
    "dimple": TypeFactor(1.0, 0.05, 3, 0.2),
    "louver": TypeFactor(1.4, 0.1, 2, 0.4),
    "bead": TypeFactor(1.1, 0.05, 3, 0.3),
    "rib": TypeFactor(1.3, 0.1, 2, 0.3),
}
DEFAULT_FORM_TYPE_FACTOR = TypeFactor(1.0, 0.05, 4, 0.2)
FORM_CORNER_FACTORS = {"emboss": 1.1, "rib": 1.1}

DRAW_TYPE_FACTORS: Mapping[str, TypeFactor] = {
    "round": TypeFactor(1.0, 0.0),
    "rectangular": TypeFactor(1.1, 0.1),
    "irregular": TypeFactor(1.2, 0.15),
    "tapered": TypeFactor(0.9, 0.1),
}


def _valid(**dims: float | None) -> bool:
    for value in dims.values():
        if value is None or not math.isfinite(value) or value <= 0:
            return False
    return True


def _invalid(operation: str, diagnostics: Diagnostics | None, **dims: float | None) -> float:
    warn(
        diagnostics,
        INVALID_GEOMETRY,
        f"{operation} calculation received invalid dimensions",
        logger=logger,
        operation=operation,
        **dims,
    )
    return 0.0


def perimeter_tonnage(
    length: float,
    thickness: float,
    tensile_strength: float,
    temp_factor: float = 1.0,
    diagnostics: Diagnostics | None = None,
) -> float:
    if not _valid(length=length, thickness=thickness, tensile_strength=tensile_strength):
        return _invalid(
            "perimeter", diagnostics, length=length, thickness=thickness, tensile_strength=tensile_strength
        )
    return length * thickness * tensile_strength * temp_factor / TONNAGE_DIVISOR


def hole_perimeter(diameter: float, shape: str = "circular", width: float | None = None) -> float:
    if shape == "square":
        return 4.0 * diameter
    if shape == "rectangular":
        height = width if width is not None and width > 0 else diameter * RECTANGULAR_HOLE_ASPECT
        return 2.0 * (diameter + height)
    return math.pi * diameter


def hole_tonnage(
    diameter: float,
    thickness: float,
    tensile_strength: float,
    temp_factor: float = 1.0,
    shape: str = "circular",
    quantity: int = 1,
    width: float | None = None,
    diagnostics: Diagnostics | None = None,
) -> float:
    if not _valid(diameter=diameter, thickness=thickness, tensile_strength=tensile_strength, quantity=quantity):
        return _invalid(
            "hole",
            diagnostics,
            diameter=diameter,
            thickness=thickness,
            tensile_strength=tensile_strength,
            quantity=quantity,
        )
    perimeter = hole_perimeter(diameter, shape, width)
    return perimeter * thickness * tensile_strength * temp_factor * quantity / TONNAGE_DIVISOR


def bend_factors(angle: float, radius_to_thickness: float, bend_type: str) -> tuple[float, float, float]:
    """(angle factor, radius factor, type factor) for one bend."""
    angle_factor = 1.0 if angle <= 90 else 1.0 + (angle - 90) * 0.01
    radius_factor = 0.8 + 0.2 * radius_to_thickness
    type_factor = BEND_TYPE_FACTORS.get(bend_type, 1.0)
    return angle_factor, radius_factor, type_factor


def bend_tonnage(
    length: float,
    thickness: float,
    tensile_strength: float,
    temp_factor: float = 1.0,
    angle: float = 90.0,
    radius_to_thickness: float = 1.0,
    bend_type: str = "v-bend",
    diagnostics: Diagnostics | None = None,
) -> float:
    if not _valid(
        length=length,
        thickness=thickness,
        tensile_strength=tensile_strength,
        angle=angle,
        radius_to_thickness=radius_to_thickness,
    ) or angle > MAX_BEND_ANGLE:
        return _invalid(
            "bend",
            diagnostics,
            length=length,
            thickness=thickness,
            tensile_strength=tensile_strength,
            angle=angle,
            radius_to_thickness=radius_to_thickness,
        )
    angle_factor, radius_factor, type_factor = bend_factors(angle, radius_to_thickness, bend_type)
    return (
        length
        * thickness**2
        * tensile_strength
        * angle_factor
        * radius_factor
        * type_factor
        * temp_factor
        / TONNAGE_DIVISOR
    )


def form_tonnage(
    diameter: float,
    depth: float,
    thickness: float,
    tensile_strength: float,
    temp_factor: float = 1.0,
    form_type: str = "emboss",
    quantity: int = 1,
    strain_hardening_exponent: float | None = None,
    diagnostics: Diagnostics | None = None,
) -> float:
    if not _valid(
        diameter=diameter, depth=depth, thickness=thickness, tensile_strength=tensile_strength, quantity=quantity
    ):
        return _invalid(
            "form",
            diagnostics,
            diameter=diameter,
            depth=depth,
            thickness=thickness,
            tensile_strength=tensile_strength,
            quantity=quantity,
        )

    max_depth = thickness * MAX_FORM_DEPTH_RATIO
    if depth > max_depth:
        warn(
            diagnostics,
            FORM_DEPTH,
            f"Form depth ({depth}mm) exceeds recommended maximum ({max_depth}mm) "
            f"for material thickness {thickness}mm",
            logger=logger,
            depth=depth,
            max_depth=max_depth,
            thickness=thickness,
        )

    area = math.pi * (diameter / 2.0) ** 2
    depth_to_thickness = depth / thickness
    depth_factor = 0.5 + 0.3 * (depth / diameter) ** 1.3 + 0.1 * min(depth_to_thickness / 5.0, 1.0)
    type_factor = FORM_TYPE_FACTORS.get(form_type, DEFAULT_FORM_TYPE_FACTOR)(depth_to_thickness)
    n = strain_hardening_exponent or DEFAULT_STRAIN_HARDENING
    strain_hardening_factor = 1.0 + n * 0.5
    corner_factor = FORM_CORNER_FACTORS.get(form_type, 1.0)

    return (
        area
        * thickness
        * tensile_strength
        * depth_factor
        * type_factor
        * strain_hardening_factor
        * corner_factor
        * temp_factor
        * quantity
        / TONNAGE_DIVISOR
    )


def limiting_drawing_ratio(tensile_strength: float, strain_hardening_exponent: float | None = None) -> float:
    n = strain_hardening_exponent or DEFAULT_STRAIN_HARDENING
    return max(1.8, min(2.2, 2.5 - tensile_strength / 1000.0 + n * 0.5))


def draw_tonnage(
    diameter: float,
    depth: float,
    thickness: float,
    tensile_strength: float,
    temp_factor: float = 1.0,
    draw_type: str = "round",
    quantity: int = 1,
    strain_hardening_exponent: float | None = None,
    friction_coefficient: float | None = None,
    diagnostics: Diagnostics | None = None,
) -> float:
    if not _valid(
        diameter=diameter, depth=depth, thickness=thickness, tensile_strength=tensile_strength, quantity=quantity
    ):
        return _invalid(
            "draw",
            diagnostics,
            diameter=diameter,
            depth=depth,
            thickness=thickness,
            tensile_strength=tensile_strength,
            quantity=quantity,
        )

    ldr = limiting_drawing_ratio(tensile_strength, strain_hardening_exponent)
    ratio = depth / diameter
    if ratio > ldr:
        warn(
            diagnostics,
            DRAW_RATIO_EXCEEDS_LDR,
            f"Draw depth to diameter ratio ({ratio:.2f}) exceeds the limiting drawing ratio "
            f"({ldr:.2f}) for tensile strength {tensile_strength} MPa",
            logger=logger,
            ratio=ratio,
            ldr=ldr,
        )
    if thickness < diameter * 0.005:
        warn(
            diagnostics,
            DRAW_THICKNESS,
            f"Material may be too thin ({thickness}mm) for draw diameter {diameter}mm, wrinkling may occur",
            logger=logger,
            thickness=thickness,
            diameter=diameter,
        )
    elif thickness > diameter * 0.1:
        warn(
            diagnostics,
            DRAW_THICKNESS,
            f"Material may be too thick ({thickness}mm) for draw diameter {diameter}mm, fracturing may occur",
            logger=logger,
            thickness=thickness,
            diameter=diameter,
        )

    area = math.pi * (diameter / 2.0) ** 2
    if ratio >= ldr * 0.8:
        ldr_factor = 1.0 + ((ratio - ldr * 0.8) / (ldr * 0.2)) ** 2 * 0.5
    else:
        ldr_factor = 1.0
    depth_factor = 0.7 + 0.3 * ratio**1.5 + 0.3 * ratio
    type_factor = DRAW_TYPE_FACTORS.get(draw_type, DRAW_TYPE_FACTORS["round"])(ratio)
    friction_factor = 1.0 + (friction_coefficient or DEFAULT_DRAW_FRICTION) * 4.0
    holddown_factor = 1.0 + 0.1 * min(ratio * 2.0, 0.5)

    return (
        area
        * thickness
        * tensile_strength
        * depth_factor
        * type_factor
        * temp_factor
        * friction_factor
        * holddown_factor
        * ldr_factor
        * quantity
        / TONNAGE_DIVISOR
    )


def reverse_tonnage(total_tonnage: float, reverse_factor: float | None = None) -> float:
    if reverse_factor is None:
        reverse_factor = DEFAULT_REVERSE_FACTOR
    return total_tonnage * reverse_factor
