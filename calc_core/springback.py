"""Springback estimation for bends."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping

DEFAULT_STRAIN_HARDENING = 0.2
DEFAULT_YIELD_TO_TENSILE = 0.7
DEFAULT_YIELD_STRENGTH = 300.0
DEFAULT_MODULUS = 200.0
DEFAULT_ANISOTROPY = 1.0

COMPENSATION_RANGES = {
    "Low": "2-5%",
    "Medium": "5-10%",
    "High": "10-15%",
}


@dataclass(frozen=True)
class SpringbackSuggestions:
    severity: str
    characteristics: str
    compensation: str
    tips: tuple[str, ...]
    min_bend_radius: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SpringbackSuggestions":
        return cls(
            severity=data["severity"],
            characteristics=data["characteristics"],
            compensation=data["compensation"],
            tips=tuple(data.get("tips") or ()),
            min_bend_radius=data["min_bend_radius"],
        )


@dataclass(frozen=True)
class SpringbackResult:
    angle: float
    compensation_angle: float
    percentage: float
    thickness_factor: float
    radius_factor: float
    suggestions: SpringbackSuggestions

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SpringbackResult":
        return cls(
            angle=float(data["angle"]),
            compensation_angle=float(data["compensation_angle"]),
            percentage=float(data["percentage"]),
            thickness_factor=float(data["thickness_factor"]),
            radius_factor=float(data["radius_factor"]),
            suggestions=SpringbackSuggestions.from_dict(data["suggestions"]),
        )


def yield_to_tensile_ratio(material) -> float:
    if material.yield_strength and material.tensile_strength:
        return material.yield_strength / material.tensile_strength
    return DEFAULT_YIELD_TO_TENSILE


def springback_angle(target_angle: float, thickness: float, bend_radius: float, material) -> float:
    """Elastic recovery in degrees for a bend to ``target_angle``."""
    if material is None:
        return 0.0
    props = material.properties
    n = props.strain_hardening_exponent or DEFAULT_STRAIN_HARDENING
    yield_strength = material.yield_strength or DEFAULT_YIELD_STRENGTH
    modulus = props.elastic_modulus or DEFAULT_MODULUS
    anisotropy = props.anisotropy_ratio or DEFAULT_ANISOTROPY

    factor = (
        3.0
        * n
        * yield_to_tensile_ratio(material) ** 0.8
        * math.sqrt(bend_radius / thickness)
        * (0.7 + 0.3 * anisotropy)
    )
    radians = math.radians(target_angle) * factor * (yield_strength / modulus)
    return math.degrees(radians)


def compensation_angle(target_angle: float, thickness: float, bend_radius: float, material) -> float:
    if material is None:
        return target_angle
    return target_angle + springback_angle(target_angle, thickness, bend_radius, material)


def springback_percentage(target_angle: float, thickness: float, bend_radius: float, material) -> float:
    if material is None or target_angle == 0:
        return 0.0
    return springback_angle(target_angle, thickness, bend_radius, material) / target_angle * 100.0


def springback_severity(material) -> str:
    n = material.properties.strain_hardening_exponent or DEFAULT_STRAIN_HARDENING
    ratio = yield_to_tensile_ratio(material)
    if n > 0.2 or ratio > 0.8:
        return "High"
    if n > 0.15 or ratio > 0.7:
        return "Medium"
    return "Low"


def springback_suggestions(material) -> SpringbackSuggestions | None:
    if material is None:
        return None
    severity = springback_severity(material)
    fc = material.forming_characteristics
    return SpringbackSuggestions(
        severity=severity,
        characteristics=fc.springback or severity,
        compensation=f"Overbend by {COMPENSATION_RANGES[severity]} for optimal results",
        tips=(
            f"Maintain consistent {fc.recommended_die_clearance or '6-8%'} die clearance",
            f"Use {fc.lubricant_type or 'appropriate'} lubricant to reduce friction",
            f"Set punch speed to {fc.recommended_punch_speed or 'manufacturer recommended speed'}",
        ),
        min_bend_radius=(
            material.properties.minimum_bend_radius or fc.minimum_bend_radius or "1.5t"
        ),
    )


def analyze_bend(bend, thickness_mm: float, material) -> SpringbackResult | None:
    """Springback summary for one bend item, radius taken from its r/t ratio."""
    if material is None:
        return None
    bend_radius = bend.radius_to_thickness * thickness_mm
    angle = springback_angle(bend.angle, thickness_mm, bend_radius, material)
    percentage = angle / bend.angle * 100.0 if bend.angle else 0.0
    return SpringbackResult(
        angle=angle,
        compensation_angle=bend.angle + angle,
        percentage=percentage,
        thickness_factor=1.2 if thickness_mm > 3 else 1.0,
        radius_factor=bend.radius_to_thickness,
        suggestions=springback_suggestions(material),
    )
