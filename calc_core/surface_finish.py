"""
Surface finish prediction.

Predicted Ra (μm) is a base roughness from hardness and grain size scaled by
independent lubricant, speed, tool-condition and temperature factors. The
effective friction coefficient is derived from an analogous factor table.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

LUBRICANT_RA_FACTORS = {
    "none": 1.3,
    "light oil": 0.9,
    "medium oil": 0.8,
    "heavy oil": 0.7,
    "emulsion": 0.85,
    "solid film": 0.6,
    "synthetic": 0.75,
    "water-based": 0.88,
    "semi-synthetic": 0.8,
    "vegetable-based": 0.82,
    "mineral oil": 0.78,
    "EP oil": 0.65,
    "chlorinated oil": 0.62,
    "EP oil with MoS2": 0.55,
    "chlorinated oil with EP": 0.52,
    "titanium lubricant": 0.50,
}
VISCOSITY_FACTORS = {"low": 1.1, "medium": 1.0, "high": 0.9}
ADDITIVE_RA_FACTORS = {
    "EP": 0.9,
    "AW": 0.92,
    "FM": 0.88,
    "VI": 0.95,
    "MoS2": 0.85,
    "PTFE": 0.82,
    "graphite": 0.87,
}
MIN_ADDITIVE_RA_FACTOR = 0.7

SPEED_FACTORS = {"slow": 0.9, "medium": 1.0, "high": 1.2, "very high": 1.4}
TOOL_CONDITION_FACTORS = {"new": 0.8, "good": 1.0, "worn": 1.5, "damaged": 2.0}
REGIME_RA_FACTORS = {"room": 1.0, "warm": 1.2, "hot": 1.5}

LUBRICANT_FRICTION_FACTORS = {
    "none": 1.0,
    "light oil": 0.85,
    "medium oil": 0.75,
    "heavy oil": 0.65,
    "emulsion": 0.80,
    "solid film": 0.55,
    "synthetic": 0.70,
    "water-based": 0.82,
    "semi-synthetic": 0.72,
    "vegetable-based": 0.76,
    "mineral oil": 0.75,
    "EP oil": 0.60,
    "chlorinated oil": 0.55,
}
ADDITIVE_FRICTION_FACTORS = {
    "EP": 0.85,
    "AW": 0.88,
    "FM": 0.80,
    "VI": 0.95,
    "MoS2": 0.75,
    "PTFE": 0.65,
    "graphite": 0.78,
}
MIN_ADDITIVE_FRICTION_FACTOR = 0.55
REGIME_FRICTION_FACTORS = {"room": 1.0, "warm": 1.15, "hot": 1.3}
MIN_FRICTION = 0.04
DEFAULT_FRICTION = 0.3

RMS_PER_RA = 1.11

QUALITY_BREAKPOINTS = (
    (0.5, "Excellent - Mirror finish"),
    (1.0, "Very good - Fine machined surface"),
    (2.0, "Good - Standard machined surface"),
    (4.0, "Fair - Rough machined surface"),
    (8.0, "Poor - Rough formed surface"),
)
CLASSIFICATION_BREAKPOINTS = (
    (0.1, "Super finish"),
    (0.5, "Polished"),
    (1.6, "Ground"),
    (3.2, "Fine machined"),
    (6.3, "Medium machined"),
    (12.5, "Rough machined"),
    (25.0, "Rough formed"),
)


@dataclass(frozen=True)
class Lubricant:
    type: str = "none"
    viscosity: str = "medium"
    additives: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "Lubricant":
        data = data or {}
        return cls(
            type=str(data.get("type") or "none"),
            viscosity=str(data.get("viscosity") or "medium"),
            additives=tuple(data.get("additives") or ()),
        )


@dataclass(frozen=True)
class SurfaceFinishFactors:
    base_surface_roughness: float
    lubricant_factor: float
    speed_factor: float
    tool_condition_factor: float
    temperature_factor: float


@dataclass(frozen=True)
class SurfaceFinishResult:
    predicted_ra: float
    predicted_rq: float
    quality_assessment: str
    classification: str
    effective_friction_coefficient: float
    factors: SurfaceFinishFactors
    recommendations: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SurfaceFinishResult":
        return cls(
            predicted_ra=float(data["predicted_ra"]),
            predicted_rq=float(data["predicted_rq"]),
            quality_assessment=data["quality_assessment"],
            classification=data["classification"],
            effective_friction_coefficient=float(data["effective_friction_coefficient"]),
            factors=SurfaceFinishFactors(**data["factors"]),
            recommendations=tuple(data.get("recommendations") or ()),
        )


def _compound(additives: Sequence[str], table: Mapping[str, float], floor: float) -> float:
    if not additives:
        return 1.0
    effect = 1.0
    for additive in additives:
        effect *= table.get(additive, 1.0)
    return max(effect, floor)


def base_surface_roughness(properties) -> float:
    hardness = properties.hardness or 150.0
    grain_size = properties.grain_size or 5.0
    roughness = 0.5 + 250.0 / hardness + 0.1 * grain_size
    if properties.tensile_strength > 800:
        roughness *= 0.85
    return roughness


def lubricant_factor(lubricant: Lubricant) -> float:
    return (
        LUBRICANT_RA_FACTORS.get(lubricant.type, 1.0)
        * VISCOSITY_FACTORS.get(lubricant.viscosity, 1.0)
        * _compound(lubricant.additives, ADDITIVE_RA_FACTORS, MIN_ADDITIVE_RA_FACTOR)
    )


def effective_friction_coefficient(
    base_friction: float | None,
    lubricant: Lubricant,
    regime: str = "room",
) -> float:
    friction = (
        (base_friction or DEFAULT_FRICTION)
        * LUBRICANT_FRICTION_FACTORS.get(lubricant.type, 1.0)
        * VISCOSITY_FACTORS.get(lubricant.viscosity, 1.0)
        * _compound(lubricant.additives, ADDITIVE_FRICTION_FACTORS, MIN_ADDITIVE_FRICTION_FACTOR)
        * REGIME_FRICTION_FACTORS.get(regime, 1.0)
    )
    return max(friction, MIN_FRICTION)


def _lookup(ra: float, breakpoints, fallback: str) -> str:
    for limit, label in breakpoints:
        if ra < limit:
            return label
    return fallback


def assess_surface_quality(ra: float) -> str:
    return _lookup(ra, QUALITY_BREAKPOINTS, "Very poor - Extremely rough surface")


def classify_surface_finish(ra: float) -> str:
    return _lookup(ra, CLASSIFICATION_BREAKPOINTS, "Extremely rough")


def surface_finish_recommendations(
    ra: float,
    material,
    forming_speed: str,
    tool_condition: str,
    lubricant: Lubricant,
) -> list[str]:
    recs: list[str] = []
    hardness = material.properties.hardness

    if lubricant.type == "none":
        recs.append("Apply appropriate lubricant to significantly improve surface finish")
    elif lubricant.type in ("light oil", "water-based"):
        if material.category == "stainless-steel":
            recs.append("Use chlorinated oil or EP additives for better surface finish with stainless steel")
        elif material.category == "titanium":
            recs.append("Switch to specialized lubricant with MoS2 or PTFE additives for titanium materials")
        elif material.category == "aluminum":
            recs.append("Consider synthetic lubricant with lower friction for aluminum forming")
        else:
            recs.append("Use a higher viscosity lubricant or solid film for improved surface finish")

    if not lubricant.additives:
        if hardness is not None and hardness > 180:
            recs.append("Add EP (Extreme Pressure) additives to lubricant for this hard material")
        else:
            recs.append("Consider lubricant with friction modifiers to improve surface quality")

    if forming_speed in ("high", "very high"):
        recs.append("Reduce forming speed to improve surface finish")

    if tool_condition in ("worn", "damaged"):
        recs.append("Replace or refurbish forming tools to achieve better surface finish")

    if material.regime == "hot":
        recs.append("Consider reducing forming temperature if possible to improve surface quality")
        if lubricant.type != "solid film" and "EP" not in lubricant.additives:
            recs.append("Use high-temperature lubricant with EP additives for elevated temperature forming")

    if hardness is not None and hardness < 150:
        recs.append("Consider pre-hardening or using harder die materials for this soft material")

    if ra < 1.6:
        recs.append("Maintain current process parameters and regularly inspect tool condition")

    return recs


def calculate_surface_finish(
    material,
    forming_speed: str = "medium",
    tool_condition: str = "new",
    lubricant: Lubricant | Mapping[str, Any] | None = None,
) -> SurfaceFinishResult | None:
    if material is None:
        return None
    if not isinstance(lubricant, Lubricant):
        lubricant = Lubricant.from_dict(lubricant)

    props = material.properties
    factors = SurfaceFinishFactors(
        base_surface_roughness=base_surface_roughness(props),
        lubricant_factor=lubricant_factor(lubricant),
        speed_factor=SPEED_FACTORS.get(forming_speed, 1.0),
        tool_condition_factor=TOOL_CONDITION_FACTORS.get(tool_condition, 1.0),
        temperature_factor=REGIME_RA_FACTORS.get(material.regime, 1.0),
    )
    ra = (
        factors.base_surface_roughness
        * factors.lubricant_factor
        * factors.speed_factor
        * factors.tool_condition_factor
        * factors.temperature_factor
    )
    return SurfaceFinishResult(
        predicted_ra=ra,
        predicted_rq=ra * RMS_PER_RA,
        quality_assessment=assess_surface_quality(ra),
        classification=classify_surface_finish(ra),
        effective_friction_coefficient=effective_friction_coefficient(
            props.friction_coefficient, lubricant, material.regime
        ),
        factors=factors,
        recommendations=tuple(
            surface_finish_recommendations(ra, material, forming_speed, tool_condition, lubricant)
        ),
    )
