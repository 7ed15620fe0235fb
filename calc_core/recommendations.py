"""Rule-based process recommendations per operation type."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Mapping

from .temperature import describe_regime

DEFAULT_DIE_CLEARANCE = "6%"
DEFAULT_PUNCH_SPEED = "150-300mm/s"
DEFAULT_BLANK_HOLDING_FORCE = "Medium"
DEFAULT_LUBRICANT = "Standard lubricant"
DEFAULT_GRAIN_EFFECT = "Moderate"
DEFAULT_MAX_FORMING_DEPTH = "60% of diameter"

TITLES = {
    "perimeter": ("Cutting Recommendations", "Optimal parameters for perimeter cutting operations"),
    "hole": ("Punching Recommendations", "Optimal parameters for hole punching operations"),
    "bend": ("Bending Recommendations", "Optimal parameters for bending operations"),
    "form": ("Forming Recommendations", "Optimal parameters for forming operations"),
    "draw": ("Drawing Recommendations", "Optimal parameters for drawing operations"),
}
GENERAL_TITLE = ("General Recommendations", "General process parameters for this material")

BLANK_HOLDER_PRESSURES = {
    "Very High": "3.0 - 4.0 MPa",
    "High": "2.0 - 3.0 MPa",
    "Medium": "1.5 - 2.0 MPa",
    "Medium-High": "1.5 - 2.0 MPa",
    "Moderate": "1.5 - 2.0 MPa",
    "Moderate to High": "1.5 - 2.0 MPa",
    "Low": "1.0 - 1.5 MPa",
    "Low-Medium": "1.0 - 1.5 MPa",
}
STRONG_GRAIN_EFFECTS = ("Significant", "Very Significant", "Extremely Critical")

REGIME_EFFICIENCY = {"warm": 0.95, "hot": 0.90}
OPERATION_EFFICIENCY = {"bend": 1.05, "draw": 1.10}

_LEADING_NUMBER = re.compile(r"^\s*([-+]?\d*\.?\d+)")


@dataclass(frozen=True)
class ProcessRecommendation:
    operation_type: str
    title: str
    description: str
    die_clearance: str
    punch_speed: str
    blank_holding_force: str
    lubricant_type: str
    grain_direction_effect: str
    temperature_range: str
    max_forming_depth: str
    tonnage_efficiency_factor: float
    specific: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ProcessRecommendation":
        return cls(**{**data, "specific": dict(data.get("specific") or {})})


def _parse_leading_float(text: str | None) -> float | None:
    if not text:
        return None
    m = _LEADING_NUMBER.match(str(text))
    return float(m.group(1)) if m else None


def _mm(value: float) -> str:
    return f"{value:g}mm"


def adjust_clearance_for_cutting(base_clearance: str | None, tensile_strength: float | None) -> str:
    """Nudges a clearance percentage for high (>600 MPa) or low (<300 MPa) strength."""
    base = _parse_leading_float(base_clearance) or 6.0
    ts = tensile_strength or 400.0
    adjustment = 0.0
    if ts > 600:
        adjustment = 1.5
    elif ts < 300:
        adjustment = -0.5
    return f"{base + adjustment:.1f}%"


def edge_quality(tensile_strength: float | None, elongation: float | None) -> str:
    ts = tensile_strength or 400.0
    el = elongation or 20.0
    if ts > 600 or el < 10:
        return "Consider secondary deburring operation"
    if ts > 400 or el < 20:
        return "Standard edge quality expected"
    return "Good edge quality expected"


def tool_life(hardness: float | None, friction: float | None) -> str:
    h = 100.0 if hardness is None else hardness
    mu = 0.4 if friction is None else friction
    if h > 200 or mu > 0.5:
        return "Reduced tool life expected - increase inspection frequency"
    if h > 100 or mu > 0.4:
        return "Average tool life expected"
    return "Above average tool life expected"


def grain_direction(effect: str | None) -> str:
    if effect in STRONG_GRAIN_EFFECTS:
        return "Align bend axis perpendicular to grain direction"
    if effect == "Moderate":
        return "Consider grain direction for critical dimensions"
    return "Grain direction has minimal impact"


def surface_finish_expectation(roughness: float | None) -> str:
    r = 0.8 if roughness is None else roughness
    if r < 0.5:
        return "High surface quality expected"
    if r < 1.0:
        return "Standard surface quality expected"
    return "Rougher surface finish expected"


def stretchability(elongation: float | None, strain_hardening: float | None) -> str:
    index = ((elongation or 20.0) / 20.0) * ((strain_hardening or 0.2) / 0.2)
    if index > 1.5:
        return "Excellent stretchability"
    if index > 0.8:
        return "Good stretchability"
    return "Limited stretchability"


def max_draw_ratio(anisotropy: float | None, strain_hardening: float | None) -> str:
    index = (anisotropy or 1.0) * (1 + (strain_hardening or 0.2) * 2)
    if index > 2.0:
        return "2.2 - 2.4 LDR"
    if index > 1.5:
        return "2.0 - 2.2 LDR"
    if index > 1.0:
        return "1.8 - 2.0 LDR"
    return "1.6 - 1.8 LDR"


def blank_holder_pressure(force: str | None) -> str:
    return BLANK_HOLDER_PRESSURES.get(force or "", "1.5 - 2.5 MPa")


def tonnage_efficiency_factor(regime: str, operation_type: str) -> float:
    factor = REGIME_EFFICIENCY.get(regime, 1.0) * OPERATION_EFFICIENCY.get(operation_type, 1.0)
    return round(factor, 2)


def _specifics(operation_type: str, props, fc, clearance: str, thickness_mm: float | None) -> tuple[str, dict[str, str]]:
    if operation_type == "perimeter":
        return adjust_clearance_for_cutting(clearance, props.tensile_strength), {
            "edge_quality": edge_quality(props.tensile_strength, props.elongation),
            "tool_life": tool_life(props.hardness, props.friction_coefficient),
        }
    if operation_type == "hole":
        t = thickness_mm or 0.0
        return adjust_clearance_for_cutting(clearance, props.tensile_strength), {
            "minimum_diameter": _mm(max(t or 1.0, 1.5)),
            "recommended_spacing": _mm(max(t * 2 or 3.0, 3.0)),
            "tool_life": tool_life(props.hardness, props.friction_coefficient),
        }
    if operation_type == "bend":
        return clearance, {
            "minimum_bend_radius": props.minimum_bend_radius or fc.minimum_bend_radius or "1.5t",
            "springback": fc.springback or "Medium",
            "grain_direction": grain_direction(fc.grain_direction_effect),
        }
    if operation_type == "form":
        return clearance, {
            "surface_finish": surface_finish_expectation(props.surface_roughness),
            "max_depth": fc.max_forming_depth or DEFAULT_MAX_FORMING_DEPTH,
            "stretchability": stretchability(props.elongation, props.strain_hardening_exponent),
        }
    if operation_type == "draw":
        return clearance, {
            "draw_ratio": max_draw_ratio(props.anisotropy_ratio, props.strain_hardening_exponent),
            "blank_holder_pressure": blank_holder_pressure(fc.blank_holding_force),
            "surface_finish": surface_finish_expectation(props.surface_roughness),
        }
    return clearance, {}


def generate_process_recommendations(
    material,
    operation_type: str,
    thickness_mm: float | None = None,
) -> ProcessRecommendation | None:
    if material is None:
        return None
    props = material.properties
    fc = material.forming_characteristics
    title, description = TITLES.get(operation_type, GENERAL_TITLE)
    clearance, specific = _specifics(
        operation_type, props, fc, fc.recommended_die_clearance or DEFAULT_DIE_CLEARANCE, thickness_mm
    )
    return ProcessRecommendation(
        operation_type=operation_type,
        title=title,
        description=description,
        die_clearance=clearance,
        punch_speed=fc.recommended_punch_speed or DEFAULT_PUNCH_SPEED,
        blank_holding_force=fc.blank_holding_force or DEFAULT_BLANK_HOLDING_FORCE,
        lubricant_type=fc.lubricant_type or DEFAULT_LUBRICANT,
        grain_direction_effect=fc.grain_direction_effect or DEFAULT_GRAIN_EFFECT,
        temperature_range=describe_regime(material.regime),
        max_forming_depth=fc.max_forming_depth or DEFAULT_MAX_FORMING_DEPTH,
        tonnage_efficiency_factor=tonnage_efficiency_factor(material.regime, operation_type),
        specific=specific,
    )
