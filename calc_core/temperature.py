"""
Temperature effects on material properties.

The regime (room/warm/hot) selects which catalogued property set is used;
the temperature factor additionally derates strength within that regime.
"""

from __future__ import annotations

import math
from dataclasses import replace
from typing import Any

MIN_TEMPERATURE_FACTOR = 0.8
REFERENCE_TEMPERATURE_C = 20.0
DEFAULT_COEFFICIENT = 0.0002

ROOM_MAX_C = 100.0
WARM_MAX_C = 300.0

REGIME_LABELS = {
    "room": "Room Temperature (≤100°C)",
    "warm": "Warm Temperature (100-300°C)",
    "hot": "Hot Temperature (>300°C)",
}


def _to_celsius(temperature: float, is_metric: bool) -> float:
    return temperature if is_metric else (temperature - 32.0) * 5.0 / 9.0


def temperature_factor(
    temperature: float,
    is_metric: bool = True,
    material_coefficient: float | None = DEFAULT_COEFFICIENT,
) -> float:
    """Strength multiplier relative to 20°C, never below 0.8."""
    coefficient = DEFAULT_COEFFICIENT if material_coefficient is None else material_coefficient
    celsius = _to_celsius(float(temperature), is_metric)
    return max(1.0 - coefficient * (celsius - REFERENCE_TEMPERATURE_C), MIN_TEMPERATURE_FACTOR)


def regime_of(temperature_celsius: float) -> str:
    if temperature_celsius <= ROOM_MAX_C:
        return "room"
    if temperature_celsius <= WARM_MAX_C:
        return "warm"
    return "hot"


def properties_for_regime(material: Any, regime: str):
    """Property bundle for ``regime``, falling back to room temperature."""
    return material.properties_for(regime)


def describe_regime(regime: str) -> str:
    return REGIME_LABELS.get(regime, REGIME_LABELS["room"])


def _scaled(value: float | None, factor: float) -> float | None:
    return None if value is None else value * factor


def adjust_properties_for_temperature(properties: Any, temperature: float, is_metric: bool = True, coefficient: float | None = None):
    """
    Strengths and hardness are multiplied by the temperature factor,
    elongation is divided by it (ductility rises as strength drops).
    """
    factor = temperature_factor(temperature, is_metric, coefficient)
    elongation = properties.elongation
    if elongation is not None and not math.isclose(factor, 0.0):
        elongation = elongation / factor
    return replace(
        properties,
        tensile_strength=properties.tensile_strength * factor,
        yield_strength=_scaled(properties.yield_strength, factor),
        shear_strength=_scaled(properties.shear_strength, factor),
        hardness=_scaled(properties.hardness, factor),
        elongation=elongation,
    )
