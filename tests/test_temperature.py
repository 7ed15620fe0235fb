from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from calc_core.model import PropertySet
from calc_core.temperature import (
    adjust_properties_for_temperature,
    describe_regime,
    properties_for_regime,
    regime_of,
    temperature_factor,
)


def test_reference_temperature_has_unit_factor() -> None:
    assert temperature_factor(20.0) == pytest.approx(1.0)
    assert temperature_factor(68.0, is_metric=False) == pytest.approx(1.0)


def test_factor_decreases_with_temperature_and_is_floored() -> None:
    values = [temperature_factor(t) for t in (-50, 20, 200, 600, 1000, 1200)]
    assert values == sorted(values, reverse=True)
    assert min(values) == pytest.approx(0.8)
    assert temperature_factor(520.0) == pytest.approx(0.9)


def test_cold_material_gets_factor_above_one() -> None:
    assert temperature_factor(-30.0) == pytest.approx(1.01)


def test_material_coefficient_is_used() -> None:
    assert temperature_factor(120.0, material_coefficient=0.001) == pytest.approx(0.9)
    assert temperature_factor(120.0, material_coefficient=None) == pytest.approx(0.98)


@pytest.mark.parametrize(
    ("celsius", "regime"),
    [(-50.0, "room"), (100.0, "room"), (100.01, "warm"), (300.0, "warm"), (300.01, "hot"), (900.0, "hot")],
)
def test_regime_boundaries(celsius: float, regime: str) -> None:
    assert regime_of(celsius) == regime


def test_describe_regime_falls_back_to_room() -> None:
    assert "Warm" in describe_regime("warm")
    assert describe_regime("unknown") == describe_regime("room")


def test_adjust_properties_scales_strength_and_elongation() -> None:
    props = PropertySet(tensile_strength=400.0, yield_strength=250.0, elongation=30.0, hardness=120.0)
    adjusted = adjust_properties_for_temperature(props, 520.0)
    assert adjusted.tensile_strength == pytest.approx(360.0)
    assert adjusted.yield_strength == pytest.approx(225.0)
    assert adjusted.hardness == pytest.approx(108.0)
    assert adjusted.elongation == pytest.approx(30.0 / 0.9)
    assert adjusted.shear_strength is None


def test_properties_for_regime_selects_bundle(catalog, material_factory) -> None:
    steel = catalog["mild-steel"]
    assert properties_for_regime(steel, "hot").tensile_strength == pytest.approx(220.0)
    assert properties_for_regime(steel, "warm").tensile_strength == pytest.approx(370.0)
    room_only = material_factory(tensile=310.0)
    assert properties_for_regime(room_only, "hot") is room_only.properties_for("room")
    assert properties_for_regime(room_only, "hot").tensile_strength == pytest.approx(310.0)
