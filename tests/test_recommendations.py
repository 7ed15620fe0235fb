from __future__ import annotations

import pytest

from calc_core.model import select_material
from calc_core.recommendations import (
    adjust_clearance_for_cutting,
    generate_process_recommendations,
    max_draw_ratio,
    stretchability,
    tonnage_efficiency_factor,
)


def test_clearance_adjusts_for_strength() -> None:
    assert adjust_clearance_for_cutting("6-8%", 400.0) == "6.0%"
    assert adjust_clearance_for_cutting("8-10%", 620.0) == "9.5%"
    assert adjust_clearance_for_cutting("5-7%", 230.0) == "4.5%"
    assert adjust_clearance_for_cutting(None, None) == "6.0%"
    assert adjust_clearance_for_cutting("tight", 400.0) == "6.0%"


@pytest.mark.parametrize(
    ("regime", "operation", "factor"),
    [("room", "perimeter", 1.0), ("warm", "perimeter", 0.95), ("room", "draw", 1.1), ("hot", "hole", 0.9)],
)
def test_tonnage_efficiency_factor(regime: str, operation: str, factor: float) -> None:
    assert tonnage_efficiency_factor(regime, operation) == pytest.approx(factor)


def test_index_bands() -> None:
    assert stretchability(40.0, 0.3) == "Excellent stretchability"
    assert stretchability(20.0, 0.2) == "Good stretchability"
    assert stretchability(10.0, 0.1) == "Limited stretchability"
    assert max_draw_ratio(2.0, 0.2) == "2.2 - 2.4 LDR"
    assert max_draw_ratio(0.5, 0.2) == "1.6 - 1.8 LDR"


def test_perimeter_recommendation(mild_steel) -> None:
    rec = generate_process_recommendations(mild_steel, "perimeter", 2.0)
    assert rec.title == "Cutting Recommendations"
    assert rec.die_clearance == "6.0%"
    assert rec.punch_speed == "150-300mm/s"
    assert rec.specific == {
        "edge_quality": "Good edge quality expected",
        "tool_life": "Average tool life expected",
    }
    assert rec.temperature_range.startswith("Room Temperature")


@pytest.mark.parametrize(
    ("thickness", "minimum", "spacing"),
    [(2.0, "2mm", "4mm"), (0.5, "1.5mm", "3mm"), (None, "1.5mm", "3mm")],
)
def test_hole_recommendation_uses_actual_thickness(mild_steel, thickness, minimum: str, spacing: str) -> None:
    rec = generate_process_recommendations(mild_steel, "hole", thickness)
    assert rec.specific["minimum_diameter"] == minimum
    assert rec.specific["recommended_spacing"] == spacing


def test_bend_form_draw_specifics(mild_steel) -> None:
    bend = generate_process_recommendations(mild_steel, "bend")
    assert bend.die_clearance == "6-8%"
    assert bend.tonnage_efficiency_factor == pytest.approx(1.05)
    assert bend.specific == {
        "minimum_bend_radius": "0.5t",
        "springback": "Low to Medium",
        "grain_direction": "Consider grain direction for critical dimensions",
    }

    form = generate_process_recommendations(mild_steel, "form")
    assert form.specific["stretchability"] == "Excellent stretchability"
    assert form.specific["max_depth"] == "60% of diameter"
    assert form.specific["surface_finish"] == "Rougher surface finish expected"

    draw = generate_process_recommendations(mild_steel, "draw")
    assert draw.specific["draw_ratio"] == "2.0 - 2.2 LDR"
    assert draw.specific["blank_holder_pressure"] == "1.5 - 2.0 MPa"


def test_defaults_when_characteristics_missing(material_factory) -> None:
    material = select_material(material_factory(tensile=700.0))
    rec = generate_process_recommendations(material, "perimeter")
    assert rec.die_clearance == "7.5%"
    assert rec.lubricant_type == "Standard lubricant"
    assert rec.blank_holding_force == "Medium"
    assert rec.specific["edge_quality"] == "Consider secondary deburring operation"


def test_strong_grain_effect(catalog) -> None:
    rec = generate_process_recommendations(select_material(catalog["titanium"]), "bend")
    assert rec.specific["grain_direction"] == "Align bend axis perpendicular to grain direction"


def test_unknown_operation_gets_general_title(mild_steel) -> None:
    rec = generate_process_recommendations(mild_steel, "general")
    assert rec.title == "General Recommendations"
    assert rec.specific == {}


def test_missing_material_returns_none() -> None:
    assert generate_process_recommendations(None, "bend") is None
