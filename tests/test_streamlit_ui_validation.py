from __future__ import annotations

import pandas as pd
import pytest

from app.validation import (
    clamp_batch_quantity,
    clamp_bend,
    clamp_draw,
    clamp_form,
    clamp_hole,
    clamp_item,
    clamp_perimeter_length,
    clamp_temperature,
    clamp_thickness,
    item_defaults,
    validate_items,
)


def test_thickness_is_clamped_per_unit_system() -> None:
    assert clamp_thickness(2.0, True).value == 2.0
    assert clamp_thickness(2.0, True).warnings == []
    assert clamp_thickness(0.05, True).value == 0.1
    assert clamp_thickness(150.0, True).value == 100.0
    assert clamp_thickness(5.0, False).value == 4.0
    assert clamp_thickness(0.001, False).value == 0.004

    res = clamp_thickness("abc", True)
    assert res.value == 1.0
    assert "Invalid thickness value detected and corrected to 1.0" in res.warnings


def test_temperature_bounds() -> None:
    assert clamp_temperature(-100.0, True).value == -50.0
    assert clamp_temperature(1500.0, True).value == 1200.0
    assert clamp_temperature(3000.0, False).value == 2192.0
    assert clamp_temperature(-10.0, True).warnings == []
    assert clamp_temperature(None, True).value == 20.0


def test_perimeter_and_batch() -> None:
    assert clamp_perimeter_length(20000.0, True).value == 10000.0
    assert clamp_perimeter_length(500.0, False).value == 400.0
    assert clamp_batch_quantity(0).value == 1
    assert clamp_batch_quantity("7").value == 7
    assert clamp_batch_quantity(None).warnings


def test_hole_clamps() -> None:
    res = clamp_hole({"diameter": 0.1, "quantity": 0, "shape": "oval"}, True)
    assert res.value["diameter"] == 0.5
    assert res.value["quantity"] == 1
    assert res.value["shape"] == "circular"
    assert len(res.warnings) == 3
    assert clamp_hole({"diameter": 30.0}, False).value["diameter"] == 20.0
    assert clamp_hole({"diameter": 10.0, "width": -3}, True).value["width"] is None


def test_bend_clamps() -> None:
    res = clamp_bend({"angle": 200.0, "radius_to_thickness": 0.2, "length": -5})
    assert res.value["angle"] == 90.0
    assert res.value["radius_to_thickness"] == 1.0
    assert res.value["length"] == 100.0
    assert "Invalid bend angle detected and corrected" in res.warnings
    assert clamp_bend({"angle": 180.0, "radius_to_thickness": 0.5}).warnings == []


def test_form_and_draw_defaults() -> None:
    form = clamp_form({"diameter": None, "depth": "x", "quantity": 2})
    assert (form.value["diameter"], form.value["depth"], form.value["quantity"]) == (20.0, 2.0, 2)
    draw = clamp_draw({"type": "rectangular", "corner_radius": 0})
    assert draw.value["corner_radius"] == 5.0
    assert draw.value["type"] == "rectangular"
    assert draw.value["diameter"] == 50.0


def test_unknown_category_is_rejected() -> None:
    with pytest.raises(ValueError):
        clamp_item("welds", {}, True)


def test_validate_items_marks_corrected_rows() -> None:
    df = pd.DataFrame(
        [
            {"id": "keep-me", "shape": "square", "diameter": 12.0, "width": None, "quantity": 2},
            {"id": None, "shape": None, "diameter": float("nan"), "width": None, "quantity": -1},
        ]
    )
    res = validate_items(df, "holes", True)
    assert res.has_corrections
    assert res.row_status == {0: "OK", 1: "CORRECTED"}
    first, second = res.items
    assert first["id"] == "keep-me" and first["shape"] == "square" and first["quantity"] == 2
    assert "id" not in second
    assert second["diameter"] == 10.0 and second["quantity"] == 1
    assert len(res.warnings) == 1 and res.warnings[0].startswith("row#1")


def test_validate_items_uses_translator() -> None:
    df = pd.DataFrame([{"id": None, "type": "v-bend", "length": 10.0, "angle": 0, "radius_to_thickness": 1.0}])
    res = validate_items(df, "bends", True, translator=lambda key, **kw: f"<{key}>")
    assert "<validation.angle_corrected>" in res.warnings[0]


def test_imperial_defaults_match_metric_defaults() -> None:
    assert clamp_temperature(None, False).value == 68.0
    assert clamp_thickness("abc", False).value == 0.04
    assert clamp_perimeter_length(-1, False).value == 4.0
    assert clamp_hole({"diameter": None}, False).value["diameter"] == pytest.approx(0.394)
    assert clamp_bend({"length": 0}, False).value["length"] == pytest.approx(3.937)
    draw = clamp_draw({"depth": "x"}, False).value
    assert draw["depth"] == pytest.approx(0.787)
    assert item_defaults("forms", False)["diameter"] == pytest.approx(0.787)
    assert item_defaults("forms", True)["diameter"] == 20.0
