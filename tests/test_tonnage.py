from __future__ import annotations

import math
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from calc_core.diagnostics import (
    DRAW_RATIO_EXCEEDS_LDR,
    DRAW_THICKNESS,
    FORM_DEPTH,
    INVALID_GEOMETRY,
    Diagnostics,
)
from calc_core.tonnage import (
    bend_factors,
    bend_tonnage,
    draw_tonnage,
    form_tonnage,
    hole_perimeter,
    hole_tonnage,
    limiting_drawing_ratio,
    perimeter_tonnage,
    reverse_tonnage,
)


def test_perimeter_cut_force() -> None:
    assert perimeter_tonnage(500.0, 2.0, 400.0, 1.0) == pytest.approx(400.0)
    assert perimeter_tonnage(500.0, 2.0, 400.0, 0.9) == pytest.approx(360.0)


def test_circular_holes_scale_with_quantity() -> None:
    assert hole_tonnage(20.0, 2.0, 400.0, 1.0, quantity=3) == pytest.approx(150.796, rel=1e-4)


def test_hole_shapes() -> None:
    assert hole_perimeter(10.0, "circular") == pytest.approx(math.pi * 10.0)
    assert hole_perimeter(10.0, "square") == pytest.approx(40.0)
    assert hole_perimeter(10.0, "rectangular") == pytest.approx(36.0)
    assert hole_perimeter(10.0, "rectangular", width=5.0) == pytest.approx(30.0)
    assert hole_tonnage(10.0, 1.0, 400.0, shape="square") == pytest.approx(16.0)
    assert hole_tonnage(10.0, 1.0, 400.0, shape="rectangular", width=5.0) == pytest.approx(12.0)


def test_bend_force_with_angle_and_radius_factors() -> None:
    assert bend_factors(120.0, 2.0, "v-bend") == pytest.approx((1.3, 1.2, 1.0))
    assert bend_tonnage(100.0, 1.0, 300.0, 1.0, angle=120.0, radius_to_thickness=2.0) == pytest.approx(46.8)


def test_bend_type_factors() -> None:
    base = bend_tonnage(100.0, 1.0, 300.0, angle=90.0)
    assert base == pytest.approx(30.0)
    assert bend_tonnage(100.0, 1.0, 300.0, angle=90.0, bend_type="air-bend") == pytest.approx(24.0)
    assert bend_tonnage(100.0, 1.0, 300.0, angle=90.0, bend_type="bottoming") == pytest.approx(36.0)
    assert bend_tonnage(100.0, 1.0, 300.0, angle=45.0) == pytest.approx(base)


def test_bend_grows_with_thickness_squared() -> None:
    assert bend_tonnage(100.0, 2.0, 300.0) == pytest.approx(4.0 * bend_tonnage(100.0, 1.0, 300.0))


@pytest.mark.parametrize("thickness", [0.5, 1.0, 2.0, 4.0])
def test_all_models_grow_with_tensile_strength(thickness: float) -> None:
    low, high = 300.0, 600.0
    assert perimeter_tonnage(100, thickness, high) > perimeter_tonnage(100, thickness, low)
    assert hole_tonnage(10, thickness, high) > hole_tonnage(10, thickness, low)
    assert bend_tonnage(100, thickness, high) > bend_tonnage(100, thickness, low)
    assert form_tonnage(40, 2, thickness, high) > form_tonnage(40, 2, thickness, low)
    assert draw_tonnage(80, 20, thickness, high) > draw_tonnage(80, 20, thickness, low)


def test_form_force() -> None:
    assert form_tonnage(20.0, 2.0, 1.0, 400.0) == pytest.approx(103.806, rel=1e-3)
    assert form_tonnage(20.0, 2.0, 1.0, 400.0, quantity=2) == pytest.approx(
        2 * form_tonnage(20.0, 2.0, 1.0, 400.0)
    )
    assert form_tonnage(20.0, 2.0, 1.0, 400.0, form_type="unknown") > 0


def test_form_deeper_than_four_thicknesses_warns() -> None:
    sink = Diagnostics()
    tonnage = form_tonnage(20.0, 10.0, 2.0, 400.0, diagnostics=sink)
    assert tonnage > 0
    assert sink.codes() == [FORM_DEPTH]


def test_draw_force() -> None:
    assert draw_tonnage(50.0, 20.0, 1.0, 400.0) == pytest.approx(1182.105, rel=1e-4)


def test_limiting_drawing_ratio_is_clamped() -> None:
    assert limiting_drawing_ratio(400.0, 0.2) == pytest.approx(2.2)
    assert limiting_drawing_ratio(900.0, 0.1) == pytest.approx(1.8)
    assert limiting_drawing_ratio(600.0, 0.1) == pytest.approx(1.95)


def test_draw_past_ldr_warns_and_costs_more() -> None:
    sink = Diagnostics()
    deep = draw_tonnage(10.0, 50.0, 0.5, 400.0, diagnostics=sink)
    assert DRAW_RATIO_EXCEEDS_LDR in sink.codes()
    assert deep > draw_tonnage(10.0, 10.0, 0.5, 400.0)


def test_draw_thickness_warnings() -> None:
    thin = Diagnostics()
    draw_tonnage(500.0, 50.0, 1.0, 400.0, diagnostics=thin)
    assert thin.codes() == [DRAW_THICKNESS]
    assert "too thin" in next(iter(thin)).message

    thick = Diagnostics()
    draw_tonnage(10.0, 5.0, 2.0, 400.0, diagnostics=thick)
    assert thick.codes() == [DRAW_THICKNESS]
    assert "too thick" in next(iter(thick)).message


@pytest.mark.parametrize("bad", [0.0, -1.0, float("nan"), float("inf")])
def test_invalid_geometry_returns_zero_with_warning(bad: float) -> None:
    sink = Diagnostics()
    assert perimeter_tonnage(bad, 1.0, 400.0, diagnostics=sink) == 0.0
    assert hole_tonnage(bad, 1.0, 400.0, diagnostics=sink) == 0.0
    assert bend_tonnage(bad, 1.0, 400.0, diagnostics=sink) == 0.0
    assert form_tonnage(bad, 1.0, 1.0, 400.0, diagnostics=sink) == 0.0
    assert draw_tonnage(bad, 1.0, 1.0, 400.0, diagnostics=sink) == 0.0
    assert sink.codes() == [INVALID_GEOMETRY] * 5


def test_invalid_geometry_without_sink_does_not_raise() -> None:
    assert hole_tonnage(10.0, 0.0, 400.0) == 0.0


def test_reverse_tonnage_defaults_to_seventy_percent() -> None:
    assert reverse_tonnage(400.0) == pytest.approx(280.0)
    assert reverse_tonnage(400.0, 0.5) == pytest.approx(200.0)
    assert reverse_tonnage(400.0, None) == pytest.approx(280.0)
    assert reverse_tonnage(400.0, 0.0) == 0.0


@pytest.mark.parametrize("quantity", [0, -2])
def test_non_positive_form_and_draw_quantity_is_invalid(quantity: int) -> None:
    sink = Diagnostics()
    assert form_tonnage(20.0, 2.0, 1.0, 400.0, quantity=quantity, diagnostics=sink) == 0.0
    assert draw_tonnage(50.0, 20.0, 1.0, 400.0, quantity=quantity, diagnostics=sink) == 0.0
    assert sink.codes() == [INVALID_GEOMETRY] * 2
    assert [d.context["quantity"] for d in sink] == [quantity, quantity]


@pytest.mark.parametrize(("angle", "ratio"), [(90.0, 0.0), (90.0, -10.0), (181.0, 1.0), (300.0, 1.0)])
def test_bend_out_of_range_angle_or_ratio_is_invalid(angle: float, ratio: float) -> None:
    sink = Diagnostics()
    assert bend_tonnage(100.0, 1.0, 300.0, angle=angle, radius_to_thickness=ratio, diagnostics=sink) == 0.0
    assert sink.codes() == [INVALID_GEOMETRY]


def test_bend_at_one_eighty_degrees_is_still_computed() -> None:
    sink = Diagnostics()
    assert bend_tonnage(100.0, 1.0, 300.0, angle=180.0, diagnostics=sink) == pytest.approx(57.0)
    assert sink.codes() == []


def test_tonnage_grows_with_geometry() -> None:
    holes = [hole_tonnage(d, 1.0, 400.0) for d in (5.0, 10.0, 20.0, 40.0)]
    bends = [bend_tonnage(length, 1.0, 400.0) for length in (10.0, 50.0, 100.0, 400.0)]
    forms = [form_tonnage(40.0, depth, 1.0, 400.0) for depth in (0.5, 1.0, 2.0, 3.0)]
    draws = [draw_tonnage(60.0, depth, 1.0, 400.0) for depth in (5.0, 10.0, 20.0, 40.0)]
    for series in (holes, bends, forms, draws):
        assert all(a < b for a, b in zip(series, series[1:]))
