from __future__ import annotations

import pandas as pd
import pytest

from app import session


@pytest.fixture()
def state(catalog):
    st: dict = {}
    session.init_state(st, catalog)
    return st


def test_no_result_until_material_selected(state) -> None:
    assert session.dispatch(state, "setThickness", 2.0) is None
    assert state["results"] is None
    results = session.dispatch(state, "setSelectedMaterial", "mild-steel")
    assert results is not None
    assert state["snapshot"].material.id == "mild-steel"


def test_unknown_material_and_event_are_rejected(state) -> None:
    with pytest.raises(ValueError, match="Material not found"):
        session.dispatch(state, "setSelectedMaterial", "unobtainium")
    with pytest.raises(ValueError, match="unknown event"):
        session.dispatch(state, "explode")


def test_perimeter_flow_produces_expected_totals(state) -> None:
    session.dispatch(state, "setSelectedMaterial", "mild-steel")
    session.dispatch(state, "setThickness", 2.0)
    session.dispatch(state, "toggleOperationType", "perimeter")
    results = session.dispatch(state, "operations/setPerimeterLength", 500.0)
    assert results.total_tonnage == pytest.approx(400.0)
    assert results.reverse_tonnage == pytest.approx(280.0)

    results = session.dispatch(state, "setBatchQuantity", 10)
    assert results.total_tonnage == pytest.approx(4000.0)


def test_clamped_input_is_reported(state) -> None:
    session.dispatch(state, "setSelectedMaterial", "mild-steel")
    session.dispatch(state, "setThickness", 500.0)
    assert state["snapshot"].parameters.thickness == 100.0
    assert state["warnings"] == ["thickness too large, set to maximum: 100.0"]

    session.dispatch(state, "setThickness", 3.0)
    assert state["warnings"] == []


def test_item_events(state) -> None:
    session.dispatch(state, "setSelectedMaterial", "mild-steel")
    session.dispatch(state, "toggleOperationType", "holes")
    session.dispatch(state, "addHole", {"diameter": 20.0, "quantity": 3})
    session.dispatch(state, "setThickness", 2.0)
    (hole,) = state["snapshot"].operations.items("holes")
    assert state["results"].holes_tonnage == pytest.approx(150.796, rel=1e-4)

    session.dispatch(state, "updateHole", {"id": hole.id, "quantity": 0})
    assert state["snapshot"].operations.items("holes")[0].quantity == 1
    assert state["warnings"]

    session.dispatch(state, "removeHole", hole.id)
    assert state["snapshot"].operations.items("holes") == ()
    assert state["results"].holes_tonnage == 0.0

    with pytest.raises(ValueError, match="not found"):
        session.dispatch(state, "updateHole", {"id": "missing", "quantity": 2})


def test_toggle_units_keeps_tonnage(state) -> None:
    session.dispatch(state, "setSelectedMaterial", "mild-steel")
    session.dispatch(state, "setThickness", 2.54)
    session.dispatch(state, "toggleOperationType", "perimeter")
    metric = session.dispatch(state, "setPerimeterLength", 254.0)
    imperial = session.dispatch(state, "toggleUnits")
    params = state["snapshot"].parameters
    assert params.is_metric is False
    assert params.thickness == pytest.approx(0.1)
    assert state["snapshot"].operations.perimeter.length == pytest.approx(10.0)
    assert imperial.total_tonnage == pytest.approx(metric.total_tonnage, rel=1e-3)


def test_set_items_from_editor_table(state) -> None:
    session.dispatch(state, "setSelectedMaterial", "mild-steel")
    session.dispatch(state, "toggleOperationType", "bends")
    df = pd.DataFrame(
        [
            {"id": None, "type": "v-bend", "length": 100.0, "angle": 120.0, "radius_to_thickness": 2.0},
            {"id": None, "type": "air-bend", "length": 100.0, "angle": 300.0, "radius_to_thickness": 1.0},
        ]
    )
    results = session.set_items(state, "bends", df)
    assert len(state["snapshot"].operations.items("bends")) == 2
    assert state["snapshot"].operations.items("bends")[1].angle == 90.0
    assert len(state["warnings"]) == 1
    assert results.springback is not None
    assert results.bend_tonnage == pytest.approx(sum(r.tonnage for r in results.items_for("bends")))


def test_save_load_delete(state) -> None:
    with pytest.raises(ValueError):
        session.save_current(state, "nothing yet")

    session.dispatch(state, "setSelectedMaterial", "aluminum")
    session.dispatch(state, "toggleOperationType", "perimeter")
    session.dispatch(state, "setPerimeterLength", 300.0)
    saved = session.save_current(state, "  bracket  ")
    assert saved["name"] == "bracket"
    assert [p["id"] for p in state["saved"]] == [saved["id"]]

    session.dispatch(state, "setSelectedMaterial", "titanium")
    loaded = session.load_saved(state, saved["id"])
    assert state["snapshot"].material.id == "aluminum"
    assert loaded.total_tonnage == pytest.approx(saved["results"]["total_tonnage"])

    session.delete_saved(state, saved["id"])
    assert state["saved"] == []
    with pytest.raises(ValueError):
        session.load_saved(state, saved["id"])
