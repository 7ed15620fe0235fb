from __future__ import annotations

import pytest

from calc_core.catalog import parse_catalog
from calc_core.model import (
    BendItem,
    HoleItem,
    Material,
    OperationSet,
    Parameters,
    PropertySet,
    Snapshot,
    select_material,
)


def test_property_set_accepts_camel_and_snake_case() -> None:
    camel = PropertySet.from_dict({"tensileStrength": 400, "yieldStrength": 250, "modulus": 200})
    snake = PropertySet.from_dict({"tensile_strength": 400, "yield_strength": 250, "elastic_modulus": 200})
    assert camel == snake
    assert camel.elastic_modulus == 200.0


def test_property_set_requires_tensile_strength() -> None:
    with pytest.raises(ValueError):
        PropertySet.from_dict({"yieldStrength": 250})
    with pytest.raises(ValueError):
        PropertySet.from_dict({"tensileStrength": "strong"})


def test_material_requires_room_properties() -> None:
    with pytest.raises(ValueError):
        Material.from_dict({"id": "x", "properties": {"hot": {"tensileStrength": 100}}})
    with pytest.raises(ValueError):
        Material.from_dict({"properties": {"room": {"tensileStrength": 100}}})


def test_catalog_entries(catalog) -> None:
    assert set(catalog) == {"mild-steel", "stainless-steel", "aluminum", "titanium"}
    steel = catalog["mild-steel"]
    assert steel.properties_for("warm").tensile_strength == 370.0
    assert steel.forming_characteristics.recommended_die_clearance == "6-8%"


def test_catalog_rejects_duplicates() -> None:
    entry = {"id": "a", "properties": {"room": {"tensileStrength": 100}}}
    with pytest.raises(ValueError, match="duplicate"):
        parse_catalog([entry, dict(entry)])
    with pytest.raises(TypeError):
        parse_catalog("mild-steel")


def test_select_material_copies_regime_strengths(catalog) -> None:
    hot = select_material(catalog["mild-steel"], "hot")
    assert hot.regime == "hot"
    assert hot.tensile_strength == 220.0
    assert hot.reverse_factor == 0.65
    assert hot.with_regime("room").tensile_strength == 400.0
    with pytest.raises(ValueError):
        select_material(catalog["mild-steel"], "molten")


def test_missing_regime_falls_back_to_room(material_factory) -> None:
    material = select_material(material_factory(tensile=321.0), "hot")
    assert material.tensile_strength == 321.0
    assert material.reverse_factor == 0.7


def test_parameters_from_dict_and_regime() -> None:
    params = Parameters.from_dict({"thickness": "2", "temperature": 212, "batchQuantity": 5, "isMetric": False})
    assert params.thickness == 2.0
    assert params.batch_quantity == 5
    assert params.temperature_celsius == pytest.approx(100.0)
    assert params.regime == "room"
    assert params.thickness_mm == pytest.approx(50.8)
    assert Parameters(batch_quantity=0).effective_batch_quantity == 1


def test_toggle_units_rounds_like_the_inputs() -> None:
    imperial = Parameters(thickness=2.0, temperature=20.0).toggle_units()
    assert imperial.is_metric is False
    assert imperial.thickness == pytest.approx(0.079)
    assert imperial.temperature == 68.0

    back = imperial.toggle_units()
    assert back.is_metric is True
    assert back.thickness == pytest.approx(2.01)
    assert back.temperature == 20.0


def test_operation_set_edits_return_new_values() -> None:
    ops = OperationSet()
    toggled = ops.toggle("holes")
    assert not ops.holes.enabled and toggled.holes.enabled

    with_hole = toggled.add_item("holes", {"diameter": 12, "quantity": 2})
    (hole,) = with_hole.items("holes")
    assert isinstance(hole, HoleItem) and hole.diameter == 12.0 and hole.id

    updated = with_hole.update_item("holes", hole.id, quantity=5)
    assert updated.items("holes")[0].quantity == 5
    assert updated.items("holes")[0].id == hole.id
    assert updated.remove_item("holes", hole.id).items("holes") == ()

    assert ops.enabled_categories() == ()
    assert toggled.dependencies()["holes"] is True
    with pytest.raises(ValueError):
        ops.toggle("welds")
    with pytest.raises(TypeError):
        ops.add_item("holes", BendItem())


def test_scaled_lengths_touch_geometry_only() -> None:
    ops = (
        OperationSet()
        .set_perimeter_length(254.0)
        .add_item("holes", HoleItem(diameter=25.4, width=None, quantity=3))
        .add_item("bends", BendItem(length=50.8, angle=90.0, radius_to_thickness=2.0))
    )
    scaled = ops.scaled_lengths(1 / 25.4)
    assert scaled.perimeter.length == pytest.approx(10.0)
    hole = scaled.items("holes")[0]
    assert hole.diameter == pytest.approx(1.0) and hole.width is None and hole.quantity == 3
    bend = scaled.items("bends")[0]
    assert bend.length == pytest.approx(2.0)
    assert bend.angle == 90.0 and bend.radius_to_thickness == 2.0


def test_operation_set_dict_round_trip() -> None:
    ops = OperationSet().toggle("draws").add_item("draws", {"diameter": 80, "cornerRadius": 4})
    again = OperationSet.from_dict(ops.to_dict())
    assert again == ops


def test_snapshot_from_dict_resolves_material(catalog) -> None:
    data = {"material": "aluminum", "parameters": {"thickness": 1.5, "temperature": 250}}
    snap = Snapshot.from_dict(data, catalog=catalog)
    assert snap.material.id == "aluminum"
    assert snap.material.regime == "warm"
    assert Snapshot.from_dict({"material": {"id": "aluminum"}}, catalog=catalog).material.regime == "room"
    with pytest.raises(ValueError):
        Snapshot.from_dict({"material": "unobtainium"}, catalog=catalog)


def test_snapshot_regime_follows_temperature(catalog) -> None:
    snap = Snapshot(material=None).with_material(catalog["mild-steel"])
    assert snap.material.regime == "room"
    hot = snap.with_parameters(temperature=450.0)
    assert hot.material.regime == "hot"
    assert hot.material.tensile_strength == 220.0


def test_snapshot_toggle_units_scales_operations(catalog) -> None:
    snap = Snapshot(material=None).with_operations(OperationSet().set_perimeter_length(254.0))
    imperial = snap.toggle_units()
    assert imperial.parameters.is_metric is False
    assert imperial.operations.perimeter.length == pytest.approx(10.0)
    assert imperial.toggle_units().operations.perimeter.length == pytest.approx(254.0)
