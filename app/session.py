"""
Session wiring: hosting events -> validated snapshot -> coordinator.

State is any mutable mapping (st.session_state in the app, a plain dict in
tests). Each dispatch runs the coordinator to completion and replaces the
single stored result.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any, Mapping, MutableMapping

import pandas as pd

from app import validation
from calc_core.coordinator import ChangeKind, change_for_event, recalculate
from calc_core.export_payload import build_payload, load_payload
from calc_core.model import Material, Snapshot
from calc_core.results import Results

logger = logging.getLogger(__name__)

_ITEM_EVENT_CATEGORIES = {"Hole": "holes", "Bend": "bends", "Form": "forms", "Draw": "draws"}


def init_state(state: MutableMapping[str, Any], catalog: Mapping[str, Material]) -> None:
    state.setdefault("catalog", dict(catalog))
    state.setdefault("snapshot", Snapshot(material=None))
    state.setdefault("results", None)
    state.setdefault("warnings", [])
    state.setdefault("saved", [])


def _item_category(event: str) -> tuple[str, str] | None:
    for prefix in ("add", "update", "remove"):
        if event.startswith(prefix):
            category = _ITEM_EVENT_CATEGORIES.get(event[len(prefix):])
            if category:
                return prefix, category
    return None


def _apply(snapshot: Snapshot, catalog: Mapping[str, Material], event: str, payload: Any) -> tuple[Snapshot, list[str]]:
    params = snapshot.parameters
    ops = snapshot.operations
    is_metric = params.is_metric

    if event == "setSelectedMaterial":
        if payload is None:
            return snapshot.with_material(None), []
        if payload not in catalog:
            raise ValueError(f"Material not found: {payload}")
        return snapshot.with_material(catalog[payload]), []
    if event == "setThickness":
        res = validation.clamp_thickness(payload, is_metric)
        return snapshot.with_parameters(thickness=res.value), res.warnings
    if event == "setTemperature":
        res = validation.clamp_temperature(payload, is_metric)
        return snapshot.with_parameters(temperature=res.value), res.warnings
    if event == "setBatchQuantity":
        res = validation.clamp_batch_quantity(payload)
        return snapshot.with_parameters(batch_quantity=res.value), res.warnings
    if event == "toggleUnits":
        return snapshot.toggle_units(), []
    if event == "toggleOperationType":
        return snapshot.with_operations(ops.toggle(payload)), []
    if event == "setPerimeterLength":
        res = validation.clamp_perimeter_length(payload, is_metric)
        return snapshot.with_operations(ops.set_perimeter_length(res.value)), res.warnings

    item_event = _item_category(event)
    if item_event is None:
        raise ValueError(f"unknown event: {event}")
    action, category = item_event
    if action == "add":
        res = validation.clamp_item(category, dict(payload or {}), is_metric)
        return snapshot.with_operations(ops.add_item(category, res.value)), res.warnings
    if action == "remove":
        return snapshot.with_operations(ops.remove_item(category, payload)), []

    item_id = payload.get("id")
    current = next((it for it in ops.items(category) if it.id == item_id), None)
    if current is None:
        raise ValueError(f"{category} item not found: {item_id}")
    merged = {**asdict(current), **payload}
    res = validation.clamp_item(category, merged, is_metric)
    changes = {k: v for k, v in res.value.items() if k != "id"}
    return snapshot.with_operations(ops.update_item(category, item_id, **changes)), res.warnings


def _store(state: MutableMapping[str, Any], snapshot: Snapshot, change, warnings: list[str]) -> Results | None:
    results = recalculate(snapshot, state.get("results"), change)
    state["snapshot"] = snapshot
    state["results"] = results
    state["warnings"] = warnings
    for w in warnings:
        logger.warning("input corrected: %s", w)
    return results


def dispatch(state: MutableMapping[str, Any], event: str, payload: Any = None) -> Results | None:
    """
    Applies one hosting event (``setThickness``, ``addHole``,
    ``toggleOperationType``...) and recomputes.
    """
    event = event.rsplit("/", 1)[-1]
    snapshot, warnings = _apply(state["snapshot"], state["catalog"], event, payload)
    category = payload if event == "toggleOperationType" else None
    change = change_for_event(event, category)
    logger.debug("event %s -> %s", event, change.value if change else None)
    return _store(state, snapshot, change, warnings)


def set_items(state: MutableMapping[str, Any], category: str, df: pd.DataFrame) -> Results | None:
    """Replaces every item of a category from an editor table."""
    snapshot: Snapshot = state["snapshot"]
    checked = validation.validate_items(df, category, snapshot.parameters.is_metric)
    snapshot = snapshot.with_operations(snapshot.operations.replace_items(category, checked.items))
    return _store(state, snapshot, ChangeKind(category), checked.warnings)


def save_current(state: MutableMapping[str, Any], name: str) -> dict[str, Any]:
    results = state.get("results")
    if results is None:
        raise ValueError("nothing calculated yet")
    payload = build_payload(results, state["snapshot"], name)
    state["saved"] = [*state.get("saved", []), payload]
    logger.info("saved calculation %s (%s)", payload["name"], payload["id"])
    return payload


def load_saved(state: MutableMapping[str, Any], calculation_id: str) -> Results:
    payload = next((p for p in state.get("saved", []) if p["id"] == calculation_id), None)
    if payload is None:
        raise ValueError(f"Saved calculation not found: {calculation_id}")
    snapshot, results = load_payload(payload, state["catalog"])
    state["snapshot"] = snapshot
    state["results"] = results
    state["warnings"] = []
    return results


def delete_saved(state: MutableMapping[str, Any], calculation_id: str) -> None:
    state["saved"] = [p for p in state.get("saved", []) if p["id"] != calculation_id]
