from __future__ import annotations

from dataclasses import asdict

import pandas as pd
import streamlit as st

from app import session
from app.formatting import length_unit
from app.ui_components import run_event, show_messages, widget_event
from app.validation import ITEM_COLUMNS, ITEM_TYPE_CHOICES

_TITLES = {
    "perimeter": "Perimeter cutting",
    "holes": "Hole punching",
    "bends": "Bending",
    "forms": "Forming",
    "draws": "Drawing",
}

# item fields that hold a length in the active unit system
_LENGTH_FIELDS = {"diameter", "width", "length", "depth", "corner_radius"}


def _on_toggle(state: dict, category: str) -> None:
    run_event(state, "toggleOperationType", category)


def _items_frame(items, category: str) -> pd.DataFrame:
    columns = ITEM_COLUMNS[category]
    return pd.DataFrame([asdict(it) for it in items], columns=columns)


def _column_config(category: str, is_metric: bool) -> dict:
    unit = length_unit(is_metric)
    config: dict = {"id": st.column_config.TextColumn("id", disabled=True)}
    type_key, choices = ITEM_TYPE_CHOICES[category]
    config[type_key] = st.column_config.SelectboxColumn(type_key, options=list(choices), required=True)
    for column in ITEM_COLUMNS[category]:
        if column in _LENGTH_FIELDS:
            config[column] = st.column_config.NumberColumn(f"{column} ({unit})", format="%.3f")
        elif column == "quantity":
            config[column] = st.column_config.NumberColumn("quantity", min_value=1, step=1)
        elif column == "angle":
            config[column] = st.column_config.NumberColumn("angle (°)", format="%.1f")
    return config


def _item_editor(state: dict, category: str) -> None:
    snapshot = state["snapshot"]
    items = snapshot.operations.items(category)
    edited = st.data_editor(
        _items_frame(items, category),
        column_config=_column_config(category, snapshot.parameters.is_metric),
        num_rows="dynamic",
        use_container_width=True,
        key=f"editor_{category}",
    )
    if st.button(f"Apply {_TITLES[category].lower()} items", key=f"apply_{category}"):
        try:
            session.set_items(state, category, edited)
        except (TypeError, ValueError) as exc:  # pragma: no cover - UI error path
            st.error(f"Failed to apply items: {exc}")
            return
        state.pop(f"editor_{category}", None)
        st.rerun()


def render(state: dict) -> None:
    st.header("Operations")
    show_messages(state)

    snapshot = state["snapshot"]
    ops = snapshot.operations
    params = snapshot.parameters

    for category, title in _TITLES.items():
        key = f"op_{category}"
        state[key] = ops.is_enabled(category)
        st.toggle(title, key=key, on_change=_on_toggle, args=(state, category))
        if not ops.is_enabled(category):
            continue

        if category == "perimeter":
            state["in_perimeter"] = float(ops.perimeter.length)
            st.number_input(
                f"Perimeter length ({length_unit(params.is_metric)})",
                key="in_perimeter",
                format="%.2f",
                on_change=widget_event,
                args=(state, "setPerimeterLength", "in_perimeter"),
            )
        else:
            _item_editor(state, category)
        st.divider()
