from __future__ import annotations

import streamlit as st

from app.formatting import length_unit, temperature_unit
from app.ui_components import run_event, show_messages, widget_event
from calc_core.temperature import describe_regime

_NONE = "(none)"


def _on_material(state: dict) -> None:
    choice = state["in_material"]
    run_event(state, "setSelectedMaterial", None if choice == _NONE else choice)


def _on_units(state: dict) -> None:
    run_event(state, "toggleUnits")


def render(state: dict) -> None:
    st.header("Material & parameters")
    show_messages(state)

    catalog = state["catalog"]
    snapshot = state["snapshot"]
    params = snapshot.parameters

    options = [_NONE, *sorted(catalog)]
    state["in_material"] = snapshot.material.id if snapshot.material else _NONE
    st.selectbox(
        "Material",
        options,
        key="in_material",
        format_func=lambda mid: catalog[mid].name if mid in catalog else mid,
        on_change=_on_material,
        args=(state,),
    )
    if snapshot.material is None:
        st.info("Select a material to start calculating.")

    state["in_metric"] = params.is_metric
    st.toggle("Metric units", key="in_metric", on_change=_on_units, args=(state,))

    cols = st.columns(3)
    state["in_thickness"] = float(params.thickness)
    cols[0].number_input(
        f"Thickness ({length_unit(params.is_metric)})",
        key="in_thickness",
        step=0.1 if params.is_metric else 0.005,
        format="%.3f",
        on_change=widget_event,
        args=(state, "setThickness", "in_thickness"),
    )
    state["in_temperature"] = float(params.temperature)
    cols[1].number_input(
        f"Temperature ({temperature_unit(params.is_metric)})",
        key="in_temperature",
        step=10.0,
        format="%.0f",
        on_change=widget_event,
        args=(state, "setTemperature", "in_temperature"),
    )
    state["in_batch"] = int(params.batch_quantity)
    cols[2].number_input(
        "Batch quantity",
        key="in_batch",
        min_value=1,
        step=1,
        on_change=widget_event,
        args=(state, "setBatchQuantity", "in_batch"),
    )

    st.caption(describe_regime(params.regime))

    material = snapshot.material
    if material is not None:
        props = material.properties
        with st.expander(f"{material.name} properties ({material.regime})", expanded=False):
            st.json(
                {
                    "category": material.category,
                    "tensile_strength_mpa": material.tensile_strength,
                    "yield_strength_mpa": material.yield_strength,
                    "shear_strength_mpa": material.shear_strength,
                    "elongation_pct": props.elongation,
                    "hardness_hb": props.hardness,
                    "reverse_factor": material.reverse_factor,
                    "temperature_coefficient": material.temperature_coefficient,
                }
            )
