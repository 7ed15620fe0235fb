from __future__ import annotations

from dataclasses import asdict

import pandas as pd
import streamlit as st

from app.formatting import display_tonnage, format_tonnage, length_unit, tonnage_unit
from calc_core.model import CATEGORIES
from calc_core.results import Results
from calc_core.temperature import describe_regime

_LABELS = {
    "perimeter": "Perimeter",
    "holes": "Holes",
    "bends": "Bends",
    "forms": "Forms",
    "draws": "Draws",
}
_LENGTH_FIELDS = ("diameter", "width", "length", "depth", "corner_radius")


def summary_frame(results: Results, is_metric: bool) -> pd.DataFrame:
    unit = tonnage_unit(is_metric)
    rows = []
    for category in CATEGORIES:
        rows.append(
            {
                "operation": _LABELS[category],
                "enabled": bool(results.dependencies.get(category)),
                f"per piece ({unit})": display_tonnage(results.per_piece_category_tonnage(category), is_metric),
                f"batch ({unit})": display_tonnage(results.category_tonnage(category), is_metric),
            }
        )
    return pd.DataFrame(rows)


def items_frame(results: Results, category: str, is_metric: bool) -> pd.DataFrame:
    """
    Item geometry stays in the unit system it was entered in; tonnage is
    converted once for display.
    """
    rows = []
    for r in results.items_for(category):
        row = {k: v for k, v in asdict(r.item).items() if k != "id"}
        row[f"tonnage ({tonnage_unit(is_metric)})"] = display_tonnage(r.tonnage, is_metric)
        rows.append(row)
    df = pd.DataFrame(rows)
    if not df.empty:
        suffix = length_unit(is_metric)
        df = df.rename(columns={c: f"{c} ({suffix})" for c in _LENGTH_FIELDS if c in df.columns})
    return df


def _render_springback(results: Results) -> None:
    sb = results.springback
    if sb is None:
        return
    st.subheader("Springback (first bend)")
    cols = st.columns(3)
    cols[0].metric("Springback", f"{sb.angle:.2f}°")
    cols[1].metric("Compensated angle", f"{sb.compensation_angle:.2f}°")
    cols[2].metric("Percentage", f"{sb.percentage:.1f}%")
    s = sb.suggestions
    st.write(f"Severity: **{s.severity}**. {s.characteristics}")
    st.write(f"Compensation: {s.compensation}. Minimum bend radius: {s.min_bend_radius}")
    for tip in s.tips:
        st.markdown(f"- {tip}")


def _render_surface(results: Results) -> None:
    sf = results.surface_finish
    if sf is None:
        return
    st.subheader("Surface finish")
    cols = st.columns(3)
    cols[0].metric("Ra (µm)", f"{sf.predicted_ra:.2f}")
    cols[1].metric("Rq (µm)", f"{sf.predicted_rq:.2f}")
    cols[2].metric("Friction", f"{sf.effective_friction_coefficient:.3f}")
    st.write(f"{sf.quality_assessment} ({sf.classification})")
    for rec in sf.recommendations:
        st.markdown(f"- {rec}")


def _render_tool_wear(results: Results) -> None:
    report = results.tool_wear
    if report is None:
        return
    st.subheader("Tool wear")
    rows = [
        {
            "operation": op.name,
            "estimated life (hits)": op.wear.estimated_life_in_hits,
            "hours until maintenance": op.wear.hours_until_maintenance,
            "wear rate (mm/10k hits)": round(op.wear.wear_rate, 4),
            "resharpen at (hits)": op.wear.maintenance_intervals.resharpening,
        }
        for op in report.operations
    ]
    st.dataframe(pd.DataFrame(rows), use_container_width=True)
    with st.expander("Tool material and coating comparison", expanded=False):
        st.dataframe(
            pd.DataFrame([asdict(c) for c in report.general.material_comparisons]),
            use_container_width=True,
        )
        st.dataframe(
            pd.DataFrame([asdict(c) for c in report.general.coating_comparisons]),
            use_container_width=True,
        )
    for rec in (*report.general.recommendations, *report.recommendations):
        st.markdown(f"- {rec}")


def _render_recommendations(results: Results) -> None:
    if not results.process_recommendations:
        return
    st.subheader("Process recommendations")
    for rec in results.process_recommendations:
        with st.expander(rec.title, expanded=False):
            st.write(rec.description)
            st.json(
                {
                    "die_clearance": rec.die_clearance,
                    "punch_speed": rec.punch_speed,
                    "blank_holding_force": rec.blank_holding_force,
                    "lubricant_type": rec.lubricant_type,
                    "grain_direction_effect": rec.grain_direction_effect,
                    "temperature_range": rec.temperature_range,
                    "max_forming_depth": rec.max_forming_depth,
                    "tonnage_efficiency_factor": rec.tonnage_efficiency_factor,
                    **dict(rec.specific),
                }
            )


def render(state: dict) -> None:
    st.header("Results")
    results: Results | None = state.get("results")
    if results is None:
        st.info("No calculation yet. Select a material and a positive thickness.")
        return

    params = state["snapshot"].parameters
    is_metric = params.is_metric

    cols = st.columns(4)
    cols[0].metric("Total tonnage", format_tonnage(results.total_tonnage, is_metric))
    cols[1].metric("Reverse tonnage", format_tonnage(results.reverse_tonnage, is_metric))
    cols[2].metric("Per piece", format_tonnage(results.per_piece_total_tonnage, is_metric))
    cols[3].metric("Batch quantity", results.batch_quantity)

    effects = results.temperature_effects
    st.caption(
        f"Temperature factor {effects.factor:.3f} at {effects.temperature:g}"
        f"{'°C' if effects.is_metric else '°F'}. {describe_regime(effects.regime)}"
    )

    if results.diagnostics:
        with st.expander(f"Warnings ({len(results.diagnostics)})", expanded=True):
            for d in results.diagnostics:
                st.warning(f"[{d.code}] {d.message}")

    st.dataframe(summary_frame(results, is_metric), use_container_width=True)

    for category in CATEGORIES[1:]:
        if results.items_for(category):
            st.subheader(_LABELS[category])
            st.dataframe(items_frame(results, category, is_metric), use_container_width=True)

    _render_springback(results)
    _render_surface(results)
    _render_tool_wear(results)
    _render_recommendations(results)
