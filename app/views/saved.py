from __future__ import annotations

import json

import streamlit as st

from app import session
from app.formatting import format_tonnage


def render(state: dict) -> None:
    st.header("Saved calculations")

    name = st.text_input("Calculation name", value="")
    if st.button("Save current calculation", disabled=state.get("results") is None):
        try:
            payload = session.save_current(state, name)
            st.success(f"Saved: {payload['name']}")
        except ValueError as exc:
            st.error(f"Save failed: {exc}")

    saved = state.get("saved") or []
    if not saved:
        st.info("Nothing saved yet.")
        return

    is_metric = state["snapshot"].parameters.is_metric
    for payload in reversed(saved):
        results = payload["results"]
        label = (
            f"{payload['name']} | {payload['material']['name']} | "
            f"{format_tonnage(results['total_tonnage'], is_metric)} | {payload['timestamp']}"
        )
        with st.expander(label, expanded=False):
            cols = st.columns(3)
            if cols[0].button("Load", key=f"load_{payload['id']}"):
                try:
                    session.load_saved(state, payload["id"])
                    st.success(f"Loaded: {payload['name']}")
                except ValueError as exc:
                    st.error(f"Load failed: {exc}")
            cols[1].download_button(
                "Download JSON",
                data=json.dumps(payload, ensure_ascii=False, indent=2) + "\n",
                file_name=f"calculation_{payload['id'][:8]}.json",
                key=f"download_{payload['id']}",
            )
            if cols[2].button("Delete", key=f"delete_{payload['id']}"):
                session.delete_saved(state, payload["id"])
                st.rerun()
