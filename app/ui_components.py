from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

import streamlit as st

from app import session
from calc_core.results import Results


@dataclass(frozen=True)
class CalcStatus:
    status: str
    reason: str | None = None
    diagnostics: int = 0
    corrections: int = 0


def _status_style(status: str) -> tuple[str, str]:
    """
    Returns (bg_color, fg_color) for a status pill.
    Colors are chosen to be readable in both Streamlit light/dark themes.
    """
    s = (status or "").upper().strip()
    if s == "OK":
        return "#1f7a3a", "white"
    if s == "CORRECTED":
        return "#b45309", "white"
    if s == "WARNINGS":
        return "#b7791f", "white"
    if s == "NO_CALC":
        return "#b91c1c", "white"
    return "#374151", "white"


def calc_status(state: Mapping[str, Any]) -> CalcStatus:
    """
    NO_CALC: nothing to show (no material or zero thickness).
    WARNINGS: the engine recorded diagnostics.
    CORRECTED: inputs were clamped on the last event.
    """
    results: Results | None = state.get("results")
    corrections = len(state.get("warnings") or [])
    if results is None:
        reason = "no material selected" if state["snapshot"].material is None else "thickness is not positive"
        return CalcStatus("NO_CALC", reason=reason, corrections=corrections)
    if results.diagnostics:
        return CalcStatus(
            "WARNINGS",
            reason=", ".join(sorted({d.code for d in results.diagnostics})),
            diagnostics=len(results.diagnostics),
            corrections=corrections,
        )
    if corrections:
        return CalcStatus("CORRECTED", reason="inputs were adjusted", corrections=corrections)
    return CalcStatus("OK")


def _details_text(info: CalcStatus) -> str:
    parts: list[str] = [f"status={info.status}"]
    if info.reason:
        parts.append(f"reason={info.reason}")
    if info.diagnostics:
        parts.append(f"diagnostics={info.diagnostics}")
    if info.corrections:
        parts.append(f"corrections={info.corrections}")
    return "; ".join(parts)


def status_chip(label: str, info: CalcStatus) -> None:
    """Compact status chip; the tooltip carries the details."""
    bg, fg = _status_style(info.status)
    title = _details_text(info).replace('"', "'")
    st.markdown(
        f"""
        <span title="{title}" style="
          display:inline-block;
          padding:0.15rem 0.55rem;
          border-radius:999px;
          background:{bg};
          color:{fg};
          font-weight:600;
          font-size:0.85rem;
          line-height:1.4;
          white-space:nowrap;
        ">{label}: {info.status}</span>
        """,
        unsafe_allow_html=True,
    )


def run_event(state: Any, event: str, payload: Any = None) -> bool:
    """
    Dispatches one event. Meant for widget on_change callbacks: the error,
    if any, is kept in state["last_error"] and shown by show_messages().
    """
    try:
        session.dispatch(state, event, payload)
    except (TypeError, ValueError) as exc:
        state["last_error"] = f"{event}: {exc}"
        return False
    state["last_error"] = None
    return True


def widget_event(state: Any, event: str, key: str) -> None:
    run_event(state, event, state[key])


def show_messages(state: Mapping[str, Any]) -> None:
    if state.get("last_error"):
        st.error(state["last_error"])
    for warning in state.get("warnings") or []:
        st.warning(warning)
