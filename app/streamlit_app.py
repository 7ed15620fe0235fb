from __future__ import annotations

import logging
import sys
from pathlib import Path
import streamlit as st

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app import session  # noqa: E402
from app.ui_components import calc_status, status_chip  # noqa: E402
from app.views import inputs, operations, results, saved  # noqa: E402
from calc_core.catalog import load_catalog  # noqa: E402
from calc_core.logging_config import setup_logging  # noqa: E402


DEFAULT_CATALOG_PATH = str(ROOT / "data" / "materials.json")


def _init_state() -> None:
    state = st.session_state
    state.setdefault("catalog_path", DEFAULT_CATALOG_PATH)
    state.setdefault("log_level", "INFO")
    if "catalog" not in state:
        state["catalog"] = load_catalog(state["catalog_path"])
    session.init_state(state, state["catalog"])


def main() -> None:
    st.set_page_config(page_title="Press Tonnage", layout="wide")
    try:
        _init_state()
    except (OSError, ValueError) as exc:  # pragma: no cover - UI error path
        st.error(f"Failed to load material catalog: {exc}")
        return
    state = st.session_state

    with st.sidebar:
        st.title("Press Tonnage")
        st.selectbox("Log level", ["DEBUG", "INFO", "WARNING"], key="log_level")
        status_chip("Calculation", calc_status(state))

        page = st.radio(
            "Navigation",
            [
                "Inputs",
                "Operations",
                "Results",
                "Saved",
            ],
        )

    setup_logging(getattr(logging, state["log_level"]))

    pages = {
        "Inputs": inputs,
        "Operations": operations,
        "Results": results,
        "Saved": saved,
    }

    pages[page].render(state)


if __name__ == "__main__":
    main()
