from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from calc_core.catalog import load_catalog, parse_catalog  # noqa: E402
from calc_core.model import select_material  # noqa: E402


@pytest.fixture(scope="session")
def catalog():
    return load_catalog(ROOT / "data" / "materials.json")


@pytest.fixture()
def mild_steel(catalog):
    return select_material(catalog["mild-steel"], "room")


def make_material(material_id: str = "test-steel", tensile: float = 400.0, forming=None, **room):
    """One-regime catalog entry; extra keyword args go into the room properties."""
    entry = {
        "name": material_id,
        "category": "test",
        "properties": {"room": {"tensileStrength": tensile, **room}},
        "formingCharacteristics": forming or {},
    }
    return parse_catalog({material_id: entry})[material_id]


@pytest.fixture()
def material_factory():
    return make_material
