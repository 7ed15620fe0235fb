from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

from .model import Material

logger = logging.getLogger(__name__)


def parse_catalog(data: Mapping[str, Any]) -> dict[str, Material]:
    """
    Builds Material records from an already-decoded catalog mapping
    ``{id: {name, category, properties: {room, warm, hot}, formingCharacteristics}}``.
    A list of entries carrying their own ``id`` is accepted too.
    """
    if isinstance(data, Mapping):
        entries = [(str(mid), entry) for mid, entry in data.items()]
    elif isinstance(data, list):
        entries = [(None, entry) for entry in data]
    else:
        raise TypeError("catalog must be a mapping or a list of materials")

    catalog: dict[str, Material] = {}
    for mid, entry in entries:
        material = Material.from_dict(entry, material_id=mid if mid is not None else None)
        if material.id in catalog:
            raise ValueError(f"duplicate material id: {material.id}")
        catalog[material.id] = material
    logger.debug("parsed %d materials", len(catalog))
    return catalog


def load_catalog(path: str | Path) -> dict[str, Material]:
    text = Path(path).read_text(encoding="utf-8")
    return parse_catalog(json.loads(text))
