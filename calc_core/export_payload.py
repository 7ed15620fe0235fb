from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Mapping

from .model import Snapshot
from .results import Results

PAYLOAD_VERSION = "1.0"


def _iso_utc_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def build_payload(
    results: Results,
    snapshot: Snapshot,
    name: str,
    *,
    calculation_id: str | None = None,
) -> dict[str, Any]:
    """
    Saved-calculation payload: id, name, timestamp, parameters, material,
    operations and results. All tonnages are metric tons.
    """
    if not isinstance(results, Results):
        raise TypeError("results must be a Results instance")
    if not isinstance(name, str) or not name.strip():
        raise ValueError("name is required")
    if snapshot.material is None:
        raise ValueError("snapshot has no material")

    material = snapshot.material
    return {
        "version": PAYLOAD_VERSION,
        "id": calculation_id or str(uuid.uuid4()),
        "name": name.strip(),
        "timestamp": _iso_utc_now(),
        "parameters": snapshot.parameters.to_dict(),
        "material": {
            "id": material.id,
            "name": material.name,
            "category": material.category,
            "regime": material.regime,
        },
        "operations": snapshot.operations.to_dict(),
        "results": results.to_dict(),
    }


def load_payload(payload: Mapping[str, Any], catalog: Mapping[str, Any]) -> tuple[Snapshot, Results]:
    """Rebuilds the snapshot and results of a saved calculation."""
    for key in ("parameters", "material", "operations", "results"):
        if key not in payload:
            raise ValueError(f"payload is missing '{key}'")
    snapshot = Snapshot.from_dict(
        {
            "material": payload["material"]["id"],
            "parameters": payload["parameters"],
            "operations": payload["operations"],
        },
        catalog=catalog,
    )
    return snapshot, Results.from_dict(payload["results"])
