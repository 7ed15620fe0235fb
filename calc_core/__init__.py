"""
calc_core: press tonnage calculation engine.

- per-operation force models (perimeter, holes, bends, forms, draws)
- springback, surface finish, tool wear and process recommendations
- incremental recalculation coordinator over immutable snapshots

The engine works in millimetres, MPa and metric tons only; unit conversion
for display happens in the hosting layer.
"""

from .catalog import load_catalog, parse_catalog
from .coordinator import ChangeKind, calculate, change_for_event, recalculate
from .model import Material, OperationSet, Parameters, Snapshot, select_material
from .results import Results

__all__ = [
    "ChangeKind",
    "Material",
    "OperationSet",
    "Parameters",
    "Results",
    "Snapshot",
    "calculate",
    "change_for_event",
    "load_catalog",
    "parse_catalog",
    "recalculate",
    "select_material",
]
