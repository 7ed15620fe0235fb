"""
Immutable results record produced by the coordinator.

to_dict() yields a JSON-serialisable mapping; from_dict() rebuilds the same
record, so saved calculations round-trip.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Mapping

from .diagnostics import Diagnostic
from .model import ITEM_TYPES, PropertySet
from .recommendations import ProcessRecommendation
from .springback import SpringbackResult
from .surface_finish import SurfaceFinishResult
from .tool_wear import ToolWearReport

TONNAGE_FIELDS = {
    "perimeter": "perimeter_tonnage",
    "holes": "holes_tonnage",
    "bends": "bend_tonnage",
    "forms": "form_tonnage",
    "draws": "draw_tonnage",
}


@dataclass(frozen=True)
class ItemResult:
    category: str
    item: Any
    tonnage: float

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ItemResult":
        category = data["category"]
        return cls(
            category=category,
            item=ITEM_TYPES[category].from_dict(data["item"]),
            tonnage=float(data["tonnage"]),
        )


@dataclass(frozen=True)
class TemperatureEffects:
    factor: float
    temperature: float
    is_metric: bool
    regime: str


@dataclass(frozen=True)
class Results:
    # batch-scaled per category, metric tons
    perimeter_tonnage: float
    holes_tonnage: float
    bend_tonnage: float
    form_tonnage: float
    draw_tonnage: float

    per_piece_total_tonnage: float
    per_piece_reverse_tonnage: float
    total_tonnage: float
    reverse_tonnage: float
    batch_quantity: int

    material_id: str
    material_properties: PropertySet
    temperature_effects: TemperatureEffects

    item_results: Mapping[str, tuple[ItemResult, ...]] = field(default_factory=dict)
    springback: SpringbackResult | None = None
    surface_finish: SurfaceFinishResult | None = None
    tool_wear: ToolWearReport | None = None
    process_recommendations: tuple[ProcessRecommendation, ...] = ()
    dependencies: Mapping[str, bool] = field(default_factory=dict)
    diagnostics: tuple[Diagnostic, ...] = ()

    def category_tonnage(self, category: str) -> float:
        """Batch-scaled tonnage for one operation category."""
        return getattr(self, TONNAGE_FIELDS[category])

    def per_piece_category_tonnage(self, category: str) -> float:
        return self.category_tonnage(category) / (self.batch_quantity or 1)

    def items_for(self, category: str) -> tuple[ItemResult, ...]:
        return tuple(self.item_results.get(category, ()))

    def to_dict(self) -> dict[str, Any]:
        out = asdict(self)
        out["item_results"] = {
            category: [asdict(r) for r in results] for category, results in self.item_results.items()
        }
        out["diagnostics"] = [d.to_dict() for d in self.diagnostics]
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Results":
        springback = data.get("springback")
        surface = data.get("surface_finish")
        wear = data.get("tool_wear")
        return cls(
            perimeter_tonnage=float(data["perimeter_tonnage"]),
            holes_tonnage=float(data["holes_tonnage"]),
            bend_tonnage=float(data["bend_tonnage"]),
            form_tonnage=float(data["form_tonnage"]),
            draw_tonnage=float(data["draw_tonnage"]),
            per_piece_total_tonnage=float(data["per_piece_total_tonnage"]),
            per_piece_reverse_tonnage=float(data["per_piece_reverse_tonnage"]),
            total_tonnage=float(data["total_tonnage"]),
            reverse_tonnage=float(data["reverse_tonnage"]),
            batch_quantity=int(data["batch_quantity"]),
            material_id=str(data["material_id"]),
            material_properties=PropertySet.from_dict(data["material_properties"]),
            temperature_effects=TemperatureEffects(**data["temperature_effects"]),
            item_results={
                category: tuple(ItemResult.from_dict(r) for r in results)
                for category, results in (data.get("item_results") or {}).items()
            },
            springback=SpringbackResult.from_dict(springback) if springback else None,
            surface_finish=SurfaceFinishResult.from_dict(surface) if surface else None,
            tool_wear=ToolWearReport.from_dict(wear) if wear else None,
            process_recommendations=tuple(
                ProcessRecommendation.from_dict(r) for r in data.get("process_recommendations") or ()
            ),
            dependencies=dict(data.get("dependencies") or {}),
            diagnostics=tuple(Diagnostic.from_dict(d) for d in data.get("diagnostics") or ()),
        )
