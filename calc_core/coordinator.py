"""
Aggregation and incremental recalculation.

calculate() recomputes every enabled category from a snapshot.
recalculate() reuses the per-category tonnage stored on the previous Results
for categories the change did not touch. Both return a new Results, or None
when no material is selected or thickness is not positive.
"""

from __future__ import annotations

import logging
from enum import Enum

from .diagnostics import Diagnostic, Diagnostics
from .model import CATEGORIES, Snapshot
from .recommendations import generate_process_recommendations
from .results import ItemResult, Results, TemperatureEffects
from .springback import analyze_bend
from .surface_finish import Lubricant, calculate_surface_finish
from .temperature import temperature_factor
from .tonnage import (
    bend_tonnage,
    draw_tonnage,
    form_tonnage,
    hole_tonnage,
    perimeter_tonnage,
    reverse_tonnage,
)
from .tool_wear import OPERATION_TYPES, tool_wear_report

logger = logging.getLogger(__name__)


class ChangeKind(str, Enum):
    MATERIAL = "material"
    THICKNESS = "thickness"
    TEMPERATURE = "temperature"
    UNITS = "units"
    BATCH = "batch"
    PERIMETER = "perimeter"
    HOLES = "holes"
    BENDS = "bends"
    FORMS = "forms"
    DRAWS = "draws"


FULL_RECOMPUTE = frozenset({ChangeKind.MATERIAL, ChangeKind.THICKNESS, ChangeKind.TEMPERATURE, ChangeKind.UNITS})

_EVENTS = {
    "setSelectedMaterial": ChangeKind.MATERIAL,
    "setThickness": ChangeKind.THICKNESS,
    "setTemperature": ChangeKind.TEMPERATURE,
    "toggleUnits": ChangeKind.UNITS,
    "setBatchQuantity": ChangeKind.BATCH,
    "setPerimeterLength": ChangeKind.PERIMETER,
}
_EVENT_SUFFIXES = {
    "Hole": ChangeKind.HOLES,
    "Bend": ChangeKind.BENDS,
    "Form": ChangeKind.FORMS,
    "Draw": ChangeKind.DRAWS,
}


def change_for_event(name: str, category: str | None = None) -> ChangeKind | None:
    """
    Maps a hosting event name (``setThickness``, ``addHole``,
    ``operations/updateBend``...) to the change it represents.
    ``toggleOperationType`` needs the toggled ``category``.
    Unknown events return None.
    """
    event = name.rsplit("/", 1)[-1]
    if event in _EVENTS:
        return _EVENTS[event]
    if event == "toggleOperationType":
        return ChangeKind(category) if category in CATEGORIES else None
    for prefix in ("add", "update", "remove"):
        if event.startswith(prefix):
            return _EVENT_SUFFIXES.get(event[len(prefix):])
    return None


def _coerce_change(changed) -> ChangeKind | None:
    if changed is None or isinstance(changed, ChangeKind):
        return changed
    try:
        return ChangeKind(changed)
    except ValueError:
        raise ValueError(f"unknown change kind: {changed!r}") from None


def _tagged(category: str, sink: Diagnostics) -> tuple[Diagnostic, ...]:
    return tuple(
        Diagnostic(code=d.code, message=d.message, context={**d.context, "category": category}) for d in sink
    )


class _Context:
    """Per-run derived inputs shared by every category."""

    def __init__(self, snapshot: Snapshot) -> None:
        material = snapshot.material
        params = snapshot.parameters
        if material.regime != params.regime:
            material = material.with_regime(params.regime)
        self.material = material
        self.params = params
        self.props = material.properties
        self.tensile = material.tensile_strength
        self.thickness = params.thickness_mm
        self.temp_factor = temperature_factor(
            params.temperature, params.is_metric, material.temperature_coefficient
        )


def _compute_category(ctx: _Context, snapshot: Snapshot, category: str):
    """(per-piece tonnage, item results, diagnostics) for one enabled category."""
    ops = snapshot.operations
    sink = Diagnostics()
    to_mm = ctx.params.to_mm
    items: list[ItemResult] = []

    if category == "perimeter":
        total = perimeter_tonnage(
            to_mm(ops.perimeter.length), ctx.thickness, ctx.tensile, ctx.temp_factor, diagnostics=sink
        )
        return total, (), _tagged(category, sink)

    for item in ops.items(category):
        if category == "holes":
            tonnage = hole_tonnage(
                to_mm(item.diameter),
                ctx.thickness,
                ctx.tensile,
                ctx.temp_factor,
                shape=item.shape,
                quantity=item.quantity,
                width=to_mm(item.width) if item.width is not None else None,
                diagnostics=sink,
            )
        elif category == "bends":
            tonnage = bend_tonnage(
                to_mm(item.length),
                ctx.thickness,
                ctx.tensile,
                ctx.temp_factor,
                angle=item.angle,
                radius_to_thickness=item.radius_to_thickness,
                bend_type=item.type,
                diagnostics=sink,
            )
        elif category == "forms":
            tonnage = form_tonnage(
                to_mm(item.diameter),
                to_mm(item.depth),
                ctx.thickness,
                ctx.tensile,
                ctx.temp_factor,
                form_type=item.type,
                quantity=item.quantity,
                strain_hardening_exponent=ctx.props.strain_hardening_exponent,
                diagnostics=sink,
            )
        else:
            tonnage = draw_tonnage(
                to_mm(item.diameter),
                to_mm(item.depth),
                ctx.thickness,
                ctx.tensile,
                ctx.temp_factor,
                draw_type=item.type,
                quantity=item.quantity,
                strain_hardening_exponent=ctx.props.strain_hardening_exponent,
                friction_coefficient=ctx.props.friction_coefficient,
                diagnostics=sink,
            )
        items.append(ItemResult(category=category, item=item, tonnage=tonnage))

    return sum(r.tonnage for r in items), tuple(items), _tagged(category, sink)


def _assemble(ctx: _Context, snapshot: Snapshot, per_piece, item_results, diagnostics) -> Results:
    ops = snapshot.operations
    batch = ctx.params.effective_batch_quantity
    per_piece_total = sum(per_piece.values())
    per_piece_reverse = reverse_tonnage(per_piece_total, ctx.material.reverse_factor)
    enabled = ops.enabled_categories()

    springback = None
    if ops.bends.enabled and ops.bends.items:
        springback = analyze_bend(ops.bends.items[0], ctx.thickness, ctx.material)

    surface_finish = None
    if ops.forms.enabled or ops.draws.enabled:
        surface_finish = calculate_surface_finish(
            ctx.material, forming_speed="medium", tool_condition="good", lubricant=Lubricant()
        )

    recommendations = tuple(
        generate_process_recommendations(ctx.material, OPERATION_TYPES[c], ctx.thickness) for c in enabled
    )
    tool_wear = tool_wear_report(ctx.material, enabled) if enabled else None

    return Results(
        perimeter_tonnage=per_piece["perimeter"] * batch,
        holes_tonnage=per_piece["holes"] * batch,
        bend_tonnage=per_piece["bends"] * batch,
        form_tonnage=per_piece["forms"] * batch,
        draw_tonnage=per_piece["draws"] * batch,
        per_piece_total_tonnage=per_piece_total,
        per_piece_reverse_tonnage=per_piece_reverse,
        total_tonnage=per_piece_total * batch,
        reverse_tonnage=per_piece_reverse * batch,
        batch_quantity=batch,
        material_id=ctx.material.id,
        material_properties=ctx.props,
        temperature_effects=TemperatureEffects(
            factor=ctx.temp_factor,
            temperature=ctx.params.temperature,
            is_metric=ctx.params.is_metric,
            regime=ctx.params.regime,
        ),
        item_results=item_results,
        springback=springback,
        surface_finish=surface_finish,
        tool_wear=tool_wear,
        process_recommendations=recommendations,
        dependencies=ops.dependencies(),
        diagnostics=diagnostics,
    )


def _ready(snapshot: Snapshot) -> bool:
    return snapshot.material is not None and snapshot.parameters.thickness > 0


def calculate(snapshot: Snapshot) -> Results | None:
    """Full recompute of every enabled category."""
    if not _ready(snapshot):
        logger.debug("calculation skipped: material or thickness missing")
        return None
    ctx = _Context(snapshot)
    per_piece: dict[str, float] = {}
    item_results: dict[str, tuple[ItemResult, ...]] = {}
    diagnostics: list[Diagnostic] = []
    for category in CATEGORIES:
        if snapshot.operations.is_enabled(category):
            per_piece[category], items, diags = _compute_category(ctx, snapshot, category)
            diagnostics.extend(diags)
        else:
            per_piece[category], items = 0.0, ()
        if category != "perimeter":
            item_results[category] = items
    result = _assemble(ctx, snapshot, per_piece, item_results, tuple(diagnostics))
    logger.info(
        "full calculation: material=%s total=%.3f t batch=%d",
        result.material_id,
        result.total_tonnage,
        result.batch_quantity,
    )
    return result


def recalculate(snapshot: Snapshot, previous: Results | None, changed=None) -> Results | None:
    """
    Selective recompute. Only ``changed`` and categories that were disabled
    at the previous computation are evaluated; the rest reuse the previous
    per-piece tonnage. Disabled categories always contribute zero.
    """
    kind = _coerce_change(changed)
    if previous is None or kind in FULL_RECOMPUTE:
        return calculate(snapshot)
    if not _ready(snapshot):
        return None
    if snapshot.material.id != previous.material_id:
        logger.warning("previous result belongs to material %s, recomputing fully", previous.material_id)
        return calculate(snapshot)

    ctx = _Context(snapshot)
    per_piece: dict[str, float] = {}
    item_results: dict[str, tuple[ItemResult, ...]] = {}
    diagnostics: list[Diagnostic] = []
    recomputed = []
    for category in CATEGORIES:
        if not snapshot.operations.is_enabled(category):
            per_piece[category], items = 0.0, ()
        elif kind == category or not previous.dependencies.get(category, False):
            per_piece[category], items, diags = _compute_category(ctx, snapshot, category)
            diagnostics.extend(diags)
            recomputed.append(category)
        else:
            per_piece[category] = previous.per_piece_category_tonnage(category)
            items = previous.items_for(category) if category != "perimeter" else ()
            diagnostics.extend(d for d in previous.diagnostics if d.context.get("category") == category)
        if category != "perimeter":
            item_results[category] = items

    result = _assemble(ctx, snapshot, per_piece, item_results, tuple(diagnostics))
    logger.info(
        "selective calculation (%s): recomputed=%s total=%.3f t",
        kind.value if kind else "none",
        ",".join(recomputed) or "-",
        result.total_tonnage,
    )
    return result

