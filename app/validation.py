from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable

import pandas as pd

from calc_core.units import mm_to_inch

Translator = Callable[..., str]

# Default English strings when no translator is provided.
_VALIDATION_EN = {
    "validation.invalid_corrected": "Invalid {field} value detected and corrected to {value}",
    "validation.too_small": "{field} too small, set to minimum: {value}",
    "validation.too_large": "{field} too large, set to maximum: {value}",
    "validation.quantity_corrected": "Invalid {field} quantity detected and corrected",
    "validation.angle_corrected": "Invalid bend angle detected and corrected",
    "validation.ratio_corrected": "Invalid radius-to-thickness ratio detected and corrected",
    "validation.unknown_type": "Unknown {field} '{value}', using {default}",
}

# (metric, imperial) ranges
THICKNESS_RANGE = ((0.1, 100.0), (0.004, 4.0))
TEMPERATURE_RANGE = ((-50.0, 1200.0), (-58.0, 2192.0))
PERIMETER_RANGE = ((1.0, 10000.0), (0.04, 400.0))
HOLE_DIAMETER_RANGE = ((0.5, 500.0), (0.02, 20.0))

# (metric, imperial) defaults
DEFAULT_THICKNESS = (1.0, 0.04)
DEFAULT_TEMPERATURE = (20.0, 68.0)
DEFAULT_PERIMETER = (100.0, 4.0)
DEFAULT_BEND_ANGLE = 90.0
DEFAULT_RADIUS_RATIO = 1.0
MIN_RADIUS_RATIO = 0.5

ITEM_DEFAULTS = {
    "holes": {"shape": "circular", "diameter": 10.0, "width": None, "quantity": 1},
    "bends": {"type": "v-bend", "length": 100.0, "angle": 90.0, "radius_to_thickness": 1.0, "forming_type": "standard"},
    "forms": {"type": "emboss", "diameter": 20.0, "depth": 2.0, "quantity": 1},
    "draws": {"type": "round", "diameter": 50.0, "depth": 20.0, "corner_radius": 5.0, "quantity": 1},
}
LENGTH_FIELDS = ("diameter", "width", "length", "depth", "corner_radius")
ITEM_COLUMNS = {category: ["id", *defaults] for category, defaults in ITEM_DEFAULTS.items()}
ITEM_TYPE_CHOICES = {
    "holes": ("shape", ("circular", "square", "rectangular")),
    "bends": ("type", ("v-bend", "u-bend", "air-bend", "bottoming")),
    "forms": ("type", ("emboss", "dimple", "louver", "bead", "rib")),
    "draws": ("type", ("round", "rectangular", "irregular", "tapered")),
}


def _tr(translator: Translator | None, key: str, **kwargs: Any) -> str:
    if translator is None:
        raw = _VALIDATION_EN.get(key, key)
        return raw.format(**kwargs) if kwargs else raw
    return translator(key, **kwargs)


@dataclass(frozen=True)
class ClampResult:
    value: Any
    warnings: list[str]


@dataclass(frozen=True)
class ValidationResult:
    items: list[dict[str, Any]]
    warnings: list[str]
    row_status: dict[int, str]

    @property
    def has_corrections(self) -> bool:
        return bool(self.warnings)


def is_finite(value: Any) -> bool:
    try:
        num = float(value)
    except (TypeError, ValueError):
        return False
    return math.isfinite(num)


def _number(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass
    return float(value) if is_finite(value) else None


def _clamp(
    value: Any,
    bounds: tuple[tuple[float, float], tuple[float, float]],
    is_metric: bool,
    defaults: tuple[float, float],
    field: str,
    translator: Translator | None,
) -> ClampResult:
    warnings: list[str] = []
    default = defaults[0] if is_metric else defaults[1]
    num = _number(value)
    if num is None or num <= 0:
        warnings.append(_tr(translator, "validation.invalid_corrected", field=field, value=default))
        num = default
    lo, hi = bounds[0] if is_metric else bounds[1]
    if num < lo:
        warnings.append(_tr(translator, "validation.too_small", field=field, value=lo))
        num = lo
    elif num > hi:
        warnings.append(_tr(translator, "validation.too_large", field=field, value=hi))
        num = hi
    return ClampResult(num, warnings)


def clamp_thickness(value: Any, is_metric: bool, *, translator: Translator | None = None) -> ClampResult:
    return _clamp(value, THICKNESS_RANGE, is_metric, DEFAULT_THICKNESS, "thickness", translator)


def clamp_temperature(value: Any, is_metric: bool, *, translator: Translator | None = None) -> ClampResult:
    warnings: list[str] = []
    num = _number(value)
    if num is None:
        num = DEFAULT_TEMPERATURE[0] if is_metric else DEFAULT_TEMPERATURE[1]
        warnings.append(_tr(translator, "validation.invalid_corrected", field="temperature", value=num))
    lo, hi = TEMPERATURE_RANGE[0] if is_metric else TEMPERATURE_RANGE[1]
    if num < lo:
        warnings.append(_tr(translator, "validation.too_small", field="temperature", value=lo))
        num = lo
    elif num > hi:
        warnings.append(_tr(translator, "validation.too_large", field="temperature", value=hi))
        num = hi
    return ClampResult(num, warnings)


def clamp_perimeter_length(value: Any, is_metric: bool, *, translator: Translator | None = None) -> ClampResult:
    return _clamp(value, PERIMETER_RANGE, is_metric, DEFAULT_PERIMETER, "perimeter length", translator)


def clamp_batch_quantity(value: Any, *, translator: Translator | None = None) -> ClampResult:
    num = _number(value)
    if num is None or num < 1:
        return ClampResult(1, [_tr(translator, "validation.quantity_corrected", field="batch")])
    return ClampResult(int(num), [])


def _quantity(value: Any, field: str, translator: Translator | None, warnings: list[str]) -> int:
    num = _number(value)
    if num is None or num < 1:
        warnings.append(_tr(translator, "validation.quantity_corrected", field=field))
        return 1
    return int(num)


def _positive(value: Any, default: float, field: str, translator: Translator | None, warnings: list[str]) -> float:
    num = _number(value)
    if num is None or num <= 0:
        warnings.append(_tr(translator, "validation.invalid_corrected", field=field, value=default))
        return default
    return num


def item_defaults(category: str, is_metric: bool = True) -> dict[str, Any]:
    """Editor defaults for one item category in the entered unit system."""
    defaults = dict(ITEM_DEFAULTS[category])
    if not is_metric:
        for key in LENGTH_FIELDS:
            if defaults.get(key) is not None:
                defaults[key] = round(mm_to_inch(defaults[key]), 3)
    return defaults


def _choice(payload: dict[str, Any], category: str, translator: Translator | None, warnings: list[str]) -> None:
    key, allowed = ITEM_TYPE_CHOICES[category]
    default = ITEM_DEFAULTS[category][key]
    value = payload.get(key)
    if value in (None, ""):
        payload[key] = default
    elif value not in allowed:
        warnings.append(_tr(translator, "validation.unknown_type", field=key, value=value, default=default))
        payload[key] = default


def clamp_hole(payload: dict[str, Any], is_metric: bool, *, translator: Translator | None = None) -> ClampResult:
    out = {**item_defaults("holes", is_metric), **payload}
    warnings: list[str] = []
    _choice(out, "holes", translator, warnings)
    default_diameter = (ITEM_DEFAULTS["holes"]["diameter"], item_defaults("holes", False)["diameter"])
    diameter = _clamp(out.get("diameter"), HOLE_DIAMETER_RANGE, is_metric, default_diameter, "hole diameter", translator)
    out["diameter"] = diameter.value
    warnings.extend(diameter.warnings)
    width = _number(out.get("width"))
    out["width"] = width if width is not None and width > 0 else None
    out["quantity"] = _quantity(out.get("quantity"), "hole", translator, warnings)
    return ClampResult(out, warnings)


def clamp_bend(payload: dict[str, Any], is_metric: bool = True, *, translator: Translator | None = None) -> ClampResult:
    defaults = item_defaults("bends", is_metric)
    out = {**defaults, **payload}
    warnings: list[str] = []
    _choice(out, "bends", translator, warnings)
    out["length"] = _positive(out.get("length"), defaults["length"], "bend length", translator, warnings)

    angle = _number(out.get("angle"))
    if angle is None or angle <= 0 or angle > 180:
        warnings.append(_tr(translator, "validation.angle_corrected"))
        angle = DEFAULT_BEND_ANGLE
    out["angle"] = angle

    ratio = _number(out.get("radius_to_thickness"))
    if ratio is None or ratio < MIN_RADIUS_RATIO:
        warnings.append(_tr(translator, "validation.ratio_corrected"))
        ratio = DEFAULT_RADIUS_RATIO
    out["radius_to_thickness"] = ratio
    return ClampResult(out, warnings)


def clamp_form(payload: dict[str, Any], is_metric: bool = True, *, translator: Translator | None = None) -> ClampResult:
    defaults = item_defaults("forms", is_metric)
    out = {**defaults, **payload}
    warnings: list[str] = []
    _choice(out, "forms", translator, warnings)
    out["diameter"] = _positive(out.get("diameter"), defaults["diameter"], "form diameter", translator, warnings)
    out["depth"] = _positive(out.get("depth"), defaults["depth"], "form depth", translator, warnings)
    out["quantity"] = _quantity(out.get("quantity"), "form", translator, warnings)
    return ClampResult(out, warnings)


def clamp_draw(payload: dict[str, Any], is_metric: bool = True, *, translator: Translator | None = None) -> ClampResult:
    defaults = item_defaults("draws", is_metric)
    out = {**defaults, **payload}
    warnings: list[str] = []
    _choice(out, "draws", translator, warnings)
    out["diameter"] = _positive(out.get("diameter"), defaults["diameter"], "draw diameter", translator, warnings)
    out["depth"] = _positive(out.get("depth"), defaults["depth"], "draw depth", translator, warnings)
    out["corner_radius"] = _positive(
        out.get("corner_radius"), defaults["corner_radius"], "corner radius", translator, warnings
    )
    out["quantity"] = _quantity(out.get("quantity"), "draw", translator, warnings)
    return ClampResult(out, warnings)


ITEM_CLAMPS = {
    "holes": clamp_hole,
    "bends": clamp_bend,
    "forms": clamp_form,
    "draws": clamp_draw,
}


def clamp_item(category: str, payload: dict[str, Any], is_metric: bool, *, translator: Translator | None = None) -> ClampResult:
    if category not in ITEM_CLAMPS:
        raise ValueError(f"unknown item category: {category}")
    return ITEM_CLAMPS[category](dict(payload), is_metric, translator=translator)


def validate_items(
    df: pd.DataFrame,
    category: str,
    is_metric: bool,
    *,
    translator: Translator | None = None,
) -> ValidationResult:
    """
    Clamps the rows of an item editor table.

    Expects the columns of ITEM_COLUMNS[category]; missing cells take the
    item defaults. Returns one clamped dict per row.
    """
    items: list[dict[str, Any]] = []
    warnings: list[str] = []
    statuses: dict[int, str] = {}

    for idx, row in df.iterrows():
        payload = {k: v for k, v in row.to_dict().items() if k in ITEM_COLUMNS[category]}
        payload = {k: (None if _is_missing(v) else v) for k, v in payload.items()}
        if not payload.get("id"):
            payload.pop("id", None)
        res = clamp_item(category, payload, is_metric, translator=translator)
        items.append(res.value)
        if res.warnings:
            label = str(res.value.get("id") or f"row#{idx}")[:8]
            warnings.append(f"{label}: " + "; ".join(res.warnings))
            statuses[idx] = "CORRECTED"
        else:
            statuses[idx] = "OK"

    return ValidationResult(items=items, warnings=warnings, row_status=statuses)


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False
