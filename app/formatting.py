"""
Display-boundary conversion.

The engine emits millimetres and metric tons only. Every value shown in the
UI passes through exactly one function here, which converts at most once.
"""

from __future__ import annotations

from calc_core.units import format_with_unit, metric_to_us_tons, mm_to_inch


def display_tonnage(metric_tons: float, is_metric: bool) -> float:
    return metric_tons if is_metric else metric_to_us_tons(metric_tons)


def format_tonnage(metric_tons: float | None, is_metric: bool, decimals: int = 2) -> str:
    if metric_tons is None:
        return ""
    return format_with_unit(display_tonnage(metric_tons, is_metric), "tonnage", is_metric, decimals)


def display_length(mm: float, is_metric: bool) -> float:
    return mm if is_metric else mm_to_inch(mm)


def format_length(mm: float | None, is_metric: bool, decimals: int = 2) -> str:
    if mm is None:
        return ""
    return format_with_unit(display_length(mm, is_metric), "length", is_metric, decimals)


def tonnage_unit(is_metric: bool) -> str:
    return "metric t" if is_metric else "US ton"


def length_unit(is_metric: bool) -> str:
    return "mm" if is_metric else "in"


def temperature_unit(is_metric: bool) -> str:
    return "°C" if is_metric else "°F"
