"""
Unit conversion.

Each supported pair has one authoritative constant; the inverse direction
uses its exact reciprocal so that a round trip returns the input.
"""

from __future__ import annotations

import logging

from .diagnostics import UNSUPPORTED_CONVERSION, Diagnostics, warn

logger = logging.getLogger(__name__)

MM_PER_INCH = 25.4
LBF_PER_NEWTON = 0.2248
US_TONS_PER_METRIC_TON = 1.1023
KSI_PER_MPA = 0.145038


def mm_to_inch(mm: float) -> float:
    return mm / MM_PER_INCH


def inch_to_mm(inch: float) -> float:
    return inch * MM_PER_INCH


def celsius_to_fahrenheit(celsius: float) -> float:
    return celsius * 9.0 / 5.0 + 32.0


def fahrenheit_to_celsius(fahrenheit: float) -> float:
    return (fahrenheit - 32.0) * 5.0 / 9.0


def newtons_to_pounds(newtons: float) -> float:
    return newtons * LBF_PER_NEWTON


def pounds_to_newtons(pounds: float) -> float:
    return pounds / LBF_PER_NEWTON


def metric_to_us_tons(metric_tons: float) -> float:
    return metric_tons * US_TONS_PER_METRIC_TON


def us_to_metric_tons(us_tons: float) -> float:
    return us_tons / US_TONS_PER_METRIC_TON


def mpa_to_ksi(mpa: float) -> float:
    return mpa * KSI_PER_MPA


def ksi_to_mpa(ksi: float) -> float:
    return ksi / KSI_PER_MPA


_CONVERSIONS = {
    ("mm", "in"): mm_to_inch,
    ("in", "mm"): inch_to_mm,
    ("C", "F"): celsius_to_fahrenheit,
    ("F", "C"): fahrenheit_to_celsius,
    ("N", "lbf"): newtons_to_pounds,
    ("lbf", "N"): pounds_to_newtons,
    ("t", "ton"): metric_to_us_tons,
    ("ton", "t"): us_to_metric_tons,
    ("MPa", "ksi"): mpa_to_ksi,
    ("ksi", "MPa"): ksi_to_mpa,
}

SUPPORTED_PAIRS = tuple(_CONVERSIONS)


def convert_units(
    value: float,
    from_unit: str,
    to_unit: str,
    diagnostics: Diagnostics | None = None,
) -> float:
    """
    Converts value between unit tags (mm/in, C/F, N/lbf, t/ton, MPa/ksi).

    An unsupported pair returns value unchanged and records a warning.
    """
    if from_unit == to_unit:
        return value
    fn = _CONVERSIONS.get((from_unit, to_unit))
    if fn is None:
        warn(
            diagnostics,
            UNSUPPORTED_CONVERSION,
            f"Conversion from {from_unit} to {to_unit} not supported",
            logger=logger,
            from_unit=from_unit,
            to_unit=to_unit,
        )
        return value
    return fn(value)


_UNIT_LABELS = {
    "length": ("mm", "in"),
    "temperature": ("°C", "°F"),
    "force": ("N", "lbf"),
    "weight": ("kg", "lb"),
    "pressure": ("MPa", "ksi"),
    "tonnage": ("metric t", "US ton"),
}


def format_with_unit(value: float | None, unit: str, is_metric: bool, decimals: int = 2) -> str:
    """Formats an already-converted value with the label of its unit system."""
    if value is None:
        return ""
    rounded = round(float(value), decimals)
    if rounded == int(rounded):
        text = str(int(rounded))
    else:
        text = f"{rounded:.{decimals}f}".rstrip("0")
    labels = _UNIT_LABELS.get(unit)
    if labels is None:
        return text
    return f"{text} {labels[0] if is_metric else labels[1]}"
