from __future__ import annotations

import pytest

from app.formatting import display_length, display_tonnage, format_length, format_tonnage


def test_tonnage_is_converted_only_for_imperial() -> None:
    assert display_tonnage(100.0, True) == 100.0
    assert display_tonnage(100.0, False) == pytest.approx(110.23)
    assert format_tonnage(400.0, True) == "400 metric t"
    assert format_tonnage(100.0, False) == "110.23 US ton"
    assert format_tonnage(None, True) == ""


def test_length_display() -> None:
    assert display_length(25.4, False) == pytest.approx(1.0)
    assert format_length(25.4, False) == "1 in"
    assert format_length(12.5, True) == "12.5 mm"
