"""
Structured warning channel for the calculation engine.

Nothing in calc_core raises for recoverable conditions (bad geometry, a draw
past the limiting drawing ratio, an unsupported unit pair). Instead a
Diagnostic is recorded and logged, and the collected list travels with the
Results so callers and tests can inspect it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

INVALID_GEOMETRY = "INVALID_GEOMETRY"
FORM_DEPTH = "FORM_DEPTH"
DRAW_RATIO_EXCEEDS_LDR = "DRAW_RATIO_EXCEEDS_LDR"
DRAW_THICKNESS = "DRAW_THICKNESS"
UNSUPPORTED_CONVERSION = "UNSUPPORTED_CONVERSION"


@dataclass(frozen=True)
class Diagnostic:
    code: str
    message: str
    context: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "context": dict(self.context)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Diagnostic":
        return cls(
            code=str(data["code"]),
            message=str(data.get("message") or ""),
            context=dict(data.get("context") or {}),
        )


class Diagnostics:
    """Append-only sink; one instance per coordinator run."""

    def __init__(self) -> None:
        self._items: list[Diagnostic] = []

    def warn(
        self,
        code: str,
        message: str,
        *,
        logger: logging.Logger | None = None,
        **context: Any,
    ) -> Diagnostic:
        item = Diagnostic(code=code, message=message, context=context)
        self._items.append(item)
        (logger or logging.getLogger(__name__)).warning("%s: %s", code, message)
        return item

    def codes(self) -> list[str]:
        return [d.code for d in self._items]

    def as_tuple(self) -> tuple[Diagnostic, ...]:
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(self._items)


def warn(
    diagnostics: Diagnostics | None,
    code: str,
    message: str,
    *,
    logger: logging.Logger | None = None,
    **context: Any,
) -> None:
    # Engine functions accept diagnostics=None when called standalone.
    if diagnostics is None:
        (logger or logging.getLogger(__name__)).warning("%s: %s", code, message)
        return
    diagnostics.warn(code, message, logger=logger, **context)
