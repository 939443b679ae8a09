"""
Symbol Table
============
Name → value store for knobs.

The parser declares every knob a script animates; the engine writes the
per-frame values into it and transform operations read them back.
"""
from __future__ import annotations

import logging
from typing import Iterator

from mdlanim.errors import UnresolvedKnobError

logger = logging.getLogger(__name__)


class SymbolTable:
    """
    Knob values by name, kept in declaration order.
    """

    def __init__(self, values: dict[str, float] | None = None) -> None:
        self._values: dict[str, float] = {}
        for name, value in (values or {}).items():
            self.set(name, value)

    def declare(self, name: str, value: float = 0.0) -> None:
        """Add ``name`` with ``value`` unless it already exists."""
        if name not in self._values:
            self._values[name] = float(value)

    def set(self, name: str, value: float) -> None:
        self._values[name] = float(value)

    def lookup(self, name: str) -> float:
        try:
            return self._values[name]
        except KeyError:
            raise UnresolvedKnobError(name) from None

    def items(self) -> Iterator[tuple[str, float]]:
        return iter(self._values.items())

    def names(self) -> list[str]:
        return list(self._values)

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __len__(self) -> int:
        return len(self._values)

    def report(self) -> str:
        """
        Logs the knob table and returns it as text.

        Returns:
            One header row followed by one row per knob.
        """
        lines = ["ID\tNAME\t\tTYPE\t\tVALUE"]
        for i, (name, value) in enumerate(self._values.items()):
            lines.append(f"{i}\t{name}\t\tSYM_VALUE\t{value:6.2f}")
        table = "\n".join(lines)
        logger.info(f"Knobs:\n{table}")
        return table
