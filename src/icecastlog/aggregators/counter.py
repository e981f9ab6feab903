"""Count parsed entries by a field value."""
from __future__ import annotations

from collections import Counter as _Counter
from typing import Any

from ..parsers.base import LogEntry


class Counter:
    """Count occurrences of a field value across log entries."""

    def __init__(self, field: str) -> None:
        self._field = field
        self._counts: _Counter[str] = _Counter()

    @property
    def field(self) -> str:
        return self._field

    def add(self, entry: LogEntry | dict[str, Any]) -> None:
        data = entry if isinstance(entry, dict) else entry.to_dict()
        value = data.get(self._field)
        self._counts["-" if value is None else str(value)] += 1

    def top(self, n: int = 10) -> list[tuple[str, int]]:
        return self._counts.most_common(n)

    @property
    def total(self) -> int:
        return sum(self._counts.values())
