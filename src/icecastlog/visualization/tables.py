"""Rich-powered tables for parsed Icecast log records."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from rich import box
from rich.console import Console
from rich.table import Table

from ..stream.parser import ParserStats

_console = Console()


def _cell(key: str, value: Any) -> str:
    if value is None:
        return "-"
    if key == "date" and isinstance(value, int):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
    return str(value)


def print_entries_table(
    entries: list[dict[str, Any]],
    fields: list[str] | None = None,
    title: str = "Log Entries",
) -> None:
    """Render parsed entries as a Rich table.

    Args:
        entries:  Entry dicts (``entry.to_dict()``).
        fields:   Columns to display. Defaults to all keys of the first entry.
        title:    Table title shown in the header.
    """
    if not entries:
        _console.print("[yellow]No entries to display.[/yellow]")
        return

    cols = fields or list(entries[0].keys())
    table = Table(title=title, box=box.ROUNDED, show_lines=False)
    for col in cols:
        table.add_column("date (UTC)" if col == "date" else col, overflow="fold", max_width=60)

    for entry in entries:
        # 4xx/5xx access entries are highlighted
        status = entry.get("status")
        style = "red" if isinstance(status, int) and status >= 400 else ""
        table.add_row(*[_cell(c, entry.get(c)) for c in cols], style=style)

    _console.print(table)


def print_counter_table(
    counts: list[tuple[str, int]],
    title: str = "Top values",
    value_col: str = "Value",
    count_col: str = "Count",
) -> None:
    """Render a Counter.top() result as a Rich table."""
    table = Table(title=title, box=box.SIMPLE_HEAVY)
    table.add_column("#", style="dim", width=4)
    table.add_column(value_col, overflow="fold")
    table.add_column(count_col, justify="right", style="cyan")

    for rank, (value, count) in enumerate(counts, start=1):
        table.add_row(str(rank), value, str(count))

    _console.print(table)


def print_stats_table(stats: ParserStats, title: str = "Parse summary") -> None:
    table = Table(title=title, box=box.MINIMAL_DOUBLE_HEAD)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right", style="cyan")
    for key in ("lines", "blank", "entries", "failures"):
        table.add_row(key, str(getattr(stats, key)))
    _console.print(table)
