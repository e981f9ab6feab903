"""icecastlog CLI — entry point.

Commands:
    icecastlog parse <file>    Parse and display access/playlist log entries
    icecastlog stats <file>    Count entries by a field
"""
from __future__ import annotations

import dataclasses
import json
import logging
from typing import IO, Any, Iterator

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from .aggregators.counter import Counter
from .config import settings
from .errors import IcecastLogError
from .parsers.base import LogEntry, ParseFailure
from .parsers.formats import LogFormat
from .stream.parser import IcecastLogParser
from .stream.pump import ChunkPump
from .visualization.tables import print_counter_table, print_entries_table, print_stats_table

console = Console()
err_console = Console(stderr=True)

_FORMATS = [f.value for f in LogFormat]


class _LimitReached(Exception):
    pass


# ── Helpers ─────────────────────────────────────────────────────────────────


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _read_chunks(fh: IO[bytes], size: int) -> Iterator[bytes]:
    while True:
        chunk = fh.read(size)
        if not chunk:
            return
        yield chunk


def _entry_line(entry: LogEntry) -> str:
    if entry.format == "access":
        return (
            f"[dim]{entry.date}[/dim] {escape(entry.ip)} {escape(entry.method)} {escape(entry.url)} "
            f"→ {entry.status} ({entry.size} B, {entry.duration}s)"
        )
    count = "-" if entry.count is None else entry.count
    return f"[dim]{entry.date}[/dim] {escape(entry.mount)} [cyan]{count}[/cyan] {escape(entry.meta)}"


def _report_failure(failure: ParseFailure) -> None:
    err_console.print(str(failure.error), style="red", markup=False, highlight=False)


def _run(pump: ChunkPump) -> bool:
    try:
        return pump.run()
    except IcecastLogError as exc:
        raise click.ClickException(str(exc)) from exc


# ── CLI root ─────────────────────────────────────────────────────────────────


@click.group()
@click.version_option(version="1.0.0", prog_name="icecastlog")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging on stderr.")
def main(verbose: bool) -> None:
    """icecastlog — streaming parser for Icecast access and playlist logs."""
    _configure_logging(verbose)


# ── parse ────────────────────────────────────────────────────────────────────


@main.command()
@click.argument("file", type=click.File("rb"))
@click.option(
    "--format", "-f", "fmt", default=settings.default_format,
    type=click.Choice(_FORMATS, case_sensitive=False),
    help="Log format.",
    show_default=True,
)
@click.option(
    "--output", "-o", "output_fmt", default="stream",
    type=click.Choice(["table", "stream", "json"], case_sensitive=False),
    help="Output format.",
    show_default=True,
)
@click.option("--limit", "-n", default=0, type=int, help="Max entries to display (0 = all).")
@click.option(
    "--on-error", default="skip",
    type=click.Choice(["stop", "skip"], case_sensitive=False),
    help="Stop at the first chunk with an unparseable line, or report it and go on.",
    show_default=True,
)
@click.option(
    "--flush/--no-flush", default=settings.flush_on_finish,
    help="Parse a trailing line that has no newline.",
    show_default=True,
)
@click.option("--chunk-size", default=settings.chunk_size, type=int, help="Bytes per read.", show_default=True)
def parse(
    file: IO[bytes],
    fmt: str,
    output_fmt: str,
    limit: int,
    on_error: str,
    flush: bool,
    chunk_size: int,
) -> None:
    """Parse an Icecast log (use - for stdin) and display entries.

    \b
    Examples:
      icecastlog parse access.log
      icecastlog parse playlist.log --format playlist --output table
      tail -f access.log | icecastlog parse - --output json
    """
    collected: list[dict[str, Any]] = []

    def on_entry(entry: LogEntry) -> None:
        if output_fmt == "json":
            click.echo(json.dumps(entry.to_dict()))
        elif output_fmt == "table":
            collected.append(entry.to_dict())
        else:
            console.print(_entry_line(entry), highlight=False)
        if limit and parser.stats.entries >= limit:
            raise _LimitReached

    parser = IcecastLogParser(
        fmt,
        on_entry=on_entry,
        on_failure=_report_failure,
        encoding=settings.encoding,
        max_line_length=settings.max_line_length,
    )
    pump = ChunkPump(
        _read_chunks(file, chunk_size),
        parser,
        halt_on_failure=on_error == "stop",
        flush=flush,
    )

    try:
        finished = _run(pump)
    except _LimitReached:
        finished = True

    if output_fmt == "table":
        print_entries_table(collected, title=f"{parser.format.value} log")

    err_console.print(
        f"[dim]{parser.stats.entries} entries, {parser.stats.failures} unparseable lines[/dim]"
    )
    if not finished:
        raise click.ClickException(f"Stopped after chunk {pump.chunks} on unparseable input")


# ── stats ────────────────────────────────────────────────────────────────────


@main.command()
@click.argument("file", type=click.File("rb"))
@click.option(
    "--format", "-f", "fmt", default=settings.default_format,
    type=click.Choice(_FORMATS, case_sensitive=False),
    show_default=True,
)
@click.option("--by", "-b", default="", help="Field to count by (default: status / mount).")
@click.option("--top", "-t", default=10, type=int, help="Show top N values.", show_default=True)
@click.option("--flush/--no-flush", default=settings.flush_on_finish, show_default=True)
@click.option("--chunk-size", default=settings.chunk_size, type=int, help="Bytes per read.", show_default=True)
def stats(file: IO[bytes], fmt: str, by: str, top: int, flush: bool, chunk_size: int) -> None:
    """Show aggregate statistics for an Icecast log.

    \b
    Examples:
      icecastlog stats access.log
      icecastlog stats access.log --by agent --top 5
      icecastlog stats playlist.log --format playlist --by meta
    """
    log_format = LogFormat.from_tag(fmt)
    field = by or ("status" if log_format is LogFormat.ACCESS else "mount")
    known = [f.name for f in dataclasses.fields(log_format.entry_type)]
    if field not in known:
        raise click.BadParameter(f"{field!r} is not one of {', '.join(known)}", param_hint="--by")

    counter = Counter(field=field)
    parser = IcecastLogParser(
        log_format,
        on_entry=counter.add,
        encoding=settings.encoding,
        max_line_length=settings.max_line_length,
    )
    pump = ChunkPump(
        _read_chunks(file, chunk_size), parser, halt_on_failure=False, flush=flush
    )
    _run(pump)

    print_stats_table(parser.stats, title=f"{log_format.value} log")
    print_counter_table(counter.top(top), title=f"Top {top} by '{field}'", value_col=field, count_col="Count")


if __name__ == "__main__":
    main()
