"""Parser Protocol and the record types every grammar produces."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, ClassVar, Iterator, Protocol, Union, runtime_checkable

from ..errors import LineParseError


@dataclass(frozen=True)
class AccessLogEntry:
    """One listener request from an Icecast access log."""

    format: ClassVar[str] = "access"

    ip: str
    date: int
    method: str
    url: str
    protocol: str
    status: int
    size: int
    referer: str | None
    agent: str | None
    duration: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PlaylistLogEntry:
    """One track change from an Icecast playlist log."""

    format: ClassVar[str] = "playlist"

    date: int
    mount: str
    count: int | None
    meta: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


LogEntry = Union[AccessLogEntry, PlaylistLogEntry]


@dataclass(frozen=True)
class ParseFailure:
    """A line that did not match the selected grammar."""

    line: str
    line_number: int
    format: str

    @property
    def error(self) -> LineParseError:
        return LineParseError(self.line, self.line_number)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@runtime_checkable
class LineParser(Protocol):
    """Protocol for line grammars — duck-typed, no inheritance required."""

    def parse_line(self, line: str) -> LogEntry | None:
        """Parse a single log line. Returns None if it does not match."""
        ...

    def parse_file(self, path: str) -> Iterator[LogEntry]:
        """Stream-parse a log file line by line, skipping unparseable lines."""
        ...

    @property
    def name(self) -> str:
        """Format tag (e.g. 'access', 'playlist')."""
        ...


def to_epoch_millis(raw: str, fmt: str) -> int | None:
    """Parse a zone-aware timestamp into epoch milliseconds, or None."""
    try:
        ts = datetime.strptime(raw, fmt)
    except ValueError:
        return None
    if ts.tzinfo is None:
        return None
    return int(ts.timestamp()) * 1000
