"""Icecast playlist log parser.

    20/Oct/2015:13:23:25 +0300|/radio|5888| - Artist - Title

Fields are timestamp, mount, listener count and track metadata. Missing
trailing fields fall back to defaults instead of rejecting the line.
"""
from __future__ import annotations

from typing import Iterator

from .base import PlaylistLogEntry, to_epoch_millis

_DATE_FORMAT = "%d/%b/%Y:%H:%M:%S %z"

# Icecast prefixes the metadata with " - " (empty artist slot).
_META_PREFIX = " -"


def parse_playlist_line(line: str) -> PlaylistLogEntry | None:
    fields = line.rstrip("\r\n").split("|", 3)
    date = to_epoch_millis(fields[0].strip(), _DATE_FORMAT)
    if date is None:
        return None

    mount = fields[1] if len(fields) > 1 else ""

    count: int | None = None
    raw_count = fields[2].strip() if len(fields) > 2 else ""
    if raw_count:
        # ASCII digits only, no "_" separators
        if not (raw_count.isascii() and raw_count.isdigit()):
            return None
        count = int(raw_count)

    meta = ""
    if len(fields) > 3:
        meta = fields[3].removeprefix(_META_PREFIX).strip()

    return PlaylistLogEntry(date=date, mount=mount, count=count, meta=meta)


class PlaylistLogParser:
    """Parse Icecast playlist log lines."""

    @property
    def name(self) -> str:
        return "playlist"

    def parse_line(self, line: str) -> PlaylistLogEntry | None:
        return parse_playlist_line(line)

    def parse_file(self, path: str) -> Iterator[PlaylistLogEntry]:
        with open(path, encoding="utf-8", errors="replace") as f:
            for line in f:
                if not line.strip():
                    continue
                entry = self.parse_line(line)
                if entry is not None:
                    yield entry
