"""Closed set of supported log formats."""
from __future__ import annotations

import enum

from ..errors import UnknownFormatError
from .access import AccessLogParser
from .base import AccessLogEntry, LineParser, PlaylistLogEntry
from .playlist import PlaylistLogParser

_ALIASES = {
    "access-log": "access",
    "playlist-log": "playlist",
}


class LogFormat(enum.Enum):
    ACCESS = "access"
    PLAYLIST = "playlist"

    @classmethod
    def from_tag(cls, tag: LogFormat | str | None) -> LogFormat:
        """Resolve a format tag, raising UnknownFormatError if it is not supported."""
        if isinstance(tag, cls):
            return tag
        if not isinstance(tag, str) or not tag.strip():
            raise UnknownFormatError(tag)
        key = tag.strip().lower()
        try:
            return cls(_ALIASES.get(key, key))
        except ValueError:
            raise UnknownFormatError(tag) from None

    @property
    def parser(self) -> LineParser:
        return _PARSERS[self]

    @property
    def entry_type(self) -> type:
        return AccessLogEntry if self is LogFormat.ACCESS else PlaylistLogEntry


_PARSERS: dict[LogFormat, LineParser] = {
    LogFormat.ACCESS: AccessLogParser(),
    LogFormat.PLAYLIST: PlaylistLogParser(),
}


def get_parser(tag: LogFormat | str) -> LineParser:
    return LogFormat.from_tag(tag).parser
