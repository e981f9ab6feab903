"""Exception hierarchy for icecastlog."""
from __future__ import annotations


class IcecastLogError(Exception):
    """Base class for all icecastlog errors."""


class UnknownFormatError(IcecastLogError, ValueError):
    """Raised at construction time for an unknown or missing format tag."""

    def __init__(self, tag: object) -> None:
        self.tag = tag
        super().__init__(f"Unknown log format: {tag!r} (expected 'access' or 'playlist')")


class LineParseError(IcecastLogError):
    """A single line did not match its grammar.

    Never raised by the parser itself; consumers that treat failures as
    fatal get one from ``ParseFailure.error``.
    """

    def __init__(self, line: str, line_number: int) -> None:
        self.line = line
        self.line_number = line_number
        super().__init__(f'Unable to parse line({line_number}) "{line}"')


class LineTooLongError(IcecastLogError):
    """The pending partial line grew past the configured maximum."""

    def __init__(self, length: int, limit: int, lines: list[str] | None = None) -> None:
        self.length = length
        self.limit = limit
        # Lines completed by the same chunk, still to be processed.
        self.lines = lines or []
        super().__init__(f"Unterminated line of {length} chars exceeds limit of {limit}")


class ParserClosedError(IcecastLogError):
    """``feed`` was called after ``finish``."""
