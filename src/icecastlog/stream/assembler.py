"""Accumulate text chunks and split them into complete lines."""
from __future__ import annotations

import logging
import re

from ..errors import LineTooLongError

logger = logging.getLogger(__name__)

# A lone LF or a CRLF pair. A CR at the very end of the buffer stays in the
# pending tail, so a CRLF split across two chunks still terminates one line.
_LINE_END_RE = re.compile(r"\r\n|\n")


class LineAssembler:
    """Line buffer that survives arbitrary chunk boundaries.

    After every ``feed`` the buffer holds at most one partial line.
    ``max_line_length`` of ``None`` or ``0`` leaves the buffer unbounded.
    """

    def __init__(self, max_line_length: int | None = None) -> None:
        self._buffer = ""
        self._max = max_line_length or None

    @property
    def pending(self) -> str:
        return self._buffer

    def feed(self, chunk: str) -> list[str]:
        """Append *chunk* and return every line it completed, in order."""
        self._buffer += chunk
        lines = _LINE_END_RE.split(self._buffer)
        # Last segment is "" when the buffer ended on a terminator.
        self._buffer = lines.pop()
        if self._max is not None and len(self._buffer) > self._max:
            length = len(self._buffer)
            self._buffer = ""
            logger.warning("Dropping unterminated line of %d chars (limit %d)", length, self._max)
            raise LineTooLongError(length, self._max, lines)
        return lines

    def flush(self) -> str | None:
        """Return and clear the pending partial line, if any."""
        tail, self._buffer = self._buffer, ""
        return tail or None
