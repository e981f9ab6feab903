"""Streaming transformer: raw chunks in, entries and failures out.

Usage::

    parser = IcecastLogParser("access", on_entry=sink.append, on_failure=errors.append)
    for chunk in source:
        parser.feed(chunk)
    parser.finish()
"""
from __future__ import annotations

import codecs
import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator, Union

from ..errors import LineTooLongError, ParserClosedError
from ..parsers.base import LogEntry, ParseFailure
from ..parsers.formats import LogFormat
from .assembler import LineAssembler

logger = logging.getLogger(__name__)

EntryHandler = Callable[[LogEntry], Any]
FailureHandler = Callable[[ParseFailure], Any]
LineHandler = Callable[[str], Any]

Chunk = Union[bytes, bytearray, str]


@dataclass
class ParserStats:
    lines: int = 0
    blank: int = 0
    entries: int = 0
    failures: int = 0


class IcecastLogParser:
    """Turn a stream of chunks into parsed Icecast log records.

    Every complete, non-blank line goes to ``on_line`` first, then either
    ``on_entry`` or ``on_failure``. A failure never stops the remaining
    lines of the same chunk; whether to keep feeding is up to the caller.
    Not safe for concurrent callers.
    """

    def __init__(
        self,
        format: LogFormat | str,
        on_entry: EntryHandler | None = None,
        on_failure: FailureHandler | None = None,
        on_line: LineHandler | None = None,
        encoding: str = "utf-8",
        max_line_length: int | None = None,
    ) -> None:
        self.format = LogFormat.from_tag(format)
        self._parse = self.format.parser.parse_line
        self._on_entry = on_entry
        self._on_failure = on_failure
        self._on_line = on_line
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._assembler = LineAssembler(max_line_length)
        # Complete lines not yet handed to the callbacks.
        self._queue: deque[str] = deque()
        self._closed = False
        self.stats = ParserStats()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> str:
        """Partial line waiting for its terminator."""
        return self._assembler.pending

    @property
    def queued(self) -> int:
        """Complete lines left undelivered because a callback raised."""
        return len(self._queue)

    def feed(self, chunk: Chunk) -> None:
        if self._closed:
            raise ParserClosedError("feed() called after finish()")
        self._drain()
        text = self._decoder.decode(bytes(chunk)) if isinstance(chunk, (bytes, bytearray)) else chunk
        try:
            self._queue.extend(self._assembler.feed(text))
        except LineTooLongError as exc:
            self._queue.extend(exc.lines)
            self._drain()
            raise
        self._drain()

    def finish(self, flush: bool = False) -> None:
        """Signal end of input.

        The trailing unterminated line is dropped unless *flush* is set.
        """
        if self._closed:
            self._drain()
            return
        self._drain()
        tail = self._decoder.decode(b"", final=True)
        if tail:
            self._queue.extend(self._assembler.feed(tail))
        rest = self._assembler.flush()
        if rest is not None:
            if flush:
                self._queue.append(rest)
            else:
                logger.debug("Dropping unterminated final line: %r", rest)
        self._closed = True
        self._drain()

    def _drain(self) -> None:
        # Each line leaves the queue before its callbacks run, so an exception
        # raised by a consumer leaves the rest of the chunk queued.
        while self._queue:
            line = self._queue.popleft()
            self.stats.lines += 1
            if not line.strip():
                self.stats.blank += 1
                continue
            if self._on_line is not None:
                self._on_line(line)
            entry = self._parse(line)
            if entry is not None:
                self.stats.entries += 1
                if self._on_entry is not None:
                    self._on_entry(entry)
                continue
            self.stats.failures += 1
            failure = ParseFailure(line=line, line_number=self.stats.lines, format=self.format.value)
            logger.debug("Unparseable %s line %d: %r", self.format.value, failure.line_number, line)
            if self._on_failure is not None:
                self._on_failure(failure)


def parse_stream(
    chunks: Iterable[Chunk],
    format: LogFormat | str,
    flush: bool = False,
    **kwargs: Any,
) -> Iterator[LogEntry | ParseFailure]:
    """Yield entries and failures from *chunks* in line order."""
    results: list[LogEntry | ParseFailure] = []
    parser = IcecastLogParser(
        format,
        on_entry=results.append,
        on_failure=results.append,
        **kwargs,
    )
    for chunk in chunks:
        parser.feed(chunk)
        yield from results
        results.clear()
    parser.finish(flush=flush)
    yield from results
