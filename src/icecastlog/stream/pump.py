"""Drive a parser from a chunk source, pausing on failures.

The pump owns the source iterator, so a paused pump resumes from the next
unconsumed chunk and never re-feeds bytes the parser has already seen::

    pump = ChunkPump(read_chunks(path), parser)
    while not pump.run():
        report(failures)        # consumer decides whether to go on
"""
from __future__ import annotations

import logging
from typing import Iterable

from .parser import Chunk, IcecastLogParser

logger = logging.getLogger(__name__)


class ChunkPump:
    def __init__(
        self,
        source: Iterable[Chunk],
        parser: IcecastLogParser,
        halt_on_failure: bool = True,
        flush: bool = False,
    ) -> None:
        self._source = iter(source)
        self._parser = parser
        self._halt = halt_on_failure
        self._flush = flush
        self._paused = False
        self._finished = False
        self.chunks = 0

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def finished(self) -> bool:
        return self._finished

    def run(self) -> bool:
        """Feed chunks until the source is exhausted or a chunk fails.

        Returns True when the source is exhausted, False when paused.
        """
        if self._finished:
            return True
        self._paused = False
        for chunk in self._source:
            self.chunks += 1
            before = self._parser.stats.failures
            self._parser.feed(chunk)
            if self._halt and self._parser.stats.failures > before:
                self._paused = True
                logger.debug("Paused after chunk %d: %d new failure(s)",
                             self.chunks, self._parser.stats.failures - before)
                return False
        self._parser.finish(flush=self._flush)
        self._finished = True
        return True

    def resume(self) -> bool:
        """Continue after a pause; the pump never does this on its own."""
        return self.run()
