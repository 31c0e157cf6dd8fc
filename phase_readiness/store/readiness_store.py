"""In-memory readiness history with async-safe access and bounded size.

Design notes:
    - An asyncio.Lock guards all access so the telemetry loop (the single
      writer) and any number of HTTP handlers (readers) never interleave.
    - Records are immutable ReadinessRecord objects, so a reader holding a
      record can never observe a partially-updated snapshot.
    - History is an owned deque with FIFO eviction.  Eviction is an explicit
      step run by both update() and set_max_history(); the deque itself is
      unbounded.
    - The store does NOT evaluate anything.  It only remembers what the
      engine said and serves it back.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque

from phase_readiness.domain.readiness import ReadinessOutput
from phase_readiness.domain.record import ReadinessRecord
from phase_readiness.domain.signal import SignalSnapshot

logger = logging.getLogger(__name__)


class ReadinessStore:
    """Async-safe, bounded store of evaluated samples.

    Args:
        max_history: Maximum number of records retained.  Older records are
            evicted first.  Zero keeps only the current record.
    """

    def __init__(self, max_history: int = 100) -> None:
        if max_history < 0:
            raise ValueError("max_history must not be negative")

        self._max_history = max_history
        self._lock = asyncio.Lock()
        self._current = ReadinessRecord.initial()
        self._history: deque[ReadinessRecord] = deque()
        self._total_updates = 0

    # ── Producer side ────────────────────────────────────────────────────

    async def update(self, signal: SignalSnapshot, output: ReadinessOutput) -> ReadinessRecord:
        """Merge one signal/output pair, make it current, append to history."""
        record = ReadinessRecord.merge(signal, output)
        async with self._lock:
            self._current = record
            self._history.append(record)
            self._total_updates += 1
            evicted = self._evict()
        if evicted:
            logger.debug("Evicted %d record(s) from history", evicted)
        return record

    async def set_max_history(self, size: int) -> None:
        """Change the history bound and trim existing history down to it."""
        if size < 0:
            raise ValueError("max_history must not be negative")
        async with self._lock:
            self._max_history = size
            evicted = self._evict()
        logger.info("History capacity set to %d (evicted %d)", size, evicted)

    # ── Reader side ──────────────────────────────────────────────────────

    async def current(self) -> ReadinessRecord:
        """The most recent record, or the initial BLOCK record if none yet."""
        async with self._lock:
            return self._current

    async def history(self, max_count: int) -> list[ReadinessRecord]:
        """Up to *max_count* most recent records, oldest first."""
        if max_count <= 0:
            return []
        async with self._lock:
            count = min(max_count, len(self._history))
            return list(self._history)[len(self._history) - count:]

    async def size(self) -> int:
        async with self._lock:
            return len(self._history)

    @property
    def max_history(self) -> int:
        return self._max_history

    @property
    def total_updates(self) -> int:
        return self._total_updates

    # ── Internals ────────────────────────────────────────────────────────

    def _evict(self) -> int:
        """Drop the oldest records beyond capacity.  Must hold self._lock."""
        evicted = 0
        while len(self._history) > self._max_history:
            self._history.popleft()
            evicted += 1
        return evicted
