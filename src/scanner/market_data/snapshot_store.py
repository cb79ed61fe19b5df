"""Per-exchange, time-evicted snapshot history.

Each exchange has exactly one writer (its poller). Readers take an
immutable tuple view, so a query running while a poll lands sees either
the old or the new history, never a half-evicted one. The lock is held
only for append/evict and for copying.
"""

import time
from collections import deque
from threading import Lock
from typing import Mapping

from scanner.models import Snapshot, TickerRecord


class SnapshotStore:
    """Ordered-by-time snapshot sequence for one exchange, oldest first.

    Invariant: after every append, no snapshot is older than
    ``max_age_seconds`` relative to the newest one.
    """

    def __init__(self, max_age_seconds: float = 25 * 60 * 60) -> None:
        self._max_age = max_age_seconds
        self._snapshots: deque[Snapshot] = deque()
        self._lock = Lock()
        self._view: tuple[Snapshot, ...] | None = ()

    def append(self, tickers: Mapping[str, TickerRecord], timestamp: float | None = None) -> Snapshot:
        """Append a snapshot and evict everything older than max age. Returns the new snapshot."""
        ts = timestamp if timestamp is not None else time.time()
        snapshot = Snapshot(timestamp=ts, tickers=dict(tickers))
        cutoff = ts - self._max_age
        with self._lock:
            self._snapshots.append(snapshot)
            while self._snapshots and self._snapshots[0].timestamp < cutoff:
                self._snapshots.popleft()
            self._view = None
        return snapshot

    def view(self) -> tuple[Snapshot, ...]:
        """Return an immutable copy of the history, oldest first.

        The copy is cached until the next append, so repeated queries between
        polls share one tuple.
        """
        with self._lock:
            if self._view is None:
                self._view = tuple(self._snapshots)
            return self._view

    def latest(self) -> Snapshot | None:
        with self._lock:
            return self._snapshots[-1] if self._snapshots else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._snapshots)
