"""Running 24h high/low reconstruction from observed prices.

Coinbase's products endpoint reports no 24h high/low, so every poll's
prices are recorded here and the timeframe resolver reads from this
tracker whenever an exchange reports 0.

Each entry keeps its raw points plus two monotonic deques (decreasing for
the max, increasing for the min), so a prune+append+recompute costs
amortized O(1) instead of a full rescan of up to a day of points.
"""

from collections import deque
from typing import Mapping

from scanner.models import TickerRecord

DEFAULT_WINDOW_SECONDS = 24 * 60 * 60


class HighLowEntry:
    """Rolling extremes for one symbol.

    Invariant: ``high == max(p for _, p in points)`` and
    ``low == min(p for _, p in points)`` after every ``add``.
    """

    __slots__ = ("_points", "_max", "_min", "high", "low")

    def __init__(self) -> None:
        self._points: deque[tuple[float, float]] = deque()
        self._max: deque[tuple[float, float]] = deque()
        self._min: deque[tuple[float, float]] = deque()
        self.high = 0.0
        self.low = 0.0

    @property
    def points(self) -> tuple[tuple[float, float], ...]:
        return tuple(self._points)

    @property
    def last_seen(self) -> float:
        return self._points[-1][0] if self._points else 0.0

    def add(self, timestamp: float, price: float, cutoff: float) -> None:
        """Record ``(timestamp, price)``, drop points older than ``cutoff``, recompute."""
        point = (timestamp, price)
        self._points.append(point)
        while self._max and self._max[-1][1] <= price:
            self._max.pop()
        self._max.append(point)
        while self._min and self._min[-1][1] >= price:
            self._min.pop()
        self._min.append(point)

        while self._points and self._points[0][0] < cutoff:
            self._points.popleft()
        while self._max and self._max[0][0] < cutoff:
            self._max.popleft()
        while self._min and self._min[0][0] < cutoff:
            self._min.popleft()

        if self._points:
            self.high = self._max[0][1]
            self.low = self._min[0][1]
        else:
            self.high = 0.0
            self.low = 0.0


class HighLowTracker:
    """Per-symbol running high/low for one exchange."""

    def __init__(self, window_seconds: float = DEFAULT_WINDOW_SECONDS) -> None:
        self._window = window_seconds
        self._entries: dict[str, HighLowEntry] = {}

    def update(self, tickers: Mapping[str, TickerRecord], timestamp: float) -> None:
        """Record every symbol's price from one successful poll."""
        cutoff = timestamp - self._window
        for symbol, ticker in tickers.items():
            entry = self._entries.get(symbol)
            if entry is None:
                entry = self._entries[symbol] = HighLowEntry()
            entry.add(timestamp, ticker.price, cutoff)

        # Delisted symbols stop receiving points; drop them once fully aged out.
        stale = [
            symbol
            for symbol, entry in self._entries.items()
            if symbol not in tickers and entry.last_seen < cutoff
        ]
        for symbol in stale:
            del self._entries[symbol]

    def get(self, symbol: str) -> HighLowEntry | None:
        return self._entries.get(symbol)

    def __len__(self) -> int:
        return len(self._entries)
