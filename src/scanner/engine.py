"""Multi-exchange price engine.

Owns, per exchange: the adapter, its snapshot store, its running high/low
tracker and its poller. Constructed once at startup and passed explicitly
to the API layer. Exchange states are disjoint, so there is no locking
across exchanges.

Query API:
  - get_timeframe_data(exchange, timeframe, market)
  - get_all_exchanges_data(timeframe, market)
  - get_sparkline_data(exchange | "all", symbol)
  - get_history_info(exchange | "all")
  - get_exchanges()
"""

import asyncio
import time
from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass

from scanner.config import EngineSettings
from scanner.exceptions import UnknownExchangeError
from scanner.exchange.adapter import ExchangeAdapter
from scanner.logging import get_logger
from scanner.market_data.aggregator import aggregate_results
from scanner.market_data.high_low import HighLowTracker
from scanner.market_data.history import combine_history_info, history_info
from scanner.market_data.poller import ExchangePoller
from scanner.market_data.snapshot_store import SnapshotStore
from scanner.market_data.sparkline import count_snapshots_with, sample_sparkline
from scanner.market_data.timeframe import resolve_timeframe
from scanner.models import (
    AggregatedResult,
    ExchangeInfo,
    HistoryInfo,
    SparkPoint,
    TickerRecord,
    Timeframe,
    TimeframeResult,
)

logger = get_logger(__name__)

ALL_EXCHANGES = "all"


@dataclass
class ExchangeState:
    """Everything the engine holds for one exchange."""

    adapter: ExchangeAdapter
    store: SnapshotStore
    tracker: HighLowTracker
    poller: ExchangePoller
    pair_count: int = 0


class PriceEngine:
    """Polls every configured exchange and answers scanner queries.

    Args:
        adapters: Exchange adapters, in iteration order for "all" queries.
        settings: Polling and retention parameters.
        clock: Time source (Unix seconds); injectable for tests.
    """

    def __init__(
        self,
        adapters: Sequence[ExchangeAdapter],
        settings: EngineSettings | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._settings = settings or EngineSettings()
        self._clock = clock
        self._exchanges: dict[str, ExchangeState] = {}
        for adapter in adapters:
            if adapter.id in self._exchanges:
                raise ValueError(f"Duplicate exchange id: {adapter.id}")
            self._exchanges[adapter.id] = ExchangeState(
                adapter=adapter,
                store=SnapshotStore(self._settings.max_age_hours * 3600),
                tracker=HighLowTracker(self._settings.high_low_window_hours * 3600),
                poller=ExchangePoller(
                    adapter,
                    self.record_snapshot,
                    poll_interval=self._settings.poll_interval,
                    clock=clock,
                ),
            )

    @property
    def exchange_ids(self) -> list[str]:
        return list(self._exchanges)

    def _state(self, exchange: str) -> ExchangeState:
        state = self._exchanges.get(exchange)
        if state is None:
            raise UnknownExchangeError(exchange)
        return state

    # ──────────────────────────────────────────────
    # Lifecycle
    # ──────────────────────────────────────────────

    async def start(self) -> None:
        """Start one independent poller per exchange."""
        logger.info("price_engine_starting", exchanges=self.exchange_ids)
        for state in self._exchanges.values():
            await state.poller.start()

    async def stop(self) -> None:
        """Stop all pollers and close adapter sessions."""
        await asyncio.gather(*(s.poller.stop() for s in self._exchanges.values()))
        await asyncio.gather(*(s.adapter.close() for s in self._exchanges.values()))
        logger.info("price_engine_stopped")

    async def poll_once(self, exchange: str) -> bool:
        """Run one poll cycle for ``exchange``. Only call while the engine is stopped."""
        return await self._state(exchange).poller.poll_once()

    # ──────────────────────────────────────────────
    # Write path (pollers only)
    # ──────────────────────────────────────────────

    def record_snapshot(
        self, exchange: str, tickers: Mapping[str, TickerRecord], timestamp: float
    ) -> None:
        """Append a snapshot, evict old history, and update running high/low."""
        if not tickers:
            return
        state = self._state(exchange)
        state.store.append(tickers, timestamp)
        state.pair_count = len(tickers)
        state.tracker.update(tickers, timestamp)

    # ──────────────────────────────────────────────
    # Queries
    # ──────────────────────────────────────────────

    def get_timeframe_data(
        self, exchange: str, timeframe: str | Timeframe, market: str
    ) -> list[TimeframeResult]:
        """Per-symbol price/volume change over ``timeframe`` for one exchange.

        Unknown timeframe tokens fall back to 24h.
        """
        state = self._state(exchange)
        return resolve_timeframe(
            exchange,
            state.adapter,
            state.store.view(),
            state.tracker,
            Timeframe.parse(timeframe, default=Timeframe.H24),
            market,
            self._clock(),
        )

    def get_all_exchanges_data(
        self, timeframe: str | Timeframe, market: str
    ) -> list[AggregatedResult]:
        """Timeframe data from every exchange, merged by symbol."""
        results: list[TimeframeResult] = []
        for exchange in self._exchanges:
            results.extend(self.get_timeframe_data(exchange, timeframe, market))
        return aggregate_results(results)

    def get_sparkline_data(self, exchange: str, symbol: str) -> Iterator[SparkPoint]:
        """Down-sampled price trajectory for ``symbol``.

        ``exchange="all"`` picks the exchange whose history contains the
        symbol most often (first configured wins ties).
        """
        if exchange == ALL_EXCHANGES:
            best: str | None = None
            best_count = 0
            for name, state in self._exchanges.items():
                count = count_snapshots_with(state.store.view(), symbol)
                if count > best_count:
                    best, best_count = name, count
            if best is None:
                return iter(())
            exchange = best

        history = self._state(exchange).store.view()
        return sample_sparkline(history, symbol, self._settings.sparkline_points)

    def get_history_info(self, exchange: str) -> HistoryInfo:
        """Snapshot count, oldest/newest age and pair count for one exchange or "all"."""
        now = self._clock()
        if exchange == ALL_EXCHANGES:
            return combine_history_info(
                history_info(s.store.view(), s.pair_count, now)
                for s in self._exchanges.values()
            )
        state = self._state(exchange)
        return history_info(state.store.view(), state.pair_count, now)

    def get_exchanges(self) -> list[ExchangeInfo]:
        """Status row per exchange: markets, pair count, consecutive errors."""
        return [
            ExchangeInfo(
                id=name,
                name=state.adapter.display_name,
                markets=state.adapter.get_markets(),
                pairs=state.pair_count,
                errors=state.poller.errors,
            )
            for name, state in self._exchanges.items()
        ]
