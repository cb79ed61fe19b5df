"""Per-exchange ticker poller.

Uses REST polling on a fixed cadence. Each exchange gets its own task, so a
slow or hung exchange never delays another. Within one exchange, polls are
strictly sequential: the loop awaits each poll, then sleeps only for what
is left of the interval, so an overrunning fetch skips ticks instead of
overlapping them. That makes the poller the single writer of its store.
"""

import asyncio
import time
from collections.abc import Callable, Mapping

from scanner.exceptions import FetchError
from scanner.exchange.adapter import ExchangeAdapter
from scanner.logging import get_logger, poll_context
from scanner.models import TickerRecord

logger = get_logger(__name__)

SnapshotSink = Callable[[str, Mapping[str, TickerRecord], float], None]


class ExchangePoller:
    """Polls one adapter and hands each non-empty result to ``sink``.

    Tracks the consecutive error count; a successful poll resets it.
    Failures are logged and counted, never raised.
    """

    def __init__(
        self,
        adapter: ExchangeAdapter,
        sink: SnapshotSink,
        poll_interval: float = 10.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._adapter = adapter
        self._sink = sink
        self._poll_interval = poll_interval
        self._clock = clock
        self._running = False
        self._task: asyncio.Task | None = None  # type: ignore[type-arg]
        self.errors = 0
        self.last_success: float | None = None

    @property
    def exchange_id(self) -> str:
        return self._adapter.id

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Begin polling in the background. The first poll runs immediately."""
        if self._running:
            logger.warning("poller_already_running", exchange=self.exchange_id)
            return
        self._running = True
        self._task = asyncio.create_task(
            self._poll_loop(), name=f"poller-{self.exchange_id}"
        )
        logger.info(
            "poller_started", exchange=self.exchange_id, poll_interval=self._poll_interval
        )

    async def stop(self) -> None:
        """Stop polling gracefully."""
        self._running = False
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("poller_stopped", exchange=self.exchange_id)

    async def _poll_loop(self) -> None:
        """Main polling loop: poll, then sleep for the rest of the interval."""
        loop = asyncio.get_running_loop()
        while self._running:
            started = loop.time()
            await self.poll_once()
            if self._running:
                elapsed = loop.time() - started
                if elapsed > self._poll_interval:
                    logger.info(
                        "poll_overran_interval",
                        exchange=self.exchange_id,
                        elapsed=round(elapsed, 2),
                    )
                await asyncio.sleep(max(0.0, self._poll_interval - elapsed))

    async def poll_once(self) -> bool:
        """Execute a single poll. Returns True if a snapshot was recorded."""
        with poll_context(self.exchange_id):
            try:
                tickers = await self._adapter.fetch_ticker()
            except asyncio.CancelledError:
                raise
            except FetchError as e:
                self.errors += 1
                logger.warning("fetch_error", errors=self.errors, error=e.message)
                return False
            except Exception:
                self.errors += 1
                logger.warning("fetch_error_unexpected", errors=self.errors, exc_info=True)
                return False

            if not tickers:
                logger.debug("empty_ticker_result")
                return False

            now = self._clock()
            self._sink(self.exchange_id, tickers, now)
            self.errors = 0
            self.last_success = now
            logger.debug("snapshot_recorded", pairs=len(tickers))
            return True
