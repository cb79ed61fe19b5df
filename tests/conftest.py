"""Shared test fixtures for the crypto price scanner."""

import pytest

from scanner.config import EngineSettings
from scanner.engine import PriceEngine
from scanner.exchange.adapter import ExchangeAdapter
from scanner.models import TickerRecord


class FakeAdapter(ExchangeAdapter):
    """In-memory adapter: returns queued ticker maps (or raises queued exceptions)."""

    def __init__(
        self,
        exchange_id: str,
        display_name: str | None = None,
        markets: list[str] | None = None,
    ) -> None:
        super().__init__()
        self.id = exchange_id
        self.display_name = display_name or exchange_id.title()
        self._markets = markets or ["USD", "USDT"]
        self.responses: list = []
        self.calls = 0

    async def fetch_ticker(self) -> dict[str, TickerRecord]:
        self.calls += 1
        response = self.responses.pop(0) if self.responses else {}
        if isinstance(response, BaseException):
            raise response
        return response

    def get_markets(self) -> list[str]:
        return list(self._markets)


class FakeClock:
    """Manually advanced clock, Unix seconds."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


def ticker(
    price: float,
    volume: float = 1_000_000.0,
    high: float = 0.0,
    low: float = 0.0,
    change_24h: float = 0.0,
    vol_change_24h: float | None = None,
) -> TickerRecord:
    """Build a TickerRecord with test defaults (liquid, no native high/low)."""
    return TickerRecord(
        price=price,
        volume=volume,
        high=high,
        low=low,
        open=price,
        change_24h=change_24h,
        vol_change_24h=vol_change_24h,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def engine_settings() -> EngineSettings:
    """Engine settings with production windows and a short poll interval."""
    return EngineSettings(poll_interval=0.01)


@pytest.fixture
def coinbase() -> FakeAdapter:
    return FakeAdapter("coinbase", "Coinbase", ["USD", "USDT", "USDC", "BTC", "ETH"])


@pytest.fixture
def kraken() -> FakeAdapter:
    return FakeAdapter("kraken", "Kraken", ["USD", "USDT", "USDC", "BTC", "ETH"])


@pytest.fixture
def engine(
    coinbase: FakeAdapter,
    kraken: FakeAdapter,
    engine_settings: EngineSettings,
    clock: FakeClock,
) -> PriceEngine:
    """PriceEngine over two fake exchanges and a manual clock."""
    return PriceEngine([coinbase, kraken], engine_settings, clock=clock)
