"""Shared data models for the price scanner.

Prices and volumes are floats: percentages are rounded to 3 decimals for
display and nothing here settles money.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping


class Timeframe(str, Enum):
    """Lookback window for price/volume deltas."""

    M1 = "1m"
    M5 = "5m"
    M15 = "15m"
    M30 = "30m"
    H1 = "1h"
    H4 = "4h"
    H24 = "24h"

    @property
    def seconds(self) -> int:
        return _TIMEFRAME_SECONDS[self]

    @classmethod
    def parse(cls, token: "str | Timeframe", default: "Timeframe | None" = None) -> "Timeframe":
        """Parse a timeframe token like "15m".

        Unknown tokens raise ValueError unless ``default`` is given.
        """
        if isinstance(token, Timeframe):
            return token
        try:
            return cls(token)
        except ValueError:
            if default is not None:
                return default
            raise


_TIMEFRAME_SECONDS: dict[Timeframe, int] = {
    Timeframe.M1: 60,
    Timeframe.M5: 5 * 60,
    Timeframe.M15: 15 * 60,
    Timeframe.M30: 30 * 60,
    Timeframe.H1: 60 * 60,
    Timeframe.H4: 4 * 60 * 60,
    Timeframe.H24: 24 * 60 * 60,
}


@dataclass(frozen=True)
class TickerRecord:
    """Normalized 24h ticker for one pair on one exchange.

    ``high``/``low`` of 0 mean the exchange did not report them.
    ``volume`` is always quote-denominated.
    """

    price: float
    volume: float
    high: float = 0.0
    low: float = 0.0
    open: float = 0.0
    change_24h: float = 0.0  # percent
    vol_change_24h: float | None = None  # percent, absent on most exchanges


@dataclass(frozen=True)
class Snapshot:
    """All tickers from one successful poll of one exchange."""

    timestamp: float  # Unix seconds
    tickers: Mapping[str, TickerRecord]


@dataclass
class TimeframeResult:
    """Per-symbol answer to "what changed over timeframe T"."""

    symbol: str
    display_symbol: str
    price: float
    price_change: float
    change_24h: float
    vol_change: float
    volume: float
    high: float
    low: float
    near_high: bool
    near_low: bool
    exchange: str

    def to_dict(self) -> dict:
        return {
            "symbol": self.symbol,
            "displaySymbol": self.display_symbol,
            "price": self.price,
            "priceChange": self.price_change,
            "change24h": self.change_24h,
            "volChange": self.vol_change,
            "volume": self.volume,
            "high": self.high,
            "low": self.low,
            "nearHigh": self.near_high,
            "nearLow": self.near_low,
            "exchange": self.exchange,
        }


@dataclass
class AggregatedResult(TimeframeResult):
    """TimeframeResult merged across exchanges.

    ``volume`` is the sum over all contributors; every other field comes from
    the contributor with the largest single-exchange volume.
    """

    exchanges: set[str] = field(default_factory=set)

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["exchanges"] = sorted(self.exchanges)
        return data


@dataclass(frozen=True)
class SparkPoint:
    """One point of a sparkline trajectory."""

    ts: float
    price: float

    def to_dict(self) -> dict:
        return {"ts": self.ts, "price": self.price}


@dataclass
class HistoryInfo:
    """Freshness and coverage of retained snapshot history."""

    snapshots: int = 0
    oldest_age: int = 0  # seconds
    newest_age: int = 0  # seconds
    pairs: int = 0

    def to_dict(self) -> dict:
        return {
            "snapshots": self.snapshots,
            "oldestAge": self.oldest_age,
            "newestAge": self.newest_age,
            "pairs": self.pairs,
        }


@dataclass
class ExchangeInfo:
    """Status row for one configured exchange."""

    id: str
    name: str
    markets: list[str]
    pairs: int
    errors: int

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "markets": list(self.markets),
            "pairs": self.pairs,
            "errors": self.errors,
        }
