"""MEXC spot 24hr ticker adapter.

MEXC reports ``priceChangePercent`` as a fraction (-0.0743 means -7.43%).
"""

from scanner.exceptions import FetchError
from scanner.exchange.adapter import ExchangeAdapter, to_float
from scanner.logging import get_logger
from scanner.models import TickerRecord

logger = get_logger(__name__)

TICKER_URL = "https://api.mexc.com/api/v3/ticker/24hr"


class MexcAdapter(ExchangeAdapter):
    """MEXC spot tickers from a single unpaginated array."""

    id = "mexc"
    display_name = "MEXC"

    async def fetch_ticker(self) -> dict[str, TickerRecord]:
        data = await self._get_json(TICKER_URL)
        if not isinstance(data, list):
            raise FetchError(self.id, "ticker payload is not a list")

        tickers: dict[str, TickerRecord] = {}
        for t in data:
            try:
                tickers[t["symbol"]] = TickerRecord(
                    price=to_float(t.get("lastPrice")),
                    volume=to_float(t.get("quoteVolume")),
                    high=to_float(t.get("highPrice")),
                    low=to_float(t.get("lowPrice")),
                    open=to_float(t.get("openPrice")),
                    change_24h=to_float(t.get("priceChangePercent")) * 100,
                )
            except (KeyError, TypeError, ValueError):
                logger.debug("mexc_ticker_skipped", symbol=t.get("symbol") if isinstance(t, dict) else None)
        return tickers

    def get_markets(self) -> list[str]:
        return ["USDT", "USDC", "BTC", "ETH"]
