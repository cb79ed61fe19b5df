"""KuCoin allTickers adapter.

``changeRate`` is a fraction. ``open`` is present on current API versions;
when it is missing or zero it is derived from the change rate.
"""

from scanner.exceptions import FetchError
from scanner.exchange.adapter import ExchangeAdapter, to_float
from scanner.logging import get_logger
from scanner.models import TickerRecord

logger = get_logger(__name__)

TICKERS_URL = "https://api.kucoin.com/api/v1/market/allTickers"


class KucoinAdapter(ExchangeAdapter):
    """KuCoin spot tickers under ``data.ticker``."""

    id = "kucoin"
    display_name = "KuCoin"

    async def fetch_ticker(self) -> dict[str, TickerRecord]:
        data = await self._get_json(TICKERS_URL)
        payload = data.get("data") if isinstance(data, dict) else None
        rows = payload.get("ticker") if isinstance(payload, dict) else None
        if not isinstance(rows, list):
            raise FetchError(self.id, "missing data.ticker list")

        tickers: dict[str, TickerRecord] = {}
        for t in rows:
            try:
                price = to_float(t.get("last"))
                change_rate = to_float(t.get("changeRate"))
                open_price = to_float(t.get("open"))
                if open_price == 0 and change_rate != -1:
                    open_price = price / (1 + change_rate)
                tickers[t["symbol"].replace("-", "")] = TickerRecord(
                    price=price,
                    volume=to_float(t.get("volValue")),
                    high=to_float(t.get("high")),
                    low=to_float(t.get("low")),
                    open=open_price,
                    change_24h=change_rate * 100,
                )
            except (KeyError, TypeError, ValueError, AttributeError):
                logger.debug("kucoin_ticker_skipped", symbol=t.get("symbol") if isinstance(t, dict) else None)
        return tickers

    def get_markets(self) -> list[str]:
        return ["USDT", "USDC", "BTC", "ETH"]
