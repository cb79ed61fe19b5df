"""Coinbase Advanced Trade public products adapter.

The products endpoint is paginated (``limit``/``offset``) and reports no
24h high/low, so the engine fills those from its running tracker.
Volume is base-denominated and the opening price is not reported.
"""

from scanner.exceptions import FetchError
from scanner.exchange.adapter import ExchangeAdapter, to_float
from scanner.logging import get_logger
from scanner.models import TickerRecord

logger = get_logger(__name__)

PRODUCTS_URL = "https://api.coinbase.com/api/v3/brokerage/market/products"
PAGE_LIMIT = 500


class CoinbaseAdapter(ExchangeAdapter):
    """Coinbase spot products, paginated until a short page."""

    id = "coinbase"
    display_name = "Coinbase"

    async def _fetch_products(self) -> list[dict]:
        products: list[dict] = []
        offset = 0
        while True:
            data = await self._get_json(
                PRODUCTS_URL,
                params={"limit": PAGE_LIMIT, "offset": offset, "product_type": "SPOT"},
            )
            if not isinstance(data, dict):
                raise FetchError(self.id, "unexpected products payload")
            page = data.get("products") or []
            if not isinstance(page, list):
                raise FetchError(self.id, "products is not a list")
            products.extend(page)
            if len(page) < PAGE_LIMIT:
                break
            offset += PAGE_LIMIT
        logger.debug("coinbase_products_fetched", count=len(products), pages=offset // PAGE_LIMIT + 1)
        return products

    async def fetch_ticker(self) -> dict[str, TickerRecord]:
        tickers: dict[str, TickerRecord] = {}
        for product in await self._fetch_products():
            if product.get("is_disabled") or product.get("status") != "online":
                continue
            try:
                price = to_float(product.get("price"))
                if price == 0:
                    continue
                change = to_float(product.get("price_percentage_change_24h"))
                tickers[product["product_id"].replace("-", "")] = TickerRecord(
                    price=price,
                    volume=to_float(product.get("volume_24h")) * price,
                    high=0.0,
                    low=0.0,
                    open=price / (1 + change / 100) if change != -100 else 0.0,
                    change_24h=change,
                    vol_change_24h=to_float(product.get("volume_percentage_change_24h")),
                )
            except (KeyError, TypeError, ValueError):
                logger.debug("coinbase_product_skipped", product=product.get("product_id"))
        return tickers

    def get_markets(self) -> list[str]:
        return ["USD", "USDT", "USDC", "BTC", "ETH"]
