"""Kraken public Ticker adapter.

Kraken names legacy assets with X (crypto) and Z (fiat) prefixes, so the
pair "XXBTZUSD" is BTC/USD while newer listings like "ADAUSD" carry plain
codes. Ticker fields are arrays: ``c`` = [last price, lot volume],
``v``/``h``/``l`` = [today, last 24h], ``o`` = today's opening price.
Volume is base-denominated.
"""

from scanner.exceptions import FetchError
from scanner.exchange.adapter import ExchangeAdapter, to_float
from scanner.logging import get_logger
from scanner.models import TickerRecord

logger = get_logger(__name__)

TICKER_URL = "https://api.kraken.com/0/public/Ticker"

KRAKEN_ASSET_MAP: dict[str, str] = {
    "XXBT": "BTC",
    "XETH": "ETH",
    "XXRP": "XRP",
    "XLTC": "LTC",
    "XXLM": "XLM",
    "XXMR": "XMR",
    "XZEC": "ZEC",
    "XDAO": "DAO",
    "XETC": "ETC",
    "XREP": "REP",
    "XXDG": "DOGE",
    "XMLN": "MLN",
    "ZUSD": "USD",
    "ZEUR": "EUR",
    "ZGBP": "GBP",
    "ZCAD": "CAD",
    "ZJPY": "JPY",
    "ZAUD": "AUD",
    "XBT": "BTC",
    "XDG": "DOGE",
}

# Longest first, so "XXBT" wins over "XBT"
_PREFIXES = sorted(KRAKEN_ASSET_MAP, key=len, reverse=True)

MIN_BASE_LEN = 3


def normalize_pair(pair: str) -> str:
    """Translate a Kraken pair name to canonical codes.

    The base side is matched as a prefix, then the quote side independently
    as a suffix; at most one replacement per side. A suffix only counts when
    at least a 3-letter base remains, so "TRXETH" keeps its TRX base.

    >>> normalize_pair("XXBTZUSD")
    'BTCUSD'
    >>> normalize_pair("ADAUSD")
    'ADAUSD'
    """
    s = pair
    for prefix in _PREFIXES:
        if s.startswith(prefix):
            s = KRAKEN_ASSET_MAP[prefix] + s[len(prefix):]
            break
    for suffix in _PREFIXES:
        if s.endswith(suffix) and len(s) - len(suffix) >= MIN_BASE_LEN:
            s = s[: -len(suffix)] + KRAKEN_ASSET_MAP[suffix]
            break
    return s


class KrakenAdapter(ExchangeAdapter):
    """Kraken tickers for every listed pair, with legacy asset codes normalized."""

    id = "kraken"
    display_name = "Kraken"

    async def fetch_ticker(self) -> dict[str, TickerRecord]:
        data = await self._get_json(TICKER_URL)
        if not isinstance(data, dict):
            raise FetchError(self.id, "unexpected ticker payload")
        errors = data.get("error") or []
        result = data.get("result")
        if errors and not result:
            raise FetchError(self.id, f"API error: {', '.join(map(str, errors))}")
        if not isinstance(result, dict):
            raise FetchError(self.id, "missing result object")

        tickers: dict[str, TickerRecord] = {}
        for pair, t in result.items():
            try:
                price = to_float(t["c"][0])
                open_price = to_float(t.get("o"))
                change = (price - open_price) / open_price * 100 if open_price > 0 else 0.0
                tickers[normalize_pair(pair)] = TickerRecord(
                    price=price,
                    volume=to_float(t["v"][1]) * price,
                    high=to_float(t["h"][1]),
                    low=to_float(t["l"][1]),
                    open=open_price,
                    change_24h=change,
                )
            except (KeyError, IndexError, TypeError, ValueError, AttributeError):
                logger.debug("kraken_ticker_skipped", pair=pair)
        return tickers

    def get_markets(self) -> list[str]:
        return ["USD", "USDT", "USDC", "BTC", "ETH"]
