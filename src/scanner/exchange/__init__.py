"""Exchange adapter layer -- one REST adapter per supported exchange."""

from scanner.config import EngineSettings, ExchangeSettings
from scanner.exchange.adapter import ExchangeAdapter
from scanner.exchange.coinbase import CoinbaseAdapter
from scanner.exchange.kraken import KrakenAdapter, normalize_pair
from scanner.exchange.kucoin import KucoinAdapter
from scanner.exchange.mexc import MexcAdapter

ADAPTER_CLASSES: dict[str, type[ExchangeAdapter]] = {
    cls.id: cls for cls in (CoinbaseAdapter, KrakenAdapter, MexcAdapter, KucoinAdapter)
}


def build_adapters(
    exchanges: ExchangeSettings, engine: EngineSettings
) -> list[ExchangeAdapter]:
    """Instantiate the enabled adapters, in configured order.

    Raises ValueError for an id with no adapter.
    """
    adapters = []
    for exchange_id in exchanges.enabled:
        cls = ADAPTER_CLASSES.get(exchange_id)
        if cls is None:
            raise ValueError(
                f"No adapter for exchange {exchange_id!r}; known: {sorted(ADAPTER_CLASSES)}"
            )
        adapters.append(cls(timeout=engine.request_timeout, user_agent=exchanges.user_agent))
    return adapters


__all__ = [
    "ADAPTER_CLASSES",
    "CoinbaseAdapter",
    "ExchangeAdapter",
    "KrakenAdapter",
    "KucoinAdapter",
    "MexcAdapter",
    "build_adapters",
    "normalize_pair",
]
