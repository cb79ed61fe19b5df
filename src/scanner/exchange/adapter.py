"""Abstract exchange adapter interface.

Defines the contract for all exchange implementations. The engine depends
only on this interface; each exchange's wire-format quirks (pagination,
percentage encoding, symbol prefixes, base-denominated volume) stay inside
its concrete adapter.
"""

from abc import ABC, abstractmethod
from typing import Any

import aiohttp

from scanner.exceptions import FetchError
from scanner.logging import get_logger
from scanner.models import TickerRecord

logger = get_logger(__name__)


class ExchangeAdapter(ABC):
    """Base class for exchange REST adapters.

    Owns a lazily created aiohttp session. Subclasses implement
    ``fetch_ticker`` and ``get_markets`` and set ``id``/``display_name``.
    """

    id: str = ""
    display_name: str = ""

    def __init__(self, timeout: float = 10.0, user_agent: str = "CryptoScanner/1.0") -> None:
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._headers = {"User-Agent": user_agent, "Accept": "application/json"}
        self._session: aiohttp.ClientSession | None = None

    @abstractmethod
    async def fetch_ticker(self) -> dict[str, TickerRecord]:
        """Fetch all tickers, keyed by exchange-native symbol (e.g. "BTCUSD").

        Raises FetchError on network, HTTP or payload failure. An empty dict
        means "no update this cycle".
        """
        ...

    @abstractmethod
    def get_markets(self) -> list[str]:
        """Return the quote currencies this exchange is browsed by, in display order."""
        ...

    def symbol_to_display(self, symbol: str, market: str) -> str:
        """Format a native symbol as "BASE/QUOTE" for the given market suffix."""
        base = symbol[: -len(market)] if market and symbol.endswith(market) else symbol
        return f"{base}/{market}"

    async def close(self) -> None:
        """Close the HTTP session, if one was opened."""
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=self._timeout, headers=self._headers, trust_env=True
            )
        return self._session

    async def _get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        """GET ``url`` and decode JSON, converting every failure into FetchError."""
        session = self._get_session()
        try:
            async with session.get(url, params=params) as response:
                if response.status < 200 or response.status >= 300:
                    body = await response.text()
                    raise FetchError(
                        self.id, f"HTTP {response.status} from {url}: {body[:200]}"
                    )
                return await response.json(content_type=None)
        except FetchError:
            raise
        except (aiohttp.ClientError, TimeoutError) as e:
            raise FetchError(self.id, f"request to {url} failed: {e!r}") from e
        except ValueError as e:
            raise FetchError(self.id, f"JSON parse failed for {url}: {e}") from e


def to_float(value: Any, default: float = 0.0) -> float:
    """Parse a wire value (str, int, float or None) to float."""
    if value is None or value == "":
        return default
    return float(value)
