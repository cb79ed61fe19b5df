"""Tests for the shared HTTP/JSON handling in ExchangeAdapter."""

import json
from unittest.mock import MagicMock, patch

import aiohttp
import pytest

from scanner.exceptions import FetchError
from scanner.exchange.mexc import MexcAdapter


class _FakeResponse:
    """Minimal async-context-manager stand-in for aiohttp.ClientResponse."""

    def __init__(self, status: int = 200, body: str = "[]") -> None:
        self.status = status
        self._body = body

    async def __aenter__(self) -> "_FakeResponse":
        return self

    async def __aexit__(self, *exc) -> None:
        return None

    async def text(self) -> str:
        return self._body

    async def json(self, content_type=None):
        return json.loads(self._body)


def _session_returning(response=None, error: Exception | None = None) -> MagicMock:
    session = MagicMock()
    if error is not None:
        session.get = MagicMock(side_effect=error)
    else:
        session.get = MagicMock(return_value=response)
    return session


class TestGetJson:
    @pytest.mark.asyncio
    async def test_decodes_json(self) -> None:
        adapter = MexcAdapter()
        session = _session_returning(_FakeResponse(200, '[{"symbol": "BTCUSDT"}]'))
        with patch.object(adapter, "_get_session", return_value=session):
            data = await adapter._get_json("https://example.test/ticker")
        assert data == [{"symbol": "BTCUSDT"}]

    @pytest.mark.asyncio
    async def test_non_2xx_raises_fetch_error(self) -> None:
        adapter = MexcAdapter()
        session = _session_returning(_FakeResponse(503, "Service Unavailable"))
        with patch.object(adapter, "_get_session", return_value=session):
            with pytest.raises(FetchError, match="HTTP 503") as excinfo:
                await adapter._get_json("https://example.test/ticker")
        assert excinfo.value.exchange == "mexc"

    @pytest.mark.asyncio
    async def test_bad_json_raises_fetch_error(self) -> None:
        adapter = MexcAdapter()
        session = _session_returning(_FakeResponse(200, "<html>oops</html>"))
        with patch.object(adapter, "_get_session", return_value=session):
            with pytest.raises(FetchError, match="JSON parse failed"):
                await adapter._get_json("https://example.test/ticker")

    @pytest.mark.asyncio
    async def test_network_error_raises_fetch_error(self) -> None:
        adapter = MexcAdapter()
        session = _session_returning(error=aiohttp.ClientConnectionError("refused"))
        with patch.object(adapter, "_get_session", return_value=session):
            with pytest.raises(FetchError, match="failed"):
                await adapter._get_json("https://example.test/ticker")

    @pytest.mark.asyncio
    async def test_close_without_session_is_noop(self) -> None:
        adapter = MexcAdapter()
        await adapter.close()
        assert adapter._session is None
