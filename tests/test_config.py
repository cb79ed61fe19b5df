"""Tests for settings loading and component wiring."""

from scanner.config import AppSettings, CategorySettings, EngineSettings, ExchangeSettings
from scanner.engine import PriceEngine
from scanner.main import _build_components


class TestSettings:
    def test_defaults(self) -> None:
        settings = EngineSettings()
        assert settings.poll_interval == 10.0
        assert settings.max_age_hours == 25.0
        assert settings.high_low_window_hours == 24.0
        assert settings.sparkline_points == 30

    def test_env_override(self, monkeypatch) -> None:
        monkeypatch.setenv("ENGINE_POLL_INTERVAL", "3.5")
        monkeypatch.setenv("EXCHANGES_ENABLED", '["kraken", "mexc"]')
        assert EngineSettings().poll_interval == 3.5
        assert ExchangeSettings().enabled == ["kraken", "mexc"]


class TestBuildComponents:
    def test_builds_engine_in_configured_order(self) -> None:
        settings = AppSettings(
            exchanges=ExchangeSettings(enabled=["kucoin", "coinbase"]),
            categories=CategorySettings(enabled=False),
        )
        components = _build_components(settings)
        assert isinstance(components["engine"], PriceEngine)
        assert components["engine"].exchange_ids == ["kucoin", "coinbase"]
        assert components["categories"] is None
