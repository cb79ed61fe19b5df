"""Configuration system using pydantic-settings with environment variable loading."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Price engine polling and retention parameters."""

    model_config = SettingsConfigDict(env_prefix="ENGINE_")

    poll_interval: float = 10.0  # seconds between polls, per exchange
    max_age_hours: float = 25.0  # snapshot history retention
    high_low_window_hours: float = 24.0  # running high/low window
    sparkline_points: int = 30
    request_timeout: float = 10.0  # seconds, per HTTP request


class ExchangeSettings(BaseSettings):
    """Which exchange adapters are built, in query/iteration order."""

    model_config = SettingsConfigDict(env_prefix="EXCHANGES_")

    enabled: list[str] = ["coinbase", "kraken", "mexc", "kucoin"]
    user_agent: str = "CryptoScanner/1.0"


class ApiSettings(BaseSettings):
    """HTTP API server configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8083
    enabled: bool = True


class CategorySettings(BaseSettings):
    """CoinGecko category tagging.

    The free API allows roughly 10-30 requests per minute, so requests are
    spaced by ``request_delay`` seconds.
    """

    model_config = SettingsConfigDict(env_prefix="CATEGORIES_")

    enabled: bool = True
    cache_path: str = "data/categories-cache.json"
    refresh_hours: float = 6.0
    check_interval: float = 1800.0  # seconds between staleness checks
    request_delay: float = 6.0
    rate_limit_delay: float = 60.0
    api_key: str = ""


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    log_format: str = "console"  # "json" for production
    engine: EngineSettings = EngineSettings()
    exchanges: ExchangeSettings = ExchangeSettings()
    api: ApiSettings = ApiSettings()
    categories: CategorySettings = CategorySettings()
