"""Configuration system using pydantic-settings with environment variable loading."""

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SYMBOL = "BTC/USDT"


class ExchangeSettings(BaseSettings):
    """Candle source (ccxt exchange) settings."""

    model_config = SettingsConfigDict(env_prefix="EXCHANGE_")

    primary: str = "binance"
    enabled: list[str] = ["binance"]
    enable_rate_limit: bool = True
    timeout_ms: int = 30000


class FetchSettings(BaseSettings):
    """Candle pagination and lookback configuration.

    All fields configurable via FETCH_ environment variable prefix.
    """

    model_config = SettingsConfigDict(env_prefix="FETCH_")

    page_limit: int = 1000  # candles per upstream request
    page_delay: float = 0.0  # seconds between sequential pages
    mvrv_lookback_years: int = 5
    nvt_lookback_years: int = 3
    nvt_display_years: int = 2
    s2f_start_date: str = "2019-05-01"  # ~1 year before the 3rd halving


class CacheSettings(BaseSettings):
    """Per-endpoint cache freshness windows, in seconds."""

    model_config = SettingsConfigDict(env_prefix="CACHE_")

    heatmap: int = 300
    mvrv: int = 600
    pi_cycle: int = 300
    s2f: int = 1800
    nvt: int = 1800  # on-chain data updates slowly
    ohlcv: int = 60
    technicals: int = 60
    stats: int = 60


class OnchainSettings(BaseSettings):
    """Blockchain.com public charts API."""

    model_config = SettingsConfigDict(env_prefix="ONCHAIN_")

    base_url: str = "https://api.blockchain.info"
    timeout: float = 15.0


class ServerSettings(BaseSettings):
    """HTTP server configuration."""

    model_config = SettingsConfigDict(env_prefix="SERVER_")

    host: str = "0.0.0.0"
    port: int = 8080


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    log_format: str = "console"  # LOG_FORMAT=json for machine-readable lines
    exchange: ExchangeSettings = ExchangeSettings()
    fetch: FetchSettings = FetchSettings()
    cache: CacheSettings = CacheSettings()
    onchain: OnchainSettings = OnchainSettings()
    server: ServerSettings = ServerSettings()
