"""Configuration system using pydantic-settings with environment variable loading."""

from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class MarketDataSettings(BaseSettings):
    """CoinGecko-compatible price provider settings."""

    model_config = SettingsConfigDict(env_prefix="COINGECKO_")

    base_url: str = "https://api.coingecko.com/api/v3"
    api_key: SecretStr = SecretStr("")  # optional demo key for higher rate limits
    vs_currency: str = "usd"
    request_timeout: float = 10.0


class ChartSettings(BaseSettings):
    """Price chart presentation parameters.

    Controls the truncation policy applied to fetched history, the time label
    format, the initial selection, and how unknown asset symbols are handled.
    All fields configurable via CHART_ environment variable prefix.
    """

    model_config = SettingsConfigDict(env_prefix="CHART_")

    truncation: Literal["full", "first_n"] = "full"
    first_n: int = 15  # only used when truncation == "first_n"
    label_format: str = "%I:%M %p"
    default_asset: str = "bitcoin"
    default_window: str = "1H"
    strict_assets: bool = False  # reject unknown assets instead of falling back to cardano


class TransactionSettings(BaseSettings):
    """Transaction history store location."""

    model_config = SettingsConfigDict(env_prefix="TRANSACTIONS_")

    db_path: str = "data/transactions.db"
    table: str = "transaction_history"


class DashboardSettings(BaseSettings):
    """Dashboard server configuration."""

    model_config = SettingsConfigDict(env_prefix="DASHBOARD_")

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
    market_data: MarketDataSettings = Field(default_factory=MarketDataSettings)
    chart: ChartSettings = Field(default_factory=ChartSettings)
    transactions: TransactionSettings = Field(default_factory=TransactionSettings)
    dashboard: DashboardSettings = Field(default_factory=DashboardSettings)
