"""Application settings and configuration."""

from decimal import Decimal
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


FRANKFURTER_URL = "https://api.frankfurter.app"


class Settings(BaseSettings):
    """Engine configuration loaded from SLING_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SLING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Sling Ledger"
    app_version: str = "0.1.0"

    # Currencies
    base_currency: str = "USD"
    display_currency: str = "GBP"
    local_currency: str = "GBP"
    account_stablecoin: str = "USDP"

    # Exchange rates
    use_live_rates: bool = False
    rate_provider_url: str = FRANKFURTER_URL
    rate_cache_ttl_seconds: int = 300
    rate_fetch_timeout_seconds: float = 5.0

    # Quotes
    quote_valid_for_seconds: int = Field(30, ge=1)

    # Bill splitting: DISTRIBUTE or EXACT
    split_remainder_policy: str = "DISTRIBUTE"

    # Savings (USDY)
    savings_instrument_id: str = "USDY"
    savings_apy: Decimal = Decimal("0.0375")
    # 1 real second = this many seconds of accrued yield
    demo_time_multiplier: int = 86400

    # Fees
    base_fee: Decimal = Decimal("0.50")
    free_transfers: int = 3

    # Activity store; None keeps records in memory
    database_url: Optional[str] = None

    log_level: str = "INFO"
    log_format: str = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the current settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Replace the global settings instance."""
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Reset settings to force reload."""
    global _settings
    _settings = None
