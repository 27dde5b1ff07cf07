"""Data providers module."""

from sling_ledger.providers.price_feed import PriceFeed
from sling_ledger.providers.exchange_rate_provider import ExchangeRateProvider, RateProviderError
from sling_ledger.providers.stub_provider import (
    StubPriceFeed,
    FallbackRateTable,
    FALLBACK_RATES,
    STABLECOIN_PEGS,
)
from sling_ledger.providers.frankfurter_provider import FrankfurterRateProvider

__all__ = [
    "PriceFeed",
    "ExchangeRateProvider",
    "RateProviderError",
    "StubPriceFeed",
    "FallbackRateTable",
    "FALLBACK_RATES",
    "STABLECOIN_PEGS",
    "FrankfurterRateProvider",
]
