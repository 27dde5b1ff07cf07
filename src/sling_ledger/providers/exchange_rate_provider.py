"""Exchange rate provider protocol and base types."""

from decimal import Decimal
from typing import Protocol


class RateProviderError(RuntimeError):
    """Raised by a rate provider when a fetch fails or times out."""


class ExchangeRateProvider(Protocol):
    """
    Protocol for live exchange rate sources.

    ``fetch_rates`` returns every rate quoted against ``base`` as a mapping
    of currency code -> units of that currency per one unit of ``base``.
    Implementations must bound their own network time and raise on failure;
    callers fall back to the static table.
    """

    def fetch_rates(self, base: str) -> dict[str, Decimal]:
        ...
