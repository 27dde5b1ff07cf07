"""Price feed provider protocol."""

from typing import Protocol

from sling_ledger.domain.models import Money


class PriceFeed(Protocol):
    """
    Protocol for instrument price feeds.

    Implementations return the latest price for a stock or token in the
    base currency. Unknown instruments raise NotFoundError.
    """

    def current_price(self, instrument_id: str) -> Money:
        """Return the latest price per share/token."""
        ...
