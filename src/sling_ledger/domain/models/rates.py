"""Exchange rate and price quote models."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal

from sling_ledger.domain.models.enums import RateSource
from sling_ledger.domain.models.money import Money


@dataclass(frozen=True)
class ExchangeRate:
    """A conversion rate between two currencies at a point in time."""

    from_currency: str
    to_currency: str
    rate: Decimal
    fetched_at: datetime
    source: RateSource = RateSource.LIVE


@dataclass(frozen=True)
class Quote:
    """Time-boxed price snapshot shown on a confirmation screen."""

    instrument_id: str
    price: Money
    issued_at: datetime
    valid_for_seconds: int = 30

    @property
    def expires_at(self) -> datetime:
        return self.issued_at + timedelta(seconds=self.valid_for_seconds)

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at
