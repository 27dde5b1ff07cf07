"""Holding domain model."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sling_ledger.domain.models.enums import PortfolioEventKind
from sling_ledger.domain.models.money import Money, quantize_price


@dataclass
class Holding:
    """
    Position in a single instrument (stock or yield token).

    ``total_cost`` is the remaining cost basis in the base currency; it
    shrinks proportionally on partial sells.
    """

    instrument_id: str
    shares: Decimal = field(default_factory=lambda: Decimal("0"))
    total_cost: Money = field(default_factory=Money.zero)
    opened_at: Optional[datetime] = None

    @property
    def average_price(self) -> Money:
        """Average purchase price per share."""
        if self.shares == 0:
            return Money.zero(self.total_cost.currency_code)
        return Money(
            quantize_price(self.total_cost.amount / self.shares),
            self.total_cost.currency_code,
        )

    @property
    def is_empty(self) -> bool:
        return self.shares == 0


@dataclass(frozen=True)
class PortfolioEvent:
    """
    One position change in the holdings history.

    ``shares`` is the quantity moved; ``shares_after`` is the position in
    ``instrument_id`` once the event applied. ``cash_amount`` is what was
    paid or received.
    """

    timestamp: datetime
    kind: PortfolioEventKind
    instrument_id: str
    shares: Decimal
    price_per_share: Money
    cash_amount: Money
    shares_after: Decimal
