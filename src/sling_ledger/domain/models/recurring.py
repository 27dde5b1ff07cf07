"""Recurring purchase models."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from dateutil.relativedelta import relativedelta

from sling_ledger.domain.models.enums import RecurringFrequency, RecurringPurchaseStatus
from sling_ledger.domain.models.money import Money

_STEPS = {
    RecurringFrequency.DAILY: relativedelta(days=1),
    RecurringFrequency.WEEKLY: relativedelta(weeks=1),
    RecurringFrequency.BIWEEKLY: relativedelta(weeks=2),
    RecurringFrequency.MONTHLY: relativedelta(months=1),
}

# Approximate runs per month, for the monthly commitment figure
RUNS_PER_MONTH = {
    RecurringFrequency.DAILY: Decimal("30"),
    RecurringFrequency.WEEKLY: Decimal("4.33"),
    RecurringFrequency.BIWEEKLY: Decimal("2.17"),
    RecurringFrequency.MONTHLY: Decimal("1"),
}


def next_run(frequency: RecurringFrequency, after: datetime) -> datetime:
    """Next run date; monthly runs keep the day of month, clamped to month end."""
    return after + _STEPS[frequency]


@dataclass
class RecurringPurchase:
    """A standing order to buy ``amount`` of an instrument on a schedule."""

    instrument_id: str
    amount: Money
    frequency: RecurringFrequency
    created_at: datetime
    next_purchase_at: datetime
    name: str = ""
    icon: str = ""
    status: RecurringPurchaseStatus = RecurringPurchaseStatus.ACTIVE
    last_purchase_at: Optional[datetime] = None
    total_invested: Optional[Money] = None
    purchase_count: int = 0
    purchase_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self) -> None:
        if self.total_invested is None:
            self.total_invested = Money.zero(self.amount.currency_code)

    def is_due(self, now: datetime) -> bool:
        return self.status == RecurringPurchaseStatus.ACTIVE and now >= self.next_purchase_at

    def record_purchase(self, at: datetime) -> None:
        self.last_purchase_at = at
        self.total_invested = self.total_invested + self.amount
        self.purchase_count += 1
        self.next_purchase_at = next_run(self.frequency, at)


@dataclass(frozen=True)
class RecurringPurchaseExecution:
    """Outcome of one scheduled run, successful or not."""

    purchase_id: str
    instrument_id: str
    executed_at: datetime
    amount: Money
    success: bool
    shares: Decimal = Decimal("0")
    price_per_share: Optional[Money] = None
    error_message: Optional[str] = None
    execution_id: str = field(default_factory=lambda: str(uuid.uuid4()))
