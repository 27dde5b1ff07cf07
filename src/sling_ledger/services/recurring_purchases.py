"""Recurring purchases: scheduled buys of a fixed cash amount."""

import logging
import threading
from datetime import datetime
from typing import Optional

from sling_ledger.core.exceptions import AppError, InvalidAmountError, NotFoundError, ValidationError
from sling_ledger.core.timezone import Clock, SystemClock
from sling_ledger.domain.models import (
    RUNS_PER_MONTH,
    CENT,
    Money,
    RecurringFrequency,
    RecurringPurchase,
    RecurringPurchaseExecution,
    RecurringPurchaseStatus,
)
from sling_ledger.providers import PriceFeed
from sling_ledger.services.transfer_service import TransferService

logger = logging.getLogger(__name__)


class RecurringPurchaseBook:
    """
    Standing orders that buy an instrument on a daily to monthly schedule.

    Nothing runs on its own: ``execute_due`` is called by whoever drives the
    clock (an app tick or a test). A run that fails, for example on a short
    balance, is logged as a failed execution and the purchase stays due.
    """

    def __init__(
        self,
        transfers: TransferService,
        price_feed: PriceFeed,
        clock: Optional[Clock] = None,
        lock: Optional[threading.RLock] = None,
    ):
        self._transfers = transfers
        self._price_feed = price_feed
        self._clock = clock or SystemClock()
        self._lock = lock or threading.RLock()
        self._purchases: dict[str, RecurringPurchase] = {}
        self._executions: list[RecurringPurchaseExecution] = []

    def add(
        self,
        instrument_id: str,
        amount: Money,
        frequency: RecurringFrequency,
        name: str = "",
        icon: str = "",
        start_at: Optional[datetime] = None,
    ) -> RecurringPurchase:
        """
        Schedule a new recurring purchase.

        Args:
            instrument_id: Ticker to buy
            amount: Cash spent per run, in any supported currency
            frequency: How often to run
            start_at: First run; defaults to now, so the first run is due at once
        """
        if amount.amount <= 0:
            raise InvalidAmountError(f"Recurring amount must be positive, got {amount}")
        now = self._clock.now()
        purchase = RecurringPurchase(
            instrument_id=instrument_id.upper(),
            amount=amount.quantize(CENT),
            frequency=RecurringFrequency(frequency),
            created_at=now,
            next_purchase_at=start_at or now,
            name=name or instrument_id.upper(),
            icon=icon,
        )
        with self._lock:
            self._purchases[purchase.purchase_id] = purchase
        logger.info(
            "Scheduled %s %s of %s from %s",
            purchase.frequency.value,
            purchase.amount,
            purchase.instrument_id,
            purchase.next_purchase_at,
        )
        return purchase

    def get(self, purchase_id: str) -> RecurringPurchase:
        with self._lock:
            purchase = self._purchases.get(purchase_id)
        if purchase is None:
            raise NotFoundError("Recurring purchase", purchase_id)
        return purchase

    def purchases(self, status: Optional[RecurringPurchaseStatus] = None) -> list[RecurringPurchase]:
        """Purchases ordered by next run, optionally filtered by status."""
        with self._lock:
            items = [p for p in self._purchases.values() if status is None or p.status == status]
        return sorted(items, key=lambda p: p.next_purchase_at)

    def pause(self, purchase_id: str) -> RecurringPurchase:
        with self._lock:
            purchase = self.get(purchase_id)
            if purchase.status != RecurringPurchaseStatus.ACTIVE:
                raise ValidationError(f"Only active purchases can be paused, this one is {purchase.status.value}")
            purchase.status = RecurringPurchaseStatus.PAUSED
            return purchase

    def resume(self, purchase_id: str) -> RecurringPurchase:
        """Resume a paused purchase; an overdue run is moved to now rather than replayed."""
        with self._lock:
            purchase = self.get(purchase_id)
            if purchase.status != RecurringPurchaseStatus.PAUSED:
                raise ValidationError(f"Only paused purchases can be resumed, this one is {purchase.status.value}")
            now = self._clock.now()
            if purchase.next_purchase_at < now:
                purchase.next_purchase_at = now
            purchase.status = RecurringPurchaseStatus.ACTIVE
            return purchase

    def cancel(self, purchase_id: str) -> RecurringPurchase:
        with self._lock:
            purchase = self.get(purchase_id)
            purchase.status = RecurringPurchaseStatus.CANCELLED
            return purchase

    def due(self, now: Optional[datetime] = None) -> list[RecurringPurchase]:
        now = now or self._clock.now()
        return [p for p in self.purchases(RecurringPurchaseStatus.ACTIVE) if p.is_due(now)]

    def execute_due(
        self,
        now: Optional[datetime] = None,
        prices: Optional[dict[str, Money]] = None,
    ) -> list[RecurringPurchaseExecution]:
        """
        Run every purchase that is due at ``now``.

        Each purchase runs at most once per call. Prices come from ``prices``
        when given, otherwise from the price feed.

        Returns:
            One execution per purchase attempted
        """
        now = now or self._clock.now()
        prices = {key.upper(): value for key, value in (prices or {}).items()}
        results = []
        with self._lock:
            for purchase in self.due(now):
                results.append(self._execute(purchase, now, prices.get(purchase.instrument_id)))
        return results

    def history(self, purchase_id: Optional[str] = None) -> list[RecurringPurchaseExecution]:
        """Executions most recent first."""
        with self._lock:
            items = [e for e in self._executions if purchase_id is None or e.purchase_id == purchase_id]
        return list(reversed(items))

    def total_invested(self) -> Money:
        """Cash spent by all recurring purchases, in the ledger currency."""
        total = Money.zero(self._base_currency())
        for purchase in self.purchases():
            total = total + self._transfers.to_base(purchase.total_invested)
        return total

    def monthly_commitment(self) -> Money:
        """Approximate monthly spend of the active purchases, in the ledger currency."""
        total = Money.zero(self._base_currency())
        for purchase in self.purchases(RecurringPurchaseStatus.ACTIVE):
            per_run = self._transfers.to_base(purchase.amount)
            total = total + per_run * RUNS_PER_MONTH[purchase.frequency]
        return total.quantize(CENT)

    def _execute(
        self,
        purchase: RecurringPurchase,
        now: datetime,
        price: Optional[Money],
    ) -> RecurringPurchaseExecution:
        try:
            if price is None:
                price = self._price_feed.current_price(purchase.instrument_id)
            self._transfers.buy_stock(
                purchase.instrument_id,
                price,
                amount=self._transfers.to_base(purchase.amount),
                name=purchase.name,
                icon=purchase.icon,
            )
        except AppError as exc:
            logger.warning(
                "Recurring purchase %s of %s failed: %s", purchase.purchase_id, purchase.instrument_id, exc.message
            )
            execution = RecurringPurchaseExecution(
                purchase_id=purchase.purchase_id,
                instrument_id=purchase.instrument_id,
                executed_at=now,
                amount=purchase.amount,
                success=False,
                price_per_share=price,
                error_message=exc.message,
            )
            self._executions.append(execution)
            return execution

        shares = self._transfers.holdings.history(purchase.instrument_id)[-1].shares
        purchase.record_purchase(now)
        execution = RecurringPurchaseExecution(
            purchase_id=purchase.purchase_id,
            instrument_id=purchase.instrument_id,
            executed_at=now,
            amount=purchase.amount,
            success=True,
            shares=shares,
            price_per_share=price,
        )
        self._executions.append(execution)
        logger.info("Recurring purchase %s bought %s %s", purchase.purchase_id, shares, purchase.instrument_id)
        return execution

    def _base_currency(self) -> str:
        return self._transfers.base_currency
