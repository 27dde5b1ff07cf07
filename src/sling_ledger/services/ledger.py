"""Cash ledger for a single account."""

import logging
import threading
from typing import Optional

from sling_ledger.core.exceptions import (
    CurrencyMismatchError,
    InsufficientFundsError,
    InvalidAmountError,
)
from sling_ledger.domain.models import Money

logger = logging.getLogger(__name__)


class Ledger:
    """
    Single cash balance in the account's base currency.

    Every check-then-act runs under the account lock, so a debit re-checks
    the balance at mutation time regardless of any earlier UI pre-check.
    The lock is shared with the HoldingsBook and the other account services.
    """

    def __init__(
        self,
        base_currency: str = "USD",
        lock: Optional[threading.RLock] = None,
        opening_balance: Optional[Money] = None,
    ):
        self._base_currency = base_currency.upper()
        self._lock = lock or threading.RLock()
        self._balance = Money.zero(self._base_currency)
        if opening_balance is not None:
            self.credit(opening_balance)

    @property
    def base_currency(self) -> str:
        return self._base_currency

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def balance(self) -> Money:
        """Current cash balance (read-only snapshot)."""
        with self._lock:
            return self._balance

    def can_afford(self, amount: Money) -> bool:
        """UI pre-check; the authoritative check happens inside debit."""
        with self._lock:
            return amount <= self._balance

    def credit(self, amount: Money) -> Money:
        """
        Increase the balance by ``amount``.

        Args:
            amount: Non-negative amount in the base currency

        Returns:
            The new balance
        """
        self._validate(amount)
        with self._lock:
            self._balance = self._balance + amount
            logger.info("Credited %s, balance now %s", amount, self._balance)
            return self._balance

    def debit(self, amount: Money) -> Money:
        """
        Decrease the balance by ``amount``.

        Raises InsufficientFundsError when ``amount`` exceeds the balance; the
        balance is left unchanged in that case.
        """
        self._validate(amount)
        with self._lock:
            if amount > self._balance:
                logger.info("Rejected debit of %s against balance %s", amount, self._balance)
                raise InsufficientFundsError(str(amount), str(self._balance))
            self._balance = self._balance - amount
            logger.info("Debited %s, balance now %s", amount, self._balance)
            return self._balance

    def snapshot(self) -> Money:
        return self.balance()

    def restore(self, balance: Money) -> None:
        """Put back a balance taken with ``snapshot`` after a failed flow."""
        if balance.currency_code != self._base_currency:
            raise CurrencyMismatchError(self._base_currency, balance.currency_code)
        with self._lock:
            self._balance = balance

    def _validate(self, amount: Money) -> None:
        if amount.currency_code != self._base_currency:
            raise CurrencyMismatchError(self._base_currency, amount.currency_code)
        if amount.is_negative:
            raise InvalidAmountError(f"Ledger amounts must be non-negative, got {amount}")
