"""USDY savings: a yield token priced by compound growth since first deposit."""

import logging
import threading
from datetime import datetime
from decimal import Decimal
from typing import Optional, Union

from sling_ledger.core.exceptions import InsufficientSharesError, InvalidAmountError
from sling_ledger.core.timezone import Clock, SystemClock
from sling_ledger.domain.models import (
    CENT,
    Money,
    YieldDisplayMode,
    quantize_price,
    quantize_shares,
    to_decimal,
)
from sling_ledger.domain.models.money import Number
from sling_ledger.domain.views import SavingsSummary
from sling_ledger.services.activity_recorder import ActivityRecorder
from sling_ledger.services.holdings_book import HoldingsBook
from sling_ledger.services.unit_of_work import unit_of_work

logger = logging.getLogger(__name__)

SECONDS_PER_YEAR = Decimal("31557600")  # 365.25 days
BASE_TOKEN_PRICE = Decimal("1.00")


class SavingsService:
    """
    Savings account backed by a yield token held in the HoldingsBook.

    The token price starts at 1.00 on the first deposit and compounds at
    ``apy``; ``demo_time_multiplier`` accelerates time (86400 makes one real
    second worth one day of yield). Withdrawing everything resets the clock.
    """

    def __init__(
        self,
        holdings: HoldingsBook,
        recorder: Optional[ActivityRecorder] = None,
        instrument_id: str = "USDY",
        apy: Decimal = Decimal("0.0375"),
        demo_time_multiplier: int = 86400,
        clock: Optional[Clock] = None,
        lock: Optional[threading.RLock] = None,
    ):
        self._holdings = holdings
        self._recorder = recorder
        self._instrument_id = instrument_id.upper()
        self._apy = to_decimal(apy)
        self._multiplier = Decimal(demo_time_multiplier)
        self._clock = clock or SystemClock()
        self._lock = lock or threading.RLock()
        self._base_currency = holdings.base_currency
        self.first_deposit_at: Optional[datetime] = None
        self.total_deposited = Money.zero(self._base_currency)
        self.display_mode = YieldDisplayMode.ACCUMULATING

    @property
    def instrument_id(self) -> str:
        return self._instrument_id

    def token_balance(self) -> Decimal:
        return self._holdings.shares_owned(self._instrument_id)

    def has_savings(self) -> bool:
        return self.token_balance() > 0

    def current_price(self, now: Optional[datetime] = None) -> Money:
        """Token price: 1.00 * (1 + apy) ** years since first deposit."""
        if self.first_deposit_at is None:
            return Money(BASE_TOKEN_PRICE, self._base_currency)
        now = now or self._clock.now()
        elapsed = Decimal(str(max((now - self.first_deposit_at).total_seconds(), 0)))
        years = elapsed * self._multiplier / SECONDS_PER_YEAR
        price = BASE_TOKEN_PRICE * (1 + self._apy) ** years
        return Money(quantize_price(price), self._base_currency)

    def total_value(self) -> Money:
        return (self.current_price() * self.token_balance()).quantize(CENT)

    def total_earnings(self) -> Money:
        """Value above what was deposited; never negative."""
        earnings = self.total_value() - self.total_deposited.quantize(CENT)
        if earnings.is_negative:
            return Money.zero(self._base_currency)
        return earnings

    def display_tokens(self) -> Decimal:
        if self.display_mode == YieldDisplayMode.REBASING:
            return (self.token_balance() * self.current_price().amount).quantize(CENT)
        return self.token_balance()

    def display_price(self) -> Money:
        if self.display_mode == YieldDisplayMode.REBASING:
            return Money(BASE_TOKEN_PRICE, self._base_currency)
        return self.current_price()

    def set_display_mode(self, mode: Union[YieldDisplayMode, str]) -> None:
        self.display_mode = YieldDisplayMode(mode)

    def deposit(self, amount: Money) -> Decimal:
        """
        Swap cash for tokens at the current price.

        Returns:
            Tokens received
        """
        ledger = self._holdings.ledger
        with self._lock, unit_of_work(ledger.lock, ledger, self._holdings):
            price = self.current_price()
            tokens = self._holdings.deposit(self._instrument_id, amount, price)
            if self._recorder is not None:
                self._recorder.record_savings_deposit(amount.quantize(CENT), tokens, self._instrument_id)
            if self.first_deposit_at is None:
                self.first_deposit_at = self._clock.now()
            self.total_deposited = self.total_deposited + amount.quantize(CENT)
            logger.info("Savings deposit %s -> %s %s at %s", amount, tokens, self._instrument_id, price)
            return tokens

    def withdraw(self, token_amount: Number) -> Money:
        """
        Swap tokens back to cash at the current price.

        Deposited principal shrinks in proportion to the tokens withdrawn.

        Returns:
            Cash credited to the ledger
        """
        quantity = quantize_shares(to_decimal(token_amount))
        if quantity <= 0:
            raise InvalidAmountError(f"Withdraw amount must be positive, got {token_amount}")

        ledger = self._holdings.ledger
        with self._lock, unit_of_work(ledger.lock, ledger, self._holdings):
            owned = self.token_balance()
            if quantity > owned:
                raise InsufficientSharesError(self._instrument_id, str(quantity), str(owned))

            received = self._holdings.withdraw(self._instrument_id, quantity, self.current_price())
            if self._recorder is not None:
                self._recorder.record_savings_withdraw(received, quantity, self._instrument_id)
            remaining = self.token_balance()
            if remaining <= 0:
                self.first_deposit_at = None
                self.total_deposited = Money.zero(self._base_currency)
            else:
                ratio = remaining / owned
                self.total_deposited = (self.total_deposited * ratio).quantize(CENT)
            logger.info("Savings withdraw %s %s -> %s", quantity, self._instrument_id, received)
            return received

    def withdraw_all(self) -> Money:
        with self._lock:
            balance = self.token_balance()
            if balance <= 0:
                return Money.zero(self._base_currency)
            return self.withdraw(balance)

    def summary(self) -> SavingsSummary:
        with self._lock:
            price = self.current_price()
            return SavingsSummary(
                token_balance=self.token_balance(),
                token_price=price,
                total_value=self.total_value(),
                total_deposited=self.total_deposited.quantize(CENT),
                total_earnings=self.total_earnings(),
                display_mode=self.display_mode,
                display_tokens=self.display_tokens(),
                display_price=self.display_price(),
                first_deposit_at=self.first_deposit_at,
            )

    def reset(self) -> None:
        with self._lock:
            self.first_deposit_at = None
            self.total_deposited = Money.zero(self._base_currency)
