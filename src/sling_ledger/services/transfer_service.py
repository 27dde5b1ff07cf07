"""Money movement flows: add money, send, receive, card payments, splits, trades."""

import logging
import threading
from decimal import Decimal
from typing import Optional, Sequence

from sling_ledger.core.exceptions import InvalidAmountError, NotFoundError, ValidationError
from sling_ledger.domain.models import (
    CENT,
    ActivityRecord,
    FeeResult,
    FeeTransactionType,
    Money,
    SplitShare,
)
from sling_ledger.domain.models.money import Number
from sling_ledger.services.activity_recorder import ActivityRecorder
from sling_ledger.services.currency_converter import CurrencyConverter
from sling_ledger.services.fee_service import FeeService
from sling_ledger.services.holdings_book import HoldingsBook
from sling_ledger.services.ledger import Ledger
from sling_ledger.services.split_calculator import SplitCalculator
from sling_ledger.services.unit_of_work import unit_of_work

logger = logging.getLogger(__name__)


class TransferService:
    """
    User-facing money flows built on the ledger, holdings and activity log.

    Amounts may be given in any currency (typically the display currency);
    they are converted into the ledger's base currency and settled to the
    cent before the ledger is touched. Each flow runs as a unit of work under
    the account lock: if the activity write fails, cash and positions are put
    back and the error propagates. Free-transfer waivers are consumed last.
    """

    def __init__(
        self,
        ledger: Ledger,
        holdings: HoldingsBook,
        recorder: ActivityRecorder,
        converter: CurrencyConverter,
        fees: FeeService,
        splitter: Optional[SplitCalculator] = None,
        lock: Optional[threading.RLock] = None,
    ):
        self._ledger = ledger
        self._holdings = holdings
        self._recorder = recorder
        self._converter = converter
        self._fees = fees
        self._splitter = splitter or SplitCalculator()
        self._lock = lock or ledger.lock

    @property
    def base_currency(self) -> str:
        return self._ledger.base_currency

    @property
    def holdings(self) -> HoldingsBook:
        return self._holdings

    def to_base(self, amount: Money) -> Money:
        """Convert ``amount`` into the ledger currency, settled to the cent."""
        return self._converter.convert_money(amount, self._ledger.base_currency).quantize(CENT)

    # Cash in

    def add_money(
        self,
        amount: Money,
        source_name: str,
        source_avatar: str,
    ) -> ActivityRecord:
        """
        Top up from an external account.

        A foreign-currency deposit is charged the deposit fee, taken out of
        the amount credited.
        """
        self._require_positive(amount)
        fee = self._fees.calculate_fee(
            FeeTransactionType.DEPOSIT, amount.currency_code, self._fees.account_stablecoin
        )
        credited = self.to_base(amount) - self._fee_in_base(fee)
        if credited.amount <= 0:
            raise InvalidAmountError(f"Deposit of {amount} does not cover the fee {fee.amount}")

        with unit_of_work(self._lock, self._ledger):
            self._ledger.credit(credited)
            record = self._recorder.record_add_money(source_name, source_avatar, amount)
            self._apply_waiver(fee)
        logger.info("Added %s from %s (fee %s)", credited, source_name, fee.charge)
        return record

    def receive(self, from_name: str, from_avatar: str, amount: Money) -> ActivityRecord:
        self._require_positive(amount)
        base_amount = self.to_base(amount)
        with unit_of_work(self._lock, self._ledger):
            self._ledger.credit(base_amount)
            return self._recorder.record_received(from_name, from_avatar, amount)

    # Cash out

    def send(self, to_name: str, to_avatar: str, amount: Money) -> ActivityRecord:
        """P2P send; always free."""
        self._require_positive(amount)
        base_amount = self.to_base(amount)
        with unit_of_work(self._lock, self._ledger):
            self._ledger.debit(base_amount)
            logger.info("Sent %s to %s", base_amount, to_name)
            return self._recorder.record_send(to_name, to_avatar, amount)

    def card_payment(self, merchant_name: str, merchant_avatar: str, amount: Money) -> ActivityRecord:
        self._require_positive(amount)
        base_amount = self.to_base(amount)
        with unit_of_work(self._lock, self._ledger):
            self._ledger.debit(base_amount)
            logger.info("Card payment %s at %s", base_amount, merchant_name)
            return self._recorder.record_card_payment(merchant_name, merchant_avatar, amount)

    def withdraw_cash(self, amount: Money, method: str = "ATM") -> ActivityRecord:
        """
        Withdraw to an external account or ATM.

        The withdrawal fee applies when ``amount`` is in a foreign currency and
        is debited together with the amount.
        """
        self._require_positive(amount)
        fee = self._fees.calculate_fee(
            FeeTransactionType.WITHDRAWAL, self._fees.account_stablecoin, amount.currency_code
        )
        total = self.to_base(amount) + self._fee_in_base(fee)

        with unit_of_work(self._lock, self._ledger):
            self._ledger.debit(total)
            record = self._recorder.record_withdrawal(amount, method)
            self._apply_waiver(fee)
        logger.info("Withdrew %s via %s (fee %s)", total, method, fee.charge)
        return record

    # Splits

    def settle_split(self, record_id: str, participant_names: Sequence[str]) -> SplitShare:
        """
        Split a past merchant card payment with other people.

        The payer already paid the merchant, so no cash moves; the others
        each owe one share.
        """
        names = [name for name in participant_names if name]
        if not names:
            raise ValidationError("At least one other participant is required to split")

        with self._lock:
            record = next(
                (entry for entry in self._recorder.split_eligible() if entry.record_id == record_id),
                None,
            )
            if record is None:
                if self._recorder.is_split(record_id):
                    raise ValidationError(f"Payment {record_id} has already been split")
                raise NotFoundError("Split-eligible payment", record_id)

            share = self._splitter.split(abs(record.amount).quantize(CENT), len(names) + 1)
            self._recorder.record_split(
                record.title_left,
                record.avatar,
                share.payer_share,
                ", ".join(names),
                related_record_id=record.record_id,
            )
            return share

    # Investing

    def buy_stock(
        self,
        instrument_id: str,
        price_per_share: Money,
        shares: Optional[Number] = None,
        amount: Optional[Money] = None,
        name: Optional[str] = None,
        icon: str = "",
    ) -> ActivityRecord:
        """Buy by share count or cash amount and record the trade."""
        symbol = instrument_id.upper()
        with unit_of_work(self._lock, self._ledger, self._holdings):
            before = self._holdings.shares_owned(symbol)
            balance_before = self._ledger.balance()
            self._holdings.buy(symbol, shares, price_per_share, amount=amount)
            bought = self._holdings.shares_owned(symbol) - before
            cost = balance_before - self._ledger.balance()
            return self._recorder.record_buy(name or symbol, icon, cost, bought, symbol)

    def sell_stock(
        self,
        instrument_id: str,
        shares: Number,
        price_per_share: Money,
        name: Optional[str] = None,
        icon: str = "",
    ) -> ActivityRecord:
        symbol = instrument_id.upper()
        with unit_of_work(self._lock, self._ledger, self._holdings):
            before = self._holdings.shares_owned(symbol)
            proceeds = self._holdings.sell(symbol, shares, price_per_share)
            sold = before - self._holdings.shares_owned(symbol)
            return self._recorder.record_sell(name or symbol, icon, proceeds, sold, symbol)

    def _fee_in_base(self, fee: FeeResult) -> Money:
        charge = fee.charge
        if charge.is_zero:
            return Money.zero(self._ledger.base_currency)
        return self.to_base(charge)

    def _apply_waiver(self, fee: FeeResult) -> None:
        if fee.uses_free_transfer:
            self._fees.use_free_transfer()

    @staticmethod
    def _require_positive(amount: Money) -> None:
        if amount.amount <= 0:
            raise InvalidAmountError(f"Amount must be positive, got {amount}")
