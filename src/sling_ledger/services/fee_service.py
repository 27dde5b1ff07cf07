"""Transaction fee quoting with promotional waivers."""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sling_ledger.core.exceptions import RateUnavailableError
from sling_ledger.core.timezone import Clock, SystemClock
from sling_ledger.domain.models import CENT, FeeResult, FeeTransactionType, Money
from sling_ledger.services.currency_converter import CurrencyConverter

logger = logging.getLogger(__name__)

STABLECOIN_BASES = {
    "USDP": "USD",
    "USDC": "USD",
    "EURC": "EUR",
}


class FeeService:
    """
    Quotes fees for deposits and withdrawals.

    P2P transfers and local-currency transactions are free. Foreign
    transactions cost ``base_fee`` in the account stablecoin unless a waiver
    applies: early adopter status first, then the new-user free transfers.
    """

    def __init__(
        self,
        converter: CurrencyConverter,
        base_fee: Decimal = Decimal("0.50"),
        local_currency: str = "GBP",
        account_stablecoin: str = "USDP",
        display_currency: str = "GBP",
        free_transfers: int = 3,
        clock: Optional[Clock] = None,
    ):
        self._converter = converter
        self._base_fee = base_fee
        self._clock = clock or SystemClock()
        self.local_currency = local_currency.upper()
        self.account_stablecoin = account_stablecoin.upper()
        self.display_currency = display_currency.upper()
        self.free_transfers_remaining = free_transfers
        self.is_early_adopter = False
        self.early_adopter_expiry: Optional[datetime] = None

    @property
    def stablecoin_base(self) -> str:
        return STABLECOIN_BASES.get(self.account_stablecoin, "USD")

    def configure(self, local_currency: str, account_stablecoin: str) -> None:
        """Configure for an account region."""
        self.local_currency = local_currency.upper()
        self.account_stablecoin = account_stablecoin.upper()

    def set_early_adopter(self, is_early_adopter: bool, expiry: Optional[datetime] = None) -> None:
        self.is_early_adopter = is_early_adopter
        self.early_adopter_expiry = expiry

    def reset_free_transfers(self, count: int = 3) -> None:
        self.free_transfers_remaining = count

    def use_free_transfer(self) -> None:
        """Consume one free transfer; never goes below zero."""
        if self.free_transfers_remaining > 0:
            self.free_transfers_remaining -= 1

    def is_foreign_currency(self, currency_code: str) -> bool:
        """A currency is foreign unless it is the local currency or the stablecoin's base."""
        code = currency_code.upper()
        return code != self.local_currency and code != self.stablecoin_base

    def calculate_fee(
        self,
        kind: FeeTransactionType,
        source_currency: str,
        destination_currency: str,
    ) -> FeeResult:
        """
        Quote the fee for a transaction.

        Args:
            kind: Transaction type
            source_currency: Currency money comes from
            destination_currency: Currency money goes to

        Returns:
            FeeResult; ``charge`` is what should actually be debited
        """
        if kind in (FeeTransactionType.P2P_SEND, FeeTransactionType.P2P_REQUEST):
            return self._free()

        if kind == FeeTransactionType.DEPOSIT:
            is_foreign = self.is_foreign_currency(source_currency)
        else:
            is_foreign = self.is_foreign_currency(destination_currency)

        if not is_foreign:
            return self._free()

        amount = Money(self._base_fee, self.stablecoin_base)
        display_amount = self._to_display(amount)

        waiver = self._check_waivers(amount, display_amount)
        if waiver is not None:
            return waiver
        return FeeResult(amount=amount, display_amount=display_amount)

    def _check_waivers(self, amount: Money, display_amount: Money) -> Optional[FeeResult]:
        if self.is_early_adopter:
            expiry = self.early_adopter_expiry
            if expiry is None or self._clock.now() < expiry:
                return FeeResult(
                    amount=amount,
                    display_amount=display_amount,
                    is_waived=True,
                    waiver_reason="Early adopter - fees waived",
                )

        remaining = self.free_transfers_remaining
        if remaining > 0:
            plural = "" if remaining == 1 else "s"
            return FeeResult(
                amount=amount,
                display_amount=display_amount,
                is_waived=True,
                waiver_reason=f"{remaining} free transfer{plural} remaining",
                uses_free_transfer=True,
            )
        return None

    def _to_display(self, amount: Money) -> Money:
        try:
            converted = self._converter.convert_money(amount, self.display_currency)
        except RateUnavailableError:
            logger.warning("No rate to show fee in %s, using %s", self.display_currency, amount.currency_code)
            return amount
        return converted.quantize(CENT)

    def _free(self) -> FeeResult:
        return FeeResult(
            amount=Money.zero(self.stablecoin_base),
            display_amount=Money.zero(self.display_currency),
        )
