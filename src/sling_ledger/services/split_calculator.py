"""Equal bill-splitting arithmetic."""

from decimal import Decimal, ROUND_DOWN
from typing import Union

from sling_ledger.core.exceptions import InvalidAmountError, InvalidParticipantCountError
from sling_ledger.domain.models import CENT, PRICE_QUANT, Money, RemainderPolicy, SplitShare


class SplitCalculator:
    """
    Splits a total equally between N participants, payer included.

    With RemainderPolicy.DISTRIBUTE every share is a whole number of cents and
    the leftover cents go one each to the first participants (the payer is
    participant 0), so the shares always sum to the total. With
    RemainderPolicy.EXACT every share is the plain quotient at 4 decimal places.
    """

    def __init__(self, policy: Union[RemainderPolicy, str] = RemainderPolicy.DISTRIBUTE):
        self._policy = RemainderPolicy(policy)

    @property
    def policy(self) -> RemainderPolicy:
        return self._policy

    def split_equally(self, total: Money, participant_count: int) -> Money:
        """Unrounded per-person amount (4 dp), e.g. 45.80 / 3 -> 15.2667."""
        self._validate(total, participant_count)
        return Money((total.amount / participant_count).quantize(PRICE_QUANT), total.currency_code)

    def split(self, total: Money, participant_count: int) -> SplitShare:
        """Split ``total`` and return each participant's share."""
        per_person = self.split_equally(total, participant_count)

        if self._policy == RemainderPolicy.EXACT:
            shares = tuple(per_person for _ in range(participant_count))
        else:
            shares = self._distribute(total, participant_count)

        return SplitShare(
            total_amount=total,
            participant_count=participant_count,
            per_person_amount=per_person,
            shares=shares,
        )

    @staticmethod
    def _distribute(total: Money, participant_count: int) -> tuple[Money, ...]:
        total_cents = int((total.amount / CENT).to_integral_value(rounding=ROUND_DOWN))
        base_cents, remainder = divmod(total_cents, participant_count)
        return tuple(
            Money(Decimal(base_cents + (1 if index < remainder else 0)) * CENT, total.currency_code)
            for index in range(participant_count)
        )

    @staticmethod
    def _validate(total: Money, participant_count: int) -> None:
        if isinstance(participant_count, bool) or not isinstance(participant_count, int):
            raise InvalidParticipantCountError(participant_count)
        if participant_count < 1:
            raise InvalidParticipantCountError(participant_count)
        if total.is_negative:
            raise InvalidAmountError(f"Cannot split a negative total {total}")
        if total.amount != total.amount.quantize(CENT):
            raise InvalidAmountError(f"Split totals must be whole cents, got {total.amount}")
