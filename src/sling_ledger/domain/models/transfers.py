"""Split, fee and payment-request models."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from sling_ledger.domain.models.enums import RequestStatus
from sling_ledger.domain.models.money import Money


@dataclass(frozen=True)
class SplitShare:
    """Derived result of splitting a bill equally."""

    total_amount: Money
    participant_count: int
    per_person_amount: Money
    shares: tuple[Money, ...] = ()

    @property
    def payer_share(self) -> Money:
        return self.shares[0] if self.shares else self.per_person_amount


@dataclass(frozen=True)
class FeeResult:
    """Fee quoted for a transaction, in the account stablecoin and display currency."""

    amount: Money
    display_amount: Money
    is_waived: bool = False
    waiver_reason: Optional[str] = None
    uses_free_transfer: bool = False

    @property
    def is_free(self) -> bool:
        return self.amount.is_zero or self.is_waived

    @property
    def charge(self) -> Money:
        """Amount actually debited."""
        if self.is_free:
            return Money.zero(self.amount.currency_code)
        return self.amount


@dataclass
class PaymentRequest:
    """Peer-to-peer request for money."""

    counterparty_name: str
    counterparty_username: str
    counterparty_avatar: str
    amount: Money
    note: str = ""
    created_at: Optional[datetime] = None
    status: RequestStatus = RequestStatus.PENDING
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
