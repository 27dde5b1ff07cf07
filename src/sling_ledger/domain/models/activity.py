"""Activity feed records."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from sling_ledger.domain.models.enums import ActivityKind, PayeeKind
from sling_ledger.domain.models.money import Money


@dataclass(frozen=True)
class ActivityRecord:
    """
    Immutable entry in the activity feed.

    The four title/subtitle strings are display-ready. ``amount`` carries the
    signed cash impact (negative = money out) in the currency it was shown in.
    ``payee_kind`` is set at creation time and drives split eligibility.
    ``related_record_id`` links a split back to the card payment it divides.
    """

    avatar: str
    title_left: str
    subtitle_left: str
    title_right: str
    subtitle_right: str = ""
    date: Optional[datetime] = None
    kind: ActivityKind = ActivityKind.CARD_PAYMENT
    payee_kind: PayeeKind = PayeeKind.MERCHANT
    amount: Optional[Money] = None
    related_record_id: Optional[str] = None
    record_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @property
    def is_outgoing(self) -> bool:
        return self.amount is not None and self.amount.is_negative

    @property
    def is_incoming(self) -> bool:
        return self.amount is not None and self.amount.amount > 0
