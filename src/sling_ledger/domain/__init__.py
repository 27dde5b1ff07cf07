"""Domain layer - pure business models with no external dependencies."""

from sling_ledger.domain.models import (
    Money,
    Holding,
    ExchangeRate,
    Quote,
    ActivityRecord,
    SplitShare,
    FeeResult,
    PaymentRequest,
    ActivityKind,
    PayeeKind,
)

__all__ = [
    "Money",
    "Holding",
    "ExchangeRate",
    "Quote",
    "ActivityRecord",
    "SplitShare",
    "FeeResult",
    "PaymentRequest",
    "ActivityKind",
    "PayeeKind",
]
