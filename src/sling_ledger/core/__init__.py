"""Core utilities and shared functionality."""

from sling_ledger.core.timezone import (
    now_utc,
    to_utc,
    UTC,
    Clock,
    SystemClock,
    FixedClock,
)
from sling_ledger.core.exceptions import (
    AppError,
    ValidationError,
    NotFoundError,
    InvalidAmountError,
    CurrencyMismatchError,
    InsufficientFundsError,
    InsufficientSharesError,
    RateUnavailableError,
    InvalidParticipantCountError,
    QuoteConsumedError,
)

__all__ = [
    "now_utc",
    "to_utc",
    "UTC",
    "Clock",
    "SystemClock",
    "FixedClock",
    "AppError",
    "ValidationError",
    "NotFoundError",
    "InvalidAmountError",
    "CurrencyMismatchError",
    "InsufficientFundsError",
    "InsufficientSharesError",
    "RateUnavailableError",
    "InvalidParticipantCountError",
    "QuoteConsumedError",
]
