"""Engine exceptions.

Every expected business condition (short balance, short position, missing
rate) is an ``AppError`` subclass with a stable ``code``. State is never
mutated when one of these is raised.
"""


class AppError(Exception):
    """Base exception for engine errors."""

    def __init__(self, message: str, code: str = "APP_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(AppError):
    """Raised when input validation fails."""

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class NotFoundError(AppError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(f"{resource} not found: {identifier}", code="NOT_FOUND")


class InvalidAmountError(AppError):
    """Raised when an amount is zero or negative where a positive one is required."""

    def __init__(self, message: str):
        super().__init__(message, code="INVALID_AMOUNT")


class CurrencyMismatchError(AppError):
    """Raised when two amounts in different currencies are combined."""

    def __init__(self, expected: str, actual: str):
        super().__init__(
            f"Currency mismatch: expected {expected}, got {actual}",
            code="CURRENCY_MISMATCH",
        )


class InsufficientFundsError(AppError):
    """Raised when a debit exceeds the available cash balance."""

    def __init__(self, requested: str, available: str):
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient balance: requested {requested}, available {available}",
            code="INSUFFICIENT_FUNDS",
        )


class InsufficientSharesError(AppError):
    """Raised when attempting to sell or withdraw more units than owned."""

    def __init__(self, instrument_id: str, requested: str, available: str):
        self.instrument_id = instrument_id
        super().__init__(
            f"Insufficient shares of {instrument_id}: requested {requested}, available {available}",
            code="INSUFFICIENT_SHARES",
        )


class RateUnavailableError(AppError):
    """Raised when neither the live provider nor the fallback table has a rate."""

    def __init__(self, from_currency: str, to_currency: str):
        super().__init__(
            f"No exchange rate available for {from_currency}->{to_currency}",
            code="RATE_UNAVAILABLE",
        )


class InvalidParticipantCountError(AppError):
    """Raised when a bill is split between fewer than one participant."""

    def __init__(self, count: int):
        super().__init__(
            f"Participant count must be at least 1, got {count}",
            code="INVALID_PARTICIPANT_COUNT",
        )


class QuoteConsumedError(AppError):
    """Raised when a consumed quote is ticked, refreshed or consumed again."""

    def __init__(self, instrument_id: str):
        super().__init__(f"Quote for {instrument_id} already consumed", code="QUOTE_CONSUMED")
