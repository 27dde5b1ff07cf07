"""Domain models package."""

from sling_ledger.domain.models.enums import (
    ActivityKind,
    PayeeKind,
    RateSource,
    QuoteState,
    RemainderPolicy,
    FeeTransactionType,
    YieldDisplayMode,
    RequestStatus,
    OperationState,
    PortfolioEventKind,
    RecurringFrequency,
    RecurringPurchaseStatus,
)
from sling_ledger.domain.models.money import (
    Money,
    CENT,
    PRICE_QUANT,
    SHARE_QUANT,
    to_decimal,
    quantize_shares,
    quantize_price,
)
from sling_ledger.domain.models.holding import Holding, PortfolioEvent
from sling_ledger.domain.models.rates import ExchangeRate, Quote
from sling_ledger.domain.models.activity import ActivityRecord
from sling_ledger.domain.models.transfers import SplitShare, FeeResult, PaymentRequest
from sling_ledger.domain.models.recurring import (
    RecurringPurchase,
    RecurringPurchaseExecution,
    RUNS_PER_MONTH,
    next_run,
)

__all__ = [
    "ActivityKind",
    "PayeeKind",
    "RateSource",
    "QuoteState",
    "RemainderPolicy",
    "FeeTransactionType",
    "YieldDisplayMode",
    "RequestStatus",
    "OperationState",
    "PortfolioEventKind",
    "RecurringFrequency",
    "RecurringPurchaseStatus",
    "Money",
    "CENT",
    "PRICE_QUANT",
    "SHARE_QUANT",
    "to_decimal",
    "quantize_shares",
    "quantize_price",
    "Holding",
    "PortfolioEvent",
    "ExchangeRate",
    "Quote",
    "ActivityRecord",
    "SplitShare",
    "FeeResult",
    "PaymentRequest",
    "RecurringPurchase",
    "RecurringPurchaseExecution",
    "RUNS_PER_MONTH",
    "next_run",
]
