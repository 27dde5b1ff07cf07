"""Pydantic schemas for API request/response."""

from sling_ledger.api.schemas.common import MoneySchema, ErrorResponse
from sling_ledger.api.schemas.balance import (
    AmountRequest,
    BalanceResponse,
    ConversionResponse,
    RateEntry,
    RateTableResponse,
)
from sling_ledger.api.schemas.holdings import (
    BuyRequest,
    SellRequest,
    HoldingResponse,
    HoldingsResponse,
    TradeResponse,
    PortfolioPnLResponse,
    PortfolioEventResponse,
    PortfolioHistoryResponse,
)
from sling_ledger.api.schemas.savings import (
    SavingsDepositRequest,
    SavingsWithdrawRequest,
    SavingsResponse,
)
from sling_ledger.api.schemas.split import SplitRequest, SettleSplitRequest, SplitResponse
from sling_ledger.api.schemas.activity import ActivityResponse, ActivityListResponse
from sling_ledger.api.schemas.recurring import (
    RecurringPurchaseRequest,
    RecurringPurchaseResponse,
    RecurringListResponse,
    RecurringExecutionResponse,
)

__all__ = [
    "MoneySchema",
    "ErrorResponse",
    "AmountRequest",
    "BalanceResponse",
    "ConversionResponse",
    "RateEntry",
    "RateTableResponse",
    "BuyRequest",
    "SellRequest",
    "HoldingResponse",
    "HoldingsResponse",
    "TradeResponse",
    "PortfolioPnLResponse",
    "PortfolioEventResponse",
    "PortfolioHistoryResponse",
    "SavingsDepositRequest",
    "SavingsWithdrawRequest",
    "SavingsResponse",
    "SplitRequest",
    "SettleSplitRequest",
    "SplitResponse",
    "ActivityResponse",
    "ActivityListResponse",
    "RecurringPurchaseRequest",
    "RecurringPurchaseResponse",
    "RecurringListResponse",
    "RecurringExecutionResponse",
]
