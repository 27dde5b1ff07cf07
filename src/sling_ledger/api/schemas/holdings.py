"""Pydantic schemas for holdings endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from sling_ledger.api.schemas.common import MoneySchema


class BuyRequest(BaseModel):
    """Buy by share count or by cash amount (exactly one)."""

    instrument_id: str = Field(..., min_length=1)
    shares: Optional[Decimal] = Field(None, gt=0)
    amount: Optional[Decimal] = Field(None, gt=0)
    price: Optional[Decimal] = Field(None, gt=0, description="Locked quote price; live price if omitted")


class SellRequest(BaseModel):
    """Sell a number of shares."""

    instrument_id: str = Field(..., min_length=1)
    shares: Decimal = Field(..., gt=0)
    price: Optional[Decimal] = Field(None, gt=0)


class HoldingResponse(BaseModel):
    """A position valued at the current price."""

    instrument_id: str
    shares: Decimal
    average_price: MoneySchema
    cost_basis: MoneySchema
    current_price: Optional[MoneySchema] = None
    market_value: Optional[MoneySchema] = None
    unrealized_pnl: Optional[MoneySchema] = None
    pnl_percent: Optional[Decimal] = None


class HoldingsResponse(BaseModel):
    """All positions plus cash."""

    positions: list[HoldingResponse]
    cash_balance: MoneySchema
    total_value: MoneySchema


class TradeResponse(BaseModel):
    """Outcome of a buy or sell."""

    holding: HoldingResponse
    cash_balance: MoneySchema


class PortfolioPnLResponse(BaseModel):
    """Profit and loss across all positions."""

    market_value: MoneySchema
    cost_basis: MoneySchema
    unrealized_pnl: MoneySchema
    pnl_percent: Optional[Decimal] = None


class PortfolioEventResponse(BaseModel):
    timestamp: datetime
    kind: str
    instrument_id: str
    shares: Decimal
    price_per_share: MoneySchema
    cash_amount: MoneySchema
    shares_after: Decimal


class PortfolioHistoryResponse(BaseModel):
    """Position changes, oldest first, plus the portfolio value at a point in time."""

    events: list[PortfolioEventResponse]
    created_at: Optional[datetime] = None
    value_at: Optional[datetime] = None
    value: Optional[MoneySchema] = None
