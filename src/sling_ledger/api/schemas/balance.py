"""Pydantic schemas for balance and rate endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from sling_ledger.api.schemas.common import MoneySchema


class AmountRequest(BaseModel):
    """Credit or debit request. Currency defaults to the ledger currency."""

    amount: Decimal = Field(..., gt=0)
    currency_code: Optional[str] = None


class BalanceResponse(BaseModel):
    """Cash balance in the ledger and display currencies."""

    balance: MoneySchema
    display_balance: MoneySchema


class ConversionResponse(BaseModel):
    """Result of a currency conversion."""

    amount: Decimal
    from_currency: str
    to_currency: str
    rate: Decimal
    source: str
    fetched_at: datetime
    converted: MoneySchema
    formatted: str


class RateEntry(BaseModel):
    to_currency: str
    rate: Decimal
    source: str
    fetched_at: datetime


class RateTableResponse(BaseModel):
    """Rates quoted against one base currency."""

    base: str
    rates: list[RateEntry]
