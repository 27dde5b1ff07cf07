"""Pydantic schemas for savings endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from sling_ledger.api.schemas.common import MoneySchema


class SavingsDepositRequest(BaseModel):
    amount: Decimal = Field(..., gt=0)


class SavingsWithdrawRequest(BaseModel):
    """Withdraw a number of tokens, or everything when ``all`` is set."""

    tokens: Optional[Decimal] = Field(None, gt=0)
    all: bool = False


class SavingsResponse(BaseModel):
    token_balance: Decimal
    token_price: MoneySchema
    total_value: MoneySchema
    total_deposited: MoneySchema
    total_earnings: MoneySchema
    display_mode: str
    display_tokens: Decimal
    display_price: MoneySchema
    first_deposit_at: Optional[datetime] = None
