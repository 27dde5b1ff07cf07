"""Pydantic schemas for recurring purchase endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from sling_ledger.api.schemas.common import MoneySchema
from sling_ledger.domain.models import RecurringFrequency


class RecurringPurchaseRequest(BaseModel):
    """Schedule a recurring buy of ``amount`` per run."""

    instrument_id: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0)
    currency_code: Optional[str] = Field(None, min_length=3, max_length=4)
    frequency: RecurringFrequency
    name: str = ""
    icon: str = ""
    start_at: Optional[datetime] = None


class RecurringPurchaseResponse(BaseModel):
    purchase_id: str
    instrument_id: str
    name: str
    icon: str
    amount: MoneySchema
    frequency: str
    status: str
    created_at: datetime
    next_purchase_at: datetime
    last_purchase_at: Optional[datetime] = None
    total_invested: MoneySchema
    purchase_count: int


class RecurringListResponse(BaseModel):
    items: list[RecurringPurchaseResponse]
    total_invested: MoneySchema
    monthly_commitment: MoneySchema


class RecurringExecutionResponse(BaseModel):
    execution_id: str
    purchase_id: str
    instrument_id: str
    executed_at: datetime
    amount: MoneySchema
    success: bool
    shares: Decimal
    price_per_share: Optional[MoneySchema] = None
    error_message: Optional[str] = None
