"""Pydantic schemas for bill splitting."""

from decimal import Decimal

from pydantic import BaseModel, Field

from sling_ledger.api.schemas.common import MoneySchema


class SplitRequest(BaseModel):
    """Split ``total`` equally between ``participant_count`` people, payer included."""

    total: Decimal = Field(..., ge=0)
    currency_code: str = "GBP"
    participant_count: int


class SettleSplitRequest(BaseModel):
    """Split a past card payment with the named people."""

    record_id: str
    participant_names: list[str] = Field(..., min_length=1)


class SplitResponse(BaseModel):
    total: MoneySchema
    participant_count: int
    per_person: MoneySchema
    shares: list[MoneySchema]
