"""Pydantic schemas for the activity feed."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from sling_ledger.api.schemas.common import MoneySchema


class ActivityResponse(BaseModel):
    record_id: str
    avatar: str
    title_left: str
    subtitle_left: str
    title_right: str
    subtitle_right: str
    date: Optional[datetime] = None
    kind: str
    payee_kind: str
    amount: Optional[MoneySchema] = None
    related_record_id: Optional[str] = None


class ActivityListResponse(BaseModel):
    items: list[ActivityResponse]
    total: int
