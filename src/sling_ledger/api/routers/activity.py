"""Activity feed endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from sling_ledger.account_context import AccountContext
from sling_ledger.api.deps import get_account_context
from sling_ledger.api.schemas import ActivityListResponse, ActivityResponse, MoneySchema
from sling_ledger.domain.models import ActivityKind, ActivityRecord, PayeeKind

router = APIRouter(prefix="/activity", tags=["activity"])


def _activity_response(record: ActivityRecord) -> ActivityResponse:
    return ActivityResponse(
        record_id=record.record_id,
        avatar=record.avatar,
        title_left=record.title_left,
        subtitle_left=record.subtitle_left,
        title_right=record.title_right,
        subtitle_right=record.subtitle_right,
        date=record.date,
        kind=record.kind.value,
        payee_kind=record.payee_kind.value,
        amount=MoneySchema.from_money(record.amount) if record.amount is not None else None,
        related_record_id=record.related_record_id,
    )


@router.get("", response_model=ActivityListResponse)
def list_activity(
    kind: Optional[ActivityKind] = Query(None),
    payee_kind: Optional[PayeeKind] = Query(None),
    split_eligible: bool = Query(False, description="Only merchant card payments that can be split"),
    limit: Optional[int] = Query(None, ge=1),
    ctx: AccountContext = Depends(get_account_context),
) -> ActivityListResponse:
    """Activity feed, most recent first."""
    if split_eligible:
        records = ctx.activity.split_eligible()
    else:
        records = list(reversed(ctx.activity.filter(kind=kind, payee_kind=payee_kind)))
    total = len(records)
    if limit is not None:
        records = records[:limit]
    return ActivityListResponse(items=[_activity_response(r) for r in records], total=total)
