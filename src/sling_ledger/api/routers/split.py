"""Bill splitting endpoints."""

from fastapi import APIRouter, Depends

from sling_ledger.account_context import AccountContext
from sling_ledger.api.deps import get_account_context
from sling_ledger.api.schemas import MoneySchema, SettleSplitRequest, SplitRequest, SplitResponse
from sling_ledger.domain.models import Money, SplitShare

router = APIRouter(prefix="/split", tags=["split"])


def _split_response(share: SplitShare) -> SplitResponse:
    return SplitResponse(
        total=MoneySchema.from_money(share.total_amount),
        participant_count=share.participant_count,
        per_person=MoneySchema.from_money(share.per_person_amount),
        shares=[MoneySchema.from_money(s) for s in share.shares],
    )


@router.post("", response_model=SplitResponse)
def split(data: SplitRequest, ctx: AccountContext = Depends(get_account_context)) -> SplitResponse:
    """Split a total equally; no money moves."""
    share = ctx.splitter.split(Money(data.total, data.currency_code), data.participant_count)
    return _split_response(share)


@router.post("/settle", response_model=SplitResponse)
def settle(data: SettleSplitRequest, ctx: AccountContext = Depends(get_account_context)) -> SplitResponse:
    """Split a past merchant card payment and record it in the feed."""
    share = ctx.transfers.settle_split(data.record_id, data.participant_names)
    return _split_response(share)
