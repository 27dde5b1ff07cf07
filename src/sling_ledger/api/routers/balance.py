"""Cash balance endpoints."""

from fastapi import APIRouter, Depends

from sling_ledger.account_context import AccountContext
from sling_ledger.api.deps import get_account_context
from sling_ledger.api.schemas import AmountRequest, BalanceResponse, MoneySchema
from sling_ledger.domain.models import Money

router = APIRouter(prefix="/balance", tags=["balance"])


def _balance_response(ctx: AccountContext) -> BalanceResponse:
    return BalanceResponse(
        balance=MoneySchema.from_money(ctx.ledger.balance()),
        display_balance=MoneySchema.from_money(ctx.display_balance()),
    )


def _to_base(ctx: AccountContext, data: AmountRequest) -> Money:
    currency = data.currency_code or ctx.ledger.base_currency
    return ctx.transfers.to_base(Money(data.amount, currency))


@router.get("", response_model=BalanceResponse)
def get_balance(ctx: AccountContext = Depends(get_account_context)) -> BalanceResponse:
    """Current cash balance."""
    return _balance_response(ctx)


@router.post("/credit", response_model=BalanceResponse)
def credit(data: AmountRequest, ctx: AccountContext = Depends(get_account_context)) -> BalanceResponse:
    """Add cash; amounts in another currency are converted first."""
    with ctx.transaction():
        ctx.ledger.credit(_to_base(ctx, data))
        return _balance_response(ctx)


@router.post("/debit", response_model=BalanceResponse)
def debit(data: AmountRequest, ctx: AccountContext = Depends(get_account_context)) -> BalanceResponse:
    """Remove cash. 400 INSUFFICIENT_FUNDS when the balance is short."""
    with ctx.transaction():
        ctx.ledger.debit(_to_base(ctx, data))
        return _balance_response(ctx)
