"""Savings (yield token) endpoints."""

from fastapi import APIRouter, Depends

from sling_ledger.account_context import AccountContext
from sling_ledger.api.deps import get_account_context
from sling_ledger.api.schemas import (
    MoneySchema,
    SavingsDepositRequest,
    SavingsResponse,
    SavingsWithdrawRequest,
)
from sling_ledger.core.exceptions import ValidationError
from sling_ledger.domain.models import Money

router = APIRouter(prefix="/savings", tags=["savings"])


def _savings_response(ctx: AccountContext) -> SavingsResponse:
    summary = ctx.savings.summary()
    return SavingsResponse(
        token_balance=summary.token_balance,
        token_price=MoneySchema.from_money(summary.token_price),
        total_value=MoneySchema.from_money(summary.total_value),
        total_deposited=MoneySchema.from_money(summary.total_deposited),
        total_earnings=MoneySchema.from_money(summary.total_earnings),
        display_mode=summary.display_mode.value,
        display_tokens=summary.display_tokens,
        display_price=MoneySchema.from_money(summary.display_price),
        first_deposit_at=summary.first_deposit_at,
    )


@router.get("", response_model=SavingsResponse)
def get_savings(ctx: AccountContext = Depends(get_account_context)) -> SavingsResponse:
    return _savings_response(ctx)


@router.post("/deposit", response_model=SavingsResponse)
def deposit(data: SavingsDepositRequest, ctx: AccountContext = Depends(get_account_context)) -> SavingsResponse:
    """Swap cash for savings tokens at the current price."""
    with ctx.transaction():
        ctx.savings.deposit(Money(data.amount, ctx.ledger.base_currency))
        return _savings_response(ctx)


@router.post("/withdraw", response_model=SavingsResponse)
def withdraw(data: SavingsWithdrawRequest, ctx: AccountContext = Depends(get_account_context)) -> SavingsResponse:
    """Swap savings tokens back to cash."""
    with ctx.transaction():
        if data.all:
            ctx.savings.withdraw_all()
        elif data.tokens is not None:
            ctx.savings.withdraw(data.tokens)
        else:
            raise ValidationError("Provide tokens or set all")
        return _savings_response(ctx)
