"""Recurring purchase endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from sling_ledger.account_context import AccountContext
from sling_ledger.api.deps import get_account_context
from sling_ledger.api.schemas import (
    MoneySchema,
    RecurringExecutionResponse,
    RecurringListResponse,
    RecurringPurchaseRequest,
    RecurringPurchaseResponse,
)
from sling_ledger.core.timezone import to_utc
from sling_ledger.domain.models import (
    Money,
    RecurringPurchase,
    RecurringPurchaseExecution,
    RecurringPurchaseStatus,
)

router = APIRouter(prefix="/recurring", tags=["recurring"])


def _purchase_response(purchase: RecurringPurchase) -> RecurringPurchaseResponse:
    return RecurringPurchaseResponse(
        purchase_id=purchase.purchase_id,
        instrument_id=purchase.instrument_id,
        name=purchase.name,
        icon=purchase.icon,
        amount=MoneySchema.from_money(purchase.amount),
        frequency=purchase.frequency.value,
        status=purchase.status.value,
        created_at=purchase.created_at,
        next_purchase_at=purchase.next_purchase_at,
        last_purchase_at=purchase.last_purchase_at,
        total_invested=MoneySchema.from_money(purchase.total_invested),
        purchase_count=purchase.purchase_count,
    )


def _execution_response(execution: RecurringPurchaseExecution) -> RecurringExecutionResponse:
    price = execution.price_per_share
    return RecurringExecutionResponse(
        execution_id=execution.execution_id,
        purchase_id=execution.purchase_id,
        instrument_id=execution.instrument_id,
        executed_at=execution.executed_at,
        amount=MoneySchema.from_money(execution.amount),
        success=execution.success,
        shares=execution.shares,
        price_per_share=MoneySchema.from_money(price) if price is not None else None,
        error_message=execution.error_message,
    )


@router.get("", response_model=RecurringListResponse)
def list_recurring(
    status: Optional[RecurringPurchaseStatus] = Query(None),
    ctx: AccountContext = Depends(get_account_context),
) -> RecurringListResponse:
    """Recurring purchases ordered by next run."""
    book = ctx.recurring
    return RecurringListResponse(
        items=[_purchase_response(p) for p in book.purchases(status)],
        total_invested=MoneySchema.from_money(book.total_invested()),
        monthly_commitment=MoneySchema.from_money(book.monthly_commitment()),
    )


@router.post("", response_model=RecurringPurchaseResponse, status_code=201)
def create_recurring(
    data: RecurringPurchaseRequest,
    ctx: AccountContext = Depends(get_account_context),
) -> RecurringPurchaseResponse:
    currency = data.currency_code or ctx.ledger.base_currency
    purchase = ctx.recurring.add(
        data.instrument_id,
        Money(data.amount, currency),
        data.frequency,
        name=data.name,
        icon=data.icon,
        start_at=to_utc(data.start_at) if data.start_at else None,
    )
    return _purchase_response(purchase)


@router.post("/execute", response_model=list[RecurringExecutionResponse])
def execute_due(ctx: AccountContext = Depends(get_account_context)) -> list[RecurringExecutionResponse]:
    """Run every purchase that is due now."""
    return [_execution_response(e) for e in ctx.recurring.execute_due()]


@router.get("/{purchase_id}/history", response_model=list[RecurringExecutionResponse])
def purchase_history(
    purchase_id: str,
    ctx: AccountContext = Depends(get_account_context),
) -> list[RecurringExecutionResponse]:
    ctx.recurring.get(purchase_id)
    return [_execution_response(e) for e in ctx.recurring.history(purchase_id)]


@router.post("/{purchase_id}/pause", response_model=RecurringPurchaseResponse)
def pause(purchase_id: str, ctx: AccountContext = Depends(get_account_context)) -> RecurringPurchaseResponse:
    return _purchase_response(ctx.recurring.pause(purchase_id))


@router.post("/{purchase_id}/resume", response_model=RecurringPurchaseResponse)
def resume(purchase_id: str, ctx: AccountContext = Depends(get_account_context)) -> RecurringPurchaseResponse:
    return _purchase_response(ctx.recurring.resume(purchase_id))


@router.delete("/{purchase_id}", response_model=RecurringPurchaseResponse)
def cancel(purchase_id: str, ctx: AccountContext = Depends(get_account_context)) -> RecurringPurchaseResponse:
    """Cancel a recurring purchase; its history is kept."""
    return _purchase_response(ctx.recurring.cancel(purchase_id))
