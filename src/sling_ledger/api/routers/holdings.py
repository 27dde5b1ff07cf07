"""Holdings and trading endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, Query

from sling_ledger.account_context import AccountContext
from sling_ledger.api.deps import get_account_context
from sling_ledger.api.schemas import (
    BuyRequest,
    HoldingResponse,
    HoldingsResponse,
    MoneySchema,
    PortfolioEventResponse,
    PortfolioHistoryResponse,
    PortfolioPnLResponse,
    SellRequest,
    TradeResponse,
)
from sling_ledger.domain.models import Money, PortfolioEvent
from sling_ledger.domain.views import HoldingView

router = APIRouter(prefix="/holdings", tags=["holdings"])


def _holding_response(view: HoldingView) -> HoldingResponse:
    def _money(value: Optional[Money]) -> Optional[MoneySchema]:
        return MoneySchema.from_money(value) if value is not None else None

    return HoldingResponse(
        instrument_id=view.instrument_id,
        shares=view.shares,
        average_price=MoneySchema.from_money(view.average_price),
        cost_basis=MoneySchema.from_money(view.cost_basis),
        current_price=_money(view.current_price),
        market_value=_money(view.market_value),
        unrealized_pnl=_money(view.unrealized_pnl),
        pnl_percent=view.pnl_percent,
    )


def _current_prices(ctx: AccountContext) -> dict[str, Money]:
    prices = {}
    for holding in ctx.holdings.positions():
        if holding.instrument_id == ctx.savings.instrument_id:
            prices[holding.instrument_id] = ctx.savings.current_price()
        else:
            prices[holding.instrument_id] = ctx.price_feed.current_price(holding.instrument_id)
    return prices


def _event_response(event: PortfolioEvent) -> PortfolioEventResponse:
    return PortfolioEventResponse(
        timestamp=event.timestamp,
        kind=event.kind.value,
        instrument_id=event.instrument_id,
        shares=event.shares,
        price_per_share=MoneySchema.from_money(event.price_per_share),
        cash_amount=MoneySchema.from_money(event.cash_amount),
        shares_after=event.shares_after,
    )


def _price(ctx: AccountContext, instrument_id: str, price: Optional[Decimal]) -> Money:
    if price is not None:
        return Money(price, ctx.ledger.base_currency)
    return ctx.price_feed.current_price(instrument_id)


@router.get("", response_model=HoldingsResponse)
def list_holdings(ctx: AccountContext = Depends(get_account_context)) -> HoldingsResponse:
    """All open positions valued at current prices."""
    with ctx.transaction():
        positions = [
            _holding_response(ctx.holdings.view(instrument_id, price))
            for instrument_id, price in _current_prices(ctx).items()
        ]
        return HoldingsResponse(
            positions=positions,
            cash_balance=MoneySchema.from_money(ctx.ledger.balance()),
            total_value=MoneySchema.from_money(ctx.total_balance()),
        )


@router.post("/buy", response_model=TradeResponse)
def buy(data: BuyRequest, ctx: AccountContext = Depends(get_account_context)) -> TradeResponse:
    """Buy by shares or by cash amount at the given or current price."""
    price = _price(ctx, data.instrument_id, data.price)
    amount = Money(data.amount, ctx.ledger.base_currency) if data.amount is not None else None
    with ctx.transaction():
        ctx.transfers.buy_stock(data.instrument_id, price, shares=data.shares, amount=amount)
        return TradeResponse(
            holding=_holding_response(ctx.holdings.view(data.instrument_id, price)),
            cash_balance=MoneySchema.from_money(ctx.ledger.balance()),
        )


@router.post("/sell", response_model=TradeResponse)
def sell(data: SellRequest, ctx: AccountContext = Depends(get_account_context)) -> TradeResponse:
    """Sell shares. 400 INSUFFICIENT_SHARES when the position is too small."""
    price = _price(ctx, data.instrument_id, data.price)
    with ctx.transaction():
        ctx.transfers.sell_stock(data.instrument_id, data.shares, price)
        return TradeResponse(
            holding=_holding_response(ctx.holdings.view(data.instrument_id, price)),
            cash_balance=MoneySchema.from_money(ctx.ledger.balance()),
        )


@router.get("/pnl", response_model=PortfolioPnLResponse)
def portfolio_pnl(ctx: AccountContext = Depends(get_account_context)) -> PortfolioPnLResponse:
    """Unrealized profit and loss across all positions at current prices."""
    with ctx.lock:
        pnl = ctx.holdings.total_unrealized_pnl(_current_prices(ctx))
    return PortfolioPnLResponse(
        market_value=MoneySchema.from_money(pnl.market_value),
        cost_basis=MoneySchema.from_money(pnl.cost_basis),
        unrealized_pnl=MoneySchema.from_money(pnl.unrealized_pnl),
        pnl_percent=pnl.pnl_percent,
    )


@router.get("/history", response_model=PortfolioHistoryResponse)
def portfolio_history(
    instrument_id: Optional[str] = Query(None),
    at: Optional[datetime] = Query(None, description="Value the portfolio as of this time"),
    ctx: AccountContext = Depends(get_account_context),
) -> PortfolioHistoryResponse:
    """Position changes oldest first; with ``at``, also the portfolio value then."""
    with ctx.lock:
        events = ctx.holdings.history(instrument_id)
        value = ctx.holdings.portfolio_value_at(at) if at is not None else None
        created_at = ctx.holdings.created_at
    return PortfolioHistoryResponse(
        events=[_event_response(event) for event in events],
        created_at=created_at,
        value_at=at,
        value=MoneySchema.from_money(value) if value is not None else None,
    )
