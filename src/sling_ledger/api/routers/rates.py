"""Currency conversion endpoints."""

from decimal import Decimal

from fastapi import APIRouter, Depends, Query

from sling_ledger.account_context import AccountContext
from sling_ledger.api.deps import get_account_context
from sling_ledger.api.schemas import ConversionResponse, MoneySchema, RateEntry, RateTableResponse
from sling_ledger.services import format_money

router = APIRouter(prefix="/rates", tags=["rates"])


@router.get("/convert", response_model=ConversionResponse)
def convert(
    amount: Decimal = Query(..., ge=0),
    from_currency: str = Query(..., min_length=3),
    to_currency: str = Query(..., min_length=3),
    ctx: AccountContext = Depends(get_account_context),
) -> ConversionResponse:
    """Convert an amount; the result is not rounded, ``formatted`` is."""
    rate = ctx.converter.get_rate(from_currency, to_currency)
    converted = ctx.converter.convert(amount, from_currency, to_currency)
    return ConversionResponse(
        amount=amount,
        from_currency=rate.from_currency,
        to_currency=rate.to_currency,
        rate=rate.rate,
        source=rate.source.value,
        fetched_at=rate.fetched_at,
        converted=MoneySchema.from_money(converted),
        formatted=format_money(converted.amount, converted.currency_code),
    )


@router.get("/{base}", response_model=RateTableResponse)
def rate_table(base: str, ctx: AccountContext = Depends(get_account_context)) -> RateTableResponse:
    """All rates against ``base``; live where available, the fallback table otherwise."""
    table = ctx.converter.rates(base)
    return RateTableResponse(
        base=base.upper(),
        rates=[
            RateEntry(to_currency=code, rate=rate.rate, source=rate.source.value, fetched_at=rate.fetched_at)
            for code, rate in table.items()
        ],
    )
