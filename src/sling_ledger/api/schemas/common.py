"""Shared pydantic schemas."""

from decimal import Decimal

from pydantic import BaseModel

from sling_ledger.domain.models import Money


class MoneySchema(BaseModel):
    """An amount with its currency."""

    amount: Decimal
    currency_code: str

    @classmethod
    def from_money(cls, money: Money) -> "MoneySchema":
        return cls(amount=money.amount, currency_code=money.currency_code)


class ErrorResponse(BaseModel):
    """Body returned for engine errors."""

    error: str
    message: str
