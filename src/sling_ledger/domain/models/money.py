"""Money value object and decimal quantization helpers."""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_EVEN, ROUND_DOWN
from typing import Union

from sling_ledger.core.exceptions import CurrencyMismatchError

CENT = Decimal("0.01")
PRICE_QUANT = Decimal("0.0001")
SHARE_QUANT = Decimal("0.00000001")

Number = Union[Decimal, int, str, float]


def to_decimal(value: Number) -> Decimal:
    """Coerce a number to Decimal without binary float artifacts."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def quantize_shares(value: Decimal) -> Decimal:
    """Round a share quantity down to share precision."""
    return value.quantize(SHARE_QUANT, rounding=ROUND_DOWN)


def quantize_price(value: Decimal) -> Decimal:
    """Round a unit price to price precision."""
    return value.quantize(PRICE_QUANT, rounding=ROUND_HALF_EVEN)


@dataclass(frozen=True)
class Money:
    """
    An amount in a specific currency.

    Amounts are always Decimal. Arithmetic between different currencies
    raises CurrencyMismatchError; convert first.
    """

    amount: Decimal
    currency_code: str = "USD"

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", to_decimal(self.amount))
        object.__setattr__(self, "currency_code", self.currency_code.upper())

    @classmethod
    def zero(cls, currency_code: str = "USD") -> "Money":
        return cls(Decimal("0"), currency_code)

    @classmethod
    def of(cls, amount: Number, currency_code: str = "USD") -> "Money":
        return cls(to_decimal(amount), currency_code)

    def _check_currency(self, other: "Money") -> None:
        if other.currency_code != self.currency_code:
            raise CurrencyMismatchError(self.currency_code, other.currency_code)

    def __add__(self, other: "Money") -> "Money":
        self._check_currency(other)
        return Money(self.amount + other.amount, self.currency_code)

    def __sub__(self, other: "Money") -> "Money":
        self._check_currency(other)
        return Money(self.amount - other.amount, self.currency_code)

    def __neg__(self) -> "Money":
        return Money(-self.amount, self.currency_code)

    def __abs__(self) -> "Money":
        return Money(abs(self.amount), self.currency_code)

    def __mul__(self, factor: Number) -> "Money":
        return Money(self.amount * to_decimal(factor), self.currency_code)

    __rmul__ = __mul__

    def __lt__(self, other: "Money") -> bool:
        self._check_currency(other)
        return self.amount < other.amount

    def __le__(self, other: "Money") -> bool:
        self._check_currency(other)
        return self.amount <= other.amount

    def __gt__(self, other: "Money") -> bool:
        self._check_currency(other)
        return self.amount > other.amount

    def __ge__(self, other: "Money") -> bool:
        self._check_currency(other)
        return self.amount >= other.amount

    @property
    def is_zero(self) -> bool:
        return self.amount == 0

    @property
    def is_negative(self) -> bool:
        return self.amount < 0

    def quantize(self, exp: Decimal = CENT, rounding: str = ROUND_HALF_EVEN) -> "Money":
        """Return a copy rounded to ``exp`` (cents by default)."""
        return Money(self.amount.quantize(exp, rounding=rounding), self.currency_code)

    def __str__(self) -> str:
        return f"{self.amount:.2f} {self.currency_code}"
