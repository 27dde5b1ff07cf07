"""Offline providers: stub price feed and the static fallback rate table."""

import random
from decimal import Decimal
from typing import Optional

from sling_ledger.core.exceptions import NotFoundError
from sling_ledger.domain.models import Money


# Deterministic fake prices for common instruments (USD)
_STUB_PRICES: dict[str, Decimal] = {
    "AAPL": Decimal("178.50"),
    "GOOGL": Decimal("142.75"),
    "MSFT": Decimal("378.25"),
    "AMZN": Decimal("178.50"),
    "TSLA": Decimal("248.75"),
    "NVDA": Decimal("485.25"),
    "META": Decimal("505.50"),
    "SPY": Decimal("485.25"),
    "QQQ": Decimal("418.75"),
    "USDY": Decimal("1.00"),
}


class StubPriceFeed:
    """
    Stub price feed with deterministic fake data for offline operation.

    Uses predefined prices for common symbols; generates seeded random prices
    for unknown symbols when ``allow_unknown`` is set.
    """

    def __init__(
        self,
        seed: int = 42,
        prices: Optional[dict[str, Decimal]] = None,
        allow_unknown: bool = True,
        currency_code: str = "USD",
    ):
        self._rng = random.Random(seed)
        self._prices = dict(_STUB_PRICES if prices is None else prices)
        self._allow_unknown = allow_unknown
        self._currency = currency_code

    def current_price(self, instrument_id: str) -> Money:
        symbol = instrument_id.upper()
        if symbol not in self._prices:
            if not self._allow_unknown:
                raise NotFoundError("Instrument", symbol)
            base_price = Decimal(str(50 + self._rng.random() * 200))
            self._prices[symbol] = base_price.quantize(Decimal("0.01"))
        return Money(self._prices[symbol], self._currency)

    def set_price(self, instrument_id: str, price: Decimal) -> None:
        """Override a price (tests and demos)."""
        self._prices[instrument_id.upper()] = price


# Approximate rates used when the live source is unavailable.
# Outer key is the base currency; inner values are units per one base unit.
FALLBACK_RATES: dict[str, dict[str, Decimal]] = {
    "USD": {
        "GBP": Decimal("0.79"),
        "EUR": Decimal("0.92"),
        "JPY": Decimal("149.0"),
        "CHF": Decimal("0.88"),
        "CAD": Decimal("1.36"),
        "AUD": Decimal("1.53"),
    },
    "EUR": {
        "GBP": Decimal("0.86"),
        "USD": Decimal("1.09"),
        "JPY": Decimal("162.0"),
        "CHF": Decimal("0.96"),
        "CAD": Decimal("1.48"),
        "AUD": Decimal("1.66"),
    },
}

# Stablecoins quoted 1:1 against their reference currency
STABLECOIN_PEGS: dict[str, str] = {
    "USDP": "USD",
    "USDC": "USD",
    "EURC": "EUR",
}


class FallbackRateTable:
    """
    Static approximate-rate table.

    Lookup order: direct pair, inverse pair, cross rate through USD.
    Stablecoin codes resolve to their pegged currency first.
    """

    def __init__(self, rates: Optional[dict[str, dict[str, Decimal]]] = None):
        self._rates = rates if rates is not None else FALLBACK_RATES

    @staticmethod
    def normalize(code: str) -> str:
        upper = code.upper()
        return STABLECOIN_PEGS.get(upper, upper)

    def lookup(self, from_currency: str, to_currency: str) -> Optional[Decimal]:
        """Return the rate for the pair, or None if the table cannot derive it."""
        source = self.normalize(from_currency)
        target = self.normalize(to_currency)
        if source == target:
            return Decimal("1")

        direct = self._direct(source, target)
        if direct is not None:
            return direct

        via_source = self._direct(source, "USD")
        via_target = self._direct("USD", target)
        if via_source is not None and via_target is not None:
            return via_source * via_target
        return None

    def _direct(self, source: str, target: str) -> Optional[Decimal]:
        if source == target:
            return Decimal("1")
        rate = self._rates.get(source, {}).get(target)
        if rate is not None:
            return rate
        inverse = self._rates.get(target, {}).get(source)
        if inverse:
            return Decimal("1") / inverse
        return None

    def fetch_rates(self, base: str) -> dict[str, Decimal]:
        """Expose the table through the ExchangeRateProvider interface."""
        currencies = set(self._rates)
        for quotes in self._rates.values():
            currencies.update(quotes)
        result: dict[str, Decimal] = {}
        for code in sorted(currencies):
            rate = self.lookup(base, code)
            if rate is not None:
                result[code] = rate
        return result
