"""Currency conversion with cached live rates and a static fallback table."""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sling_ledger.core.exceptions import InvalidAmountError, RateUnavailableError
from sling_ledger.core.timezone import Clock, SystemClock
from sling_ledger.domain.models import ExchangeRate, Money, RateSource, to_decimal
from sling_ledger.domain.models.money import Number
from sling_ledger.providers.exchange_rate_provider import ExchangeRateProvider
from sling_ledger.providers.stub_provider import FallbackRateTable

logger = logging.getLogger(__name__)


_SYMBOLS: dict[str, str] = {
    "GBP": "£",
    "USD": "$",
    "EUR": "€",
    "JPY": "¥",
    "CHF": "CHF",
    "CAD": "CA$",
    "AUD": "A$",
    "USDC": "$",  # stablecoin pegged to USD
    "USDP": "$",
}


def symbol_for(currency_code: str) -> str:
    """Return the display symbol for a currency code, or the code itself."""
    return _SYMBOLS.get(currency_code.upper(), currency_code)


def format_money(amount: Number, currency_code: str, signed: bool = False) -> str:
    """
    Format an amount with its currency symbol, two decimals and grouping.

    ``signed`` prefixes positive amounts with ``+``; negatives always carry ``-``.
    """
    value = to_decimal(amount)
    sign = ""
    if value < 0:
        sign = "-"
    elif signed and value > 0:
        sign = "+"
    return f"{sign}{symbol_for(currency_code)}{abs(value):,.2f}"


class CurrencyConverter:
    """
    Converts amounts between currencies.

    Live rates are fetched per base currency and cached for ``cache_ttl_seconds``.
    When the provider is missing, fails or lacks the pair, the static fallback
    table answers; fallback answers are not cached.
    """

    def __init__(
        self,
        provider: Optional[ExchangeRateProvider] = None,
        fallback: Optional[FallbackRateTable] = None,
        cache_ttl_seconds: int = 300,
        clock: Optional[Clock] = None,
    ):
        self._provider = provider
        self._fallback = fallback or FallbackRateTable()
        self._cache_ttl = cache_ttl_seconds
        self._clock = clock or SystemClock()
        self._rate_cache: dict[str, dict[str, Decimal]] = {}
        self._cache_times: dict[str, datetime] = {}

    symbol_for = staticmethod(symbol_for)
    format = staticmethod(format_money)

    def get_rate(self, from_currency: str, to_currency: str) -> ExchangeRate:
        """
        Return the rate for a currency pair.

        Raises RateUnavailableError only when both live and fallback sources miss.
        """
        source = from_currency.upper()
        target = to_currency.upper()
        now = self._clock.now()

        if source == target:
            return ExchangeRate(source, target, Decimal("1"), now, RateSource.IDENTITY)

        cached = self.get_cached_rate(source, target)
        if cached is not None:
            return cached

        if self._provider is not None:
            self._refresh(source)
            cached = self.get_cached_rate(source, target)
            if cached is not None:
                return cached

        rate = self._fallback.lookup(source, target)
        if rate is None:
            raise RateUnavailableError(source, target)
        logger.warning("Using fallback rate %s for %s->%s", rate, source, target)
        return ExchangeRate(source, target, rate, now, RateSource.FALLBACK)

    def get_cached_rate(self, from_currency: str, to_currency: str) -> Optional[ExchangeRate]:
        """Return a fresh cached live rate without fetching, or None."""
        source = from_currency.upper()
        target = to_currency.upper()
        if source == target:
            return ExchangeRate(source, target, Decimal("1"), self._clock.now(), RateSource.IDENTITY)
        if not self._is_cache_valid(source):
            return None
        rate = self._rate_cache[source].get(target)
        if rate is None:
            return None
        return ExchangeRate(source, target, rate, self._cache_times[source], RateSource.LIVE)

    def convert(self, amount: Number, from_currency: str, to_currency: str) -> Money:
        """
        Convert ``amount`` from one currency to another.

        Zero short-circuits without a rate lookup; same-currency returns the
        amount unchanged. The result is not rounded.
        """
        value = to_decimal(amount)
        if value < 0:
            raise InvalidAmountError(f"Cannot convert negative amount {value}")
        target = to_currency.upper()
        if value == 0:
            return Money.zero(target)
        if from_currency.upper() == target:
            return Money(value, target)

        rate = self.get_rate(from_currency, target)
        return Money(value * rate.rate, target)

    def convert_money(self, money: Money, to_currency: str) -> Money:
        """Convert a Money value into another currency."""
        return self.convert(money.amount, money.currency_code, to_currency)

    def invalidate(self, base: Optional[str] = None) -> None:
        """Drop cached rates for one base currency, or all of them."""
        if base is None:
            self._rate_cache.clear()
            self._cache_times.clear()
            return
        self._rate_cache.pop(base.upper(), None)
        self._cache_times.pop(base.upper(), None)

    def rates(self, base: str) -> dict[str, ExchangeRate]:
        """Every rate quoted against ``base``: live where cached, fallback otherwise."""
        source = base.upper()
        if self._provider is not None and not self._is_cache_valid(source):
            self._refresh(source)

        now = self._clock.now()
        table = {
            code: ExchangeRate(source, code, rate, now, RateSource.FALLBACK)
            for code, rate in self._fallback.fetch_rates(source).items()
            if code != source
        }
        if self._is_cache_valid(source):
            fetched_at = self._cache_times[source]
            for code, rate in self._rate_cache[source].items():
                if code != source:
                    table[code] = ExchangeRate(source, code, rate, fetched_at, RateSource.LIVE)
        return dict(sorted(table.items()))

    def _refresh(self, base: str) -> None:
        try:
            rates = self._provider.fetch_rates(base)
        except Exception as exc:
            # Graceful degradation: caller falls back to the static table
            logger.warning("Live rate fetch for %s failed: %s", base, exc)
            return
        self._rate_cache[base] = {code.upper(): to_decimal(rate) for code, rate in rates.items()}
        self._cache_times[base] = self._clock.now()

    def _is_cache_valid(self, base: str) -> bool:
        """Check if the cached rates for ``base`` are within TTL."""
        cache_time = self._cache_times.get(base)
        if cache_time is None:
            return False
        elapsed = (self._clock.now() - cache_time).total_seconds()
        return elapsed < self._cache_ttl
