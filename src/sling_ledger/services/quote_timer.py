"""Time-boxed price quotes for confirmation screens."""

import logging
import random
from decimal import Decimal
from typing import Callable, Optional

from sling_ledger.core.exceptions import QuoteConsumedError, ValidationError
from sling_ledger.core.timezone import Clock, SystemClock
from sling_ledger.domain.models import Money, Quote, QuoteState, quantize_price
from sling_ledger.providers.price_feed import PriceFeed

logger = logging.getLogger(__name__)

# Simulated market movement on refresh
MAX_PRICE_VARIATION = 0.005


def random_jitter(rng: Optional[random.Random] = None) -> Callable[[], Decimal]:
    """Return a jitter function yielding a fraction in [-0.5%, +0.5%]."""
    source = rng or random.Random()

    def _jitter() -> Decimal:
        return Decimal(str(round(source.uniform(-MAX_PRICE_VARIATION, MAX_PRICE_VARIATION), 6)))

    return _jitter


class QuoteTimer:
    """
    Countdown for a quote shown while the user confirms a buy/sell/deposit.

    ``tick`` is driven once per second by the caller. When the countdown
    reaches zero the quote expires and is immediately refreshed with a new
    price and a full window. ``pause`` freezes the countdown while a submit is
    in flight; ``consume`` locks the price in and ends the timer.
    """

    def __init__(
        self,
        instrument_id: str,
        price_feed: PriceFeed,
        valid_for_seconds: int = 30,
        clock: Optional[Clock] = None,
        jitter: Optional[Callable[[], Decimal]] = None,
        initial_price: Optional[Money] = None,
    ):
        if valid_for_seconds < 1:
            raise ValidationError(f"Quote window must be at least one second, got {valid_for_seconds}")
        self._instrument_id = instrument_id.upper()
        self._feed = price_feed
        self._valid_for = valid_for_seconds
        self._clock = clock or SystemClock()
        self._jitter = jitter or random_jitter()
        self._refresh_count = 0

        price = initial_price or self._feed.current_price(self._instrument_id)
        self._quote = self._issue(price)
        self._seconds_remaining = valid_for_seconds
        self._state = QuoteState.ACTIVE

    @property
    def instrument_id(self) -> str:
        return self._instrument_id

    @property
    def state(self) -> QuoteState:
        return self._state

    @property
    def seconds_remaining(self) -> int:
        return self._seconds_remaining

    @property
    def refresh_count(self) -> int:
        return self._refresh_count

    @property
    def quote(self) -> Quote:
        return self._quote

    @property
    def progress(self) -> float:
        """Fraction of the window remaining, for the countdown clock."""
        return self._seconds_remaining / self._valid_for

    def current_price(self) -> Money:
        return self._quote.price

    def tick(self) -> None:
        """Advance the countdown by one second; refresh when it hits zero."""
        self._ensure_not_consumed()
        if self._state == QuoteState.PAUSED:
            return

        self._seconds_remaining -= 1
        if self._seconds_remaining <= 0:
            self._state = QuoteState.EXPIRED
            self.refresh()

    def refresh(self) -> Money:
        """Fetch a new price, perturb it, and restart the window."""
        self._ensure_not_consumed()
        try:
            base_price = self._feed.current_price(self._instrument_id)
        except Exception as exc:
            logger.warning("Price refresh for %s failed, keeping last price: %s", self._instrument_id, exc)
            base_price = self._quote.price

        variation = self._jitter()
        new_price = Money(quantize_price(base_price.amount * (1 + variation)), base_price.currency_code)
        self._quote = self._issue(new_price)
        self._seconds_remaining = self._valid_for
        self._refresh_count += 1
        if self._state != QuoteState.PAUSED:
            self._state = QuoteState.ACTIVE
        logger.debug("Refreshed quote for %s: %s", self._instrument_id, new_price)
        return new_price

    def pause(self) -> None:
        """Freeze the countdown while a submit is in flight."""
        self._ensure_not_consumed()
        if self._state == QuoteState.ACTIVE:
            self._state = QuoteState.PAUSED

    def resume(self) -> None:
        self._ensure_not_consumed()
        if self._state == QuoteState.PAUSED:
            self._state = QuoteState.ACTIVE

    def consume(self) -> Quote:
        """Lock in the current quote; the timer cannot be used afterwards."""
        self._ensure_not_consumed()
        self._state = QuoteState.CONSUMED
        logger.info("Consumed quote for %s at %s", self._instrument_id, self._quote.price)
        return self._quote

    def _issue(self, price: Money) -> Quote:
        return Quote(
            instrument_id=self._instrument_id,
            price=price,
            issued_at=self._clock.now(),
            valid_for_seconds=self._valid_for,
        )

    def _ensure_not_consumed(self) -> None:
        if self._state == QuoteState.CONSUMED:
            raise QuoteConsumedError(self._instrument_id)
