"""Holdings book: per-instrument positions settled against the cash ledger."""

import copy
import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sling_ledger.core.exceptions import (
    CurrencyMismatchError,
    InsufficientSharesError,
    InvalidAmountError,
    ValidationError,
)
from sling_ledger.core.timezone import Clock, SystemClock, to_utc
from sling_ledger.domain.models import (
    CENT,
    Holding,
    Money,
    PortfolioEvent,
    PortfolioEventKind,
    quantize_shares,
    to_decimal,
)
from sling_ledger.domain.models.money import Number
from sling_ledger.domain.views import HoldingView, PortfolioPnL
from sling_ledger.services.ledger import Ledger

logger = logging.getLogger(__name__)


class HoldingsBook:
    """
    Tracks shares and cost basis per instrument (stocks and yield tokens).

    Each mutation debits or credits the ledger and updates the position under
    the ledger's lock. The ledger call comes first, so a failed debit leaves
    the position untouched.

    Numeric policy:
    - shares are kept at 8 decimal places
    - cash legs are settled to the cent with ROUND_HALF_EVEN, identically on
      both sides, so a buy followed by a sell at the same price nets to zero
    """

    def __init__(self, ledger: Ledger, clock: Optional[Clock] = None):
        self._ledger = ledger
        self._lock = ledger.lock
        self._clock = clock or SystemClock()
        self._holdings: dict[str, Holding] = {}
        self._events: list[PortfolioEvent] = []

    @property
    def base_currency(self) -> str:
        return self._ledger.base_currency

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    # Queries

    def get(self, instrument_id: str) -> Optional[Holding]:
        """Return the holding for an instrument, or None if not held."""
        with self._lock:
            return self._holdings.get(instrument_id.upper())

    def positions(self) -> list[Holding]:
        """All open positions sorted by instrument."""
        with self._lock:
            return [self._holdings[key] for key in sorted(self._holdings)]

    def shares_owned(self, instrument_id: str) -> Decimal:
        holding = self.get(instrument_id)
        return holding.shares if holding else Decimal("0")

    def owns(self, instrument_id: str) -> bool:
        return self.shares_owned(instrument_id) > 0

    def total_cost_basis(self) -> Money:
        with self._lock:
            total = Money.zero(self._ledger.base_currency)
            for holding in self._holdings.values():
                total = total + holding.total_cost
            return total

    def current_value(self, instrument_id: str, current_price: Money) -> Money:
        """Market value of a position: shares * current price, to the cent."""
        shares = self.shares_owned(instrument_id)
        return (current_price * shares).quantize(CENT)

    def unrealized_pnl(self, instrument_id: str, current_price: Money) -> Money:
        """Market value minus remaining cost basis."""
        holding = self.get(instrument_id)
        if holding is None:
            return Money.zero(current_price.currency_code)
        return self.current_value(instrument_id, current_price) - holding.total_cost.quantize(CENT)

    def view(self, instrument_id: str, current_price: Optional[Money] = None) -> HoldingView:
        """Build a HoldingView, valued at ``current_price`` when provided."""
        holding = self.get(instrument_id)
        if holding is None:
            holding = Holding(instrument_id.upper(), total_cost=Money.zero(self._ledger.base_currency))
        view = HoldingView(
            instrument_id=holding.instrument_id,
            shares=holding.shares,
            average_price=holding.average_price,
            cost_basis=holding.total_cost.quantize(CENT),
        )
        if current_price is not None:
            view.current_price = current_price
            view.market_value = self.current_value(instrument_id, current_price)
            view.unrealized_pnl = self.unrealized_pnl(instrument_id, current_price)
            if view.cost_basis.amount > 0:
                view.pnl_percent = (
                    view.unrealized_pnl.amount / view.cost_basis.amount * 100
                ).quantize(CENT)
        return view

    # Mutations

    def buy(
        self,
        instrument_id: str,
        shares: Optional[Number] = None,
        price_per_share: Optional[Money] = None,
        *,
        amount: Optional[Money] = None,
    ) -> Holding:
        """
        Buy an instrument by share count or by cash amount.

        Args:
            instrument_id: Ticker or token id
            shares: Number of shares to buy (mutually exclusive with amount)
            price_per_share: Price locked in by the quote
            amount: Cash to spend; shares = amount / price rounded down

        Returns:
            The updated holding
        """
        price = self._require_price(price_per_share)
        if (shares is None) == (amount is None):
            raise ValidationError("Provide exactly one of shares or amount")

        if amount is not None:
            if amount.amount <= 0:
                raise InvalidAmountError(f"Buy amount must be positive, got {amount}")
            cost = amount.quantize(CENT)
            quantity = quantize_shares(cost.amount / price.amount)
        else:
            quantity = self._require_quantity(shares)
            cost = (price * quantity).quantize(CENT)

        if quantity <= 0:
            raise InvalidAmountError(f"Buy of {instrument_id} rounds to zero shares")

        with self._lock:
            self._ledger.debit(cost)
            holding = self._add_to_position(instrument_id, quantity, cost)
            self._record_event(PortfolioEventKind.BUY, holding.instrument_id, quantity, price, cost)
            logger.info("Bought %s %s at %s for %s", quantity, holding.instrument_id, price, cost)
            return holding

    def sell(self, instrument_id: str, shares: Number, price_per_share: Money) -> Money:
        """
        Sell shares and credit the proceeds.

        Cost basis shrinks in proportion to the shares sold. Raises
        InsufficientSharesError when ``shares`` exceeds the position.

        Returns:
            The proceeds credited to the ledger
        """
        price = self._require_price(price_per_share)
        quantity = self._require_quantity(shares)

        with self._lock:
            self._remove_from_position(instrument_id, quantity)
            proceeds = (price * quantity).quantize(CENT)
            self._ledger.credit(proceeds)
            self._record_event(PortfolioEventKind.SELL, instrument_id.upper(), quantity, price, proceeds)
            logger.info("Sold %s %s at %s for %s", quantity, instrument_id.upper(), price, proceeds)
            return proceeds

    def deposit(self, instrument_id: str, base_amount: Money, token_price: Money) -> Decimal:
        """
        Swap cash for yield tokens at ``token_price``.

        Returns:
            Number of tokens received
        """
        price = self._require_price(token_price)
        if base_amount.amount <= 0:
            raise InvalidAmountError(f"Deposit amount must be positive, got {base_amount}")

        cost = base_amount.quantize(CENT)
        tokens = quantize_shares(cost.amount / price.amount)
        if tokens <= 0:
            raise InvalidAmountError(f"Deposit of {base_amount} rounds to zero tokens")

        with self._lock:
            self._ledger.debit(cost)
            self._add_to_position(instrument_id, tokens, cost)
            self._record_event(PortfolioEventKind.DEPOSIT, instrument_id.upper(), tokens, price, cost)
            logger.info("Deposited %s into %s tokens of %s", cost, tokens, instrument_id.upper())
            return tokens

    def withdraw(self, instrument_id: str, token_amount: Number, token_price: Money) -> Money:
        """
        Swap yield tokens back to cash at ``token_price``.

        Returns:
            Cash credited to the ledger
        """
        price = self._require_price(token_price)
        quantity = self._require_quantity(token_amount)

        with self._lock:
            self._remove_from_position(instrument_id, quantity)
            received = (price * quantity).quantize(CENT)
            self._ledger.credit(received)
            self._record_event(PortfolioEventKind.WITHDRAW, instrument_id.upper(), quantity, price, received)
            logger.info("Withdrew %s %s for %s", quantity, instrument_id.upper(), received)
            return received

    def clear(self) -> None:
        with self._lock:
            self._holdings.clear()
            self._events.clear()

    def snapshot(self) -> tuple[dict[str, Holding], list[PortfolioEvent]]:
        with self._lock:
            return copy.deepcopy(self._holdings), list(self._events)

    def restore(self, state: tuple[dict[str, Holding], list[PortfolioEvent]]) -> None:
        """Put back positions and history taken with ``snapshot``."""
        holdings, events = state
        with self._lock:
            self._holdings = copy.deepcopy(holdings)
            self._events = list(events)

    # History

    def history(self, instrument_id: Optional[str] = None) -> list[PortfolioEvent]:
        """Position changes in the order they happened."""
        with self._lock:
            if instrument_id is None:
                return list(self._events)
            key = instrument_id.upper()
            return [event for event in self._events if event.instrument_id == key]

    @property
    def created_at(self) -> Optional[datetime]:
        """Time of the first position change, None for an empty portfolio."""
        with self._lock:
            return self._events[0].timestamp if self._events else None

    def positions_at(self, at: datetime) -> dict[str, Decimal]:
        """Share counts per instrument as they stood at ``at``."""
        at = to_utc(at)
        with self._lock:
            shares: dict[str, Decimal] = {}
            for event in self._events:
                if event.timestamp > at:
                    continue
                shares[event.instrument_id] = event.shares_after
            return {key: value for key, value in shares.items() if value > 0}

    def portfolio_value_at(self, at: datetime, prices: Optional[dict[str, Money]] = None) -> Money:
        """
        Value of the positions held at ``at``.

        Each instrument is valued at the price in ``prices`` when given,
        otherwise at the last price it traded at on or before ``at``.
        """
        at = to_utc(at)
        with self._lock:
            last_price: dict[str, Money] = {}
            for event in self._events:
                if event.timestamp > at:
                    continue
                last_price[event.instrument_id] = event.price_per_share
            total = Money.zero(self._ledger.base_currency)
            for key, shares in self.positions_at(at).items():
                price = (prices or {}).get(key, last_price[key])
                total = total + (price * shares).quantize(CENT)
            return total

    def total_unrealized_pnl(self, prices: dict[str, Money]) -> PortfolioPnL:
        """
        Profit and loss across all positions.

        Positions missing from ``prices`` are valued at cost.
        """
        with self._lock:
            market_value = Money.zero(self._ledger.base_currency)
            cost_basis = Money.zero(self._ledger.base_currency)
            for holding in self._holdings.values():
                cost = holding.total_cost.quantize(CENT)
                price = prices.get(holding.instrument_id)
                cost_basis = cost_basis + cost
                if price is None:
                    market_value = market_value + cost
                else:
                    market_value = market_value + (price * holding.shares).quantize(CENT)
        pnl = market_value - cost_basis
        percent = None
        if cost_basis.amount > 0:
            percent = (pnl.amount / cost_basis.amount * 100).quantize(CENT)
        return PortfolioPnL(
            market_value=market_value,
            cost_basis=cost_basis,
            unrealized_pnl=pnl,
            pnl_percent=percent,
        )

    def _record_event(
        self,
        kind: PortfolioEventKind,
        key: str,
        quantity: Decimal,
        price: Money,
        cash: Money,
    ) -> None:
        holding = self._holdings.get(key)
        self._events.append(
            PortfolioEvent(
                timestamp=self._clock.now(),
                kind=kind,
                instrument_id=key,
                shares=quantity,
                price_per_share=price,
                cash_amount=cash,
                shares_after=holding.shares if holding else Decimal("0"),
            )
        )

    def _add_to_position(self, instrument_id: str, quantity: Decimal, cost: Money) -> Holding:
        key = instrument_id.upper()
        holding = self._holdings.get(key)
        if holding is None:
            holding = Holding(
                instrument_id=key,
                total_cost=Money.zero(cost.currency_code),
                opened_at=self._clock.now(),
            )
            self._holdings[key] = holding
        holding.shares += quantity
        holding.total_cost = holding.total_cost + cost
        return holding

    def _remove_from_position(self, instrument_id: str, quantity: Decimal) -> None:
        key = instrument_id.upper()
        holding = self._holdings.get(key)
        owned = holding.shares if holding else Decimal("0")
        if holding is None or quantity > owned:
            raise InsufficientSharesError(key, str(quantity), str(owned))

        remaining = owned - quantity
        if remaining == 0:
            del self._holdings[key]
            return
        holding.total_cost = holding.total_cost * (remaining / owned)
        holding.shares = remaining

    def _require_price(self, price: Optional[Money]) -> Money:
        if price is None or price.amount <= 0:
            raise InvalidAmountError(f"Price must be positive, got {price}")
        if price.currency_code != self._ledger.base_currency:
            raise CurrencyMismatchError(self._ledger.base_currency, price.currency_code)
        return price

    @staticmethod
    def _require_quantity(value: Optional[Number]) -> Decimal:
        if value is None:
            raise InvalidAmountError("Quantity is required")
        quantity = quantize_shares(to_decimal(value))
        if quantity <= 0:
            raise InvalidAmountError(f"Quantity must be positive, got {value}")
        return quantity
