"""Account context: owns one account's state and wires its services.

Everything that mutates the account shares one re-entrant lock, so a balance
check and the mutation it guards happen as one step.
"""

import threading
from contextlib import contextmanager
from decimal import Decimal
from typing import Any, Callable, Iterator, Optional

from sqlalchemy.orm import Session

from sling_ledger.config.settings import Settings, get_settings
from sling_ledger.core.timezone import Clock, SystemClock
from sling_ledger.domain.models import CENT, Money, RemainderPolicy
from sling_ledger.providers import (
    ExchangeRateProvider,
    FallbackRateTable,
    FrankfurterRateProvider,
    PriceFeed,
    StubPriceFeed,
)
from sling_ledger.repositories.memory import InMemoryActivityRepository
from sling_ledger.repositories.protocols import ActivityRepository
from sling_ledger.repositories.sqlalchemy import (
    SqlAlchemyActivityRepository,
    create_db_engine,
    get_session_factory,
    init_db,
)
from sling_ledger.services import (
    ActivityRecorder,
    CurrencyConverter,
    FeeService,
    HoldingsBook,
    Ledger,
    PaymentRequestBook,
    PendingOperation,
    QuoteTimer,
    RecurringPurchaseBook,
    SavingsService,
    SplitCalculator,
    TransferService,
    unit_of_work,
)


class AccountContext:
    """
    In-process access to one account's ledger, holdings and services.

    Several contexts may coexist (tests, multiple accounts); nothing here is
    shared between them.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        clock: Optional[Clock] = None,
        price_feed: Optional[PriceFeed] = None,
        rate_provider: Optional[ExchangeRateProvider] = None,
        activity_repository: Optional[ActivityRepository] = None,
    ):
        """
        Initialize the account context.

        Args:
            settings: Configuration; defaults to the global settings
            clock: Time source; defaults to the system clock
            price_feed: Instrument prices; defaults to StubPriceFeed
            rate_provider: Live FX source; by default Frankfurter when
                ``use_live_rates`` is set, otherwise none (fallback table only)
            activity_repository: Activity store; by default chosen from
                ``database_url``
        """
        self.settings = settings or get_settings()
        self.clock = clock or SystemClock()
        self.lock = threading.RLock()
        self._price_feed = price_feed
        self._rate_provider = rate_provider
        self._activity_repo = activity_repository
        self._session: Optional[Session] = None

        # Lazily created under the account lock
        self._ledger: Optional[Ledger] = None
        self._holdings: Optional[HoldingsBook] = None
        self._activity: Optional[ActivityRecorder] = None
        self._converter: Optional[CurrencyConverter] = None
        self._splitter: Optional[SplitCalculator] = None
        self._fees: Optional[FeeService] = None
        self._savings: Optional[SavingsService] = None
        self._transfers: Optional[TransferService] = None
        self._requests: Optional[PaymentRequestBook] = None
        self._recurring: Optional[RecurringPurchaseBook] = None

    @contextmanager
    def transaction(self) -> Iterator["AccountContext"]:
        """
        Hold the account lock for a multi-step mutation.

        Cash and positions are restored if the block raises.
        """
        with unit_of_work(self.lock, self.ledger, self.holdings):
            yield self

    # Collaborators

    @property
    def price_feed(self) -> PriceFeed:
        with self.lock:
            if self._price_feed is None:
                self._price_feed = StubPriceFeed()
            return self._price_feed

    def _get_rate_provider(self) -> Optional[ExchangeRateProvider]:
        with self.lock:
            if self._rate_provider is None and self.settings.use_live_rates:
                self._rate_provider = FrankfurterRateProvider(
                    base_url=self.settings.rate_provider_url,
                    timeout=self.settings.rate_fetch_timeout_seconds,
                )
            return self._rate_provider

    def _get_activity_repo(self) -> ActivityRepository:
        with self.lock:
            if self._activity_repo is None:
                if self.settings.database_url:
                    engine = create_db_engine(self.settings.database_url)
                    init_db(engine)
                    self._session = get_session_factory(engine)()
                    self._activity_repo = SqlAlchemyActivityRepository(self._session)
                else:
                    self._activity_repo = InMemoryActivityRepository()
            return self._activity_repo

    # Service accessors

    @property
    def ledger(self) -> Ledger:
        with self.lock:
            if self._ledger is None:
                self._ledger = Ledger(base_currency=self.settings.base_currency, lock=self.lock)
            return self._ledger

    @property
    def holdings(self) -> HoldingsBook:
        with self.lock:
            if self._holdings is None:
                self._holdings = HoldingsBook(self.ledger, clock=self.clock)
            return self._holdings

    @property
    def activity(self) -> ActivityRecorder:
        with self.lock:
            if self._activity is None:
                self._activity = ActivityRecorder(self._get_activity_repo(), clock=self.clock, lock=self.lock)
            return self._activity

    @property
    def converter(self) -> CurrencyConverter:
        with self.lock:
            if self._converter is None:
                self._converter = CurrencyConverter(
                    provider=self._get_rate_provider(),
                    fallback=FallbackRateTable(),
                    cache_ttl_seconds=self.settings.rate_cache_ttl_seconds,
                    clock=self.clock,
                )
            return self._converter

    @property
    def splitter(self) -> SplitCalculator:
        with self.lock:
            if self._splitter is None:
                self._splitter = SplitCalculator(RemainderPolicy(self.settings.split_remainder_policy.upper()))
            return self._splitter

    @property
    def fees(self) -> FeeService:
        with self.lock:
            if self._fees is None:
                self._fees = FeeService(
                    self.converter,
                    base_fee=self.settings.base_fee,
                    local_currency=self.settings.local_currency,
                    account_stablecoin=self.settings.account_stablecoin,
                    display_currency=self.settings.display_currency,
                    free_transfers=self.settings.free_transfers,
                    clock=self.clock,
                )
            return self._fees

    @property
    def savings(self) -> SavingsService:
        with self.lock:
            if self._savings is None:
                self._savings = SavingsService(
                    self.holdings,
                    recorder=self.activity,
                    instrument_id=self.settings.savings_instrument_id,
                    apy=self.settings.savings_apy,
                    demo_time_multiplier=self.settings.demo_time_multiplier,
                    clock=self.clock,
                    lock=self.lock,
                )
            return self._savings

    @property
    def transfers(self) -> TransferService:
        with self.lock:
            if self._transfers is None:
                self._transfers = TransferService(
                    self.ledger,
                    self.holdings,
                    self.activity,
                    self.converter,
                    self.fees,
                    splitter=self.splitter,
                    lock=self.lock,
                )
            return self._transfers

    @property
    def requests(self) -> PaymentRequestBook:
        with self.lock:
            if self._requests is None:
                self._requests = PaymentRequestBook(
                    self.ledger, self.activity, self.converter, clock=self.clock, lock=self.lock
                )
            return self._requests

    @property
    def recurring(self) -> RecurringPurchaseBook:
        with self.lock:
            if self._recurring is None:
                self._recurring = RecurringPurchaseBook(
                    self.transfers, self.price_feed, clock=self.clock, lock=self.lock
                )
            return self._recurring

    # Factories

    def quote_timer(self, instrument_id: str, jitter: Optional[Callable[[], Decimal]] = None) -> QuoteTimer:
        """Start a quote countdown for a confirmation screen."""
        return QuoteTimer(
            instrument_id,
            self.price_feed,
            valid_for_seconds=self.settings.quote_valid_for_seconds,
            clock=self.clock,
            jitter=jitter,
        )

    def prepare(self, description: str, action: Callable[..., Any], *args: Any, **kwargs: Any) -> PendingOperation:
        """Wrap a mutation so it only runs on commit."""
        return PendingOperation(description, action, *args, **kwargs)

    # Balances

    def display_balance(self) -> Money:
        """Cash balance in the display currency, to the cent."""
        balance = self.ledger.balance()
        return self.converter.convert_money(balance, self.settings.display_currency).quantize(CENT)

    def total_balance(self, prices: Optional[dict[str, Money]] = None) -> Money:
        """
        Cash plus the market value of every position, in the base currency.

        Positions missing from ``prices`` are valued with the price feed;
        the savings token uses its accrued price.
        """
        prices = {key.upper(): value for key, value in (prices or {}).items()}
        with self.lock:
            total = self.ledger.balance()
            for holding in self.holdings.positions():
                price = prices.get(holding.instrument_id)
                if price is None:
                    if holding.instrument_id == self.savings.instrument_id:
                        price = self.savings.current_price()
                    else:
                        price = self.price_feed.current_price(holding.instrument_id)
                total = total + self.holdings.current_value(holding.instrument_id, price)
            return total.quantize(CENT)

    def reset(self) -> None:
        """Start the account over: zero balance, no positions, empty feed."""
        with self.lock:
            self._get_activity_repo().clear()
            self._ledger = None
            self._holdings = None
            self._activity = None
            self._savings = None
            self._transfers = None
            self._requests = None
            self._recurring = None
            self._fees = None

    def close(self) -> None:
        """Clean up resources."""
        if self._session is not None:
            self._session.close()
            self._session = None


# Global context for the HTTP app
_account_context: Optional[AccountContext] = None


def get_account_context() -> AccountContext:
    """Get or create the global account context."""
    global _account_context
    if _account_context is None:
        _account_context = AccountContext()
    return _account_context


def set_account_context(context: Optional[AccountContext]) -> None:
    """Set (or clear) the global account context."""
    global _account_context
    _account_context = context


def close_account_context() -> None:
    """Release the global context's resources, if one was created."""
    if _account_context is not None:
        _account_context.close()
