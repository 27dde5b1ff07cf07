"""
Pytest configuration and fixtures for ledger engine tests.

This module provides:
- A fixed clock and UTC time helpers
- Money factory helpers
- Deterministic rate providers (fixed, failing, counting)
- An activity repository whose writes fail
- Service and account context fixtures
- In-memory SQLite fixtures for the activity repository
- A FastAPI test client bound to an isolated account context
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

import pytest
from sqlalchemy import create_engine, StaticPool
from sqlalchemy.orm import sessionmaker, Session
from fastapi.testclient import TestClient

from sling_ledger.main import app
from sling_ledger.api.deps import get_account_context
from sling_ledger.account_context import AccountContext
from sling_ledger.config.settings import Settings, reset_settings
from sling_ledger.core.timezone import UTC, FixedClock
from sling_ledger.domain.models import Money
from sling_ledger.providers import RateProviderError, StubPriceFeed
from sling_ledger.repositories.sqlalchemy.database import Base
# Import ORM models to register them with Base before creating tables
from sling_ledger.repositories.sqlalchemy import orm_models  # noqa: F401
from sling_ledger.repositories.memory import InMemoryActivityRepository
from sling_ledger.repositories.sqlalchemy import SqlAlchemyActivityRepository
from sling_ledger.services import (
    ActivityRecorder,
    CurrencyConverter,
    FeeService,
    HoldingsBook,
    Ledger,
    RecurringPurchaseBook,
    SavingsService,
    SplitCalculator,
    TransferService,
)


# =============================================================================
# TIME HELPERS
# =============================================================================


def utc_datetime(
    year: int,
    month: int,
    day: int,
    hour: int = 10,
    minute: int = 0,
    second: int = 0,
) -> datetime:
    """Create a timezone-aware UTC datetime."""
    return UTC.localize(datetime(year, month, day, hour, minute, second))


@pytest.fixture
def fixed_now() -> datetime:
    """Fixed 'now' timestamp for deterministic tests."""
    return utc_datetime(2024, 6, 15, 14, 30, 0)


@pytest.fixture
def clock(fixed_now) -> FixedClock:
    """Manually advanced clock starting at fixed_now."""
    return FixedClock(fixed_now)


# =============================================================================
# MONEY HELPERS
# =============================================================================


def usd(amount: str) -> Money:
    return Money(Decimal(amount), "USD")


def gbp(amount: str) -> Money:
    return Money(Decimal(amount), "GBP")


def eur(amount: str) -> Money:
    return Money(Decimal(amount), "EUR")


def zero_jitter() -> Decimal:
    """Quote refresh jitter that leaves the price unchanged."""
    return Decimal("0")


# =============================================================================
# RATE PROVIDER DOUBLES
# =============================================================================


class FixedRateProvider:
    """
    Deterministic live-rate provider for testing.

    Counts fetches so tests can assert cache behaviour.
    """

    RATES = {
        "USD": {"GBP": Decimal("0.80"), "EUR": Decimal("0.90"), "USD": Decimal("1")},
        "GBP": {"USD": Decimal("1.25"), "EUR": Decimal("1.125"), "GBP": Decimal("1")},
        "EUR": {"USD": Decimal("1.10"), "GBP": Decimal("0.88"), "EUR": Decimal("1")},
    }

    def __init__(self, rates: Optional[dict[str, dict[str, Decimal]]] = None):
        self._rates = rates if rates is not None else self.RATES
        self.calls: list[str] = []

    def fetch_rates(self, base: str) -> dict[str, Decimal]:
        self.calls.append(base)
        if base not in self._rates:
            raise RateProviderError(f"Unsupported base {base}")
        return dict(self._rates[base])


class FailingRateProvider:
    """Rate provider that always fails, like a network timeout."""

    def __init__(self):
        self.calls = 0

    def fetch_rates(self, base: str) -> dict[str, Decimal]:
        self.calls += 1
        raise RateProviderError("Network unavailable")


@pytest.fixture
def fixed_rate_provider() -> FixedRateProvider:
    return FixedRateProvider()


@pytest.fixture
def failing_rate_provider() -> FailingRateProvider:
    return FailingRateProvider()


@pytest.fixture
def price_feed() -> StubPriceFeed:
    """Stub price feed that rejects unknown instruments."""
    return StubPriceFeed(seed=42, allow_unknown=False)


# =============================================================================
# REPOSITORY DOUBLES
# =============================================================================


class FailingActivityRepository(InMemoryActivityRepository):
    """Activity store whose writes fail while ``failing`` is set, like a full disk."""

    def __init__(self, failing: bool = True):
        super().__init__()
        self.failing = failing
        self.attempts = 0

    def append(self, record):
        self.attempts += 1
        if self.failing:
            raise RuntimeError("activity store unavailable")
        return super().append(record)


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def ledger() -> Ledger:
    """Empty USD ledger."""
    return Ledger(base_currency="USD")


@pytest.fixture
def funded_ledger() -> Ledger:
    """USD ledger holding $10,000."""
    return Ledger(base_currency="USD", opening_balance=usd("10000.00"))


@pytest.fixture
def holdings(funded_ledger, clock) -> HoldingsBook:
    return HoldingsBook(funded_ledger, clock=clock)


@pytest.fixture
def converter(clock) -> CurrencyConverter:
    """Converter with no live provider (fallback table only)."""
    return CurrencyConverter(clock=clock)


@pytest.fixture
def live_converter(fixed_rate_provider, clock) -> CurrencyConverter:
    """Converter backed by the fixed live provider."""
    return CurrencyConverter(provider=fixed_rate_provider, cache_ttl_seconds=300, clock=clock)


@pytest.fixture
def recorder(clock) -> ActivityRecorder:
    return ActivityRecorder(clock=clock)


@pytest.fixture
def fee_service(converter, clock) -> FeeService:
    return FeeService(converter, clock=clock)


@pytest.fixture
def savings_service(holdings, funded_ledger, recorder, clock) -> SavingsService:
    return SavingsService(holdings, recorder=recorder, clock=clock, lock=funded_ledger.lock)


@pytest.fixture
def transfer_service(funded_ledger, holdings, recorder, converter, fee_service) -> TransferService:
    return TransferService(
        funded_ledger,
        holdings,
        recorder,
        converter,
        fee_service,
        splitter=SplitCalculator(),
    )


@pytest.fixture
def failing_repo() -> FailingActivityRepository:
    return FailingActivityRepository()


@pytest.fixture
def failing_recorder(failing_repo, clock) -> ActivityRecorder:
    return ActivityRecorder(failing_repo, clock=clock)


@pytest.fixture
def failing_transfer_service(funded_ledger, holdings, failing_recorder, converter, fee_service) -> TransferService:
    """Transfer service whose activity writes always fail."""
    return TransferService(funded_ledger, holdings, failing_recorder, converter, fee_service)


@pytest.fixture
def recurring_book(transfer_service, price_feed, clock, funded_ledger) -> RecurringPurchaseBook:
    return RecurringPurchaseBook(transfer_service, price_feed, clock=clock, lock=funded_ledger.lock)


# =============================================================================
# ACCOUNT CONTEXT FIXTURES
# =============================================================================


@pytest.fixture
def test_settings() -> Settings:
    """Default settings, ignoring any local .env file."""
    reset_settings()
    return Settings(_env_file=None)


@pytest.fixture
def account_context(test_settings, clock, price_feed) -> AccountContext:
    """Isolated account context with a fixed clock and stub prices."""
    ctx = AccountContext(settings=test_settings, clock=clock, price_feed=price_feed)
    yield ctx
    ctx.close()


@pytest.fixture
def funded_context(account_context) -> AccountContext:
    """Account context holding $10,000 cash."""
    account_context.ledger.credit(usd("10000.00"))
    return account_context


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture(scope="function")
def test_engine():
    """Create test database engine with shared in-memory SQLite."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def test_session(test_engine) -> Session:
    """Create test database session."""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def activity_repo(test_session) -> SqlAlchemyActivityRepository:
    """Provide test ActivityRepository backed by SQLite."""
    return SqlAlchemyActivityRepository(test_session)


# =============================================================================
# API FIXTURES
# =============================================================================


@pytest.fixture
def client(account_context) -> TestClient:
    """Provide FastAPI test client bound to an isolated account context."""
    app.dependency_overrides[get_account_context] = lambda: account_context
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
