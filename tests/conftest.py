"""
Pytest configuration and fixtures for the financial analytics core tests.

This module provides:
- In-memory SQLite database fixtures
- Fixed clocks and a seeded market simulator
- In-memory cache and a circuit breaker on a fake clock
- Repository and service fixtures
- Factory helpers for assets, price bars and transactions
- FastAPI test client wired to the test database
"""

import random
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable, Optional, Sequence

import pytest
from sqlalchemy import create_engine, StaticPool
from sqlalchemy.orm import sessionmaker, Session
from fastapi.testclient import TestClient

from fincore.main import app
from fincore.app_context import get_cache_backend, get_quote_breaker, get_simulator
from fincore.config.settings import Settings, set_settings, reset_settings
from fincore.repositories.sqlalchemy.database import Base, get_db, reset_database
# Import ORM models to register them with Base before creating tables
from fincore.repositories.sqlalchemy import orm_models  # noqa: F401
from fincore.repositories.sqlalchemy import (
    SqlAlchemyAssetRepository,
    SqlAlchemyPriceHistoryRepository,
    SqlAlchemyTransactionRepository,
)
from fincore.repositories.cache import InMemoryCache, SafeCache
from fincore.core.exceptions import NotFoundError, ValidationError
from fincore.core.locks import TickerLockRegistry
from fincore.core.timezone import market_tz
from fincore.domain.models import Asset, PriceBar
from fincore.providers.market_simulator import MarketSimulator
from fincore.services import (
    CircuitBreaker,
    CircuitBreakerConfig,
    IndicatorService,
    LedgerService,
    MarketDataService,
)


# =============================================================================
# TIME HELPERS
# =============================================================================


def market_datetime(
    year: int,
    month: int,
    day: int,
    hour: int = 10,
    minute: int = 0,
    second: int = 0,
) -> datetime:
    """Create a localized datetime in the exchange timezone."""
    return market_tz().localize(datetime(year, month, day, hour, minute, second))


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fixed_now() -> datetime:
    """Fixed 'now' inside trading hours (Friday 14:30 local)."""
    return market_datetime(2024, 6, 14, 14, 30, 0)


@pytest.fixture
def weekend_now() -> datetime:
    """Fixed 'now' outside trading hours (Saturday 11:00 local)."""
    return market_datetime(2024, 6, 15, 11, 0, 0)


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture(scope="function")
def test_engine():
    """Create test database engine with shared in-memory SQLite."""
    # Keep the app lifespan away from any on-disk database
    reset_database()
    set_settings(Settings(database_url="sqlite:///:memory:", simulation_enabled=False))

    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
    reset_database()
    reset_settings()


@pytest.fixture(scope="function")
def test_session(test_engine) -> Session:
    """Create test database session."""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()


# =============================================================================
# REPOSITORY FIXTURES
# =============================================================================


@pytest.fixture
def asset_repo(test_session) -> SqlAlchemyAssetRepository:
    """Provide test AssetRepository."""
    return SqlAlchemyAssetRepository(test_session)


@pytest.fixture
def price_repo(test_session) -> SqlAlchemyPriceHistoryRepository:
    """Provide test PriceHistoryRepository."""
    return SqlAlchemyPriceHistoryRepository(test_session)


@pytest.fixture
def transaction_repo(test_session) -> SqlAlchemyTransactionRepository:
    """Provide test TransactionRepository."""
    return SqlAlchemyTransactionRepository(test_session)


# =============================================================================
# INFRASTRUCTURE FIXTURES
# =============================================================================


@pytest.fixture
def memory_cache(fake_clock) -> InMemoryCache:
    """Provide an in-memory cache on the fake clock."""
    return InMemoryCache(clock=fake_clock)


@pytest.fixture
def safe_cache(memory_cache) -> SafeCache:
    return SafeCache(memory_cache)


@pytest.fixture
def breaker(fake_clock) -> CircuitBreaker:
    """Quote breaker with default thresholds on the fake clock."""
    return CircuitBreaker(
        name="quote-service",
        config=CircuitBreakerConfig(),
        clock=fake_clock,
        ignored_exceptions=(NotFoundError, ValidationError),
    )


@pytest.fixture
def simulator(fixed_now) -> MarketSimulator:
    """Seeded simulator on the fixed clock."""
    return MarketSimulator(rng=random.Random(42), clock=lambda: fixed_now)


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def market_data_service(
    asset_repo,
    price_repo,
    safe_cache,
    simulator,
    breaker,
    fixed_now,
) -> MarketDataService:
    """Provide test MarketDataService (market open at fixed_now)."""
    return MarketDataService(
        asset_repo=asset_repo,
        price_repo=price_repo,
        cache=safe_cache,
        simulator=simulator,
        breaker=breaker,
        price_locks=TickerLockRegistry(),
        clock=lambda: fixed_now,
        quote_ttl_seconds=30,
    )


@pytest.fixture
def indicator_service(price_repo, safe_cache, fixed_now) -> IndicatorService:
    """Provide test IndicatorService."""
    return IndicatorService(
        price_repo=price_repo,
        cache=safe_cache,
        clock=lambda: fixed_now,
    )


@pytest.fixture
def ledger_service(asset_repo, transaction_repo, fixed_now) -> LedgerService:
    """Provide test LedgerService."""
    return LedgerService(
        asset_repo=asset_repo,
        transaction_repo=transaction_repo,
        clock=lambda: fixed_now,
    )


# =============================================================================
# FACTORY FIXTURES
# =============================================================================


@pytest.fixture
def asset_factory(asset_repo, fixed_now) -> Callable[..., Asset]:
    """Factory for persisting test assets."""

    def _create_asset(
        ticker: str = "PETR4",
        price: Decimal = Decimal("25.50"),
        previous_close: Optional[Decimal] = None,
        name: Optional[str] = None,
        category: str = "STOCKS",
        active: bool = True,
    ) -> Asset:
        return asset_repo.upsert(Asset(
            ticker=ticker,
            name=name or f"{ticker} Test Asset",
            category=category,
            current_price=price,
            previous_close=price if previous_close is None else previous_close,
            last_updated=fixed_now,
            active=active,
        ))

    return _create_asset


@pytest.fixture
def sample_asset(asset_factory) -> Asset:
    """A persisted PETR4 at 25.50."""
    return asset_factory()


@pytest.fixture
def history_factory(price_repo, fixed_now) -> Callable[..., list[PriceBar]]:
    """Factory persisting one bar per close, oldest first, one day apart."""

    def _create_history(ticker: str, closes: Sequence[str]) -> list[PriceBar]:
        start = fixed_now - timedelta(days=len(closes) - 1)
        bars = make_bars(ticker, closes, start=start)
        price_repo.append_many(bars)
        return bars

    return _create_history


# =============================================================================
# API TEST CLIENT FIXTURE
# =============================================================================


@pytest.fixture
def client(test_engine, memory_cache, breaker) -> TestClient:
    """Provide FastAPI test client with test database and fresh shared state."""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

    def override_get_db():
        session = TestSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache_backend] = lambda: memory_cache
    app.dependency_overrides[get_quote_breaker] = lambda: breaker
    app.dependency_overrides[get_simulator] = lambda: MarketSimulator(rng=random.Random(7))
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# =============================================================================
# HELPER FUNCTIONS (exported for use in tests)
# =============================================================================


def make_bars(
    ticker: str,
    closes: Sequence[str],
    start: Optional[datetime] = None,
) -> list[PriceBar]:
    """Build flat bars (open=high=low=close) oldest first, one day apart."""
    start = start or market_datetime(2024, 6, 1)
    bars = []
    for i, close in enumerate(closes):
        price = Decimal(close)
        bars.append(PriceBar(
            ticker=ticker,
            open=price,
            high=price,
            low=price,
            close=price,
            volume=1000,
            timestamp=start + timedelta(days=i),
        ))
    return bars


def newest_first(closes: Sequence[str], ticker: str = "TEST") -> list[PriceBar]:
    """Bars in repository order (most recent first) for the given closes."""
    return list(reversed(make_bars(ticker, list(reversed(closes)))))


def assert_decimal_equal(
    actual: Decimal,
    expected: Decimal,
    tolerance: Decimal = Decimal("0.01"),
) -> None:
    """Assert two Decimals are equal within tolerance."""
    diff = abs(Decimal(actual) - Decimal(expected))
    assert diff <= tolerance, f"Expected {expected}, got {actual} (diff={diff})"
