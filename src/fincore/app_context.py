"""Application context for in-process service management.

Provides a centralized way to build all services on one database session
without HTTP. Used by the background simulation scheduler, and handy from
a shell or script.
"""

import random
from typing import Callable, Optional

from sqlalchemy.orm import Session

from fincore.config.settings import Settings, get_settings
from fincore.core.exceptions import NotFoundError, ValidationError
from fincore.core.locks import get_price_locks
from fincore.providers.market_simulator import MarketSimulator
from fincore.repositories.cache import InMemoryCache, RedisCache, SafeCache
from fincore.repositories.protocols import CacheBackend
from fincore.repositories.sqlalchemy import (
    get_session,
    SqlAlchemyAssetRepository,
    SqlAlchemyPriceHistoryRepository,
    SqlAlchemyTransactionRepository,
)
from fincore.services import (
    CircuitBreaker,
    CircuitBreakerConfig,
    IndicatorService,
    LedgerService,
    MarketDataService,
)

# Process-wide collaborators shared by every context and request
_cache_backend: Optional[CacheBackend] = None
_quote_breaker: Optional[CircuitBreaker] = None
_simulator: Optional[MarketSimulator] = None


def get_cache_backend() -> CacheBackend:
    """Get or create the configured cache backend (Redis or in-memory)."""
    global _cache_backend
    if _cache_backend is None:
        settings = get_settings()
        if settings.redis_url:
            _cache_backend = RedisCache.from_url(settings.redis_url)
        else:
            _cache_backend = InMemoryCache()
    return _cache_backend


def get_quote_breaker() -> CircuitBreaker:
    """Get or create the circuit breaker guarding the quote pipeline."""
    global _quote_breaker
    if _quote_breaker is None:
        settings = get_settings()
        _quote_breaker = CircuitBreaker(
            name="quote-service",
            config=CircuitBreakerConfig(
                failure_rate_threshold=settings.breaker_failure_rate_threshold,
                window_size=settings.breaker_window_size,
                minimum_calls=settings.breaker_minimum_calls,
                open_cooldown_seconds=settings.breaker_open_cooldown_seconds,
            ),
            ignored_exceptions=(NotFoundError, ValidationError),
        )
    return _quote_breaker


def get_simulator() -> MarketSimulator:
    """Get or create the shared market simulator."""
    global _simulator
    if _simulator is None:
        seed = get_settings().simulation_seed
        _simulator = MarketSimulator(rng=random.Random(seed))
    return _simulator


def reset_shared_state() -> None:
    """Drop shared cache, breaker and simulator (for reconfiguration)."""
    global _cache_backend, _quote_breaker, _simulator
    _cache_backend = None
    _quote_breaker = None
    _simulator = None


class AppContext:
    """
    Services bound to a single database session.

    Use as a context manager so the session is closed when done:

        with AppContext() as ctx:
            ctx.market_data.get_quote("PETR4")
    """

    def __init__(
        self,
        session_factory: Callable[[], Session] = get_session,
        settings: Optional[Settings] = None,
        cache_backend: Optional[CacheBackend] = None,
        breaker: Optional[CircuitBreaker] = None,
        simulator: Optional[MarketSimulator] = None,
    ):
        self._session_factory = session_factory
        self._settings = settings or get_settings()
        self._cache_backend = cache_backend
        self._breaker = breaker
        self._simulator = simulator
        self._session: Optional[Session] = None

        # Service instances (lazy initialized)
        self._market_data: Optional[MarketDataService] = None
        self._indicators: Optional[IndicatorService] = None
        self._ledger: Optional[LedgerService] = None

    def __enter__(self) -> "AppContext":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _get_session(self) -> Session:
        """Get or create database session."""
        if self._session is None:
            self._session = self._session_factory()
        return self._session

    # Repository accessors
    @property
    def asset_repo(self) -> SqlAlchemyAssetRepository:
        return SqlAlchemyAssetRepository(self._get_session())

    @property
    def price_repo(self) -> SqlAlchemyPriceHistoryRepository:
        return SqlAlchemyPriceHistoryRepository(self._get_session())

    @property
    def transaction_repo(self) -> SqlAlchemyTransactionRepository:
        return SqlAlchemyTransactionRepository(self._get_session())

    @property
    def cache(self) -> SafeCache:
        return SafeCache(self._cache_backend or get_cache_backend())

    @property
    def simulator(self) -> MarketSimulator:
        return self._simulator or get_simulator()

    # Service accessors
    @property
    def market_data(self) -> MarketDataService:
        """Get the MarketDataService instance."""
        if self._market_data is None:
            self._market_data = MarketDataService(
                asset_repo=self.asset_repo,
                price_repo=self.price_repo,
                cache=self.cache,
                simulator=self.simulator,
                breaker=self._breaker or get_quote_breaker(),
                price_locks=get_price_locks(),
                quote_ttl_seconds=self._settings.quote_cache_ttl_seconds,
            )
        return self._market_data

    @property
    def indicators(self) -> IndicatorService:
        """Get the IndicatorService instance."""
        if self._indicators is None:
            self._indicators = IndicatorService(
                price_repo=self.price_repo,
                cache=self.cache,
                indicator_ttl_seconds=self._settings.indicator_cache_ttl_seconds,
                volatility_ttl_seconds=self._settings.volatility_cache_ttl_seconds,
            )
        return self._indicators

    @property
    def ledger(self) -> LedgerService:
        """Get the LedgerService instance."""
        if self._ledger is None:
            self._ledger = LedgerService(
                asset_repo=self.asset_repo,
                transaction_repo=self.transaction_repo,
            )
        return self._ledger

    def close(self) -> None:
        """Clean up resources."""
        if self._session:
            self._session.close()
            self._session = None
        self._market_data = None
        self._indicators = None
        self._ledger = None
