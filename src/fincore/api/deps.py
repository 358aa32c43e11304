"""Dependency injection for FastAPI."""

from fastapi import Depends
from sqlalchemy.orm import Session

from fincore.app_context import get_cache_backend, get_quote_breaker, get_simulator
from fincore.config.settings import get_settings
from fincore.core.locks import get_price_locks
from fincore.providers.market_simulator import MarketSimulator
from fincore.repositories.cache import SafeCache
from fincore.repositories.protocols import CacheBackend
from fincore.repositories.sqlalchemy.database import get_db
from fincore.repositories.sqlalchemy import (
    SqlAlchemyAssetRepository,
    SqlAlchemyPriceHistoryRepository,
    SqlAlchemyTransactionRepository,
)
from fincore.services import (
    CircuitBreaker,
    IndicatorService,
    LedgerService,
    MarketDataService,
)


def get_asset_repo(db: Session = Depends(get_db)) -> SqlAlchemyAssetRepository:
    """Provide AssetRepository instance."""
    return SqlAlchemyAssetRepository(db)


def get_price_repo(db: Session = Depends(get_db)) -> SqlAlchemyPriceHistoryRepository:
    """Provide PriceHistoryRepository instance."""
    return SqlAlchemyPriceHistoryRepository(db)


def get_transaction_repo(db: Session = Depends(get_db)) -> SqlAlchemyTransactionRepository:
    """Provide TransactionRepository instance."""
    return SqlAlchemyTransactionRepository(db)


def get_cache(backend: CacheBackend = Depends(get_cache_backend)) -> SafeCache:
    """Provide the best-effort cache over the shared backend."""
    return SafeCache(backend)


def get_market_data_service(
    asset_repo: SqlAlchemyAssetRepository = Depends(get_asset_repo),
    price_repo: SqlAlchemyPriceHistoryRepository = Depends(get_price_repo),
    cache: SafeCache = Depends(get_cache),
    simulator: MarketSimulator = Depends(get_simulator),
    breaker: CircuitBreaker = Depends(get_quote_breaker),
) -> MarketDataService:
    """Provide MarketDataService instance."""
    settings = get_settings()
    return MarketDataService(
        asset_repo=asset_repo,
        price_repo=price_repo,
        cache=cache,
        simulator=simulator,
        breaker=breaker,
        price_locks=get_price_locks(),
        quote_ttl_seconds=settings.quote_cache_ttl_seconds,
    )


def get_indicator_service(
    price_repo: SqlAlchemyPriceHistoryRepository = Depends(get_price_repo),
    cache: SafeCache = Depends(get_cache),
) -> IndicatorService:
    """Provide IndicatorService instance."""
    settings = get_settings()
    return IndicatorService(
        price_repo=price_repo,
        cache=cache,
        indicator_ttl_seconds=settings.indicator_cache_ttl_seconds,
        volatility_ttl_seconds=settings.volatility_cache_ttl_seconds,
    )


def get_ledger_service(
    asset_repo: SqlAlchemyAssetRepository = Depends(get_asset_repo),
    transaction_repo: SqlAlchemyTransactionRepository = Depends(get_transaction_repo),
) -> LedgerService:
    """Provide LedgerService instance."""
    return LedgerService(
        asset_repo=asset_repo,
        transaction_repo=transaction_repo,
    )
