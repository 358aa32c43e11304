"""Market data service: quotes, price history and asset upkeep."""

import logging
import re
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable, Optional

from dateutil.relativedelta import relativedelta

from fincore.core.exceptions import (
    AssetNotFoundError,
    CircuitOpenError,
    NotFoundError,
    ValidationError,
)
from fincore.core.locks import TickerLockRegistry, get_price_locks
from fincore.core.timezone import now_market, is_market_hours
from fincore.domain.models import Asset, PriceBar
from fincore.domain.views import Quote
from fincore.providers.market_simulator import MarketSimulator
from fincore.repositories.cache import SafeCache
from fincore.repositories.protocols import AssetRepository, PriceHistoryRepository
from fincore.services.circuit_breaker import CircuitBreaker

logger = logging.getLogger(__name__)

DEFAULT_RANGE_DAYS = 30
_RANGE_PATTERN = re.compile(r"^(\d+)([dmy])$")


def quote_cache_key(ticker: str) -> str:
    return f"quote:{ticker.upper()}"


def parse_range(value: Optional[str], now: datetime) -> datetime:
    """
    Turn a range like "30d", "6m" or "1y" into its start time.

    d = days, m = calendar months, y = calendar years. Anything else,
    including zero-length ranges, falls back to 30 days.
    """
    match = _RANGE_PATTERN.match((value or "").strip().lower())
    if match and int(match.group(1)) > 0:
        amount, unit = int(match.group(1)), match.group(2)
        if unit == "d":
            return now - timedelta(days=amount)
        if unit == "m":
            return now - relativedelta(months=amount)
        return now - relativedelta(years=amount)

    logger.warning(f"Invalid range format: {value!r}, using default {DEFAULT_RANGE_DAYS} days")
    return now - timedelta(days=DEFAULT_RANGE_DAYS)


def _normalize_ticker(ticker: str) -> str:
    normalized = (ticker or "").strip().upper()
    if not normalized:
        raise ValidationError("Ticker must not be empty")
    return normalized


class MarketDataService:
    """
    Service for quotes, price history and asset price state.

    Quotes are read through the cache, then the store. During market hours
    a cache miss also applies one simulated tick to the asset. The whole
    quote pipeline runs under a circuit breaker; store trouble or an open
    circuit yields a FALLBACK quote instead of an error.
    """

    def __init__(
        self,
        asset_repo: AssetRepository,
        price_repo: PriceHistoryRepository,
        cache: SafeCache,
        simulator: MarketSimulator,
        breaker: CircuitBreaker,
        price_locks: Optional[TickerLockRegistry] = None,
        clock: Callable[[], datetime] = now_market,
        market_hours: Callable[[datetime], bool] = is_market_hours,
        quote_ttl_seconds: int = 30,
    ):
        self._asset_repo = asset_repo
        self._price_repo = price_repo
        self._cache = cache
        self._simulator = simulator
        self._breaker = breaker
        self._locks = price_locks or get_price_locks()
        self._clock = clock
        self._market_hours = market_hours
        self._quote_ttl = quote_ttl_seconds

    # Quotes

    def get_quote(self, ticker: str) -> Quote:
        """
        Return the current quote for a ticker.

        Raises AssetNotFoundError for unknown tickers; every other failure
        degrades to a fallback quote.
        """
        ticker = _normalize_ticker(ticker)
        try:
            return self._breaker.call(self._load_quote, ticker)
        except NotFoundError:
            raise
        except CircuitOpenError:
            logger.warning(f"Circuit open, serving fallback quote for {ticker}")
            return Quote.fallback(ticker, self._clock())
        except Exception:
            logger.warning(f"Quote pipeline failed for {ticker}, using fallback", exc_info=True)
            return Quote.fallback(ticker, self._clock())

    def _load_quote(self, ticker: str) -> Quote:
        key = quote_cache_key(ticker)
        cached = self._cache.get(key, Quote)
        if cached is not None:
            logger.debug(f"Quote retrieved from cache for {ticker}")
            return cached

        asset = self._asset_repo.find_by_ticker(ticker)
        if asset is None:
            raise AssetNotFoundError(ticker)

        if self._market_hours(self._clock()):
            asset, _ = self.apply_tick(ticker)

        quote = Quote.from_asset(asset)
        self._cache.set(key, quote, self._quote_ttl)
        return quote

    def apply_tick(self, ticker: str) -> tuple[Asset, PriceBar]:
        """
        Move an asset's price by one simulated tick and persist it.

        The asset is re-read under the ticker's price lock, so concurrent
        ticks on the same asset serialize and previous_close always holds
        the price the preceding tick left behind.
        """
        with self._locks.hold(ticker):
            asset = self._asset_repo.find_by_ticker(ticker)
            if asset is None:
                raise AssetNotFoundError(ticker)
            bar = self._simulator.tick(asset)
            saved = self._asset_repo.upsert(asset)
            self._price_repo.append(bar)
        return saved, bar

    # History

    def get_history(self, ticker: str, range_str: Optional[str] = "30d") -> list[PriceBar]:
        """Bars inside the requested range, most recent first."""
        ticker = _normalize_ticker(ticker)
        from_time = parse_range(range_str, self._clock())
        return self._price_repo.find_since(ticker, from_time)

    # Assets

    def get_asset(self, ticker: str) -> Asset:
        ticker = _normalize_ticker(ticker)
        asset = self._asset_repo.find_by_ticker(ticker)
        if asset is None:
            raise AssetNotFoundError(ticker)
        return asset

    def list_active_assets(self) -> list[Asset]:
        return self._asset_repo.list_active()

    def upsert_asset(
        self,
        ticker: str,
        name: str,
        category: str,
        price: Decimal,
    ) -> Asset:
        """
        Create an asset, or roll an existing one to a new price.

        An existing asset keeps its pre-update price as previous_close.
        """
        ticker = _normalize_ticker(ticker)
        if price is None or price <= 0:
            raise ValidationError("Asset price must be > 0")

        with self._locks.hold(ticker):
            now = self._clock()
            existing = self._asset_repo.find_by_ticker(ticker)
            if existing:
                existing.previous_close = existing.current_price
                existing.current_price = price
                existing.last_updated = now
                asset = existing
            else:
                asset = Asset(
                    ticker=ticker,
                    name=name,
                    category=category,
                    current_price=price,
                    previous_close=price,
                    last_updated=now,
                    active=True,
                )
            saved = self._asset_repo.upsert(asset)

        logger.info(f"Asset upserted: {ticker} @ {price}")
        return saved

    def deactivate_asset(self, ticker: str) -> Asset:
        """Mark an asset inactive; it stays queryable but stops ticking."""
        ticker = _normalize_ticker(ticker)
        with self._locks.hold(ticker):
            asset = self._asset_repo.find_by_ticker(ticker)
            if asset is None:
                raise AssetNotFoundError(ticker)
            asset.active = False
            saved = self._asset_repo.upsert(asset)
        logger.info(f"Asset deactivated: {ticker}")
        return saved
