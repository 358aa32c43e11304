"""Indicator service: cached technical indicators per ticker."""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable, Sequence

from fincore.core.exceptions import ValidationError
from fincore.core.timezone import now_market
from fincore.domain.models import IndicatorKind, PriceBar
from fincore.domain.views import IndicatorResult
from fincore.repositories.cache import SafeCache
from fincore.repositories.protocols import PriceHistoryRepository
from fincore.services import indicators

logger = logging.getLogger(__name__)

DEFAULT_RSI_PERIODS = 14
DEFAULT_SMA_PERIODS = 20
DEFAULT_VOLATILITY_PERIODS = 30


def indicator_cache_key(kind: IndicatorKind, ticker: str, periods: int) -> str:
    return f"{kind.cache_prefix}:{ticker.upper()}:{periods}"


class IndicatorService:
    """
    Computes RSI, SMA and volatility from stored price history.

    Results are cached per (indicator, ticker, periods): RSI and SMA for
    indicator_ttl_seconds, volatility for volatility_ttl_seconds.
    """

    def __init__(
        self,
        price_repo: PriceHistoryRepository,
        cache: SafeCache,
        clock: Callable[[], datetime] = now_market,
        indicator_ttl_seconds: int = 300,
        volatility_ttl_seconds: int = 600,
    ):
        self._price_repo = price_repo
        self._cache = cache
        self._clock = clock
        self._indicator_ttl = indicator_ttl_seconds
        self._volatility_ttl = volatility_ttl_seconds

    def get_rsi(self, ticker: str, periods: int = DEFAULT_RSI_PERIODS) -> IndicatorResult:
        return self._compute(
            IndicatorKind.RSI,
            ticker,
            periods,
            bars_needed=periods + 1,
            calculate=indicators.calculate_rsi,
            interpret=indicators.interpret_rsi,
            ttl_seconds=self._indicator_ttl,
        )

    def get_sma(self, ticker: str, periods: int = DEFAULT_SMA_PERIODS) -> IndicatorResult:
        return self._compute(
            IndicatorKind.SMA,
            ticker,
            periods,
            bars_needed=periods,
            calculate=indicators.calculate_sma,
            interpret=lambda value: indicators.interpret_sma(periods),
            ttl_seconds=self._indicator_ttl,
        )

    def get_volatility(
        self,
        ticker: str,
        periods: int = DEFAULT_VOLATILITY_PERIODS,
    ) -> IndicatorResult:
        return self._compute(
            IndicatorKind.VOLATILITY,
            ticker,
            periods,
            bars_needed=periods,
            calculate=indicators.calculate_volatility,
            interpret=indicators.interpret_volatility,
            ttl_seconds=self._volatility_ttl,
        )

    def _compute(
        self,
        kind: IndicatorKind,
        ticker: str,
        periods: int,
        bars_needed: int,
        calculate: Callable[[Sequence[PriceBar], int], Decimal],
        interpret: Callable[[Decimal], str],
        ttl_seconds: int,
    ) -> IndicatorResult:
        ticker = (ticker or "").strip().upper()
        if not ticker:
            raise ValidationError("Ticker must not be empty")
        if periods < 1:
            raise ValidationError(f"periods must be >= 1, got {periods}")

        key = indicator_cache_key(kind, ticker, periods)
        cached = self._cache.get(key, IndicatorResult)
        if cached is not None:
            return cached

        bars = self._price_repo.find_latest(ticker, bars_needed)
        value = calculate(bars, periods)

        result = IndicatorResult(
            ticker=ticker,
            indicator=kind,
            value=value,
            periods=periods,
            interpretation=interpret(value),
            calculated_at=self._clock(),
        )
        self._cache.set(key, result, ttl_seconds)
        logger.debug(f"{kind.value}({periods}) for {ticker} = {value}")
        return result
