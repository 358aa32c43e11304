"""Core utilities and shared functionality."""

from fincore.core.timezone import (
    market_tz,
    now_market,
    to_market,
    to_naive_market,
    is_market_hours,
)
from fincore.core.exceptions import (
    AppError,
    ValidationError,
    NotFoundError,
    AssetNotFoundError,
    UpstreamUnavailableError,
    CircuitOpenError,
)
from fincore.core.numeric import round2, round4
from fincore.core.locks import TickerLockRegistry, get_price_locks

__all__ = [
    "market_tz",
    "now_market",
    "to_market",
    "to_naive_market",
    "is_market_hours",
    "AppError",
    "ValidationError",
    "NotFoundError",
    "AssetNotFoundError",
    "UpstreamUnavailableError",
    "CircuitOpenError",
    "round2",
    "round4",
    "TickerLockRegistry",
    "get_price_locks",
]
