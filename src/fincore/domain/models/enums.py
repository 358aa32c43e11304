"""Enumerations for domain models."""

from enum import Enum


class TransactionType(str, Enum):
    """Types of ledger transactions."""

    BUY = "BUY"
    SELL = "SELL"


class QuoteSource(str, Enum):
    """Provenance of a quote."""

    STORE = "STORE"
    FALLBACK = "FALLBACK"


class IndicatorKind(str, Enum):
    """Technical indicators computed over price history."""

    RSI = "RSI"
    SMA = "SMA"
    VOLATILITY = "VOLATILITY"

    @property
    def cache_prefix(self) -> str:
        return self.value.lower()
