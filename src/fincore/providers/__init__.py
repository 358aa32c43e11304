"""Market data providers module."""

from fincore.providers.market_simulator import MarketSimulator, ensure_consistent

__all__ = [
    "MarketSimulator",
    "ensure_consistent",
]
