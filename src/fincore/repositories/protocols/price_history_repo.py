"""Price history repository protocol."""

from datetime import datetime
from typing import Protocol

from fincore.domain.models import PriceBar


class PriceHistoryRepository(Protocol):
    """Interface for append-only OHLCV bar storage."""

    def append(self, bar: PriceBar) -> PriceBar:
        """Persist one bar."""
        ...

    def append_many(self, bars: list[PriceBar]) -> int:
        """Persist bars in the given order; returns number written."""
        ...

    def find_since(self, ticker: str, from_time: datetime) -> list[PriceBar]:
        """Bars with timestamp >= from_time, most recent first."""
        ...

    def find_latest(self, ticker: str, limit: int) -> list[PriceBar]:
        """The latest `limit` bars, most recent first."""
        ...
