"""Asset and price bar domain models."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from fincore.core.numeric import round4


@dataclass
class Asset:
    """
    Tradable instrument with its latest simulated or fed price.

    Assets are never deleted, only deactivated. current_price and
    previous_close are mutated by price ticks and by asset upserts.
    """

    ticker: str
    name: str
    category: str
    current_price: Decimal
    previous_close: Decimal
    last_updated: datetime
    active: bool = True

    def __post_init__(self) -> None:
        self.ticker = self.ticker.upper()

    @property
    def price_change(self) -> Decimal:
        """Absolute change versus previous close."""
        return self.current_price - self.previous_close

    @property
    def price_change_percent(self) -> Decimal:
        """
        Percentage change versus previous close.

        The ratio is rounded to 4 places before scaling, so the result
        carries at most 2 fractional percentage digits.
        """
        if self.previous_close == 0:
            return Decimal("0")
        return round4(self.price_change / self.previous_close) * 100


@dataclass
class PriceBar:
    """
    One OHLCV bar of price history.

    Append-only. Invariant: high >= max(open, close), low <= min(open, close).
    """

    ticker: str
    open: Decimal
    high: Decimal
    low: Decimal
    close: Decimal
    volume: int
    timestamp: datetime
    bar_id: Optional[int] = field(default=None)

    @property
    def is_consistent(self) -> bool:
        """Return True if high/low bracket open and close."""
        return (
            self.high >= max(self.open, self.close)
            and self.low <= min(self.open, self.close)
        )
