"""View models for quotes, indicators and ledger reports."""

import math
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Generic, Optional, TypeVar

from fincore.domain.models import Asset, IndicatorKind, QuoteSource

T = TypeVar("T")

FALLBACK_PRICE = Decimal("100.00")


@dataclass
class Quote:
    """Point-in-time quote for a ticker, tagged with its provenance."""

    ticker: str
    name: str
    category: str
    current_price: Decimal
    previous_close: Decimal
    price_change: Decimal
    price_change_percent: Decimal
    last_updated: datetime
    source: QuoteSource = QuoteSource.STORE

    def __post_init__(self) -> None:
        if isinstance(self.source, str):
            self.source = QuoteSource(self.source)

    @classmethod
    def from_asset(cls, asset: Asset, source: QuoteSource = QuoteSource.STORE) -> "Quote":
        """Build a quote from the asset's current price state."""
        return cls(
            ticker=asset.ticker,
            name=asset.name,
            category=asset.category,
            current_price=asset.current_price,
            previous_close=asset.previous_close,
            price_change=asset.price_change,
            price_change_percent=asset.price_change_percent,
            last_updated=asset.last_updated,
            source=source,
        )

    @classmethod
    def fallback(cls, ticker: str, as_of: datetime) -> "Quote":
        """Degraded-mode quote served when the store is unreachable."""
        return cls(
            ticker=ticker.upper(),
            name="Unknown Asset",
            category="UNKNOWN",
            current_price=FALLBACK_PRICE,
            previous_close=FALLBACK_PRICE,
            price_change=Decimal("0"),
            price_change_percent=Decimal("0"),
            last_updated=as_of,
            source=QuoteSource.FALLBACK,
        )


@dataclass
class IndicatorResult:
    """Computed technical indicator value for a ticker."""

    ticker: str
    indicator: IndicatorKind
    value: Decimal
    periods: int
    interpretation: str
    calculated_at: datetime

    def __post_init__(self) -> None:
        if isinstance(self.indicator, str):
            self.indicator = IndicatorKind(self.indicator)


@dataclass
class TransactionReport:
    """Aggregate buy/sell totals and net positions for one user."""

    user_id: str
    total_transactions: int
    total_buy_transactions: int
    total_sell_transactions: int
    total_amount_bought: Decimal
    total_amount_sold: Decimal
    net_amount: Decimal
    current_positions: dict[str, Decimal] = field(default_factory=dict)
    generated_at: Optional[datetime] = None


@dataclass
class Page(Generic[T]):
    """One page of an ordered result set (0-based page index)."""

    items: list[T]
    page: int
    size: int
    total_items: int

    @property
    def total_pages(self) -> int:
        if self.size <= 0:
            return 0
        return math.ceil(self.total_items / self.size)
