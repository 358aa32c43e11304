"""Domain layer - pure business models with no external dependencies."""

from fincore.domain.models import (
    Asset,
    PriceBar,
    Transaction,
    TransactionType,
    QuoteSource,
    IndicatorKind,
)

__all__ = [
    "Asset",
    "PriceBar",
    "Transaction",
    "TransactionType",
    "QuoteSource",
    "IndicatorKind",
]
