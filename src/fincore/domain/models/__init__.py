"""Domain models package."""

from fincore.domain.models.enums import TransactionType, QuoteSource, IndicatorKind
from fincore.domain.models.asset import Asset, PriceBar
from fincore.domain.models.transaction import Transaction

__all__ = [
    "TransactionType",
    "QuoteSource",
    "IndicatorKind",
    "Asset",
    "PriceBar",
    "Transaction",
]
