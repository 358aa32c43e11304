"""Repository layer - data access abstractions and implementations."""

from fincore.repositories.protocols import (
    AssetRepository,
    PriceHistoryRepository,
    TransactionRepository,
    CacheBackend,
)

__all__ = [
    "AssetRepository",
    "PriceHistoryRepository",
    "TransactionRepository",
    "CacheBackend",
]
