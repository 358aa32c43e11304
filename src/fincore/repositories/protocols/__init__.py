"""Repository protocol definitions (interfaces)."""

from fincore.repositories.protocols.asset_repo import AssetRepository
from fincore.repositories.protocols.price_history_repo import PriceHistoryRepository
from fincore.repositories.protocols.transaction_repo import TransactionRepository
from fincore.repositories.protocols.cache_backend import CacheBackend

__all__ = [
    "AssetRepository",
    "PriceHistoryRepository",
    "TransactionRepository",
    "CacheBackend",
]
