"""Cache backend implementations."""

from fincore.repositories.cache.memory_cache import InMemoryCache
from fincore.repositories.cache.redis_cache import RedisCache
from fincore.repositories.cache.safe_cache import SafeCache

__all__ = [
    "InMemoryCache",
    "RedisCache",
    "SafeCache",
]
