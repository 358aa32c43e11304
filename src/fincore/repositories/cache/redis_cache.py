"""Redis-backed cache."""

import logging
from typing import Optional

import redis

logger = logging.getLogger(__name__)


class RedisCache:
    """Cache backend storing raw bytes in Redis with SETEX expiry."""

    def __init__(self, client: redis.Redis):
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisCache":
        """Create a cache on a pooled client for the given Redis URL."""
        client = redis.Redis.from_url(
            url,
            decode_responses=False,
            socket_timeout=1.0,
            socket_connect_timeout=1.0,
        )
        logger.info(f"Redis cache configured: {url}")
        return cls(client)

    def get(self, key: str) -> Optional[bytes]:
        return self._client.get(key)

    def set(self, key: str, value: bytes, ttl_seconds: int) -> None:
        self._client.setex(key, ttl_seconds, value)

    def delete(self, key: str) -> None:
        self._client.delete(key)
