"""Best-effort cache facade used by the service layer."""

import logging
from typing import Optional, Type, TypeVar, Union

from fincore.domain import serialization
from fincore.domain.views import Quote, IndicatorResult
from fincore.repositories.protocols import CacheBackend

logger = logging.getLogger(__name__)

V = TypeVar("V", Quote, IndicatorResult)


class SafeCache:
    """
    Wraps a CacheBackend so that cache trouble never fails a caller.

    Backend errors and undecodable payloads are logged and reported as a
    miss; failed writes are logged and dropped.
    """

    def __init__(self, backend: CacheBackend):
        self._backend = backend

    def get(self, key: str, cls: Type[V]) -> Optional[V]:
        try:
            raw = self._backend.get(key)
        except Exception as e:
            logger.warning(f"Cache GET failed for {key}: {e}")
            return None
        if raw is None:
            return None
        try:
            value = serialization.from_bytes(cls, raw)
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Discarding undecodable cache entry {key}: {e}")
            return None
        logger.debug(f"Cache hit: {key}")
        return value

    def set(self, key: str, value: Union[Quote, IndicatorResult], ttl_seconds: int) -> None:
        try:
            self._backend.set(key, serialization.to_bytes(value), ttl_seconds)
        except Exception as e:
            logger.warning(f"Cache SET failed for {key}: {e}")
