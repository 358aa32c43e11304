"""Key-value cache protocol."""

from typing import Protocol, Optional


class CacheBackend(Protocol):
    """
    Interface for a TTL key-value cache.

    Implementations may raise on transport errors; callers wrap them in
    SafeCache, which treats every failure as a miss.
    """

    def get(self, key: str) -> Optional[bytes]:
        """Return the stored value, or None if absent or expired."""
        ...

    def set(self, key: str, value: bytes, ttl_seconds: int) -> None:
        """Store a value that expires after ttl_seconds."""
        ...

    def delete(self, key: str) -> None:
        """Remove a key if present."""
        ...
