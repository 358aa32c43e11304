"""Per-ticker mutual exclusion for asset price updates."""

import threading
from contextlib import contextmanager
from typing import Iterator


class TickerLockRegistry:
    """
    Hands out one lock per ticker.

    Every read-modify-write of an asset's current_price/previous_close must
    run inside hold(ticker) so concurrent tickers (scheduler, request path)
    cannot interleave and lose updates.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def _lock_for(self, ticker: str) -> threading.Lock:
        key = ticker.upper()
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def hold(self, ticker: str) -> Iterator[None]:
        """Acquire the ticker's lock for the duration of the block."""
        lock = self._lock_for(ticker)
        lock.acquire()
        try:
            yield
        finally:
            lock.release()


# Process-wide registry shared by the request path and the scheduler
_price_locks = TickerLockRegistry()


def get_price_locks() -> TickerLockRegistry:
    """Return the shared ticker lock registry."""
    return _price_locks
