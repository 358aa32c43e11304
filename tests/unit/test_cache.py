"""
Unit tests for cache backends and the SafeCache facade.

Tests cover:
- InMemoryCache expiry on its clock
- RedisCache delegation to the client (mocked)
- SafeCache round trip of quotes and indicator results
- SafeCache swallowing backend and decode errors
"""

from decimal import Decimal
from unittest.mock import MagicMock

from fincore.domain.models import IndicatorKind, QuoteSource
from fincore.domain.views import IndicatorResult, Quote
from fincore.repositories.cache import InMemoryCache, RedisCache, SafeCache


def _quote(fixed_now) -> Quote:
    return Quote(
        ticker="PETR4",
        name="Petrobras PN",
        category="STOCKS",
        current_price=Decimal("25.75"),
        previous_close=Decimal("25.50"),
        price_change=Decimal("0.25"),
        price_change_percent=Decimal("0.98"),
        last_updated=fixed_now,
    )


# =============================================================================
# IN-MEMORY BACKEND TESTS
# =============================================================================


class TestInMemoryCache:
    """Tests for InMemoryCache."""

    def test_get_before_expiry(self, memory_cache, fake_clock):
        memory_cache.set("k", b"v", 30)
        fake_clock.advance(29)

        assert memory_cache.get("k") == b"v"

    def test_expires_at_ttl(self, memory_cache, fake_clock):
        memory_cache.set("k", b"v", 30)
        fake_clock.advance(30)

        assert memory_cache.get("k") is None

    def test_missing_key(self, memory_cache):
        assert memory_cache.get("nope") is None

    def test_delete_and_clear(self, memory_cache):
        memory_cache.set("a", b"1", 30)
        memory_cache.set("b", b"2", 30)

        memory_cache.delete("a")
        assert memory_cache.get("a") is None
        assert memory_cache.get("b") == b"2"

        memory_cache.clear()
        assert memory_cache.get("b") is None


# =============================================================================
# REDIS BACKEND TESTS
# =============================================================================


class TestRedisCache:
    """Tests for RedisCache against a mocked client."""

    def test_set_uses_setex(self):
        client = MagicMock()
        cache = RedisCache(client)

        cache.set("quote:PETR4", b"{}", 30)

        client.setex.assert_called_once_with("quote:PETR4", 30, b"{}")

    def test_get_and_delete_delegate(self):
        client = MagicMock()
        client.get.return_value = b"payload"
        cache = RedisCache(client)

        assert cache.get("k") == b"payload"
        cache.delete("k")

        client.get.assert_called_once_with("k")
        client.delete.assert_called_once_with("k")


# =============================================================================
# SAFE CACHE TESTS
# =============================================================================


class TestSafeCache:
    """Tests for SafeCache."""

    def test_quote_round_trip(self, safe_cache, fixed_now):
        """
        GIVEN a quote stored through SafeCache
        WHEN it is read back
        THEN every field, including the aware timestamp, survives
        """
        quote = _quote(fixed_now)

        safe_cache.set("quote:PETR4", quote, 30)
        cached = safe_cache.get("quote:PETR4", Quote)

        assert cached == quote
        assert cached.source == QuoteSource.STORE

    def test_indicator_round_trip(self, safe_cache, fixed_now):
        result = IndicatorResult(
            ticker="VALE3",
            indicator=IndicatorKind.RSI,
            value=Decimal("66.67"),
            periods=14,
            interpretation="NEUTRAL - No strong signal",
            calculated_at=fixed_now,
        )

        safe_cache.set("rsi:VALE3:14", result, 300)

        assert safe_cache.get("rsi:VALE3:14", IndicatorResult) == result

    def test_miss_returns_none(self, safe_cache):
        assert safe_cache.get("quote:NONE", Quote) is None

    def test_backend_get_error_is_a_miss(self):
        """
        GIVEN a backend whose GET raises
        WHEN SafeCache.get is called
        THEN None is returned instead of an exception
        """
        backend = MagicMock()
        backend.get.side_effect = ConnectionError("redis down")

        assert SafeCache(backend).get("quote:PETR4", Quote) is None

    def test_backend_set_error_is_swallowed(self, fixed_now):
        backend = MagicMock()
        backend.set.side_effect = ConnectionError("redis down")

        SafeCache(backend).set("quote:PETR4", _quote(fixed_now), 30)

        backend.set.assert_called_once()

    def test_corrupt_entry_is_a_miss(self, memory_cache):
        memory_cache.set("quote:PETR4", b"not json", 30)

        assert SafeCache(memory_cache).get("quote:PETR4", Quote) is None
