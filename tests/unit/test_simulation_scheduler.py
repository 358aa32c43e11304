"""
Unit tests for the market simulation scheduler.

Tests cover:
- Seeding the sample universe only into an empty store
- Backfilling assets that have no history
- Tick cycles over active assets, surviving per-asset failures
- Daemon thread start/stop
"""

import time
import pytest
from decimal import Decimal
from unittest.mock import MagicMock

from sqlalchemy.orm import sessionmaker

from fincore.app_context import AppContext
from fincore.domain.models import Asset
from fincore.services import SimulationScheduler
from fincore.services.simulation_scheduler import (
    SAMPLE_ASSETS,
    backfill_missing_history,
    tick_active_assets,
)


@pytest.fixture
def context_factory(test_engine, memory_cache, breaker, simulator):
    """Build AppContexts bound to the test database."""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

    def _factory() -> AppContext:
        return AppContext(
            session_factory=TestSessionLocal,
            cache_backend=memory_cache,
            breaker=breaker,
            simulator=simulator,
        )

    return _factory


@pytest.fixture
def scheduler(context_factory) -> SimulationScheduler:
    return SimulationScheduler(context_factory, interval_seconds=0.05, backfill_days=10)


# =============================================================================
# SEEDING TESTS
# =============================================================================


class TestSeedSampleAssets:
    """Tests for seeding the sample universe."""

    def test_seeds_empty_store(self, scheduler, asset_repo):
        """
        GIVEN an empty asset table
        WHEN sample assets are seeded
        THEN all ten sample assets exist at their starting prices
        """
        created = scheduler.seed_sample_assets()

        assert created == 10
        assert asset_repo.count() == 10
        btc = asset_repo.find_by_ticker("BTC")
        assert btc.current_price == Decimal("43250.00")
        assert btc.category == "CRYPTO"
        assert asset_repo.find_by_ticker("ADA").current_price == Decimal("0.45")

    def test_skips_when_assets_exist(self, scheduler, sample_asset, asset_repo):
        assert scheduler.seed_sample_assets() == 0
        assert asset_repo.count() == 1

    def test_sample_universe(self):
        categories = {s.category for s in SAMPLE_ASSETS}
        assert categories == {"STOCKS", "CRYPTO", "INDEX"}
        assert len({s.ticker for s in SAMPLE_ASSETS}) == 10


# =============================================================================
# BACKFILL TESTS
# =============================================================================


class TestBackfillMissingHistory:
    """Tests for backfill_missing_history."""

    def test_backfills_only_assets_without_history(
        self,
        scheduler,
        asset_factory,
        history_factory,
        price_repo,
    ):
        """
        GIVEN PETR4 with one bar and VALE3 with none
        WHEN missing history is backfilled for 10 days
        THEN only VALE3 gains 11 bars
        """
        asset_factory("PETR4")
        asset_factory("VALE3", price=Decimal("65.80"))
        history_factory("PETR4", ["25.50"])

        backfilled = scheduler.backfill_missing_history()

        assert backfilled == 1
        assert len(price_repo.find_latest("PETR4", 100)) == 1
        assert len(price_repo.find_latest("VALE3", 100)) == 11

    def test_inactive_assets_skipped(self, scheduler, asset_factory, price_repo):
        asset_factory("PETR4", active=False)

        assert scheduler.backfill_missing_history(days=5) == 0
        assert price_repo.find_latest("PETR4", 10) == []

    def test_second_run_is_noop(self, asset_factory, asset_repo, price_repo, simulator):
        asset_factory("PETR4")

        assert backfill_missing_history(asset_repo, price_repo, simulator, 3) == 1
        assert backfill_missing_history(asset_repo, price_repo, simulator, 3) == 0

    def test_initialize_seeds_and_backfills(self, scheduler, asset_repo, price_repo):
        scheduler.initialize()

        assert asset_repo.count() == 10
        for sample in SAMPLE_ASSETS:
            assert len(price_repo.find_latest(sample.ticker, 100)) == 11


# =============================================================================
# TICK CYCLE TESTS
# =============================================================================


class TestTickCycle:
    """Tests for run_tick_cycle."""

    def test_ticks_every_active_asset(self, scheduler, asset_factory, asset_repo, price_repo):
        asset_factory("PETR4")
        asset_factory("VALE3", price=Decimal("65.80"))
        asset_factory("ITUB4", price=Decimal("22.30"), active=False)

        ticked = scheduler.run_tick_cycle()

        assert ticked == 2
        assert len(price_repo.find_latest("PETR4", 10)) == 1
        assert len(price_repo.find_latest("VALE3", 10)) == 1
        assert price_repo.find_latest("ITUB4", 10) == []
        assert asset_repo.find_by_ticker("PETR4").previous_close == Decimal("25.50")

    def test_failure_on_one_asset_does_not_stop_cycle(self, fixed_fixture_assets):
        """
        GIVEN apply_tick fails for the first of three assets
        WHEN a tick cycle runs
        THEN the other two are still ticked
        """
        asset_repo, market_data = fixed_fixture_assets
        market_data.apply_tick.side_effect = [RuntimeError("lock timeout"), None, None]

        assert tick_active_assets(asset_repo, market_data) == 2
        assert market_data.apply_tick.call_count == 3


@pytest.fixture
def fixed_fixture_assets(fixed_now):
    asset_repo = MagicMock()
    asset_repo.list_active.return_value = [
        Asset(t, t, "STOCKS", Decimal("10"), Decimal("10"), fixed_now)
        for t in ("AAA", "BBB", "CCC")
    ]
    return asset_repo, MagicMock()


# =============================================================================
# THREAD LIFECYCLE TESTS
# =============================================================================


class TestSchedulerThread:
    """Tests for start/stop."""

    @pytest.fixture
    def stubbed_scheduler(self) -> SimulationScheduler:
        scheduler = SimulationScheduler(MagicMock(), interval_seconds=0.01)
        scheduler.initialize = MagicMock()
        scheduler.run_tick_cycle = MagicMock(return_value=0)
        return scheduler

    def test_start_initializes_then_ticks(self, stubbed_scheduler):
        """
        GIVEN a started scheduler
        WHEN a few intervals pass
        THEN initialize ran once and tick cycles keep running until stop
        """
        stubbed_scheduler.start()
        try:
            deadline = time.monotonic() + 5
            while stubbed_scheduler.run_tick_cycle.call_count < 2 and time.monotonic() < deadline:
                time.sleep(0.01)
            assert stubbed_scheduler.running
        finally:
            stubbed_scheduler.stop()

        assert not stubbed_scheduler.running
        stubbed_scheduler.initialize.assert_called_once()
        assert stubbed_scheduler.run_tick_cycle.call_count >= 2

    def test_failing_cycle_keeps_thread_alive(self, stubbed_scheduler):
        stubbed_scheduler.initialize.side_effect = RuntimeError("db not ready")
        stubbed_scheduler.run_tick_cycle.side_effect = RuntimeError("boom")

        stubbed_scheduler.start()
        try:
            deadline = time.monotonic() + 5
            while stubbed_scheduler.run_tick_cycle.call_count < 2 and time.monotonic() < deadline:
                time.sleep(0.01)
            assert stubbed_scheduler.running
        finally:
            stubbed_scheduler.stop()

    def test_start_twice_keeps_one_thread(self, stubbed_scheduler):
        stubbed_scheduler.start()
        try:
            first = stubbed_scheduler._thread
            stubbed_scheduler.start()
            assert stubbed_scheduler._thread is first
        finally:
            stubbed_scheduler.stop()
