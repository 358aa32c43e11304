"""Background market simulation: seeding, backfill and periodic ticks."""

import logging
import threading
from decimal import Decimal
from typing import Callable, ContextManager, NamedTuple, Optional, Protocol

from fincore.providers.market_simulator import DEFAULT_BACKFILL_DAYS, MarketSimulator
from fincore.repositories.protocols import AssetRepository, PriceHistoryRepository
from fincore.services.market_data_service import MarketDataService

logger = logging.getLogger(__name__)


class SampleAsset(NamedTuple):
    ticker: str
    name: str
    category: str
    price: Decimal


SAMPLE_ASSETS: tuple[SampleAsset, ...] = (
    SampleAsset("PETR4", "Petrobras PN", "STOCKS", Decimal("25.50")),
    SampleAsset("VALE3", "Vale ON", "STOCKS", Decimal("65.80")),
    SampleAsset("ITUB4", "Itau Unibanco PN", "STOCKS", Decimal("22.30")),
    SampleAsset("BBDC4", "Bradesco PN", "STOCKS", Decimal("18.90")),
    SampleAsset("WEGE3", "WEG ON", "STOCKS", Decimal("45.20")),
    SampleAsset("BTC", "Bitcoin", "CRYPTO", Decimal("43250.00")),
    SampleAsset("ETH", "Ethereum", "CRYPTO", Decimal("2680.50")),
    SampleAsset("ADA", "Cardano", "CRYPTO", Decimal("0.45")),
    SampleAsset("IBOV", "Ibovespa", "INDEX", Decimal("125800.00")),
    SampleAsset("IFIX", "Indice de Fundos Imobiliarios", "INDEX", Decimal("2850.00")),
)


class SimulationContext(Protocol):
    """What the scheduler needs from a unit of work (see AppContext)."""

    @property
    def asset_repo(self) -> AssetRepository: ...

    @property
    def price_repo(self) -> PriceHistoryRepository: ...

    @property
    def simulator(self) -> MarketSimulator: ...

    @property
    def market_data(self) -> MarketDataService: ...


def seed_sample_assets(
    asset_repo: AssetRepository,
    market_data: MarketDataService,
) -> int:
    """Create the sample universe if the asset table is empty."""
    if asset_repo.count() > 0:
        logger.debug("Assets already present, skipping sample seed")
        return 0

    for sample in SAMPLE_ASSETS:
        market_data.upsert_asset(sample.ticker, sample.name, sample.category, sample.price)
    logger.info(f"Seeded {len(SAMPLE_ASSETS)} sample assets")
    return len(SAMPLE_ASSETS)


def backfill_missing_history(
    asset_repo: AssetRepository,
    price_repo: PriceHistoryRepository,
    simulator: MarketSimulator,
    days: int = DEFAULT_BACKFILL_DAYS,
) -> int:
    """
    Generate daily history for every active asset that has none.

    Returns the number of assets backfilled. Assets with at least one
    stored bar are left untouched.
    """
    backfilled = 0
    for asset in asset_repo.list_active():
        if price_repo.find_latest(asset.ticker, 1):
            continue
        bars = simulator.backfill(asset, days)
        price_repo.append_many(bars)
        backfilled += 1
        logger.info(f"Backfilled {len(bars)} bars for {asset.ticker}")
    return backfilled


def tick_active_assets(
    asset_repo: AssetRepository,
    market_data: MarketDataService,
) -> int:
    """
    Apply one tick to every active asset.

    A failure on one asset is logged and the cycle moves on. Returns the
    number of assets ticked.
    """
    ticked = 0
    for asset in asset_repo.list_active():
        try:
            market_data.apply_tick(asset.ticker)
            ticked += 1
        except Exception:
            logger.error(f"Tick failed for {asset.ticker}", exc_info=True)
    logger.debug(f"Tick cycle updated {ticked} assets")
    return ticked


class SimulationScheduler:
    """
    Runs the market simulation on a daemon thread.

    On start it seeds sample assets and backfills missing history, then
    ticks every active asset each interval_seconds. Each cycle works on a
    fresh context from context_factory, so no database session outlives
    a cycle.
    """

    def __init__(
        self,
        context_factory: Callable[[], ContextManager[SimulationContext]],
        interval_seconds: float = 30.0,
        backfill_days: int = DEFAULT_BACKFILL_DAYS,
    ):
        self._context_factory = context_factory
        self._interval = interval_seconds
        self._backfill_days = backfill_days
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def seed_sample_assets(self) -> int:
        with self._context_factory() as ctx:
            return seed_sample_assets(ctx.asset_repo, ctx.market_data)

    def backfill_missing_history(self, days: Optional[int] = None) -> int:
        days = self._backfill_days if days is None else days
        with self._context_factory() as ctx:
            return backfill_missing_history(ctx.asset_repo, ctx.price_repo, ctx.simulator, days)

    def initialize(self) -> None:
        """Seed sample assets and backfill history."""
        self.seed_sample_assets()
        self.backfill_missing_history()

    def run_tick_cycle(self) -> int:
        """Tick all active assets once."""
        with self._context_factory() as ctx:
            return tick_active_assets(ctx.asset_repo, ctx.market_data)

    def start(self) -> None:
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run, name="market-simulation", daemon=True
        )
        self._thread.start()
        logger.info(f"Market simulation started (interval {self._interval}s)")

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info("Market simulation stopped")

    def _run(self) -> None:
        try:
            self.initialize()
        except Exception:
            logger.error("Market simulation initialization failed", exc_info=True)

        while not self._stop_event.wait(self._interval):
            try:
                self.run_tick_cycle()
            except Exception:
                logger.error("Tick cycle failed", exc_info=True)
