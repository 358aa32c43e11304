"""Synthetic market data for assets without a live feed."""

import logging
import random
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable, Optional

from fincore.core.numeric import round2, to_decimal
from fincore.core.timezone import now_market
from fincore.domain.models import Asset, PriceBar

logger = logging.getLogger(__name__)

# Smallest representable price; keeps simulated prices strictly positive
MIN_PRICE = Decimal("0.01")

TICK_MAX_VARIATION = 0.02  # total band width: -1% to +1%
TICK_VOLUME_BASE = 50_000
TICK_VOLUME_SPREAD = 500_000

DAILY_MAX_VARIATION = 0.05  # -2.5% to +2.5%
DAILY_VOLUME_BASE = 100_000
DAILY_VOLUME_SPREAD = 1_000_000

DEFAULT_BACKFILL_DAYS = 90


def _price(value: Decimal) -> Decimal:
    return max(round2(value), MIN_PRICE)


def ensure_consistent(bar: PriceBar) -> PriceBar:
    """Widen high/low so they bracket open and close."""
    bar.high = max(bar.high, bar.open, bar.close)
    bar.low = min(bar.low, bar.open, bar.close)
    return bar


class MarketSimulator:
    """
    Random-walk price generator.

    Two entry points:
    - tick(): one live update, mutating the asset in place
    - backfill(): N days of daily bars for an asset with no history

    The random source and clock are injected so runs can be reproduced.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = now_market,
    ):
        self._rng = rng or random.Random()
        self._clock = clock

    def tick(self, asset: Asset) -> PriceBar:
        """
        Apply one price move of up to +/-1% to the asset.

        previous_close takes the pre-tick price. Returns the bar spanning
        the move (open = previous_close, close = new price).
        """
        now = self._clock()
        variation = (self._rng.random() - 0.5) * TICK_MAX_VARIATION
        new_price = _price(asset.current_price * to_decimal(1 + variation))

        asset.previous_close = asset.current_price
        asset.current_price = new_price
        asset.last_updated = now

        bar = PriceBar(
            ticker=asset.ticker,
            open=asset.previous_close,
            high=max(asset.current_price, asset.previous_close),
            low=min(asset.current_price, asset.previous_close),
            close=asset.current_price,
            volume=TICK_VOLUME_BASE + self._rng.randrange(TICK_VOLUME_SPREAD),
            timestamp=now,
        )
        return ensure_consistent(bar)

    def backfill(self, asset: Asset, days: int = DEFAULT_BACKFILL_DAYS) -> list[PriceBar]:
        """
        Generate one bar per day from now - days up to now, oldest first.

        The walk starts at the asset's current price and each close feeds
        the next day. The asset itself is not modified.
        """
        if days < 0:
            raise ValueError(f"days must be >= 0, got {days}")

        start = self._clock() - timedelta(days=days)
        cursor = asset.current_price
        bars: list[PriceBar] = []

        for offset in range(days + 1):
            variation = (self._rng.random() - 0.5) * DAILY_MAX_VARIATION
            cursor = cursor * to_decimal(1 + variation)

            open_factor = 0.995 + self._rng.random() * 0.01
            high_factor = 1 + self._rng.random() * 0.02
            low_factor = 1 - self._rng.random() * 0.02

            bar = PriceBar(
                ticker=asset.ticker,
                open=_price(cursor * to_decimal(open_factor)),
                high=_price(cursor * to_decimal(high_factor)),
                low=_price(cursor * to_decimal(low_factor)),
                close=_price(cursor),
                volume=DAILY_VOLUME_BASE + self._rng.randrange(DAILY_VOLUME_SPREAD),
                timestamp=start + timedelta(days=offset),
            )
            bars.append(ensure_consistent(bar))

        logger.debug(f"Generated {len(bars)} days of history for {asset.ticker}")
        return bars
