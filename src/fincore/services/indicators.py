"""
Technical indicators over price history.

All functions take bars ordered most recent first (index 0 = newest), as
returned by PriceHistoryRepository.find_latest, and are side-effect free.
Insufficient history is not an error: each indicator returns a neutral
sentinel instead (RSI 50, SMA 0, volatility 0).
"""

import logging
from decimal import Decimal
from typing import Sequence

from fincore.core.exceptions import ValidationError
from fincore.core.numeric import round2, round4
from fincore.domain.models import PriceBar

logger = logging.getLogger(__name__)

NEUTRAL_RSI = Decimal("50")
MAX_RSI = Decimal("100")
HUNDRED = Decimal("100")

RSI_OVERBOUGHT = Decimal("70")
RSI_OVERSOLD = Decimal("30")
VOLATILITY_HIGH = Decimal("0.05")
VOLATILITY_MODERATE = Decimal("0.02")


def _require_periods(periods: int) -> None:
    if periods < 1:
        raise ValidationError(f"periods must be >= 1, got {periods}")


def calculate_rsi(bars: Sequence[PriceBar], periods: int) -> Decimal:
    """
    Relative Strength Index over `periods` price changes.

    Needs periods + 1 bars. Each change pairs a bar with the one after it
    in the window: delta = close[i-1] - close[i]. Averages and RS are
    rounded to 4 places, the final 100 / (1 + RS) term to 2 places.
    """
    _require_periods(periods)
    if len(bars) < periods + 1:
        logger.warning(
            f"Insufficient data for RSI: need {periods + 1} bars, got {len(bars)}"
        )
        return NEUTRAL_RSI

    gains = Decimal("0")
    losses = Decimal("0")
    for i in range(1, periods + 1):
        delta = bars[i - 1].close - bars[i].close
        if delta > 0:
            gains += delta
        else:
            losses += abs(delta)

    avg_gain = round4(gains / periods)
    avg_loss = round4(losses / periods)

    if avg_loss == 0:
        return MAX_RSI

    rs = round4(avg_gain / avg_loss)
    return HUNDRED - round2(HUNDRED / (1 + rs))


def calculate_sma(bars: Sequence[PriceBar], periods: int) -> Decimal:
    """Mean close of the first `periods` bars, rounded to 4 places."""
    _require_periods(periods)
    if len(bars) < periods:
        logger.warning(
            f"Insufficient data for SMA: need {periods} bars, got {len(bars)}"
        )
        return Decimal("0")

    total = sum((bar.close for bar in bars[:periods]), Decimal("0"))
    return round4(total / periods)


def calculate_volatility(bars: Sequence[PriceBar], periods: int) -> Decimal:
    """
    Population standard deviation of single-period returns.

    Uses periods - 1 returns, r = close[i] / close[i+1] - 1 with the ratio
    rounded to 4 places. Mean and variance are rounded to 4 places before
    the square root.
    """
    _require_periods(periods)
    if len(bars) < periods:
        logger.warning(
            f"Insufficient data for volatility: need {periods} bars, got {len(bars)}"
        )
        return Decimal("0")

    returns = [
        round4(bars[i].close / bars[i + 1].close) - 1
        for i in range(periods - 1)
    ]
    if not returns:
        return Decimal("0")

    count = len(returns)
    mean = round4(sum(returns, Decimal("0")) / count)
    variance = round4(sum(((r - mean) ** 2 for r in returns), Decimal("0")) / count)
    return variance.sqrt()


def interpret_rsi(rsi: Decimal) -> str:
    if rsi >= RSI_OVERBOUGHT:
        return "OVERBOUGHT - Consider selling"
    if rsi <= RSI_OVERSOLD:
        return "OVERSOLD - Consider buying"
    return "NEUTRAL - No strong signal"


def interpret_sma(periods: int) -> str:
    return f"Simple Moving Average over {periods} periods"


def interpret_volatility(volatility: Decimal) -> str:
    if volatility > VOLATILITY_HIGH:
        return "HIGH - Asset is very volatile"
    if volatility > VOLATILITY_MODERATE:
        return "MODERATE - Normal volatility levels"
    return "LOW - Asset is relatively stable"
