"""Timezone utilities for local exchange market time."""

from datetime import datetime
from typing import Optional

import pytz

from fincore.config.settings import get_settings


def market_tz() -> pytz.BaseTzInfo:
    """Return the configured exchange timezone."""
    return pytz.timezone(get_settings().market_timezone)


def now_market() -> datetime:
    """Return current time in the exchange timezone."""
    return datetime.now(market_tz())


def to_market(dt: datetime) -> datetime:
    """Convert a datetime to the exchange timezone."""
    tz = market_tz()
    if dt.tzinfo is None:
        # Assume naive datetime is already exchange-local
        return tz.localize(dt)
    return dt.astimezone(tz)


def is_market_hours(
    dt: Optional[datetime] = None,
    open_hour: Optional[int] = None,
    close_hour: Optional[int] = None,
) -> bool:
    """
    Check whether a moment falls inside the trading session.

    Session is Monday to Friday, from open_hour (inclusive) to
    close_hour (exclusive), exchange-local time.
    """
    settings = get_settings()
    open_hour = settings.market_open_hour if open_hour is None else open_hour
    close_hour = settings.market_close_hour if close_hour is None else close_hour

    local = to_market(dt) if dt is not None else now_market()
    return local.weekday() < 5 and open_hour <= local.hour < close_hour


def to_naive_market(dt: datetime) -> datetime:
    """Return exchange-local wall time without tzinfo (storage format)."""
    return to_market(dt).replace(tzinfo=None)
