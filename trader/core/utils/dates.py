"""
Date and trading schedule helpers.

Trading minutes are minute-aligned instants that fall inside the
``[start_time, end_time)`` window of a trading day.
"""

from collections.abc import Iterable
from datetime import datetime, time, timedelta

from trader.core.models.candle import TradingDay

ONE_MINUTE = timedelta(minutes=1)


def start_of_day(dt: datetime) -> datetime:
    """Get midnight of the day of ``dt`` in its own timezone."""
    return datetime.combine(dt.date(), time.min, tzinfo=dt.tzinfo)


def end_of_day(dt: datetime) -> datetime:
    """Get the last representable instant of the day of ``dt``."""
    return datetime.combine(dt.date(), time.max, tzinfo=dt.tzinfo)


def ceil_to_minute(dt: datetime) -> datetime:
    """Round ``dt`` up to a whole minute."""
    truncated = dt.replace(second=0, microsecond=0)
    return truncated if truncated == dt else truncated + ONE_MINUTE


def ceiling_schedule_minute(
    trading_schedule: Iterable[TradingDay], timestamp: datetime
) -> datetime | None:
    """
    Get the first trading minute not before ``timestamp``.

    Args:
        trading_schedule: Time-ascending trading days
        timestamp: Lower bound

    Returns:
        Trading minute or None when the schedule has no minute left
    """
    candidate = ceil_to_minute(timestamp)
    for trading_day in trading_schedule:
        if not trading_day.is_trading_day:
            continue
        if trading_day.start_time > candidate:
            return trading_day.start_time
        if candidate < trading_day.end_time:
            return candidate
    return None


def next_schedule_minute(
    trading_schedule: Iterable[TradingDay], timestamp: datetime
) -> datetime | None:
    """Get the first trading minute strictly after ``timestamp``."""
    following_minute = timestamp.replace(second=0, microsecond=0) + ONE_MINUTE
    return ceiling_schedule_minute(trading_schedule, following_minute)
