"""
Averaging helpers over Decimal values.
"""

from collections.abc import Iterable, Mapping
from datetime import datetime, timedelta
from decimal import Decimal

from trader.core.exceptions.backtest import ValidationError
from trader.core.types.financial import ZERO, Number, divide, set_default_scale, to_decimal

ONE_MICROSECOND = timedelta(microseconds=1)


def get_average(values: Iterable[Number]) -> Decimal:
    """
    Get arithmetic mean of values.

    Returns:
        Mean at the default scale, or zero for an empty input
    """
    decimals = [to_decimal(value) for value in values]
    if not decimals:
        return ZERO
    return divide(sum(decimals, ZERO), len(decimals))


def get_weighted_average(values: Mapping[datetime, Decimal], end: datetime) -> Decimal:
    """
    Get time-weighted average of a step series.

    Each value stays current from its own timestamp until the next entry's
    timestamp, and the last one until ``end``. The weight of a value is the
    duration it stayed current.

    Args:
        values: Series of values keyed by the moment they became current
        end: Moment the last value stops being current

    Returns:
        Weighted average at the default scale; zero for an empty series

    Raises:
        ValidationError: If any value becomes current after ``end``
    """
    if not values:
        return ZERO

    entries = sorted(values.items())
    last_timestamp, last_value = entries[-1]
    if last_timestamp > end:
        raise ValidationError(f"Value at {last_timestamp} is after the end {end}")
    if len(entries) == 1:
        return set_default_scale(last_value)

    weighted_sum = ZERO
    total_weight = 0
    for index, (timestamp, value) in enumerate(entries):
        next_timestamp = entries[index + 1][0] if index + 1 < len(entries) else end
        weight = (next_timestamp - timestamp) // ONE_MICROSECOND
        weighted_sum += to_decimal(value) * weight
        total_weight += weight

    if total_weight == 0:
        return set_default_scale(last_value)
    return divide(weighted_sum, total_weight)
