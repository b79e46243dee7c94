"""
Trend utilities.

This module provides moving average calculation and crossover detection.
Moving averages implement the Strategy Pattern behind the ``MovingAverager``
protocol so crossover strategies can switch between them by configuration.
"""

from collections.abc import Sequence
from decimal import Decimal
from typing import Protocol

from trader.core.enums import Crossover, MovingAverageType
from trader.core.exceptions.backtest import ValidationError
from trader.core.types.financial import ONE, ZERO, divide, multiply, set_default_scale


class MovingAverager(Protocol):
    """Protocol for moving average calculation strategies."""

    def get_averages(self, values: Sequence[Decimal], window: int, order: int = 1) -> list[Decimal]:
        """Calculate moving averages of the same length as values."""
        ...


def _validate_window_and_order(window: int, order: int) -> None:
    if window <= 0:
        raise ValidationError(f"window must be positive, got {window}")
    if order <= 0:
        raise ValidationError(f"order must be positive, got {order}")


class SimpleMovingAverager:
    """Trailing simple moving average.

    The first ``window`` averages cover all values seen so far.
    """

    def get_averages(self, values: Sequence[Decimal], window: int, order: int = 1) -> list[Decimal]:
        """Apply the average ``order`` times."""
        _validate_window_and_order(window, order)
        averages = list(values)
        for _ in range(order):
            averages = self._get_averages(averages, window)
        return averages

    @staticmethod
    def _get_averages(values: list[Decimal], window: int) -> list[Decimal]:
        averages: list[Decimal] = []
        running_sum = ZERO
        for index in range(min(window, len(values))):
            running_sum += values[index]
            averages.append(divide(running_sum, index + 1))

        for index in range(window, len(values)):
            excluded = divide(values[index - window], window)
            added = divide(values[index], window)
            averages.append(averages[index - 1] - excluded + added)

        return averages


class LinearMovingAverager:
    """Linearly weighted moving average, the latest value weighs the most."""

    def get_averages(self, values: Sequence[Decimal], window: int, order: int = 1) -> list[Decimal]:
        """Apply the average ``order`` times."""
        _validate_window_and_order(window, order)
        averages = list(values)
        for _ in range(order):
            averages = [
                self._get_average(averages, index, window) for index in range(len(averages))
            ]
        return averages

    @staticmethod
    def _get_average(values: list[Decimal], index: int, window: int) -> Decimal:
        period = min(window, index + 1)
        weighted_sum = ZERO
        for offset in range(period):
            weighted_sum += values[index - offset] * (period - offset)
        return divide(weighted_sum, period * (period + 1) // 2)


class ExponentialMovingAverager:
    """Exponential moving average with smoothing ``2 / (window + 1)``."""

    def get_averages(self, values: Sequence[Decimal], window: int, order: int = 1) -> list[Decimal]:
        """Apply the average ``order`` times."""
        _validate_window_and_order(window, order)
        averages = list(values)
        if not averages:
            return averages

        weight = Decimal(2) / Decimal(window + 1)
        reverted_weight = ONE - weight
        for _ in range(order):
            for index in range(1, len(averages)):
                averages[index] = multiply(averages[index], weight) + multiply(
                    averages[index - 1], reverted_weight
                )

        return [set_default_scale(average) for average in averages]


_AVERAGERS: dict[MovingAverageType, MovingAverager] = {
    MovingAverageType.SIMPLE: SimpleMovingAverager(),
    MovingAverageType.LINEAR: LinearMovingAverager(),
    MovingAverageType.EXPONENTIAL: ExponentialMovingAverager(),
}


def get_averager(moving_average_type: MovingAverageType) -> MovingAverager:
    """Get stateless averager for the given type."""
    return _AVERAGERS[moving_average_type]


def get_crossovers(values1: Sequence[Decimal], values2: Sequence[Decimal]) -> list[int]:
    """
    Find indices where one series overtakes the other.

    Leading indices where the series are equal are skipped. After that a
    crossover is reported at every index where the sign of ``values1 - values2``
    is non-zero and differs from the sign at the previous index, so leaving
    an equal point to either side counts as a crossover.

    Args:
        values1: First series
        values2: Second series of the same length

    Returns:
        Ascending crossover indices

    Raises:
        ValidationError: If series lengths differ
    """
    if len(values1) != len(values2):
        raise ValidationError(
            f"Series must have same size, got {len(values1)} and {len(values2)}"
        )

    crossovers: list[int] = []
    previous_sign: int | None = None
    for index, (value1, value2) in enumerate(zip(values1, values2, strict=True)):
        sign = int(value1.compare(value2))
        if previous_sign is None:
            # series start to differ here
            if sign != 0:
                previous_sign = sign
            continue
        if sign != 0 and sign != previous_sign:
            crossovers.append(index)
        previous_sign = sign

    return crossovers


def get_crossover_if_last(
    values1: Sequence[Decimal], values2: Sequence[Decimal], index: int
) -> Crossover:
    """
    Get crossover type when the last crossover of the series is at ``index``.

    Returns:
        BELOW if values1 came from below values2 at ``index``, ABOVE if it came
        from above, NONE if the last crossover is elsewhere or absent

    Raises:
        ValidationError: If index is out of bounds or series lengths differ
    """
    if not 0 <= index < len(values1):
        raise ValidationError(f"index {index} is out of bounds for size {len(values1)}")

    crossovers = get_crossovers(values1, values2)
    if not crossovers or crossovers[-1] != index:
        return Crossover.NONE
    return Crossover.BELOW if values1[index] > values2[index] else Crossover.ABOVE
