"""
Unit tests for moving averages and crossover detection.
"""

from decimal import Decimal

import pytest

from tests.builders import decimal_prices
from trader.core.enums import Crossover, MovingAverageType
from trader.core.exceptions.backtest import ValidationError
from trader.core.utils.trend import (
    ExponentialMovingAverager,
    LinearMovingAverager,
    SimpleMovingAverager,
    get_averager,
    get_crossover_if_last,
    get_crossovers,
)


class TestMovingAveragers:
    """Test suite for moving average calculation."""

    def test_should_calculate_trailing_simple_average(self) -> None:
        """Test simple average including the warm-up part."""
        values = decimal_prices(1, 2, 3, 4, 5)

        result = SimpleMovingAverager().get_averages(values, 2)

        assert result == decimal_prices(1, "1.5", "2.5", "3.5", "4.5")

    def test_should_apply_simple_average_several_times(self) -> None:
        """Test order greater than one."""
        values = decimal_prices(1, 2, 3, 4, 5)

        result = SimpleMovingAverager().get_averages(values, 2, order=2)

        assert result == decimal_prices(1, "1.25", 2, 3, 4)

    def test_should_weight_latest_value_most_in_linear_average(self) -> None:
        """Test linearly weighted average."""
        values = decimal_prices(1, 2, 4)

        result = LinearMovingAverager().get_averages(values, 2)

        # (1*1 + 2*2) / 3 and (2*1 + 4*2) / 3
        assert result == [Decimal(1), Decimal("1.66667"), Decimal("3.33333")]

    def test_should_smooth_exponentially(self) -> None:
        """Test exponential average with window 3 (weight 0.5)."""
        values = decimal_prices(2, 4, 8)

        result = ExponentialMovingAverager().get_averages(values, 3)

        assert result == decimal_prices(2, 3, "5.5")

    @pytest.mark.parametrize("averager_type", list(MovingAverageType))
    def test_should_keep_constant_series(self, averager_type: MovingAverageType) -> None:
        """Test that every averager keeps a constant series intact."""
        values = decimal_prices(7, 7, 7, 7)

        result = get_averager(averager_type).get_averages(values, 3, order=2)

        assert result == values

    def test_should_return_empty_for_empty_values(self) -> None:
        """Test empty input."""
        assert get_averager(MovingAverageType.EXPONENTIAL).get_averages([], 3) == []

    def test_should_reject_non_positive_window(self) -> None:
        """Test window validation."""
        with pytest.raises(ValidationError):
            SimpleMovingAverager().get_averages(decimal_prices(1, 2), 0)


class TestCrossovers:
    """Test suite for crossover detection."""

    def test_should_find_crossovers(self) -> None:
        """Test sign changes of the difference."""
        values1 = decimal_prices(1, 3, 1, 3)
        values2 = decimal_prices(2, 2, 2, 2)

        assert get_crossovers(values1, values2) == [1, 2, 3]

    def test_should_count_leaving_equal_point_as_crossover(self) -> None:
        """Test that meeting and going back is a crossover where the series part."""
        values1 = decimal_prices(1, 2, 1)
        values2 = decimal_prices(2, 2, 2)

        assert get_crossovers(values1, values2) == [2]
        assert get_crossover_if_last(values1, values2, 2) == Crossover.ABOVE

    def test_should_skip_leading_equal_values(self) -> None:
        """Test that series equal from the start have no crossover there."""
        values1 = decimal_prices(2, 2, 3, 3)
        values2 = decimal_prices(2, 2, 2, 2)

        assert get_crossovers(values1, values2) == []

    def test_should_report_crossing_through_equality_once(self) -> None:
        """Test that a crossing passing an equal point is reported where it ends."""
        values1 = decimal_prices(1, 2, 3)
        values2 = decimal_prices(2, 2, 2)

        assert get_crossovers(values1, values2) == [2]

    def test_should_reject_series_of_different_size(self) -> None:
        """Test size validation."""
        with pytest.raises(ValidationError):
            get_crossovers(decimal_prices(1, 2), decimal_prices(1))

    def test_should_detect_crossover_from_below_at_index(self) -> None:
        """Test BELOW crossover at the requested index."""
        values1 = decimal_prices(1, 1, 3)
        values2 = decimal_prices(2, 2, 2)

        assert get_crossover_if_last(values1, values2, 2) == Crossover.BELOW

    def test_should_detect_crossover_from_above_at_index(self) -> None:
        """Test ABOVE crossover at the requested index."""
        values1 = decimal_prices(3, 3, 1)
        values2 = decimal_prices(2, 2, 2)

        assert get_crossover_if_last(values1, values2, 2) == Crossover.ABOVE

    def test_should_return_none_when_last_crossover_is_elsewhere(self) -> None:
        """Test that only the last crossover counts."""
        values1 = decimal_prices(1, 3, 1, 1)
        values2 = decimal_prices(2, 2, 2, 2)

        assert get_crossover_if_last(values1, values2, 1) == Crossover.NONE
        assert get_crossover_if_last(values1, values2, 2) == Crossover.ABOVE
        assert get_crossover_if_last(values1, values2, 3) == Crossover.NONE

    def test_should_reject_index_out_of_bounds(self) -> None:
        """Test index validation."""
        with pytest.raises(ValidationError):
            get_crossover_if_last(decimal_prices(1), decimal_prices(1), 1)
