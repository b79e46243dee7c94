"""
Unit tests for cron expression evaluation.
"""

import pytest

from tests.builders import at
from trader.core.exceptions.backtest import ConfigurationError
from trader.core.utils.cron import CronExpression


class TestCronParsing:
    """Test suite for parsing cron expressions."""

    def test_should_parse_five_field_expression(self) -> None:
        """Test fields of a classic expression."""
        cron = CronExpression.parse("*/15 9-11 1,15 * MON-FRI")

        assert cron.minutes == frozenset({0, 15, 30, 45})
        assert cron.hours == frozenset({9, 10, 11})
        assert cron.days_of_month == frozenset({1, 15})
        assert cron.days_of_week == frozenset({1, 2, 3, 4, 5})

    def test_should_accept_seconds_field_at_zero(self) -> None:
        """Test six-field expression with zero seconds."""
        cron = CronExpression.parse("0 0 12 * * ?")

        assert cron.hours == frozenset({12})
        assert cron.minutes == frozenset({0})

    def test_should_map_seven_to_sunday(self) -> None:
        """Test day-of-week alias."""
        assert CronExpression.parse("0 0 * * 7").days_of_week == frozenset({0})

    @pytest.mark.parametrize(
        "expression",
        [
            "* * * *",
            "60 * * * *",
            "* 24 * * *",
            "*/0 * * * *",
            "5-1 * * * *",
            "* * * FOO *",
            "30 0 12 * * *",
        ],
    )
    def test_should_reject_invalid_expression(self, expression: str) -> None:
        """Test that malformed expressions raise ConfigurationError."""
        with pytest.raises(ConfigurationError):
            CronExpression.parse(expression)


class TestCronMatching:
    """Test suite for trigger evaluation."""

    def test_should_match_minute_and_hour(self) -> None:
        """Test a daily trigger."""
        cron = CronExpression.parse("30 12 * * *")

        assert cron.matches(at(1, 12, 30))
        assert not cron.matches(at(1, 12, 31))

    def test_should_match_day_of_week(self) -> None:
        """Test weekday restriction; March 1st 2023 is a Wednesday."""
        cron = CronExpression.parse("0 0 * * WED")

        assert cron.matches(at(1))
        assert not cron.matches(at(2))
        assert cron.matches(at(8))

    def test_should_match_either_day_when_both_are_restricted(self) -> None:
        """Test classic cron OR semantics of day fields."""
        cron = CronExpression.parse("0 0 5 * MON")

        assert cron.matches(at(5))
        assert cron.matches(at(6))
        assert not cron.matches(at(7))


class TestCronHits:
    """Test suite for trigger enumeration."""

    def test_should_get_hits_in_half_open_range(self) -> None:
        """Test that start is included and end is excluded."""
        cron = CronExpression.parse("0 12 * * *")

        hits = cron.get_hits(at(1, 12), at(3, 12))

        assert hits == [at(1, 12), at(2, 12)]

    def test_should_round_start_up_to_minute(self) -> None:
        """Test that a trigger before a mid-minute start is skipped."""
        cron = CronExpression.parse("* * * * *")
        start = at(1, 12).replace(second=30)

        hits = cron.get_hits(start, at(1, 12, 3))

        assert hits == [at(1, 12, 1), at(1, 12, 2)]

    def test_should_return_no_hits_for_empty_range(self) -> None:
        """Test empty range."""
        assert CronExpression.parse("* * * * *").get_hits(at(1), at(1)) == []
