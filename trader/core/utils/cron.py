"""
Cron expression evaluation for scheduled balance increments.

Supports the classic five fields ``minute hour day-of-month month day-of-week``
and the six-field form with a leading seconds field, as long as seconds are
``0`` (the simulation works with whole minutes). Each field accepts ``*``,
``?``, single values, ``a-b`` ranges, ``/step`` and comma separated lists.
Month and day-of-week fields also accept three-letter names.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime, timedelta

from trader.core.exceptions.backtest import ConfigurationError
from trader.core.utils.dates import ceil_to_minute

ONE_MINUTE = timedelta(minutes=1)

MONTH_NAMES = {
    name: number
    for number, name in enumerate(
        ["JAN", "FEB", "MAR", "APR", "MAY", "JUN", "JUL", "AUG", "SEP", "OCT", "NOV", "DEC"],
        start=1,
    )
}
DAY_NAMES = {
    name: number
    for number, name in enumerate(["SUN", "MON", "TUE", "WED", "THU", "FRI", "SAT"])
}


@dataclass(frozen=True)
class _FieldSpec:
    name: str
    minimum: int
    maximum: int
    names: dict[str, int]


_MINUTE = _FieldSpec("minute", 0, 59, {})
_HOUR = _FieldSpec("hour", 0, 23, {})
_DAY_OF_MONTH = _FieldSpec("day of month", 1, 31, {})
_MONTH = _FieldSpec("month", 1, 12, MONTH_NAMES)
_DAY_OF_WEEK = _FieldSpec("day of week", 0, 7, DAY_NAMES)


@dataclass(frozen=True)
class CronExpression:
    """Parsed cron expression."""

    expression: str
    minutes: frozenset[int]
    hours: frozenset[int]
    days_of_month: frozenset[int]
    months: frozenset[int]
    days_of_week: frozenset[int]
    day_of_month_restricted: bool
    day_of_week_restricted: bool

    @classmethod
    def parse(cls, expression: str) -> "CronExpression":
        """
        Parse cron expression.

        Args:
            expression: Five or six field cron expression

        Returns:
            Parsed expression

        Raises:
            ConfigurationError: If expression is malformed
        """
        fields = expression.split()
        if len(fields) == 6:
            if _parse_field(fields[0], _FieldSpec("second", 0, 59, {})) != frozenset({0}):
                raise ConfigurationError(
                    f"Cron expression '{expression}' must fire at second 0 only"
                )
            fields = fields[1:]
        if len(fields) != 5:
            raise ConfigurationError(
                f"Cron expression '{expression}' must have 5 or 6 fields, got {len(fields)}"
            )

        minute, hour, day_of_month, month, day_of_week = fields
        # 7 is an alias of Sunday
        days_of_week = frozenset(day % 7 for day in _parse_field(day_of_week, _DAY_OF_WEEK))

        return cls(
            expression=expression,
            minutes=_parse_field(minute, _MINUTE),
            hours=_parse_field(hour, _HOUR),
            days_of_month=_parse_field(day_of_month, _DAY_OF_MONTH),
            months=_parse_field(month, _MONTH),
            days_of_week=days_of_week,
            day_of_month_restricted=not _is_wildcard(day_of_month),
            day_of_week_restricted=not _is_wildcard(day_of_week),
        )

    def matches(self, dt: datetime) -> bool:
        """Check whether the expression fires at the minute of ``dt``."""
        if dt.minute not in self.minutes or dt.hour not in self.hours:
            return False
        if dt.month not in self.months:
            return False

        day_of_month_match = dt.day in self.days_of_month
        # datetime weekday() is Monday=0, cron is Sunday=0
        day_of_week_match = (dt.weekday() + 1) % 7 in self.days_of_week
        if self.day_of_month_restricted and self.day_of_week_restricted:
            return day_of_month_match or day_of_week_match
        return day_of_month_match and day_of_week_match

    def iter_hits(self, start: datetime, end: datetime) -> Iterator[datetime]:
        """Yield trigger minutes within ``[start, end)`` in ascending order."""
        current = ceil_to_minute(start)
        while current < end:
            if self.matches(current):
                yield current
            current += ONE_MINUTE

    def get_hits(self, start: datetime, end: datetime) -> list[datetime]:
        """Get trigger minutes within ``[start, end)``."""
        return list(self.iter_hits(start, end))


def _is_wildcard(field: str) -> bool:
    return field in ("*", "?")


def _parse_field(field: str, spec: _FieldSpec) -> frozenset[int]:
    values: set[int] = set()
    for item in field.split(","):
        values.update(_parse_item(item, spec))
    return frozenset(values)


def _parse_item(item: str, spec: _FieldSpec) -> range:
    range_part, _, step_part = item.partition("/")
    step = _parse_number(step_part, spec, is_step=True) if step_part else 1

    if _is_wildcard(range_part):
        low, high = spec.minimum, spec.maximum
    elif "-" in range_part:
        low_text, high_text = range_part.split("-", 1)
        low, high = _parse_number(low_text, spec), _parse_number(high_text, spec)
    else:
        low = _parse_number(range_part, spec)
        # "5/15" means from 5 to the maximum with step 15
        high = spec.maximum if step_part else low

    if low > high:
        raise ConfigurationError(f"Invalid {spec.name} range '{item}'")
    return range(low, high + 1, step)


def _parse_number(text: str, spec: _FieldSpec, is_step: bool = False) -> int:
    upper = text.strip().upper()
    if not is_step and upper in spec.names:
        return spec.names[upper]
    if not upper.isdigit():
        raise ConfigurationError(f"Invalid {spec.name} value '{text}'")

    value = int(upper)
    if is_step:
        if value <= 0:
            raise ConfigurationError(f"Step of {spec.name} must be positive, got {value}")
        return value
    if not spec.minimum <= value <= spec.maximum:
        raise ConfigurationError(
            f"{spec.name} value {value} is out of range [{spec.minimum}, {spec.maximum}]"
        )
    return value
