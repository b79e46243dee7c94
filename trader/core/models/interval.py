"""
Interval domain model.

An immutable pair of instants. Either endpoint may be None, which makes
the interval open on that side.
"""

from collections.abc import Iterator
from dataclasses import dataclass, replace
from datetime import datetime, timedelta

from trader.core.exceptions.backtest import InvalidIntervalError, ValidationError
from trader.core.utils.dates import end_of_day, start_of_day

ONE_MICROSECOND = timedelta(microseconds=1)
ONE_DAY = timedelta(days=1)

PRETTY_FORMAT = "%d.%m.%Y %H:%M:%S"


@dataclass(frozen=True)
class Interval:
    """Time interval ``[from_, to]`` with both endpoints inclusive."""

    from_: datetime | None
    to: datetime | None

    def __post_init__(self) -> None:
        """Validate interval bounds after initialization."""
        if self.from_ is not None and self.to is not None and self.from_ > self.to:
            raise InvalidIntervalError(f"from ({self.from_}) can't be after to ({self.to})")

    @classmethod
    def of(cls, from_: datetime | None, to: datetime | None) -> "Interval":
        """
        Create interval.

        Raises:
            InvalidIntervalError: If from_ is after to
        """
        return cls(from_, to)

    @classmethod
    def of_day(cls, dt: datetime) -> "Interval":
        """Create interval covering the whole day of ``dt``."""
        return cls(start_of_day(dt), end_of_day(dt))

    def limit_by_now(self, now: datetime) -> "Interval":
        """Replace an open ``to`` with ``now``."""
        if self.to is not None:
            return self
        return replace(self, to=now)

    def split_into_daily_intervals(self) -> "DailyIntervals":
        """
        Split interval into sub-intervals each lying within one calendar day.

        Returns:
            Lazy iterable which can be iterated any number of times

        Raises:
            ValidationError: If any endpoint is open
        """
        from_, to = self._require_bounds()
        return DailyIntervals(from_, to)

    def contains(self, dt: datetime) -> bool:
        """Check that ``dt`` lies within the interval, open sides unbounded."""
        if self.from_ is not None and dt < self.from_:
            return False
        if self.to is not None and dt > self.to:
            return False
        return True

    def to_duration(self) -> timedelta:
        """Get interval length."""
        from_, to = self._require_bounds()
        return to - from_

    def to_days(self) -> float:
        """Get interval length in fractional days."""
        return self.to_duration() / ONE_DAY

    def minus_days(self, days: int) -> "Interval":
        """Shift both endpoints ``days`` back."""
        shift = timedelta(days=days)
        return Interval(
            None if self.from_ is None else self.from_ - shift,
            None if self.to is None else self.to - shift,
        )

    def extend_to_day(self) -> "Interval":
        """Extend interval to the start of its first day and end of its last day."""
        from_, to = self._require_bounds()
        return Interval(start_of_day(from_), end_of_day(to))

    def equal_dates(self) -> bool:
        """Check that both endpoints are in the same calendar day."""
        from_, to = self._require_bounds()
        return from_.date() == to.date()

    def to_pretty_string(self) -> str:
        """Human readable representation."""
        from_text = "-inf" if self.from_ is None else self.from_.strftime(PRETTY_FORMAT)
        to_text = "inf" if self.to is None else self.to.strftime(PRETTY_FORMAT)
        return f"{from_text} - {to_text}"

    def _require_bounds(self) -> tuple[datetime, datetime]:
        if self.from_ is None or self.to is None:
            raise ValidationError(f"Interval {self.to_pretty_string()} must be closed")
        return self.from_, self.to


@dataclass(frozen=True)
class DailyIntervals:
    """Restartable sequence of per-day pieces of ``[from_, to]``."""

    from_: datetime
    to: datetime

    def __iter__(self) -> Iterator[Interval]:
        current_from = self.from_
        while True:
            day_end = end_of_day(current_from)
            if day_end >= self.to:
                yield Interval(current_from, self.to)
                return
            yield Interval(current_from, day_end)
            current_from = day_end + ONE_MICROSECOND
