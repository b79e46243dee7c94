"""
Candle interval enumerations.

This module defines the allowed resolutions for candlestick data.
"""

from enum import StrEnum


class CandleInterval(StrEnum):
    """
    Allowed candle resolutions.

    Intraday intervals are fetched day by day, daily and coarser ones
    year by year.
    """

    # Minute intervals
    MIN_1 = "1min"
    MIN_5 = "5min"
    MIN_15 = "15min"
    MIN_30 = "30min"

    # Hour intervals
    HOUR = "hour"

    # Day/Week intervals
    DAY = "day"
    WEEK = "week"

    @classmethod
    def from_string(cls, value: str) -> "CandleInterval":
        """
        Convert string to CandleInterval enum.

        Raises:
            ValueError: If the interval is not supported
        """
        value_lower = value.lower()

        for candle_interval in cls:
            if candle_interval.value == value_lower:
                return candle_interval

        raise ValueError(
            f"Unsupported candle interval: {value}. "
            f"Supported intervals: {', '.join([ci.value for ci in cls])}"
        )

    @property
    def pandas_freq(self) -> str:
        """Pandas resample frequency for this interval."""
        freq_map = {
            CandleInterval.MIN_1: "1min",
            CandleInterval.MIN_5: "5min",
            CandleInterval.MIN_15: "15min",
            CandleInterval.MIN_30: "30min",
            CandleInterval.HOUR: "1h",
            CandleInterval.DAY: "1D",
            CandleInterval.WEEK: "W-MON",
        }
        return freq_map[self]

    @property
    def is_intraday(self) -> bool:
        """Check if interval is intraday (less than 1 day)."""
        return self in [self.MIN_1, self.MIN_5, self.MIN_15, self.MIN_30, self.HOUR]
