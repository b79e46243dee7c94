"""
Market data domain models.

Candles, trading days and instrument metadata are produced by external
collaborators and are read-only inside the engine.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from trader.core.enums import CandleInterval
from trader.core.exceptions.backtest import ValidationError


@dataclass(frozen=True)
class Candle:
    """OHLCV summary of one time bucket."""

    time: datetime
    open: Decimal
    close: Decimal
    high: Decimal
    low: Decimal
    volume: int
    interval: CandleInterval

    def __post_init__(self) -> None:
        """Validate candle data after initialization."""
        if self.low > self.high:
            raise ValidationError(f"Candle low {self.low} exceeds high {self.high} at {self.time}")
        if self.volume < 0:
            raise ValidationError(f"Volume must be non-negative, got {self.volume}")


@dataclass(frozen=True)
class TradingDay:
    """Exchange working hours of one calendar day."""

    date: date
    is_trading_day: bool
    start_time: datetime
    end_time: datetime

    def __post_init__(self) -> None:
        """Validate trading day data after initialization."""
        if self.start_time > self.end_time:
            raise ValidationError(
                f"Trading day {self.date} starts at {self.start_time} after its end {self.end_time}"
            )


@dataclass(frozen=True)
class Share:
    """Static instrument metadata."""

    figi: str
    ticker: str
    currency: str
    lot: int
    exchange: str
