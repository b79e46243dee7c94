"""
Market collaborator interfaces.

The engine consumes candles, trading schedules and instrument metadata
through these interfaces only.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal

from trader.core.enums import CandleInterval
from trader.core.models.candle import Candle, Share, TradingDay
from trader.core.models.interval import Interval


class IMarketDataProvider(ABC):
    """Abstract interface for historical candles."""

    @abstractmethod
    def get_candles(
        self, figi: str, interval: Interval, candle_interval: CandleInterval
    ) -> list[Candle]:
        """Get time-ascending candles within the interval; gaps are allowed."""
        pass


class IInstrumentsProvider(ABC):
    """Abstract interface for static instrument data."""

    @abstractmethod
    def get_share(self, figi: str) -> Share:
        """Get instrument metadata."""
        pass

    @abstractmethod
    def get_trading_schedule(self, exchange: str, interval: Interval) -> list[TradingDay]:
        """Get time-ascending trading days covering the interval."""
        pass


class IMarketDataService(ABC):
    """Abstract interface for point-in-time market data queries."""

    @abstractmethod
    def get_last_price(self, figi: str, to: datetime) -> Decimal:
        """Get the last known price not after ``to``."""
        pass

    @abstractmethod
    def get_last_candles(
        self, figi: str, to: datetime, limit: int, candle_interval: CandleInterval
    ) -> list[Candle]:
        """Get up to ``limit`` time-ascending candles not after ``to``."""
        pass
