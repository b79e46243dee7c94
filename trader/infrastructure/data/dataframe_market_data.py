"""
In-memory market data provider over pandas frames.

Serves candles of any supported resolution from one-minute OHLCV frames,
one frame per instrument, e.g. as loaded by ``CSVCandleLoader``.
"""

from collections.abc import Mapping
from datetime import UTC, datetime, timedelta

import pandas as pd

from trader.core.enums import CandleInterval
from trader.core.exceptions.backtest import DataError
from trader.core.interfaces.market import IMarketDataProvider
from trader.core.models.candle import Candle
from trader.core.models.interval import Interval
from trader.core.types.financial import to_decimal

from .ohlcv_resampler import OHLCVResampler
from .ohlcv_validator import OHLCVValidator

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
ONE_MILLISECOND = timedelta(milliseconds=1)


def to_millis(moment: datetime) -> int:
    """Convert timezone-aware datetime to epoch milliseconds."""
    return (moment - EPOCH) // ONE_MILLISECOND


def from_millis(millis: int) -> datetime:
    """Convert epoch milliseconds to UTC datetime."""
    return EPOCH + timedelta(milliseconds=millis)


class DataFrameMarketDataService(IMarketDataProvider):
    """
    Market data provider backed by one-minute frames.

    Frames are validated once and never mutated, so a single instance can be
    shared by concurrent runs.
    """

    def __init__(self, frames: Mapping[str, pd.DataFrame]) -> None:
        """
        Initialize the provider.

        Args:
            frames: One-minute OHLCV frames keyed by FIGI

        Raises:
            DataError: If any frame is invalid
        """
        validator = OHLCVValidator()
        self._frames: dict[str, pd.DataFrame] = {}
        for figi, frame in frames.items():
            validator.validate_data(frame, source=figi)
            self._frames[figi] = frame.sort_values("timestamp", ignore_index=True)
        self._resampler = OHLCVResampler()

    def get_candles(
        self, figi: str, interval: Interval, candle_interval: CandleInterval
    ) -> list[Candle]:
        """
        Get candles within the interval.

        Coarser resolutions are aggregated from the one-minute rows of the
        interval; buckets are timed by their start.

        Raises:
            DataError: If there is no history for the instrument
        """
        frame = self._frames.get(figi)
        if frame is None:
            raise DataError(f"No candles history for figi '{figi}'")

        rows = self._resampler.resample_data(self._slice(frame, interval), candle_interval)
        return [
            candle
            for candle in (self._to_candle(row, candle_interval) for row in rows.itertuples())
            if interval.contains(candle.time)
        ]

    @staticmethod
    def _slice(frame: pd.DataFrame, interval: Interval) -> pd.DataFrame:
        mask = pd.Series(True, index=frame.index)
        if interval.from_ is not None:
            mask &= frame["timestamp"] >= to_millis(interval.from_)
        if interval.to is not None:
            mask &= frame["timestamp"] <= to_millis(interval.to)
        return frame[mask]

    @staticmethod
    def _to_candle(row, candle_interval: CandleInterval) -> Candle:
        return Candle(
            time=from_millis(int(row.timestamp)),
            open=to_decimal(row.open),
            close=to_decimal(row.close),
            high=to_decimal(row.high),
            low=to_decimal(row.low),
            volume=int(row.volume),
            interval=candle_interval,
        )
