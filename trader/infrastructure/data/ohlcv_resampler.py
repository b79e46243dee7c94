"""
OHLCV resampling.

Aggregates one-minute candle frames into coarser candle intervals.
"""

import pandas as pd
from loguru import logger

from trader.core.enums import CandleInterval
from trader.core.exceptions.backtest import DataError

from .ohlcv_validator import OHLCV_COLUMNS

_EPOCH = pd.Timestamp("1970-01-01", tz="UTC")

_AGGREGATIONS = {
    "open": "first",
    "high": "max",
    "low": "min",
    "close": "last",
    "volume": "sum",
}


class OHLCVResampler:
    """Resampler of one-minute frames, buckets are labelled by their start."""

    def resample_data(self, data: pd.DataFrame, candle_interval: CandleInterval) -> pd.DataFrame:
        """
        Resample one-minute frame to the given candle interval.

        Args:
            data: Time-ascending frame with ``OHLCV_COLUMNS``
            candle_interval: Target resolution

        Returns:
            Frame with the same columns, empty buckets dropped

        Raises:
            DataError: If resampling fails
        """
        if data.empty or candle_interval == CandleInterval.MIN_1:
            return data

        try:
            datetimes = pd.to_datetime(data["timestamp"], unit="ms", utc=True).rename("datetime")
            indexed = data.set_index(datetimes)
            resampled = (
                indexed[list(_AGGREGATIONS)]
                .resample(candle_interval.pandas_freq, label="left", closed="left")
                .agg(_AGGREGATIONS)
                .dropna()
            )
        except (KeyError, TypeError, ValueError) as e:
            raise DataError(f"Failed to resample data to {candle_interval}: {e}") from e

        resampled["timestamp"] = (resampled.index - _EPOCH) // pd.Timedelta(milliseconds=1)
        result = resampled.reset_index(drop=True)[OHLCV_COLUMNS]
        logger.debug(f"Resampled data: {len(data)} -> {len(result)} rows to {candle_interval}")
        return result
