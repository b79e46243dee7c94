"""
OHLCV frame validation.

Checks that a one-minute candle frame can be turned into candles: required
columns, numeric non-missing values, sane prices and OHLC relationships.
"""

import pandas as pd
from loguru import logger

from trader.core.exceptions.backtest import DataError

OHLCV_COLUMNS = ["timestamp", "open", "high", "low", "close", "volume"]
PRICE_COLUMNS = ["open", "high", "low", "close"]


class OHLCVValidator:
    """
    Validator of candle frames.

    Features:
    - Structure validation (required columns, unique timestamps)
    - Numeric, non-missing values
    - Positive prices and non-negative volume
    - OHLC relationships
    - Warnings for unordered timestamps
    """

    def validate_data(self, data: pd.DataFrame, source: str = "frame") -> None:
        """
        Validate candle frame integrity.

        Args:
            data: Frame with ``OHLCV_COLUMNS``, ``timestamp`` in epoch milliseconds
            source: Name of the data source used in messages

        Raises:
            DataError: If the frame can't be turned into candles
        """
        missing_columns = set(OHLCV_COLUMNS) - set(data.columns)
        if missing_columns:
            raise DataError(f"{source}: missing required columns {sorted(missing_columns)}")
        if data.empty:
            return

        self._validate_values(data, source)
        self._validate_ohlc_relationships(data, source)

        if data["timestamp"].duplicated().any():
            raise DataError(f"{source}: duplicate timestamps found")
        if not data["timestamp"].is_monotonic_increasing:
            logger.warning(f"{source}: timestamps are not in ascending order")

    @staticmethod
    def _validate_values(data: pd.DataFrame, source: str) -> None:
        for column in OHLCV_COLUMNS:
            if not pd.api.types.is_numeric_dtype(data[column]):
                raise DataError(f"{source}: column {column} must be numeric")
            if data[column].isna().any():
                raise DataError(f"{source}: column {column} contains missing values")

        for column in PRICE_COLUMNS:
            if (data[column] <= 0).any():
                raise DataError(f"{source}: column {column} contains non-positive prices")
        if (data["volume"] < 0).any():
            raise DataError(f"{source}: volume contains negative values")

    @staticmethod
    def _validate_ohlc_relationships(data: pd.DataFrame, source: str) -> None:
        invalid = (
            (data["high"] < data["low"])
            | (data["high"] < data[["open", "close"]].max(axis=1))
            | (data["low"] > data[["open", "close"]].min(axis=1))
        )
        if invalid.any():
            raise DataError(f"{source}: invalid OHLC relationships in {int(invalid.sum())} rows")
