"""
CSV candle loader.

Loads one-minute OHLCV history of an instrument from ``<figi>.csv`` files
with columns ``timestamp`` (epoch milliseconds), open, high, low, close
and volume.
"""

from pathlib import Path

import pandas as pd
from loguru import logger

from trader.core.exceptions.backtest import DataError

from .ohlcv_validator import OHLCV_COLUMNS, OHLCVValidator


class CSVCandleLoader:
    """
    Loader of per-instrument candle files.

    Features:
    - One file per instrument, named by its FIGI
    - Fixed dtypes for memory efficiency
    - Validation of loaded frames
    """

    def __init__(self, data_directory: str | Path = "data") -> None:
        """
        Initialize the loader.

        Args:
            data_directory: Directory containing ``<figi>.csv`` files

        Raises:
            DataError: If the directory does not exist
        """
        self.data_dir = Path(data_directory)
        if not self.data_dir.is_dir():
            raise DataError(f"Data directory not found: {self.data_dir}")
        self._validator = OHLCVValidator()

    def load(self, figi: str) -> pd.DataFrame:
        """
        Load candle history of an instrument.

        Returns:
            Time-ascending frame with ``OHLCV_COLUMNS``

        Raises:
            DataError: If the file is missing, unreadable or invalid
        """
        return self.load_file(self.data_dir / f"{figi}.csv")

    def load_all(self) -> dict[str, pd.DataFrame]:
        """Load every ``*.csv`` file of the directory keyed by its FIGI."""
        return {path.stem: self.load_file(path) for path in sorted(self.data_dir.glob("*.csv"))}

    def load_file(self, file_path: Path) -> pd.DataFrame:
        """Load and validate one candle file."""
        if not file_path.exists():
            raise DataError(f"Data file not found: {file_path}")

        logger.debug(f"Loading file: {file_path}")
        try:
            data = pd.read_csv(
                file_path,
                usecols=OHLCV_COLUMNS,
                dtype={
                    "timestamp": "int64",
                    "open": "float64",
                    "high": "float64",
                    "low": "float64",
                    "close": "float64",
                    "volume": "int64",
                },
            )
        except pd.errors.EmptyDataError:
            logger.warning(f"Empty data file: {file_path.name}")
            return pd.DataFrame(columns=OHLCV_COLUMNS)
        except (pd.errors.ParserError, ValueError, OSError) as e:
            raise DataError(f"Failed to read {file_path.name}: {type(e).__name__}: {e}") from e

        data = data.sort_values("timestamp", ignore_index=True)
        self._validator.validate_data(data, source=file_path.name)
        logger.debug(f"Loaded {len(data)} rows from {file_path.name}")
        return data
