"""
Unit tests for the offline data collaborators.
Testing CSV loading, frame-backed candles, static instruments and JSON reports.
"""

import json
from datetime import date, time
from decimal import Decimal
from pathlib import Path

import pandas as pd
import pytest

from tests.builders import FIGI, at, make_share
from trader.core.enums import CandleInterval, StrategyType
from trader.core.exceptions.backtest import DataError
from trader.core.models.backtest import BackTestResult
from trader.core.models.config import BotConfig
from trader.core.models.interval import Interval
from trader.infrastructure.data import (
    CSVCandleLoader,
    DataFrameMarketDataService,
    JsonReportService,
    StaticInstrumentsService,
)
from trader.infrastructure.data.dataframe_market_data import to_millis


def make_frame(start_millis: int, closes: list[float]) -> pd.DataFrame:
    """Build one-minute frame where every candle opens at 100."""
    return pd.DataFrame(
        {
            "timestamp": [start_millis + index * 60_000 for index in range(len(closes))],
            "open": [100.0] * len(closes),
            "high": [max(100.0, close) for close in closes],
            "low": [min(100.0, close) for close in closes],
            "close": closes,
            "volume": [10] * len(closes),
        }
    )


class TestCSVCandleLoader:
    """Test suite for CSV loading."""

    def test_should_load_and_sort_candles(self, tmp_path: Path) -> None:
        """Test loading of a valid file."""
        # Arrange
        frame = make_frame(to_millis(at(1, 10)), [101.0, 102.5])
        frame.iloc[::-1].to_csv(tmp_path / f"{FIGI}.csv", index=False)
        loader = CSVCandleLoader(tmp_path)

        # Act
        loaded = loader.load(FIGI)

        # Assert
        assert list(loaded["close"]) == [101.0, 102.5]
        assert loaded["timestamp"].is_monotonic_increasing

    def test_should_load_all_files_by_figi(self, tmp_path: Path) -> None:
        """Test directory loading."""
        make_frame(to_millis(at(1, 10)), [101.0]).to_csv(tmp_path / "A.csv", index=False)
        make_frame(to_millis(at(1, 10)), [99.0]).to_csv(tmp_path / "B.csv", index=False)

        frames = CSVCandleLoader(tmp_path).load_all()

        assert sorted(frames) == ["A", "B"]

    def test_should_raise_for_missing_file(self, tmp_path: Path) -> None:
        """Test missing file."""
        with pytest.raises(DataError):
            CSVCandleLoader(tmp_path).load(FIGI)

    def test_should_raise_for_missing_directory(self, tmp_path: Path) -> None:
        """Test missing directory."""
        with pytest.raises(DataError):
            CSVCandleLoader(tmp_path / "absent")

    def test_should_reject_invalid_ohlc(self, tmp_path: Path) -> None:
        """Test that high below close is rejected."""
        frame = make_frame(to_millis(at(1, 10)), [101.0])
        frame["high"] = 50.0
        frame.to_csv(tmp_path / f"{FIGI}.csv", index=False)

        with pytest.raises(DataError):
            CSVCandleLoader(tmp_path).load(FIGI)

    def test_should_reject_duplicate_timestamps(self, tmp_path: Path) -> None:
        """Test duplicate rows."""
        frame = make_frame(to_millis(at(1, 10)), [101.0, 102.0])
        frame["timestamp"] = frame["timestamp"].iloc[0]
        frame.to_csv(tmp_path / f"{FIGI}.csv", index=False)

        with pytest.raises(DataError):
            CSVCandleLoader(tmp_path).load(FIGI)


class TestDataFrameMarketDataService:
    """Test suite for the frame-backed market data provider."""

    def test_should_return_minute_candles_within_interval(self) -> None:
        """Test interval filtering and conversion."""
        # Arrange
        provider = DataFrameMarketDataService(
            {FIGI: make_frame(to_millis(at(1, 10)), [101.0, 102.5, 103.0, 104.0])}
        )

        # Act
        candles = provider.get_candles(
            FIGI, Interval.of(at(1, 10, 1), at(1, 10, 2)), CandleInterval.MIN_1
        )

        # Assert
        assert [candle.time for candle in candles] == [at(1, 10, 1), at(1, 10, 2)]
        assert candles[0].close == Decimal("102.5")
        assert candles[0].volume == 10
        assert candles[0].interval == CandleInterval.MIN_1

    def test_should_aggregate_coarser_candles(self) -> None:
        """Test resampling to five-minute candles."""
        # Arrange
        closes = [101.0, 99.0, 103.0, 100.5, 102.0, 104.0, 98.0]
        provider = DataFrameMarketDataService({FIGI: make_frame(to_millis(at(1, 10)), closes)})

        # Act
        candles = provider.get_candles(FIGI, Interval.of_day(at(1)), CandleInterval.MIN_5)

        # Assert
        assert [candle.time for candle in candles] == [at(1, 10), at(1, 10, 5)]
        first = candles[0]
        assert first.open == Decimal(100)
        assert first.close == Decimal(102)
        assert first.high == Decimal(103)
        assert first.low == Decimal(99)
        assert first.volume == 50
        assert candles[1].close == Decimal(98)

    def test_should_return_empty_list_outside_history(self) -> None:
        """Test gaps."""
        provider = DataFrameMarketDataService({FIGI: make_frame(to_millis(at(1, 10)), [101.0])})

        assert provider.get_candles(FIGI, Interval.of_day(at(2)), CandleInterval.HOUR) == []

    def test_should_raise_for_unknown_figi(self) -> None:
        """Test missing history."""
        provider = DataFrameMarketDataService({})

        with pytest.raises(DataError):
            provider.get_candles(FIGI, Interval.of_day(at(1)), CandleInterval.MIN_1)


class TestStaticInstrumentsService:
    """Test suite for the static instruments provider."""

    def test_should_return_known_share(self) -> None:
        """Test share lookup."""
        share = make_share()
        service = StaticInstrumentsService([share])

        assert service.get_share(FIGI) == share
        with pytest.raises(DataError):
            service.get_share("UNKNOWN")

    def test_should_build_schedule_with_weekends_and_holidays(self) -> None:
        """Test trading days; March 4th and 5th 2023 are a weekend."""
        # Arrange
        service = StaticInstrumentsService(
            [make_share()], open_time=time(7), close_time=time(15, 40), holidays=[date(2023, 3, 8)]
        )

        # Act
        schedule = service.get_trading_schedule("MOEX", Interval.of(at(3, 12), at(8, 12)))

        # Assert
        assert [day.date.day for day in schedule] == [3, 4, 5, 6, 7, 8]
        assert [day.is_trading_day for day in schedule] == [True, False, False, True, True, False]
        assert schedule[0].start_time == at(3, 7)
        assert schedule[0].end_time == at(3, 15, 40)


class TestJsonReportService:
    """Test suite for JSON reports."""

    def test_should_write_one_file_per_result(self, tmp_path: Path) -> None:
        """Test report files."""
        # Arrange
        config = BotConfig(
            figi=FIGI, commission=Decimal("0.003"), strategy_type=StrategyType.CONSERVATIVE
        )
        result = BackTestResult.failed(config, Interval.of(at(1), at(5)), "No data")
        service = JsonReportService(tmp_path / "reports")

        # Act
        service.save_back_test_results([result])

        # Assert
        report = tmp_path / "reports" / f"001_{FIGI}_conservative.json"
        content = json.loads(report.read_text(encoding="utf-8"))
        assert content["error"] == "No data"
        assert content["bot_config"]["figi"] == FIGI
        assert content["balances"]["final_total_savings"] == "0"
