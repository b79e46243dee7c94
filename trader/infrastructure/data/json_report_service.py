"""
JSON report service.

Writes every back test result of an orchestration call into its own JSON
file, prefixed by the result's rank.
"""

import json
from collections.abc import Sequence
from pathlib import Path

from loguru import logger

from trader.core.interfaces.report import IReportService
from trader.core.models.backtest import BackTestResult


class JsonReportService(IReportService):
    """Report service writing ``<rank>_<figi>_<strategy>.json`` files."""

    def __init__(self, directory: str | Path = "reports") -> None:
        self.directory = Path(directory)

    def save_back_test_results(self, results: Sequence[BackTestResult]) -> None:
        """Write results into the report directory, creating it if needed."""
        self.directory.mkdir(parents=True, exist_ok=True)
        for rank, result in enumerate(results, start=1):
            file_path = self.directory / self.get_file_name(rank, result)
            file_path.write_text(
                json.dumps(result.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8"
            )
        logger.info(f"Saved {len(results)} back test results to {self.directory}")

    @staticmethod
    def get_file_name(rank: int, result: BackTestResult) -> str:
        """Build report file name of a ranked result."""
        config = result.bot_config
        return f"{rank:03d}_{config.figi}_{config.strategy_type}.json"
