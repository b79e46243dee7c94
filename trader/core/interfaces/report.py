"""
Report collaborator interface.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from trader.core.models.backtest import BackTestResult


class IReportService(ABC):
    """Abstract interface for persisting back test results."""

    @abstractmethod
    def save_back_test_results(self, results: Sequence[BackTestResult]) -> None:
        """Persist results of one orchestration call."""
        pass
