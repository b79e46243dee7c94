"""
Back test orchestrator.

Runs many configurations concurrently over a shared interval and balance
configuration, isolates failures per configuration and ranks results by
final total savings.
"""

import time
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from datetime import UTC, datetime

from loguru import logger

from trader.core.exceptions.backtest import InvalidIntervalError, ValidationError
from trader.core.interfaces.market import IInstrumentsProvider, IMarketDataProvider
from trader.core.interfaces.report import IReportService
from trader.core.models.backtest import BackTestResult
from trader.core.models.config import BackTestProperties, BalanceConfig, BotConfig
from trader.core.models.interval import Interval

from .runner import BackTestRunner


def _utc_now() -> datetime:
    return datetime.now(UTC)


class BackTester:
    """
    Concurrent back test orchestrator.

    Features:
    - Up-front validation of the requested interval
    - Bounded thread pool, one run per configuration
    - Per-run failure isolation into failed results
    - Stable ranking by final total savings
    - Failure-isolated report saving
    """

    def __init__(
        self,
        market_data_provider: IMarketDataProvider,
        instruments: IInstrumentsProvider,
        properties: BackTestProperties | None = None,
        report_service: IReportService | None = None,
        now: Callable[[], datetime] = _utc_now,
    ) -> None:
        """
        Initialize the orchestrator.

        Args:
            market_data_provider: Source of historical candles
            instruments: Source of instrument metadata and trading schedules
            properties: Engine properties, defaults if None
            report_service: Optional persistence of results
            now: Wall clock used to reject intervals in the future
        """
        self.properties = properties or BackTestProperties()
        self.report_service = report_service
        self._now = now
        self._runner = BackTestRunner(market_data_provider, instruments, self.properties)

    def test(
        self,
        bot_configs: Sequence[BotConfig],
        balance_config: BalanceConfig,
        interval: Interval,
        save_to_files: bool = False,
    ) -> list[BackTestResult]:
        """
        Back test every configuration.

        Args:
            bot_configs: Configurations to test
            balance_config: Balance settings shared by all runs
            interval: Interval to test over; an open end means "now"
            save_to_files: Pass results to the report service

        Returns:
            One result per configuration, sorted by final total savings descending

        Raises:
            ValidationError: If no configurations given
            InvalidIntervalError: If interval is in the future or shorter than a day
        """
        if not bot_configs:
            raise ValidationError("At least one bot config is required")
        finite_interval = self.validate_interval(interval)

        started = time.time()
        logger.info(
            f"Back testing {len(bot_configs)} configs over "
            f"{finite_interval.to_pretty_string()} with {self.properties.thread_count} threads"
        )

        with ThreadPoolExecutor(max_workers=self.properties.thread_count) as executor:
            futures = [
                executor.submit(self._test_safe, bot_config, balance_config, finite_interval)
                for bot_config in bot_configs
            ]
            results = [future.result() for future in futures]

        # sort is stable so ties keep submission order
        results.sort(key=lambda result: result.balances.final_total_savings, reverse=True)

        failed_count = sum(1 for result in results if result.is_failed)
        logger.info(
            f"Back test finished within {time.time() - started:.2f}s: "
            f"{len(results) - failed_count} succeeded, {failed_count} failed"
        )

        if save_to_files:
            self._save_to_files(results)

        return results

    def validate_interval(self, interval: Interval) -> Interval:
        """
        Validate interval and clamp its open end to now.

        Raises:
            InvalidIntervalError: If start is missing, any bound is in the future
                or the interval is shorter than one day
        """
        now = self._now()
        if interval.from_ is None:
            raise InvalidIntervalError("Back test interval must have a start")
        if interval.from_ > now:
            raise InvalidIntervalError(f"from ({interval.from_}) can't be in the future")
        if interval.to is not None and interval.to > now:
            raise InvalidIntervalError(f"to ({interval.to}) can't be in the future")

        finite_interval = interval.limit_by_now(now)
        if finite_interval.to_days() < 1:
            raise InvalidIntervalError(
                f"Interval {finite_interval.to_pretty_string()} must be at least 1 day long"
            )
        return finite_interval

    def _test_safe(
        self, bot_config: BotConfig, balance_config: BalanceConfig, interval: Interval
    ) -> BackTestResult:
        """Run one configuration, converting any error into a failed result."""
        started = time.time()
        logger.info(f"Back test for '{bot_config.to_pretty_string()}' started")
        try:
            result = self._runner.run(bot_config, balance_config, interval)
        except Exception as e:
            message = str(e) or type(e).__name__
            logger.error(
                f"Back test for '{bot_config.to_pretty_string()}' failed within "
                f"{time.time() - started:.2f}s with error: {message}"
            )
            return BackTestResult.failed(bot_config, interval, message)

        logger.info(
            f"Back test for '{bot_config.to_pretty_string()}' finished within "
            f"{time.time() - started:.2f}s"
        )
        return result

    def _save_to_files(self, results: list[BackTestResult]) -> None:
        """Save results; errors are logged and never propagated."""
        if self.report_service is None:
            logger.warning("Saving of back test results requested but no report service given")
            return

        try:
            self.report_service.save_back_test_results(results)
        except Exception as e:
            logger.error(f"Failed to save back test results: {type(e).__name__}: {e}")
