"""
Back test runner.

Drives one strategy against its own simulated exchange over an interval,
minute by minute along the trading schedule, and summarizes the ledger.
Everything here reads the simulated clock only, so identical inputs give
identical results.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any

from loguru import logger

from trader.core.constants import DAYS_IN_YEAR, LAST_OPERATIONS_DAYS
from trader.core.exceptions.backtest import ValidationError
from trader.core.interfaces.market import IInstrumentsProvider, IMarketDataProvider
from trader.core.interfaces.strategy import ITradingStrategy
from trader.core.models.backtest import Balances, BackTestResult, Profits
from trader.core.models.candle import Candle, Share
from trader.core.models.config import BackTestProperties, BalanceConfig, BotConfig
from trader.core.models.decision import DecisionData
from trader.core.models.fake_exchange import FakeExchange
from trader.core.models.interval import Interval
from trader.core.models.ledger_helpers import LedgerValidator
from trader.core.types.financial import ZERO, divide, numbers_equal, to_decimal
from trader.core.utils.cron import CronExpression
from trader.infrastructure.data.market_data_service import MarketDataService
from trader.strategies.factory import StrategyFactory


@dataclass(frozen=True)
class BalanceIncrements:
    """Scheduled balance increments of a run."""

    cron: CronExpression | None
    amount: Decimal | None

    @classmethod
    def of(cls, balance_config: BalanceConfig) -> "BalanceIncrements":
        """Parse the increment schedule once per run."""
        return cls(balance_config.get_cron(), balance_config.balance_increment)

    def apply(
        self,
        exchange: FakeExchange,
        account_id: str | None,
        currency: str,
        start: datetime,
        end: datetime,
        at: datetime | None = None,
    ) -> int:
        """
        Credit increments triggered within ``[start, end)``.

        Args:
            at: Moment to book the increments at, each trigger moment if None

        Returns:
            Number of credited increments
        """
        if self.cron is None or self.amount is None:
            return 0

        hits = self.cron.get_hits(start, end)
        for hit in hits:
            exchange.add_investment(account_id, hit if at is None else at, currency, self.amount)
        return len(hits)


class BackTestRunner:
    """Runs a single back test configuration."""

    def __init__(
        self,
        market_data_provider: IMarketDataProvider,
        instruments: IInstrumentsProvider,
        properties: BackTestProperties,
    ) -> None:
        """
        Initialize the runner.

        Args:
            market_data_provider: Source of historical candles, shared read-only between runs
            instruments: Source of instrument metadata and trading schedules
            properties: Engine properties
        """
        self.market_data_provider = market_data_provider
        self.instruments = instruments
        self.properties = properties

    def run(
        self, bot_config: BotConfig, balance_config: BalanceConfig, interval: Interval
    ) -> BackTestResult:
        """
        Run back test of one configuration.

        Args:
            bot_config: Configuration to test
            balance_config: Initial balance and increments
            interval: Closed interval to test over

        Returns:
            Successful result

        Raises:
            BacktestException: On any simulation error
        """
        from_, to = interval.from_, interval.to
        if from_ is None or to is None:
            raise ValidationError(f"Interval {interval.to_pretty_string()} must be closed")

        strategy = StrategyFactory.create(bot_config.strategy_type, bot_config.strategy_params)
        share = self.instruments.get_share(bot_config.figi)
        LedgerValidator.validate_share(share)

        market_data = MarketDataService(
            self.market_data_provider, self.properties.consecutive_empty_days_limit
        )
        exchange = FakeExchange(
            market_data,
            self.instruments,
            self.instruments.get_trading_schedule(share.exchange, interval),
        )
        account_id = bot_config.account_id
        increments = BalanceIncrements.of(balance_config)
        current = exchange.init(
            account_id, from_, {share.currency: balance_config.initial_balance}
        )
        first_minute = current
        # increments due before the first trading minute join the initial balance
        increments.apply(
            exchange, account_id, share.currency, from_, min(first_minute, to), at=first_minute
        )

        cache = strategy.init_cache()
        candles_history: list[Candle] = []
        processed_window: tuple[datetime, datetime] | None = None
        while current < to:
            candles = market_data.get_last_candles(
                share.figi, current, bot_config.candles_count, bot_config.candle_interval
            )
            if not candles:
                logger.info(f"No candles found for {share.figi} at {current}")
                processed_window = None
            elif (candles[0].time, candles[-1].time) == processed_window:
                logger.debug(f"Candles window at {current} is already processed")
            else:
                processed_window = (candles[0].time, candles[-1].time)
                if not candles_history or candles_history[-1].time != candles[-1].time:
                    candles_history.append(candles[-1])
                cache = self._decide_and_trade(
                    exchange, strategy, cache, bot_config, share, candles
                )

            next_minute = exchange.advance()
            end = to if next_minute is None else min(next_minute, to)
            increments.apply(exchange, account_id, share.currency, current, end)
            if next_minute is None:
                break
            current = next_minute

        # investments are booked no earlier than the first trading minute, which may lie after `to`
        weighting_end = max(to, first_minute)
        return self._create_result(
            exchange, bot_config, interval, weighting_end, share, candles_history
        )

    @staticmethod
    def _decide_and_trade(
        exchange: FakeExchange,
        strategy: ITradingStrategy,
        cache: Any,
        bot_config: BotConfig,
        share: Share,
        candles: list[Candle],
    ) -> Any:
        """Ask strategy for a decision and place an order if needed; returns the next cache."""
        account_id = bot_config.account_id
        now = exchange.current_timestamp
        last_week = Interval.of(now - timedelta(days=LAST_OPERATIONS_DAYS), now)
        data = DecisionData(
            balance=exchange.get_balance(account_id, share.currency),
            position=exchange.get_position(account_id, share.figi),
            current_candles=candles,
            last_operations=exchange.get_operations(account_id, last_week, share.figi),
            share=share,
            commission=bot_config.commission,
            last_price=exchange.get_last_price(share.figi),
        )

        decision = strategy.decide(data, cache)
        if decision.action.is_trade and decision.quantity is not None:
            exchange.execute_market_order(
                account_id,
                share.figi,
                decision.action.to_operation_type(),
                decision.quantity,
                bot_config.commission,
            )
        return decision.cache

    @staticmethod
    def _create_result(
        exchange: FakeExchange,
        bot_config: BotConfig,
        interval: Interval,
        weighting_end: datetime,
        share: Share,
        candles_history: list[Candle],
    ) -> BackTestResult:
        """Summarize the ledger of a finished run."""
        account_id = bot_config.account_id
        currency = share.currency

        final_total_savings = exchange.get_total_savings(account_id, currency)
        total_investment = exchange.get_total_investment(account_id, currency)
        weighted_average_investment = exchange.get_weighted_average_investment(
            account_id, currency, weighting_end
        )
        balances = Balances(
            initial_investment=exchange.get_initial_investment(account_id, currency),
            total_investment=total_investment,
            weighted_average_investment=weighted_average_investment,
            final_balance=exchange.get_balance(account_id, currency),
            final_total_savings=final_total_savings,
        )

        return BackTestResult(
            bot_config=bot_config,
            interval=interval,
            balances=balances,
            profits=get_profits(
                final_total_savings - total_investment,
                weighted_average_investment,
                interval.to_days(),
            ),
            positions=exchange.get_repriced_positions(account_id),
            operations=exchange.get_operations(account_id, interval, share.figi),
            candles=candles_history,
        )


def get_profits(absolute: Decimal, weighted_average_investment: Decimal, days: float) -> Profits:
    """
    Calculate profits of a run.

    Args:
        absolute: Final total savings minus total investment
        weighted_average_investment: Time-weighted invested capital
        days: Length of the run in days

    Returns:
        Absolute, relative and annualized relative profits; ratios are zero
        when their denominator is zero
    """
    if numbers_equal(weighted_average_investment, ZERO):
        relative = ZERO
    else:
        relative = divide(absolute, weighted_average_investment)

    if days <= 0:
        relative_annual = ZERO
    else:
        relative_annual = divide(relative * to_decimal(DAYS_IN_YEAR), to_decimal(days))

    return Profits(absolute=absolute, relative=relative, relative_annual=relative_annual)
