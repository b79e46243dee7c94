"""
Unit tests for configuration models and the strategy factory.
"""

from decimal import Decimal

import pytest
from pydantic import ValidationError as PydanticValidationError

from trader.core.enums import CandleInterval, MovingAverageType, StrategyType
from trader.core.exceptions.backtest import StrategyError
from trader.core.models.config import (
    BackTestProperties,
    BalanceConfig,
    BotConfig,
    CrossStrategyParams,
    TrendReversalStrategyParams,
)
from trader.strategies.conservative import ConservativeStrategy
from trader.strategies.cross import CrossStrategy
from trader.strategies.factory import StrategyFactory


class TestBotConfig:
    """Test suite for bot configuration."""

    def test_should_apply_defaults(self) -> None:
        """Test default values."""
        config = BotConfig(
            figi="FIGI", commission=Decimal("0.003"), strategy_type=StrategyType.CONSERVATIVE
        )

        assert config.account_id is None
        assert config.candle_interval == CandleInterval.MIN_1
        assert config.candles_count == 1000
        assert config.strategy_params == {}

    def test_should_parse_enums_from_strings(self) -> None:
        """Test loading from plain data."""
        config = BotConfig.model_validate(
            {"figi": "FIGI", "commission": "0", "strategy_type": "cross", "candle_interval": "hour"}
        )

        assert config.strategy_type == StrategyType.CROSS
        assert config.candle_interval == CandleInterval.HOUR

    @pytest.mark.parametrize("commission", ["-0.1", "1.5"])
    def test_should_reject_commission_out_of_range(self, commission: str) -> None:
        """Test commission bounds."""
        with pytest.raises(PydanticValidationError):
            BotConfig(
                figi="FIGI",
                commission=Decimal(commission),
                strategy_type=StrategyType.CONSERVATIVE,
            )


class TestBalanceConfig:
    """Test suite for balance configuration."""

    def test_should_accept_increment_with_cron(self) -> None:
        """Test scheduled increments."""
        config = BalanceConfig(
            initial_balance=Decimal(1000),
            balance_increment=Decimal(100),
            balance_increment_cron="0 12 * * MON",
        )

        cron = config.get_cron()
        assert cron is not None
        assert cron.hours == frozenset({12})

    def test_should_accept_missing_increments(self) -> None:
        """Test balance without increments."""
        config = BalanceConfig(initial_balance=Decimal(1000))

        assert config.balance_increment is None
        assert config.get_cron() is None

    def test_should_require_increment_and_cron_together(self) -> None:
        """Test increment pair validation."""
        with pytest.raises(PydanticValidationError):
            BalanceConfig(initial_balance=Decimal(1000), balance_increment=Decimal(100))

    def test_should_reject_invalid_cron(self) -> None:
        """Test cron validation."""
        with pytest.raises(PydanticValidationError):
            BalanceConfig(
                initial_balance=Decimal(1000),
                balance_increment=Decimal(100),
                balance_increment_cron="every monday",
            )

    def test_should_reject_non_positive_amounts(self) -> None:
        """Test amount bounds."""
        with pytest.raises(PydanticValidationError):
            BalanceConfig(initial_balance=Decimal(0))
        with pytest.raises(PydanticValidationError):
            BalanceConfig(
                initial_balance=Decimal(1000),
                balance_increment=Decimal(0),
                balance_increment_cron="0 12 * * *",
            )


class TestStrategyParams:
    """Test suite for strategy parameter models."""

    def test_should_require_small_window_below_big_window(self) -> None:
        """Test window relation."""
        with pytest.raises(PydanticValidationError):
            CrossStrategyParams(
                minimum_profit=0.1, index_coefficient=0.5, small_window=5, big_window=5
            )

    def test_should_require_extremum_index_within_window(self) -> None:
        """Test extremum index relation."""
        with pytest.raises(PydanticValidationError):
            TrendReversalStrategyParams(
                minimum_profit=0.1, last_prices_count=3, extremum_price_index=3
            )

    def test_should_reject_non_positive_thread_count(self) -> None:
        """Test engine properties validation."""
        with pytest.raises(PydanticValidationError):
            BackTestProperties(thread_count=0)


class TestStrategyFactory:
    """Test suite for strategy creation."""

    def test_should_create_strategy_without_params(self) -> None:
        """Test conservative strategy creation."""
        strategy = StrategyFactory.create(StrategyType.CONSERVATIVE, {})

        assert isinstance(strategy, ConservativeStrategy)

    def test_should_create_strategy_with_validated_params(self) -> None:
        """Test cross strategy creation from raw params."""
        strategy = StrategyFactory.create(
            StrategyType.CROSS,
            {
                "minimum_profit": 0.05,
                "index_coefficient": 0.8,
                "small_window": 10,
                "big_window": 50,
                "moving_average_type": "exponential",
            },
        )

        assert isinstance(strategy, CrossStrategy)
        assert strategy.params.moving_average_type == MovingAverageType.EXPONENTIAL
        assert strategy.params.order == 1

    def test_should_wrap_invalid_params_into_strategy_error(self) -> None:
        """Test parameter errors."""
        with pytest.raises(StrategyError):
            StrategyFactory.create(StrategyType.DUMB, {})

    def test_should_reject_unknown_params(self) -> None:
        """Test that unexpected keys are not silently ignored."""
        with pytest.raises(StrategyError):
            StrategyFactory.create(StrategyType.CONSERVATIVE, {"minimum_profit": 0.1})
