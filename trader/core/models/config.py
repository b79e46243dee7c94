"""
Pydantic configuration models.

Back test requests, balance schedules, per-strategy parameters and
engine properties are validated once, at construction.
"""

from decimal import Decimal
from pathlib import Path
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from trader.core.constants import (
    CONSECUTIVE_EMPTY_DAYS_LIMIT,
    DEFAULT_THREAD_COUNT,
    LAST_CANDLES_COUNT,
)
from trader.core.enums import CandleInterval, MovingAverageType, StrategyType
from trader.core.exceptions.backtest import ConfigurationError
from trader.core.utils.cron import CronExpression


class BotConfig(BaseModel):
    """Configuration of one back test run."""

    model_config = ConfigDict(frozen=True)

    account_id: str | None = Field(default=None, description="Broker account, None for default")
    figi: str = Field(..., min_length=1, description="Instrument identifier")
    candle_interval: CandleInterval = Field(
        default=CandleInterval.MIN_1, description="Resolution of candles fed to the strategy"
    )
    commission: Decimal = Field(..., ge=0, le=1, description="Commission fraction of order value")
    strategy_type: StrategyType = Field(..., description="Trading strategy")
    strategy_params: dict[str, Any] = Field(
        default_factory=dict, description="Strategy parameters, validated per strategy"
    )
    candles_count: int = Field(
        default=LAST_CANDLES_COUNT, gt=0, description="Candles fed to the strategy per decision"
    )

    def to_pretty_string(self) -> str:
        """Short human readable representation for logs."""
        return (
            f"BotConfig(account={self.account_id}, figi={self.figi}, "
            f"interval={self.candle_interval}, commission={self.commission}, "
            f"strategy={self.strategy_type}, params={self.strategy_params})"
        )


class BalanceConfig(BaseModel):
    """Initial balance and optional scheduled increments shared by all runs."""

    model_config = ConfigDict(frozen=True)

    initial_balance: Decimal = Field(..., gt=0, description="Cash at the start of a run")
    balance_increment: Annotated[Decimal, Field(gt=0)] | None = Field(
        default=None, description="Cash added at every cron trigger"
    )
    balance_increment_cron: str | None = Field(
        default=None, description="Cron expression of balance increments"
    )

    @field_validator("balance_increment_cron")
    @classmethod
    def validate_cron(cls, v: str | None) -> str | None:
        """Validate that the cron expression parses."""
        if v is not None:
            try:
                CronExpression.parse(v)
            except ConfigurationError as e:
                raise ValueError(str(e)) from e
        return v

    @model_validator(mode="after")
    def validate_increment_pair(self) -> "BalanceConfig":
        """Validate that increment and cron are set together."""
        if (self.balance_increment is None) != (self.balance_increment_cron is None):
            raise ValueError("balance_increment and balance_increment_cron must be set together")
        return self

    def get_cron(self) -> CronExpression | None:
        """Parsed increment schedule."""
        if self.balance_increment_cron is None:
            return None
        return CronExpression.parse(self.balance_increment_cron)


class StrategyParams(BaseModel):
    """Base of strategy parameters; unknown keys are rejected."""

    model_config = ConfigDict(frozen=True, extra="forbid")


class ConservativeStrategyParams(StrategyParams):
    """Conservative strategy has no parameters."""


class DumbStrategyParams(StrategyParams):
    """Parameters of the reactive strategy."""

    minimum_profit: float = Field(
        ..., description="Minimal profit fraction to sell; negative disables selling"
    )


class CrossStrategyParams(StrategyParams):
    """Parameters of the moving average crossover strategy."""

    minimum_profit: float = Field(
        ..., description="Minimal profit fraction to sell; negative disables selling"
    )
    order: int = Field(default=1, ge=1, description="Times the average is applied")
    index_coefficient: float = Field(
        ..., ge=0.0, le=1.0, description="Relative position of the expected crossover"
    )
    greedy: bool = Field(default=False, description="Buy when a sell is not profitable enough")
    small_window: int = Field(..., ge=1, description="Short moving average window")
    big_window: int = Field(..., ge=1, description="Long moving average window")
    moving_average_type: MovingAverageType = Field(default=MovingAverageType.SIMPLE)

    @model_validator(mode="after")
    def validate_windows(self) -> "CrossStrategyParams":
        """Validate that the short window is shorter than the long one."""
        if self.small_window >= self.big_window:
            raise ValueError(
                f"small_window ({self.small_window}) must be lower than "
                f"big_window ({self.big_window})"
            )
        return self


class TrendReversalStrategyParams(StrategyParams):
    """Parameters of the trend reversal strategy."""

    minimum_profit: float = Field(
        ..., description="Minimal profit fraction to sell; negative disables selling"
    )
    last_prices_count: int = Field(..., ge=2, description="Candles considered for an extremum")
    extremum_price_index: int = Field(..., ge=0, description="Expected index of the extremum")

    @model_validator(mode="after")
    def validate_extremum_index(self) -> "TrendReversalStrategyParams":
        """Validate that the extremum index lies within the window."""
        if self.extremum_price_index >= self.last_prices_count:
            raise ValueError(
                f"extremum_price_index ({self.extremum_price_index}) must be lower than "
                f"last_prices_count ({self.last_prices_count})"
            )
        return self


class BackTestProperties(BaseModel):
    """Engine properties."""

    model_config = ConfigDict(frozen=True)

    thread_count: int = Field(default=DEFAULT_THREAD_COUNT, gt=0, description="Parallel runs")
    consecutive_empty_days_limit: int = Field(
        default=CONSECUTIVE_EMPTY_DAYS_LIMIT,
        gt=0,
        description="Days without candles tolerated when searching back for a price",
    )


class LogConfig(BaseModel):
    """Logging configuration."""

    dir: Path | None = Field(default=None, description="Log files directory, None for stderr only")
    rotation: str = "1 day"
    retention: str = "30 days"
    level: str = "INFO"
