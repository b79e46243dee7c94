"""
Back test result models.

Results are plain immutable aggregates built once per run, either on
success or on failure, and exported as dictionaries by reporting code.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from trader.core.models.candle import Candle
from trader.core.models.config import BotConfig
from trader.core.models.interval import Interval
from trader.core.models.operation import Operation
from trader.core.models.position import Position
from trader.core.types.financial import ZERO


@dataclass(frozen=True)
class Balances:
    """Money summary of a run."""

    initial_investment: Decimal
    total_investment: Decimal
    weighted_average_investment: Decimal
    final_balance: Decimal
    final_total_savings: Decimal

    @classmethod
    def zeros(cls) -> "Balances":
        """All-zero balances of a failed run."""
        return cls(ZERO, ZERO, ZERO, ZERO, ZERO)

    def to_dict(self) -> dict[str, str]:
        """Convert balances to dictionary."""
        return {
            "initial_investment": str(self.initial_investment),
            "total_investment": str(self.total_investment),
            "weighted_average_investment": str(self.weighted_average_investment),
            "final_balance": str(self.final_balance),
            "final_total_savings": str(self.final_total_savings),
        }


@dataclass(frozen=True)
class Profits:
    """Profit summary of a run."""

    absolute: Decimal
    relative: Decimal
    relative_annual: Decimal

    @classmethod
    def zeros(cls) -> "Profits":
        """All-zero profits of a failed run."""
        return cls(ZERO, ZERO, ZERO)

    def to_dict(self) -> dict[str, str]:
        """Convert profits to dictionary."""
        return {
            "absolute": str(self.absolute),
            "relative": str(self.relative),
            "relative_annual": str(self.relative_annual),
        }


@dataclass(frozen=True)
class BackTestResult:
    """Results from one back test run."""

    bot_config: BotConfig
    interval: Interval
    balances: Balances
    profits: Profits
    positions: list[Position] = field(default_factory=list)
    operations: list[Operation] = field(default_factory=list)
    candles: list[Candle] = field(default_factory=list)
    error: str | None = None

    @classmethod
    def failed(cls, bot_config: BotConfig, interval: Interval, error: str) -> "BackTestResult":
        """Create result of a run which raised."""
        return cls(
            bot_config=bot_config,
            interval=interval,
            balances=Balances.zeros(),
            profits=Profits.zeros(),
            error=error,
        )

    @property
    def is_failed(self) -> bool:
        """Check if the run failed."""
        return self.error is not None

    def to_dict(self) -> dict:
        """Convert results to dictionary."""
        return {
            "bot_config": self.bot_config.model_dump(mode="json"),
            "interval": {
                "from": None if self.interval.from_ is None else self.interval.from_.isoformat(),
                "to": None if self.interval.to is None else self.interval.to.isoformat(),
            },
            "balances": self.balances.to_dict(),
            "profits": self.profits.to_dict(),
            "positions": [
                {
                    "figi": position.figi,
                    "currency": position.currency,
                    "quantity": position.quantity,
                    "lots": position.lots,
                    "average_price": str(position.average_price),
                    "current_price": str(position.current_price),
                    "expected_yield": str(position.expected_yield),
                }
                for position in self.positions
            ],
            "operations": [operation.to_dict() for operation in self.operations],
            "candles": [
                {
                    "time": candle.time.isoformat(),
                    "open": str(candle.open),
                    "close": str(candle.close),
                    "high": str(candle.high),
                    "low": str(candle.low),
                    "volume": candle.volume,
                    "interval": candle.interval.value,
                }
                for candle in self.candles
            ],
            "error": self.error,
        }
