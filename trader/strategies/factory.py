"""
Strategy factory.

Maps a strategy type to its implementation and parameters model.
"""

from typing import Any

import pydantic

from trader.core.enums import StrategyType
from trader.core.exceptions.backtest import StrategyError
from trader.core.interfaces.strategy import ITradingStrategy
from trader.core.models.config import (
    ConservativeStrategyParams,
    CrossStrategyParams,
    DumbStrategyParams,
    StrategyParams,
    TrendReversalStrategyParams,
)

from .base import AbstractTradingStrategy
from .conservative import ConservativeStrategy
from .cross import CrossStrategy
from .dumb import DumbStrategy
from .trend_reversal import TrendReversalStrategy

_STRATEGIES: dict[StrategyType, tuple[type[AbstractTradingStrategy], type[StrategyParams]]] = {
    StrategyType.CONSERVATIVE: (ConservativeStrategy, ConservativeStrategyParams),
    StrategyType.DUMB: (DumbStrategy, DumbStrategyParams),
    StrategyType.CROSS: (CrossStrategy, CrossStrategyParams),
    StrategyType.TREND_REVERSAL: (TrendReversalStrategy, TrendReversalStrategyParams),
}


class StrategyFactory:
    """Creates strategies from their type and raw parameters."""

    @staticmethod
    def create(strategy_type: StrategyType, params: dict[str, Any]) -> ITradingStrategy:
        """
        Create strategy.

        Args:
            strategy_type: Strategy to create
            params: Raw strategy parameters

        Returns:
            Strategy instance

        Raises:
            StrategyError: If type is unknown or parameters are invalid
        """
        if strategy_type not in _STRATEGIES:
            raise StrategyError(f"Unknown strategy type: {strategy_type}")

        strategy_class, params_class = _STRATEGIES[strategy_type]
        try:
            strategy_params = params_class.model_validate(params)
        except pydantic.ValidationError as e:
            raise StrategyError(
                f"Invalid parameters of {strategy_type} strategy: {e}", {"params": params}
            ) from e
        return strategy_class(strategy_params)  # type: ignore[arg-type]
