"""
Base trading strategy.

Shared buy-or-wait and sell-or-wait rules used by all concrete strategies.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from loguru import logger

from trader.core.enums import DecisionAction
from trader.core.interfaces.strategy import ITradingStrategy
from trader.core.models.config import StrategyParams
from trader.core.models.decision import Decision, DecisionData
from trader.core.types.financial import (
    ZERO,
    add_fraction,
    get_fraction_difference,
    is_lower,
    set_default_scale,
    subtract_fraction,
    to_decimal,
)


@dataclass(frozen=True)
class StrategyCache:
    """Cache of strategies which keep nothing between decisions."""


class AbstractTradingStrategy(ITradingStrategy):
    """Base class of trading strategies.

    Strategies are stateless and may be shared between concurrent runs.
    """

    def __init__(self, name: str, params: StrategyParams) -> None:
        self._name = name
        self.params = params

    @property
    def name(self) -> str:
        """Strategy name with its parameters."""
        params = self.params.model_dump(mode="json")
        return f"{self._name} {params}" if params else self._name

    def init_cache(self) -> Any:
        """Create empty cache."""
        return StrategyCache()

    def wait(self, cache: Any, reason: str) -> Decision:
        """Create WAIT decision and log its reason."""
        decision = Decision(DecisionAction.WAIT, None, cache)
        logger.debug(f"{reason}. Decision is {decision.to_pretty_string()}")
        return decision

    def get_buy_or_wait_decision(self, data: DecisionData, lots: int, cache: Any) -> Decision:
        """
        Decide to buy ``lots`` if affordable, wait otherwise.

        Raises:
            ValueError: If lots is not positive
        """
        if lots <= 0:
            raise ValueError(f"lots must be positive, got {lots}")

        available_lots = data.available_lots
        if available_lots >= lots:
            decision = Decision(DecisionAction.BUY, lots, cache)
        else:
            decision = Decision(DecisionAction.WAIT, None, cache)
        logger.debug(
            f"Available lots - {available_lots}. Requested lots - {lots}. "
            f"Decision is {decision.to_pretty_string()}"
        )
        return decision

    def get_buy_available_or_wait_decision(self, data: DecisionData, cache: Any) -> Decision:
        """Decide to buy all affordable lots, wait if none are affordable."""
        available_lots = data.available_lots
        if available_lots == 0:
            return self.wait(cache, "No available lots")
        return self.get_buy_or_wait_decision(data, available_lots, cache)

    def get_sell_or_wait_decision(
        self, data: DecisionData, minimum_profit: float, cache: Any
    ) -> Decision:
        """
        Decide to sell the whole position if profitable enough, wait otherwise.

        A negative minimum profit disables selling.
        """
        if minimum_profit < 0:
            return self.wait(cache, f"Minimum profit {minimum_profit} is negative")
        if data.position is None:
            return self.wait(cache, "No position to sell")

        profit = self.get_profit(data)
        if is_lower(profit, to_decimal(minimum_profit)):
            return self.wait(
                cache, f"Potential profit {profit} is lower than minimum profit {minimum_profit}"
            )

        decision = Decision(DecisionAction.SELL, data.position_lots_count, cache)
        logger.debug(
            f"Potential profit {profit} is not lower than minimum profit {minimum_profit}. "
            f"Decision is {decision.to_pretty_string()}"
        )
        return decision

    @staticmethod
    def get_profit(data: DecisionData) -> Decimal:
        """Relative profit of selling the whole position now, commission included."""
        if data.position is None:
            return ZERO

        sell_price = subtract_fraction(data.current_price, data.commission)
        buy_price = add_fraction(set_default_scale(data.average_position_price), data.commission)
        return get_fraction_difference(sell_price, buy_price)
