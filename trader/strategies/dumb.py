"""
Reactive ("dumb") strategy.

Buys when flat; when holding a position sells it as soon as the profit
threshold is met and otherwise keeps buying.
"""

from typing import Any

from trader.core.enums import DecisionAction
from trader.core.models.config import DumbStrategyParams
from trader.core.models.decision import Decision, DecisionData

from .base import AbstractTradingStrategy


class DumbStrategy(AbstractTradingStrategy):
    """Buy-then-sell-at-profit strategy."""

    params: DumbStrategyParams

    def __init__(self, params: DumbStrategyParams) -> None:
        super().__init__("Dumb", params)

    def decide(self, data: DecisionData, cache: Any) -> Decision:
        if data.operation_in_progress:
            return self.wait(cache, "Exists operation in progress")

        if data.position is None:
            return self.get_buy_available_or_wait_decision(data, cache)

        decision = self.get_sell_or_wait_decision(data, self.params.minimum_profit, cache)
        if decision.action == DecisionAction.WAIT:
            decision = self.get_buy_available_or_wait_decision(data, cache)
        return decision
