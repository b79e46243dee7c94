"""
Conservative strategy: buy whenever possible, never sell.
"""

from typing import Any

from trader.core.models.config import ConservativeStrategyParams
from trader.core.models.decision import Decision, DecisionData

from .base import AbstractTradingStrategy


class ConservativeStrategy(AbstractTradingStrategy):
    """Buys all affordable lots at every decision."""

    def __init__(self, params: ConservativeStrategyParams) -> None:
        super().__init__("Conservative", params)

    def decide(self, data: DecisionData, cache: Any) -> Decision:
        if data.operation_in_progress:
            return self.wait(cache, "Exists operation in progress")
        return self.get_buy_available_or_wait_decision(data, cache)
