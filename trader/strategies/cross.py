"""
Moving average crossover strategy.

Compares short-window and long-window moving averages of open prices and
acts when their last crossover sits at the expected index:

- short average crossing from below: buy all affordable lots
- short average crossing from above: sell the position if profitable;
  the greedy variant buys one lot instead when selling is rejected
- no crossover at the index: wait
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from loguru import logger

from trader.core.enums import Crossover, DecisionAction
from trader.core.models.config import CrossStrategyParams
from trader.core.models.decision import Decision, DecisionData
from trader.core.types.financial import to_decimal
from trader.core.utils.trend import get_averager, get_crossover_if_last

from .base import AbstractTradingStrategy


@dataclass(frozen=True)
class CrossStrategyCache:
    """Time of the candle of the last crossover acted upon."""

    last_crossover_time: datetime | None = None


class CrossStrategy(AbstractTradingStrategy):
    """Moving average crossover strategy."""

    params: CrossStrategyParams

    def __init__(self, params: CrossStrategyParams) -> None:
        super().__init__("Cross", params)
        self._averager = get_averager(params.moving_average_type)

    def init_cache(self) -> CrossStrategyCache:
        return CrossStrategyCache()

    def decide(self, data: DecisionData, cache: CrossStrategyCache) -> Decision:
        if data.operation_in_progress:
            return self.wait(cache, "Exists operation in progress")

        values = [candle.open for candle in data.current_candles]
        short_averages = self._averager.get_averages(
            values, self.params.small_window, self.params.order
        )
        long_averages = self._averager.get_averages(
            values, self.params.big_window, self.params.order
        )

        index = self.get_crossover_index(len(values))
        crossover = get_crossover_if_last(short_averages, long_averages, index)
        if crossover == Crossover.NONE:
            return self.wait(cache, "No crossover at expected position")

        crossover_time = data.current_candles[index].time
        if crossover_time == cache.last_crossover_time:
            return self.wait(cache, f"Crossover at {crossover_time} is already processed")

        logger.debug(f"Crossover {crossover} at {crossover_time}")
        return self._decide_on_crossover(data, CrossStrategyCache(crossover_time), crossover)

    def get_crossover_index(self, size: int) -> int:
        """Expected crossover index in a window of ``size`` values, rounded half up."""
        position = to_decimal(self.params.index_coefficient) * (size - 1)
        return int(position.quantize(Decimal(1), rounding=ROUND_HALF_UP))

    def _decide_on_crossover(
        self, data: DecisionData, cache: CrossStrategyCache, crossover: Crossover
    ) -> Decision:
        if crossover == Crossover.BELOW:
            return self.get_buy_available_or_wait_decision(data, cache)

        decision = self.get_sell_or_wait_decision(data, self.params.minimum_profit, cache)
        # non-greedy strategy just waits when selling is rejected
        if self.params.greedy and decision.action == DecisionAction.WAIT:
            decision = self.get_buy_or_wait_decision(data, 1, cache)
        return decision
