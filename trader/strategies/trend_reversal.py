"""
Trend reversal strategy.

Watches the last ``last_prices_count`` candles. A buy signal is the window
minimum sitting exactly at ``extremum_price_index``, a sell signal is the
window maximum sitting there.
"""

from typing import Any

from loguru import logger

from trader.core.enums import DecisionAction
from trader.core.models.candle import Candle
from trader.core.models.config import TrendReversalStrategyParams
from trader.core.models.decision import Decision, DecisionData
from trader.core.types.financial import numbers_equal

from .base import AbstractTradingStrategy


class TrendReversalStrategy(AbstractTradingStrategy):
    """Lag-window extremum strategy."""

    params: TrendReversalStrategyParams

    def __init__(self, params: TrendReversalStrategyParams) -> None:
        super().__init__("Trend reversal", params)

    def decide(self, data: DecisionData, cache: Any) -> Decision:
        candles_count = len(data.current_candles)
        if candles_count < self.params.last_prices_count:
            logger.warning(
                f"Got {candles_count} candles while {self.params.last_prices_count} required"
            )
            return self.wait(cache, "Not enough candles")

        if data.operation_in_progress:
            return self.wait(cache, "Exists operation in progress")

        window = data.current_candles[-self.params.last_prices_count :]
        if data.position is None:
            return self._get_buy_or_wait_decision(data, window, cache)

        decision = self._get_sell_or_wait_decision(data, window, cache)
        if decision.action == DecisionAction.WAIT:
            decision = self._get_buy_or_wait_decision(data, window, cache)
        return decision

    def _get_buy_or_wait_decision(
        self, data: DecisionData, window: list[Candle], cache: Any
    ) -> Decision:
        extremum = window[self.params.extremum_price_index].low
        if not numbers_equal(extremum, min(candle.low for candle in window)):
            return self.wait(cache, f"Low {extremum} is not the window minimum")
        return self.get_buy_available_or_wait_decision(data, cache)

    def _get_sell_or_wait_decision(
        self, data: DecisionData, window: list[Candle], cache: Any
    ) -> Decision:
        extremum = window[self.params.extremum_price_index].high
        if not numbers_equal(extremum, max(candle.high for candle in window)):
            return self.wait(cache, f"High {extremum} is not the window maximum")
        return self.get_sell_or_wait_decision(data, self.params.minimum_profit, cache)
