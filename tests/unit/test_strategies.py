"""
Unit tests for trading strategies.
"""

from datetime import timedelta
from decimal import Decimal

import pytest

from tests.builders import CURRENCY, FIGI, at, make_candle, make_minute_candles, make_share
from trader.core.enums import DecisionAction, OperationState, OperationType
from trader.core.exceptions.backtest import ValidationError
from trader.core.models.candle import Candle
from trader.core.models.config import (
    ConservativeStrategyParams,
    CrossStrategyParams,
    DumbStrategyParams,
    TrendReversalStrategyParams,
)
from trader.core.models.decision import Decision, DecisionData
from trader.core.models.operation import Operation
from trader.core.models.position import Position
from trader.strategies.base import StrategyCache
from trader.strategies.conservative import ConservativeStrategy
from trader.strategies.cross import CrossStrategy, CrossStrategyCache
from trader.strategies.dumb import DumbStrategy
from trader.strategies.trend_reversal import TrendReversalStrategy


def make_position(lots: int, average_price: int | str) -> Position:
    return Position(
        figi=FIGI,
        currency=CURRENCY,
        quantity=lots,
        lots=lots,
        average_price=Decimal(average_price),
        current_price=Decimal(average_price),
    )


def make_data(
    candles: list[Candle],
    balance: int | str = 1000,
    position: Position | None = None,
    commission: str = "0",
    last_operations: list[Operation] | None = None,
) -> DecisionData:
    return DecisionData(
        balance=Decimal(balance),
        position=position,
        current_candles=candles,
        last_operations=last_operations or [],
        share=make_share(),
        commission=Decimal(commission),
    )


def in_progress_operation() -> Operation:
    return Operation(
        timestamp=at(1, 9),
        figi=FIGI,
        operation_type=OperationType.BUY,
        lots=1,
        quantity=1,
        price=Decimal(100),
        commission=Decimal(0),
        state=OperationState.UNSPECIFIED,
    )


class TestDecisionData:
    """Test suite for decision inputs."""

    def test_should_count_available_lots_with_commission(self) -> None:
        """Test affordable lots."""
        data = make_data(make_minute_candles(at(1, 10), [100]), balance=1000, commission="0.01")

        assert data.available_lots == 9

    def test_should_reject_quantity_of_wait_decision(self) -> None:
        """Test decision validation."""
        with pytest.raises(ValidationError):
            Decision(DecisionAction.WAIT, 1)
        with pytest.raises(ValidationError):
            Decision(DecisionAction.BUY, 0)


class TestConservativeStrategy:
    """Test suite for the conservative strategy."""

    def test_should_buy_all_available_lots(self) -> None:
        """Test buy decision."""
        strategy = ConservativeStrategy(ConservativeStrategyParams())
        data = make_data(make_minute_candles(at(1, 10), [100]), balance=1050)

        decision = strategy.decide(data, strategy.init_cache())

        assert decision.action == DecisionAction.BUY
        assert decision.quantity == 10
        assert decision.cache == StrategyCache()

    def test_should_wait_without_money(self) -> None:
        """Test that nothing affordable means wait."""
        strategy = ConservativeStrategy(ConservativeStrategyParams())
        data = make_data(make_minute_candles(at(1, 10), [100]), balance=99)

        assert strategy.decide(data, strategy.init_cache()).action == DecisionAction.WAIT

    def test_should_wait_while_operation_is_in_progress(self) -> None:
        """Test in-flight operations block decisions."""
        strategy = ConservativeStrategy(ConservativeStrategyParams())
        data = make_data(
            make_minute_candles(at(1, 10), [100]), last_operations=[in_progress_operation()]
        )

        assert strategy.decide(data, strategy.init_cache()).action == DecisionAction.WAIT


class TestDumbStrategy:
    """Test suite for the reactive strategy."""

    def test_should_buy_without_position(self) -> None:
        """Test first buy."""
        strategy = DumbStrategy(DumbStrategyParams(minimum_profit=0.1))
        data = make_data(make_minute_candles(at(1, 10), [100]))

        decision = strategy.decide(data, strategy.init_cache())

        assert decision.action == DecisionAction.BUY
        assert decision.quantity == 10

    def test_should_sell_whole_position_at_minimum_profit(self) -> None:
        """Test sell decision."""
        strategy = DumbStrategy(DumbStrategyParams(minimum_profit=0.1))
        data = make_data(
            make_minute_candles(at(1, 10), [110]), balance=0, position=make_position(5, 100)
        )

        decision = strategy.decide(data, strategy.init_cache())

        assert decision.action == DecisionAction.SELL
        assert decision.quantity == 5

    def test_should_buy_more_when_profit_is_too_low(self) -> None:
        """Test fallback to buying."""
        strategy = DumbStrategy(DumbStrategyParams(minimum_profit=0.1))
        data = make_data(
            make_minute_candles(at(1, 10), [105]), balance=300, position=make_position(5, 100)
        )

        decision = strategy.decide(data, strategy.init_cache())

        assert decision.action == DecisionAction.BUY
        assert decision.quantity == 2

    def test_should_never_sell_with_negative_minimum_profit(self) -> None:
        """Test that a negative threshold disables selling."""
        strategy = DumbStrategy(DumbStrategyParams(minimum_profit=-1))
        data = make_data(
            make_minute_candles(at(1, 10), [500]), balance=0, position=make_position(5, 100)
        )

        assert strategy.decide(data, strategy.init_cache()).action == DecisionAction.WAIT

    def test_should_include_commission_into_profit(self) -> None:
        """Test that commission on both sides eats the profit."""
        strategy = DumbStrategy(DumbStrategyParams(minimum_profit=0.1))
        data = make_data(
            make_minute_candles(at(1, 10), [110]),
            balance=0,
            position=make_position(5, 100),
            commission="0.01",
        )

        assert strategy.decide(data, strategy.init_cache()).action == DecisionAction.WAIT


V_SHAPE = [10, 9, 8, 7, 6, 7, 8, 9, 10]
INVERTED_V_SHAPE = [1, 2, 3, 4, 5, 4, 3, 2, 1]


def create_cross_strategy(greedy: bool = False, minimum_profit: float = 0.1) -> CrossStrategy:
    return CrossStrategy(
        CrossStrategyParams(
            minimum_profit=minimum_profit,
            index_coefficient=1.0,
            greedy=greedy,
            small_window=2,
            big_window=4,
        )
    )


def replay(
    strategy: CrossStrategy, prices: list[int], position: Position | None = None
) -> list[Decision]:
    """Feed growing candle windows like a run does and collect decisions."""
    candles = make_minute_candles(at(1, 10), prices)
    cache = strategy.init_cache()
    decisions = []
    for size in range(1, len(candles) + 1):
        decision = strategy.decide(make_data(candles[:size], position=position), cache)
        decisions.append(decision)
        cache = decision.cache
    return decisions


class TestCrossStrategy:
    """Test suite for the moving average crossover strategy."""

    def test_should_buy_exactly_once_on_crossover_from_below(self) -> None:
        """Test that a V-shaped series gives one buy at the crossover."""
        # Act
        decisions = replay(create_cross_strategy(), V_SHAPE)

        # Assert
        buys = [index for index, d in enumerate(decisions) if d.action == DecisionAction.BUY]
        assert buys == [6]
        assert decisions[6].quantity == 125
        assert decisions[6].cache == CrossStrategyCache(at(1, 10, 6))

    def test_should_wait_on_crossover_from_above_without_position(self) -> None:
        """Test that non-greedy strategy has nothing to sell."""
        decisions = replay(create_cross_strategy(), INVERTED_V_SHAPE)

        assert all(decision.action == DecisionAction.WAIT for decision in decisions)

    def test_should_buy_one_lot_when_greedy_and_sell_is_rejected(self) -> None:
        """Test greedy fallback."""
        decisions = replay(create_cross_strategy(greedy=True), INVERTED_V_SHAPE)

        trades = [d for d in decisions if d.action != DecisionAction.WAIT]
        assert len(trades) == 1
        assert trades[0].action == DecisionAction.BUY
        assert trades[0].quantity == 1

    def test_should_sell_on_crossover_from_above_when_profitable(self) -> None:
        """Test sell decision."""
        decisions = replay(
            create_cross_strategy(minimum_profit=0.1), INVERTED_V_SHAPE, make_position(3, 1)
        )

        sells = [d for d in decisions if d.action == DecisionAction.SELL]
        assert len(sells) == 1
        assert sells[0].quantity == 3

    def test_should_not_act_twice_on_same_crossover(self) -> None:
        """Test that the cache suppresses a repeated crossover."""
        # Arrange
        strategy = create_cross_strategy()
        data = make_data(make_minute_candles(at(1, 10), V_SHAPE[:7]))
        first = strategy.decide(data, strategy.init_cache())

        # Act
        second = strategy.decide(data, first.cache)

        # Assert
        assert first.action == DecisionAction.BUY
        assert second.action == DecisionAction.WAIT
        assert second.cache == first.cache

    def test_should_round_crossover_index_half_up(self) -> None:
        """Test expected crossover position."""
        strategy = CrossStrategy(
            CrossStrategyParams(
                minimum_profit=0.1, index_coefficient=0.5, small_window=2, big_window=4
            )
        )

        assert strategy.get_crossover_index(4) == 2
        assert strategy.get_crossover_index(5) == 2
        assert strategy.get_crossover_index(1) == 0


def make_extremum_candles(lows: list[int], highs: list[int]) -> list[Candle]:
    return [
        make_candle(at(1, 10) + timedelta(minutes=index), open_=low, close=low, high=high, low=low)
        for index, (low, high) in enumerate(zip(lows, highs, strict=True))
    ]


class TestTrendReversalStrategy:
    """Test suite for the trend reversal strategy."""

    @pytest.fixture
    def strategy(self) -> TrendReversalStrategy:
        return TrendReversalStrategy(
            TrendReversalStrategyParams(
                minimum_profit=0.1, last_prices_count=3, extremum_price_index=1
            )
        )

    def test_should_wait_with_too_few_candles(self, strategy: TrendReversalStrategy) -> None:
        """Test short windows."""
        data = make_data(make_extremum_candles([5, 3], [6, 4]))

        assert strategy.decide(data, strategy.init_cache()).action == DecisionAction.WAIT

    def test_should_buy_at_window_minimum(self, strategy: TrendReversalStrategy) -> None:
        """Test buy signal."""
        # only the last three candles count
        data = make_data(make_extremum_candles([1, 5, 3, 4], [2, 6, 4, 5]), balance=40)

        decision = strategy.decide(data, strategy.init_cache())

        assert decision.action == DecisionAction.BUY
        assert decision.quantity == 10

    def test_should_wait_when_minimum_is_elsewhere(self, strategy: TrendReversalStrategy) -> None:
        """Test missing buy signal."""
        data = make_data(make_extremum_candles([3, 4, 5], [4, 5, 6]))

        assert strategy.decide(data, strategy.init_cache()).action == DecisionAction.WAIT

    def test_should_sell_at_window_maximum(self, strategy: TrendReversalStrategy) -> None:
        """Test sell signal with a profitable position."""
        data = make_data(
            make_extremum_candles([5, 6, 5], [6, 9, 7]), balance=0, position=make_position(4, 2)
        )

        decision = strategy.decide(data, strategy.init_cache())

        assert decision.action == DecisionAction.SELL
        assert decision.quantity == 4
