"""
Core enumerations for the backtesting engine.

This module provides centralized enumerations for domain concepts
like candle intervals, operation types and strategy types.
"""

from .candle_intervals import CandleInterval
from .operation_types import DecisionAction, OperationState, OperationType
from .strategy_types import Crossover, MovingAverageType, StrategyType

__all__ = [
    "CandleInterval",
    "OperationType",
    "OperationState",
    "DecisionAction",
    "StrategyType",
    "MovingAverageType",
    "Crossover",
]
