"""
Strategy related enumerations.
"""

from enum import StrEnum


class StrategyType(StrEnum):
    """
    Available trading strategies.
    """

    CONSERVATIVE = "conservative"
    DUMB = "dumb"
    CROSS = "cross"
    TREND_REVERSAL = "trend_reversal"

    @classmethod
    def from_string(cls, value: str) -> "StrategyType":
        """
        Convert string to StrategyType enum.

        Raises:
            ValueError: If strategy type is not supported
        """
        value_lower = value.lower()
        for strategy_type in cls:
            if strategy_type.value == value_lower:
                return strategy_type

        raise ValueError(
            f"Unsupported strategy type: {value}. "
            f"Supported types: {', '.join([st.value for st in cls])}"
        )


class MovingAverageType(StrEnum):
    """
    Moving average flavours used by the crossover strategy.
    """

    SIMPLE = "simple"
    LINEAR = "linear"
    EXPONENTIAL = "exponential"


class Crossover(StrEnum):
    """
    Relative movement of the first series against the second one.

    BELOW means the first series came from below and is now above the second.
    ABOVE means it came from above and is now below.
    """

    NONE = "none"
    BELOW = "below"
    ABOVE = "above"
