"""
Operation and decision enumerations.

This module defines ledger operation directions and states, and the
actions a strategy may decide on.
"""

from enum import StrEnum


class OperationType(StrEnum):
    """
    Direction of a ledger operation.
    """

    BUY = "buy"
    SELL = "sell"

    @property
    def is_buy(self) -> bool:
        """Check if operation spends cash."""
        return self == self.BUY


class OperationState(StrEnum):
    """
    Execution state of an operation.

    Simulated market orders fill at once, so only external history can
    contain unspecified (in flight) operations.
    """

    DONE = "done"
    DECLINE = "decline"
    UNSPECIFIED = "unspecified"

    @property
    def is_in_progress(self) -> bool:
        """Check if the operation is not resolved yet."""
        return self == self.UNSPECIFIED


class DecisionAction(StrEnum):
    """
    Action produced by a trading strategy.
    """

    WAIT = "wait"
    BUY = "buy"
    SELL = "sell"

    @property
    def is_trade(self) -> bool:
        """Check if action requires placing an order."""
        return self != self.WAIT

    def to_operation_type(self) -> OperationType:
        """
        Map a trading action to an operation direction.

        Raises:
            ValueError: If action is WAIT
        """
        if self == self.BUY:
            return OperationType.BUY
        if self == self.SELL:
            return OperationType.SELL
        raise ValueError("WAIT has no operation type")
