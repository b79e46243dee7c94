"""
Strategy decision models.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from trader.core.enums import DecisionAction
from trader.core.exceptions.backtest import ValidationError
from trader.core.models.candle import Candle, Share
from trader.core.models.operation import Operation
from trader.core.models.position import Position
from trader.core.types.financial import ZERO, add_fraction, get_integer_quotient


@dataclass(frozen=True)
class Decision:
    """Action decided by a strategy and the cache for its next call.

    ``quantity`` is a lot count, None for WAIT.
    """

    action: DecisionAction
    quantity: int | None = None
    cache: Any = None

    def __post_init__(self) -> None:
        """Validate decision data after initialization."""
        if self.action == DecisionAction.WAIT:
            if self.quantity is not None:
                raise ValidationError(f"WAIT decision can't have quantity, got {self.quantity}")
        elif self.quantity is None or self.quantity <= 0:
            raise ValidationError(f"{self.action} decision needs positive quantity")

    def to_pretty_string(self) -> str:
        """Human readable representation for logs."""
        if self.quantity is None:
            return str(self.action)
        return f"{self.action} {self.quantity} lots"


@dataclass(frozen=True)
class DecisionData:
    """Market window and ledger snapshot a strategy decides on."""

    balance: Decimal
    position: Position | None
    current_candles: list[Candle]
    last_operations: list[Operation]
    share: Share
    commission: Decimal = field(default=ZERO)
    last_price: Decimal | None = None

    @property
    def current_price(self) -> Decimal:
        """Price orders are filled at now.

        The exchange's last one-minute price when given, otherwise the close of
        the latest candle. Candles coarser than one minute may close after the
        exchange clock.
        """
        if self.last_price is not None:
            return self.last_price
        return self.current_candles[-1].close

    @property
    def position_lots_count(self) -> int:
        """Lots held, zero without position."""
        return 0 if self.position is None else self.position.lots

    @property
    def average_position_price(self) -> Decimal:
        """Average cost of held shares, zero without position."""
        return ZERO if self.position is None else self.position.average_price

    @property
    def operation_in_progress(self) -> bool:
        """Check whether any recent operation is not resolved yet."""
        return any(operation.state.is_in_progress for operation in self.last_operations)

    @property
    def available_lots(self) -> int:
        """Lots affordable with the current balance including commission.

        Raises:
            DivisionError: If one lot costs nothing
        """
        lot_price = add_fraction(self.current_price * self.share.lot, self.commission)
        return get_integer_quotient(self.balance, lot_price)
