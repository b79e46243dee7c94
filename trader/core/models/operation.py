"""
Operation domain model.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from trader.core.enums import OperationState, OperationType
from trader.core.exceptions.backtest import ValidationError


@dataclass(frozen=True)
class Operation:
    """Represents an executed ledger operation."""

    timestamp: datetime
    figi: str
    operation_type: OperationType
    lots: int
    quantity: int
    price: Decimal
    commission: Decimal
    state: OperationState = OperationState.DONE

    def __post_init__(self) -> None:
        """Validate operation data after initialization."""
        if self.lots <= 0:
            raise ValidationError(f"Lots must be positive, got {self.lots}")
        if self.quantity <= 0:
            raise ValidationError(f"Quantity must be positive, got {self.quantity}")
        if self.price <= 0:
            raise ValidationError(f"Price must be positive, got {self.price}")
        if self.commission < 0:
            raise ValidationError(f"Commission must be non-negative, got {self.commission}")

    def to_dict(self) -> dict[str, str | int]:
        """Convert to plain dictionary for serialization."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "figi": self.figi,
            "operation_type": self.operation_type.value,
            "lots": self.lots,
            "quantity": self.quantity,
            "price": str(self.price),
            "commission": str(self.commission),
            "state": self.state.value,
        }
