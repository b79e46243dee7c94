"""
Position domain model.

Positions are immutable snapshots; the ledger replaces them on every
change so strategies can hold on to them safely.
"""

from dataclasses import dataclass, replace
from decimal import Decimal

from trader.core.exceptions.backtest import ValidationError
from trader.core.types.financial import ZERO, divide, multiply


@dataclass(frozen=True)
class Position:
    """Held quantity of one instrument.

    ``quantity`` counts shares, ``lots`` counts lots (``quantity / lot size``).
    """

    figi: str
    currency: str
    quantity: int
    lots: int
    average_price: Decimal
    current_price: Decimal

    def __post_init__(self) -> None:
        """Validate position data after initialization."""
        if self.lots < 0:
            raise ValidationError(f"Lots must be non-negative, got {self.lots}")
        if self.quantity < 0:
            raise ValidationError(f"Quantity must be non-negative, got {self.quantity}")
        if self.average_price < ZERO:
            raise ValidationError(f"Average price must be non-negative, got {self.average_price}")

    @property
    def total_price(self) -> Decimal:
        """Value of the position at the current price."""
        return multiply(self.current_price, self.quantity)

    @property
    def expected_yield(self) -> Decimal:
        """Unrealized profit at the current price."""
        return multiply(self.current_price - self.average_price, self.quantity)

    def add(self, lots: int, quantity: int, price: Decimal) -> "Position":
        """Get position with bought lots merged in at the new average cost.

        Args:
            lots: Bought lots
            quantity: Bought shares
            price: Price per share of the purchase

        Returns:
            New position
        """
        new_quantity = self.quantity + quantity
        total_cost = multiply(self.average_price, self.quantity) + multiply(price, quantity)
        return replace(
            self,
            quantity=new_quantity,
            lots=self.lots + lots,
            average_price=divide(total_cost, new_quantity),
            current_price=price,
        )

    def remove(self, lots: int, quantity: int, price: Decimal) -> "Position":
        """Get position reduced by sold lots; average cost is unchanged."""
        return replace(
            self,
            quantity=self.quantity - quantity,
            lots=self.lots - lots,
            current_price=price,
        )

    def reprice(self, price: Decimal) -> "Position":
        """Get position valued at another price."""
        return replace(self, current_price=price)
