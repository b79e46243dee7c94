"""Helper classes for the simulated ledger to reduce complexity."""

from datetime import datetime
from decimal import Decimal

from trader.core.enums import OperationType
from trader.core.exceptions.backtest import (
    InsufficientBalanceError,
    InsufficientPositionError,
    LedgerError,
    ValidationError,
)
from trader.core.models.candle import Share
from trader.core.models.operation import Operation
from trader.core.models.position import Position
from trader.core.types.financial import ZERO, multiply


class LedgerValidator:
    """Centralized validation helper for ledger operations."""

    @staticmethod
    def validate_share(share: Share) -> None:
        """Validate that an instrument can be traded.

        Raises:
            ValidationError: If lot size is not positive
        """
        if share.lot <= 0:
            raise ValidationError(f"Lot size of {share.figi} must be positive, got {share.lot}")

    @staticmethod
    def check_sufficient_balance(required: Decimal, available: Decimal, currency: str) -> None:
        """Check that cash covers the order.

        Raises:
            InsufficientBalanceError: If balance would become negative
        """
        if available - required < ZERO:
            raise InsufficientBalanceError(
                required=required, available=available, currency=currency
            )

    @staticmethod
    def check_sufficient_position(figi: str, requested: int, position: Position | None) -> None:
        """Check that the position holds enough lots to sell.

        Raises:
            InsufficientPositionError: If more lots are requested than held
        """
        available = 0 if position is None else position.lots
        if requested > available:
            raise InsufficientPositionError(figi=figi, requested=requested, available=available)

    @staticmethod
    def check_invariants(balance: Decimal, position: Position | None, currency: str) -> None:
        """Check ledger invariants after a mutation.

        Raises:
            LedgerError: If balance or lots became negative
        """
        if balance < ZERO:
            raise LedgerError(f"Negative {currency} balance {balance}")
        if position is not None and position.lots < 0:
            raise LedgerError(f"Negative lots {position.lots} of {position.figi}")


class CommissionCalculator:
    """Calculates commission of an order."""

    @staticmethod
    def calculate(total_price: Decimal, commission_rate: Decimal) -> Decimal:
        """Calculate commission as a fraction of order value."""
        return multiply(total_price, commission_rate)


class OperationRecorder:
    """Records operations to history."""

    @staticmethod
    def record(
        operations: list[Operation],
        timestamp: datetime,
        figi: str,
        operation_type: OperationType,
        lots: int,
        quantity: int,
        price: Decimal,
        commission: Decimal,
    ) -> Operation:
        """Create an operation and append it to history.

        Raises:
            LedgerError: If timestamp precedes the last recorded operation
        """
        if operations and timestamp < operations[-1].timestamp:
            raise LedgerError(
                f"Operation at {timestamp} precedes last operation at {operations[-1].timestamp}"
            )
        operation = Operation(
            timestamp=timestamp,
            figi=figi,
            operation_type=operation_type,
            lots=lots,
            quantity=quantity,
            price=price,
            commission=commission,
        )
        operations.append(operation)
        return operation


class PositionManager:
    """Manages position lifecycle."""

    @staticmethod
    def add_lots(
        positions: dict[str, Position], share: Share, lots: int, price: Decimal
    ) -> Position:
        """Create position or merge bought lots into the existing one."""
        quantity = lots * share.lot
        existing = positions.get(share.figi)
        if existing is None:
            position = Position(
                figi=share.figi,
                currency=share.currency,
                quantity=quantity,
                lots=lots,
                average_price=price,
                current_price=price,
            )
        else:
            position = existing.add(lots, quantity, price)
        positions[share.figi] = position
        return position

    @staticmethod
    def remove_lots(
        positions: dict[str, Position], share: Share, lots: int, price: Decimal
    ) -> Position | None:
        """Reduce position by sold lots, dropping it when nothing is left."""
        position = positions[share.figi].remove(lots, lots * share.lot, price)
        if position.lots == 0:
            del positions[share.figi]
            return None
        positions[share.figi] = position
        return position
