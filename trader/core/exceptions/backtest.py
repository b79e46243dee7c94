"""
Custom exception hierarchy for the backtesting engine.

This module defines domain-specific exceptions for better error handling.
"""

from decimal import Decimal
from typing import Any


class BacktestException(Exception):
    """Base exception for all backtesting-related errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(BacktestException):
    """Raised when input validation fails."""

    pass


class InvalidIntervalError(ValidationError):
    """Raised when an interval is inverted or unsuitable for a back test."""

    pass


class NonPositiveAmountError(ValidationError):
    """Raised when a money amount that must be positive is not."""

    def __init__(self, amount: Decimal | int | float, name: str = "amount"):
        self.amount = amount
        super().__init__(f"{name} must be positive, got {amount}", {name: str(amount)})


class DataError(BacktestException):
    """Raised when market data access fails."""

    pass


class StrategyError(BacktestException):
    """Raised when strategy construction or execution fails."""

    pass


class CalculationError(BacktestException):
    """Raised when mathematical calculations fail."""

    pass


class DivisionError(CalculationError):
    """Raised on division by zero."""

    def __init__(self, dividend: Decimal | int | float):
        self.dividend = dividend
        super().__init__(f"Division of {dividend} by zero")


class ConfigurationError(BacktestException):
    """Raised when configuration is invalid."""

    pass


class LedgerError(BacktestException):
    """Raised when ledger operations fail."""

    pass


class InsufficientBalanceError(LedgerError):
    """Raised when there is not enough cash for an operation."""

    def __init__(self, required: Decimal, available: Decimal, currency: str):
        self.required = required
        self.available = available
        self.currency = currency
        super().__init__(
            f"Insufficient {currency} balance: required={required}, available={available}",
            {"required": str(required), "available": str(available), "currency": currency},
        )


class InsufficientPositionError(LedgerError):
    """Raised when selling more lots than the position holds."""

    def __init__(self, figi: str, requested: int, available: int):
        self.figi = figi
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient position for {figi}: "
            f"requested={requested} lots, available={available} lots",
            {"figi": figi, "requested": requested, "available": available},
        )
