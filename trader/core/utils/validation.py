"""
Validation utilities for core domain models.

Provides consistent validation across the application.
"""

from decimal import Decimal

from trader.core.exceptions.backtest import NonPositiveAmountError, ValidationError
from trader.core.types.financial import ONE, ZERO, Number, to_decimal


def validate_positive_amount(value: Number, param_name: str = "amount") -> Decimal:
    """Validate that a money amount is positive.

    Args:
        value: Value to validate
        param_name: Parameter name for error messages

    Returns:
        The validated value as Decimal

    Raises:
        NonPositiveAmountError: If value is not positive
    """
    amount = to_decimal(value)
    if amount <= ZERO:
        raise NonPositiveAmountError(amount, param_name)
    return amount


def validate_positive(value: int, param_name: str) -> int:
    """Validate that a count is positive.

    Raises:
        ValidationError: If value is not positive
    """
    if value <= 0:
        raise ValidationError(f"{param_name} must be positive, got {value}")
    return value


def validate_fraction(value: Number, param_name: str = "fraction") -> Decimal:
    """Validate that a value is a fraction within [0, 1].

    Args:
        value: Value to validate
        param_name: Parameter name for error messages

    Returns:
        The validated fraction as Decimal

    Raises:
        ValidationError: If value is not between 0 and 1
    """
    fraction = to_decimal(value)
    if fraction < ZERO or fraction > ONE:
        raise ValidationError(f"{param_name} must be between 0 and 1, got {value}")
    return fraction
