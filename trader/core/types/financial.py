"""
Financial data types for deterministic backtesting calculations.

Every money or price value is a ``decimal.Decimal``. Rescaling and division
round HALF_UP to a default scale of five fractional digits, so replaying the
same run twice yields identical balances.

Comparisons go through ``numbers_equal``/``is_greater``/``is_lower`` which
compare numeric value, so ``Decimal("1.0")`` and ``Decimal("1.00000")`` are
equal regardless of their exponent.
"""

from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal

from trader.core.constants import DEFAULT_SCALE
from trader.core.exceptions.backtest import DivisionError

ZERO = Decimal(0)
ONE = Decimal(1)

type Number = Decimal | int | float | str


def to_decimal(value: Number) -> Decimal:
    """Convert various numeric types to Decimal.

    Floats go through ``str`` so ``0.1`` becomes ``Decimal("0.1")`` and not its
    binary expansion.

    Examples:
        >>> to_decimal(0.1)
        Decimal('0.1')
        >>> to_decimal('1.5')
        Decimal('1.5')
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def _quantum(scale: int) -> Decimal:
    return Decimal(1).scaleb(-scale)


def _scale_of(value: Decimal) -> int:
    exponent = value.as_tuple().exponent
    return -exponent if isinstance(exponent, int) else 0


def set_default_scale(value: Number) -> Decimal:
    """Rescale a value to at most the default scale.

    Values with fewer fractional digits keep them; values with more are
    rounded HALF_UP to ``DEFAULT_SCALE`` digits.

    Args:
        value: Value to rescale

    Returns:
        Rescaled Decimal
    """
    decimal_value = to_decimal(value)
    scale = min(max(_scale_of(decimal_value), 0), DEFAULT_SCALE)
    return decimal_value.quantize(_quantum(scale), rounding=ROUND_HALF_UP)


def multiply(multiplier: Number, multiplicand: Number) -> Decimal:
    """Multiply two values and rescale the product to the default scale."""
    return set_default_scale(to_decimal(multiplier) * to_decimal(multiplicand))


def divide(dividend: Number, divisor: Number, scale: int = DEFAULT_SCALE) -> Decimal:
    """Divide with HALF_UP rounding to a fixed scale.

    Args:
        dividend: Value to divide
        divisor: Value to divide by
        scale: Number of fractional digits of the result

    Returns:
        Quotient rounded to ``scale`` digits

    Raises:
        DivisionError: If divisor is zero
    """
    decimal_divisor = to_decimal(divisor)
    if decimal_divisor == ZERO:
        raise DivisionError(dividend)
    quotient = to_decimal(dividend) / decimal_divisor
    return quotient.quantize(_quantum(scale), rounding=ROUND_HALF_UP)


def get_integer_quotient(dividend: Number, divisor: Number) -> int:
    """Get how many whole divisors fit into dividend (rounded down).

    Raises:
        DivisionError: If divisor is zero
    """
    decimal_divisor = to_decimal(divisor)
    if decimal_divisor == ZERO:
        raise DivisionError(dividend)
    quotient = to_decimal(dividend) / decimal_divisor
    return int(quotient.quantize(ONE, rounding=ROUND_DOWN))


def add_fraction(number: Number, fraction: Number) -> Decimal:
    """Get ``number * (1 + fraction)`` at the default scale."""
    return multiply(number, ONE + to_decimal(fraction))


def subtract_fraction(number: Number, fraction: Number) -> Decimal:
    """Get ``number * (1 - fraction)`` at the default scale."""
    return multiply(number, ONE - to_decimal(fraction))


def get_fraction_difference(value1: Number, value2: Number) -> Decimal:
    """Get relative difference ``value1 / value2 - 1``.

    Raises:
        DivisionError: If value2 is zero
    """
    return divide(value1, value2) - ONE


def numbers_equal(value1: Number, value2: Number) -> bool:
    """Compare values numerically, ignoring scale differences."""
    return to_decimal(value1).compare(to_decimal(value2)) == ZERO


def is_greater(value1: Number, value2: Number) -> bool:
    """Check that value1 is numerically greater than value2."""
    return to_decimal(value1).compare(to_decimal(value2)) > ZERO


def is_lower(value1: Number, value2: Number) -> bool:
    """Check that value1 is numerically lower than value2."""
    return to_decimal(value1).compare(to_decimal(value2)) < ZERO
