"""
Core type definitions and utilities.
"""

# Re-export financial utilities for easy access
from .financial import (
    ONE,
    ZERO,
    Number,
    add_fraction,
    divide,
    get_fraction_difference,
    get_integer_quotient,
    is_greater,
    is_lower,
    multiply,
    numbers_equal,
    set_default_scale,
    subtract_fraction,
    to_decimal,
)

__all__ = [
    # Utility functions
    "to_decimal",
    "set_default_scale",
    "multiply",
    "divide",
    "get_integer_quotient",
    "add_fraction",
    "subtract_fraction",
    "get_fraction_difference",
    "numbers_equal",
    "is_greater",
    "is_lower",
    # Types and constants
    "Number",
    "ZERO",
    "ONE",
]
