"""
Utility decorators for input validation and trade logging.
"""

import functools
import inspect
from collections.abc import Callable
from typing import Any

from loguru import logger

from trader.core.utils.validation import (
    validate_fraction,
    validate_positive,
    validate_positive_amount,
)

_AMOUNT_PARAMS = ("amount",)
_COUNT_PARAMS = ("lots",)
_FRACTION_PARAMS = ("commission",)
_LOGGED_PARAMS = ("account_id", "figi", "operation_type", "lots", "commission")


def _bind_arguments(
    func: Callable[..., Any], args: tuple[Any, ...], kwargs: dict[str, Any]
) -> inspect.BoundArguments:
    bound_args = inspect.signature(func).bind(*args, **kwargs)
    bound_args.apply_defaults()
    return bound_args


def _validate_order_parameter(param_name: str, value: Any, bound_args: Any) -> None:
    """Validate and normalize one order argument in place."""
    if value is None:
        return
    if param_name in _AMOUNT_PARAMS:
        bound_args.arguments[param_name] = validate_positive_amount(value, param_name)
    elif param_name in _COUNT_PARAMS:
        bound_args.arguments[param_name] = validate_positive(value, param_name)
    elif param_name in _FRACTION_PARAMS:
        bound_args.arguments[param_name] = validate_fraction(value, param_name)


def validate_inputs[F: Callable[..., Any]](func: F) -> F:
    """Decorator to validate trading inputs (amount, lots, commission)."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        bound_args = _bind_arguments(func, args, kwargs)
        for param_name, value in bound_args.arguments.items():
            if param_name != "self":
                _validate_order_parameter(param_name, value, bound_args)
        return func(*bound_args.args, **bound_args.kwargs)

    return wrapper  # type: ignore


def _serialize_parameter_value(value: Any) -> Any:
    """Serialize parameter value for logging."""
    if hasattr(value, "value"):
        return str(value.value)  # Handle enum values
    elif hasattr(value, "quantize"):
        return str(value)  # Handle Decimal types
    else:
        return value


def _extract_order_context(bound_args: inspect.BoundArguments) -> dict[str, Any]:
    """Collect order arguments worth binding to log records."""
    return {
        param_name: _serialize_parameter_value(value)
        for param_name, value in bound_args.arguments.items()
        if param_name in _LOGGED_PARAMS
    }


def log_trades[F: Callable[..., Any]](func: F) -> F:
    """Decorator to log order executions with their parameters."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        context = _extract_order_context(_bind_arguments(func, args, kwargs))
        trade_logger = logger.bind(**context)
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            trade_logger.warning(f"Order failed: {func.__name__}: {type(e).__name__}: {e}")
            raise
        trade_logger.debug(f"Order executed: {func.__name__} {context}")
        return result

    return wrapper  # type: ignore
