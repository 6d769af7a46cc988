"""
Money Utilities - Safe Decimal operations for monetary values.

Avoids float precision issues by using Decimal throughout; floats appear
only at the storage/API boundary.
"""
from decimal import Decimal, InvalidOperation
from typing import Union

Number = Union[str, int, float, Decimal]


def to_decimal(value: Union[Number, None]) -> Decimal:
    """
    Convert any value to Decimal safely.

    Args:
        value: Value to convert (str, int, float, Decimal, or None)

    Returns:
        Decimal representation of the value, or Decimal("0") if None/invalid
    """
    if value is None:
        return Decimal("0")

    if isinstance(value, Decimal):
        return value

    try:
        if isinstance(value, float):
            # str() keeps 10.1 as 10.1 instead of its binary expansion
            return Decimal(str(value))
        return Decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return Decimal("0")


def to_money(value: Number) -> Decimal:
    """
    Convert a caller-supplied amount to Decimal, strictly.

    Unlike to_decimal, nothing is silently turned into zero.

    Raises:
        ValueError: value is not an int, float or Decimal (bools included),
            or is NaN/infinite
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise ValueError(f"amount must be a number, got {type(value).__name__}")
    amount = to_decimal(value)
    if not amount.is_finite():
        raise ValueError("amount must be a finite number")
    return amount


def to_float(value: Number) -> float:
    """
    Convert to float for JSON serialization.

    Use only at storage/API boundaries, not for internal calculations.
    """
    return float(to_decimal(value))


def subtract(a: Number, b: Number) -> Decimal:
    """Safe subtraction of monetary values."""
    return to_decimal(a) - to_decimal(b)


def multiply(value: Number, factor: Number) -> Decimal:
    """Safe multiplication of monetary value by a factor."""
    return to_decimal(value) * to_decimal(factor)
