"""
Money helpers built on Decimal.

Prices arrive from Supabase as floats or numeric strings; they are converted
once at the model boundary and stay Decimal until serialized for JSON.
"""
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Union

Number = Union[str, int, float, Decimal]

MONEY_PRECISION = Decimal("0.01")


def to_decimal(value: Union[Number, None]) -> Decimal:
    """
    Convert any value to Decimal safely.

    Floats go through str() so 10.1 stays 10.1 rather than its binary
    expansion. None and unparseable input become Decimal("0").
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    try:
        if isinstance(value, float):
            return Decimal(str(value))
        return Decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return Decimal("0")


def round_money(value: Number) -> Decimal:
    """Round to cents, half-up."""
    return to_decimal(value).quantize(MONEY_PRECISION, rounding=ROUND_HALF_UP)


def multiply(value: Number, factor: Number) -> Decimal:
    return to_decimal(value) * to_decimal(factor)


def add(a: Number, b: Number) -> Decimal:
    return to_decimal(a) + to_decimal(b)


def percent_of(value: Number, rate: Number) -> Decimal:
    """Apply a fractional rate (0.08 for 8%) and round to cents."""
    return round_money(multiply(value, rate))


def to_float(value: Number) -> float:
    """
    Convert to float for JSON responses.

    Use only at API boundaries, never for arithmetic.
    """
    return float(to_decimal(value))
