"""Helpers for coercing and formatting price-list numbers."""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Context, Decimal, InvalidOperation
from typing import Optional

__all__ = [
    "PLACEHOLDER",
    "to_decimal",
    "format_decimal",
    "format_price",
    "format_percent",
    "format_quantity",
]

PLACEHOLDER = "—"

_THOUSAND_PATTERN = re.compile(r"[\u202F\u00A0\s]")

_MIN_PRECISION = 28


def to_decimal(value) -> Optional[Decimal]:
    """Convert int/float/Decimal or numeric-like strings to Decimal. Return None if not possible."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return None
        return Decimal(str(value))

    text = _THOUSAND_PATTERN.sub("", str(value)).replace(",", ".")
    if not text:
        return None
    try:
        result = Decimal(text)
    except InvalidOperation:
        return None
    return result if result.is_finite() else None


def format_decimal(value, scale: int = 2) -> str:
    """Format decimal value with specified scale using ROUND_HALF_UP."""
    decimal_val = to_decimal(value)
    if decimal_val is None:
        return PLACEHOLDER

    quantizer = Decimal("0.1") ** scale if scale > 0 else Decimal("1")
    # precision must cover every integer digit or quantize yields NaN
    precision = max(_MIN_PRECISION, decimal_val.adjusted() + scale + 2)
    formatted = decimal_val.quantize(quantizer, context=Context(prec=precision, rounding=ROUND_HALF_UP, traps=[]))
    if not formatted.is_finite():
        return PLACEHOLDER
    # Avoid "-0.00" after rounding
    if formatted.is_zero():
        formatted = abs(formatted)
    return f"{formatted:f}"


def format_price(value) -> str:
    """Format a price cell; zero and missing prices render as the placeholder."""
    decimal_val = to_decimal(value)
    if not decimal_val:
        return PLACEHOLDER
    return format_decimal(decimal_val, 2)


def format_percent(value) -> str:
    if to_decimal(value) is None:
        return PLACEHOLDER
    return f"{format_decimal(value, 1)}%"


def format_quantity(value) -> str:
    decimal_val = to_decimal(value)
    if decimal_val is None:
        return PLACEHOLDER
    if decimal_val == decimal_val.to_integral_value():
        return str(int(decimal_val))
    return f"{decimal_val.normalize():f}"
