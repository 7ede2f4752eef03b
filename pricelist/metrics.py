"""Derived pricing metrics: per-unit, per-case and exposition margin."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from .columns import PriceColumnCode
from .formats import parse_format
from .models import PriceRange
from .numeral import to_decimal

__all__ = [
    "price_per_unit",
    "price_per_case",
    "margin_percent",
    "exposition_percent",
    "exposition_label",
]

_HUNDRED = Decimal(100)


def price_per_unit(sell, format: Optional[str]) -> Optional[Decimal]:
    """Price per litre, kilogram or unit depending on the parsed package format."""
    value = to_decimal(sell)
    quantity = parse_format(format).quantity
    if value is None or not quantity:
        return None
    return value / quantity


def price_per_case(sell, caisse) -> Optional[Decimal]:
    value = to_decimal(sell)
    units = to_decimal(caisse)
    if value is None or not units:
        return None
    return value * units


def margin_percent(sell, cost) -> Optional[Decimal]:
    """
    Percentage margin of sell over cost.

    Negative results mean the cost exceeds the selling price; they are kept
    as-is so the caller can flag them.
    """
    sell_value = to_decimal(sell)
    cost_value = to_decimal(cost)
    if sell_value is None or cost_value is None or sell_value == 0:
        return None
    return (sell_value - cost_value) / sell_value * _HUNDRED


def exposition_percent(price_range: PriceRange, selected_code: Optional[str]) -> Optional[Decimal]:
    """
    %Exp cell of a range for the selected list.

    Cost is always the 01-EXP price of the same range. When the EXP list
    itself is selected, its prices are compared against 03-IND instead.
    """
    exposition = price_range.price(PriceColumnCode.EXP.value)
    if PriceColumnCode.parse(selected_code) is PriceColumnCode.EXP:
        return margin_percent(price_range.price(PriceColumnCode.IND.value), exposition)
    return margin_percent(price_range.price(selected_code), exposition)


def exposition_label(selected_code: Optional[str]) -> str:
    if PriceColumnCode.parse(selected_code) is PriceColumnCode.EXP:
        return "%Exp (vs. IND)"
    return "%Exp"
