"""Package-format parsing ("500ML", "1 AERO") into normalized quantities."""

from __future__ import annotations

import re
from decimal import Decimal
from typing import Iterable, Optional

from .models import UNIT_COUNT, UNIT_KILOGRAM, UNIT_LITRE, NormalizedFormat

__all__ = ["parse_format", "common_unit"]

_FORMAT_PATTERN = re.compile(r"^(\d+(?:[.,]\d+)?)\s*(.+)$", re.IGNORECASE)
_THOUSAND = Decimal(1000)

# unit token -> (divisor, normalized unit)
_UNIT_TABLE = {
    "ML": (_THOUSAND, UNIT_LITRE),
    "G": (_THOUSAND, UNIT_KILOGRAM),
    "L": (Decimal(1), UNIT_LITRE),
    "KG": (Decimal(1), UNIT_KILOGRAM),
}


def parse_format(format: Optional[str]) -> NormalizedFormat:
    """
    Parse a free-text package format into a quantity expressed in L, KG or unité.

    Unrecognized unit tokens discard the parsed quantity: "6 AERO" is one
    unit for per-unit pricing, not six.
    """
    if format is None or not format.strip():
        return NormalizedFormat(quantity=None, unit=UNIT_COUNT, normalized_unit=UNIT_COUNT)

    match = _FORMAT_PATTERN.match(format.strip())
    if not match:
        return NormalizedFormat(quantity=Decimal(1), unit=format, normalized_unit=UNIT_COUNT)

    quantity = Decimal(match.group(1).replace(",", "."))
    raw_unit = match.group(2).strip().upper()

    conversion = _UNIT_TABLE.get(raw_unit)
    if conversion is None:
        return NormalizedFormat(quantity=Decimal(1), unit=raw_unit, normalized_unit=UNIT_COUNT)

    divisor, normalized_unit = conversion
    return NormalizedFormat(quantity=quantity / divisor, unit=raw_unit, normalized_unit=normalized_unit)


def common_unit(formats: Iterable[Optional[str]]) -> str:
    """Return the normalized unit shared by every format, falling back to unité."""
    units = {parse_format(value).normalized_unit for value in formats}
    if len(units) != 1:
        return UNIT_COUNT
    return units.pop()
