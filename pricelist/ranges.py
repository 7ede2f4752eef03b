"""Assembly and normalization of per-item quantity-break ranges."""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from .columns import columns_for_price_list
from .logging import get_logger
from .models import PriceRange
from .numeral import to_decimal

logger = get_logger(__name__)

__all__ = [
    "PriceRow",
    "DiscountTier",
    "normalize_ranges",
    "resolve_costing_discount",
    "build_price_ranges",
]


@dataclass(frozen=True, slots=True)
class PriceRow:
    """One flat price record: the price of an item on one column at one quantity break."""

    item_id: int
    qty_min: int
    price_code: str
    price: Optional[Decimal]


@dataclass(frozen=True, slots=True)
class DiscountTier:
    item_id: int
    greater_than: int
    amount: Decimal


def normalize_ranges(ranges: Iterable[PriceRange], item_id: Optional[int] = None) -> Tuple[PriceRange, ...]:
    """
    Sort ranges by qty_min, drop repeated breaks and fill open upper bounds.

    The first range seen for a given qty_min wins. A missing qty_max becomes
    the next break minus one; the last range stays open ("and above").
    """
    unique: Dict[int, PriceRange] = {}
    for price_range in ranges:
        if price_range.qty_min in unique:
            logger.warning("duplicate_range_dropped", item_id=item_id, qty_min=price_range.qty_min)
            continue
        unique[price_range.qty_min] = price_range

    ordered = [unique[qty] for qty in sorted(unique)]
    normalized: List[PriceRange] = []
    for index, price_range in enumerate(ordered):
        next_min = ordered[index + 1].qty_min if index + 1 < len(ordered) else None
        qty_max = price_range.qty_max
        if next_min is not None and (qty_max is None or qty_max >= next_min):
            qty_max = next_min - 1
        if qty_max is not None and qty_max < price_range.qty_min:
            qty_max = None if next_min is None else next_min - 1
        normalized.append(replace(price_range, qty_max=qty_max))
    return tuple(normalized)


def resolve_costing_discount(tiers: Mapping[int, Decimal], qty: int) -> Decimal:
    """Return the discount of the exact tier, else of the closest lower tier, else zero."""
    if qty in tiers:
        return tiers[qty]
    for tier in sorted(tiers, reverse=True):
        if tier <= qty:
            return tiers[tier]
    return Decimal("0")


def build_price_ranges(
    rows: Iterable[PriceRow],
    selected_code: Optional[str] = None,
    discounts: Iterable[DiscountTier] = (),
) -> Dict[int, Tuple[PriceRange, ...]]:
    """
    Build per-item ranges from flat price rows.

    Quantity breaks are the union of the breaks of every column; a column
    without a price at a break is simply absent from that range. When a
    selected list is given, only the columns it exposes are kept.
    """
    allowed: Optional[set] = None
    if selected_code:
        allowed = set(columns_for_price_list(selected_code))

    prices: Dict[int, Dict[int, Dict[str, Optional[Decimal]]]] = {}
    for row in rows:
        code = row.price_code.strip()
        if allowed is not None and code not in allowed:
            continue
        prices.setdefault(row.item_id, {}).setdefault(row.qty_min, {})[code] = to_decimal(row.price)

    discount_map: Dict[int, Dict[int, Decimal]] = {}
    for tier in discounts:
        discount_map.setdefault(tier.item_id, {})[tier.greater_than] = to_decimal(tier.amount) or Decimal("0")

    result: Dict[int, Tuple[PriceRange, ...]] = {}
    for item_id, by_qty in prices.items():
        tiers = discount_map.get(item_id, {})
        ranges = [
            PriceRange(
                qty_min=qty,
                columns=dict(columns),
                costing_discount=resolve_costing_discount(tiers, qty),
            )
            for qty, columns in by_qty.items()
        ]
        result[item_id] = normalize_ranges(ranges, item_id=item_id)
    logger.debug("price_ranges_built", items=len(result), selected_code=selected_code)
    return result

