"""Load price-list input files (the dashboard prices API JSON shape)."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .grouping import merge_items
from .logging import get_logger
from .models import Item, PriceList, PriceRange
from .numeral import to_decimal
from .ranges import DiscountTier, PriceRow, build_price_ranges, normalize_ranges

logger = get_logger(__name__)

__all__ = ["PriceListError", "InputFormatError", "PriceData", "parse_price_data", "load_price_data"]


class PriceListError(Exception):
    """Base error for price-list operations."""


class InputFormatError(PriceListError):
    """Raised when an input file does not have the expected structure."""


@dataclass(slots=True)
class PriceData:
    price_list: Optional[PriceList] = None
    items: List[Item] = field(default_factory=list)
    ranges: Dict[int, Tuple[PriceRange, ...]] = field(default_factory=dict)

    def merge(self, other: "PriceData") -> "PriceData":
        """Union by item identity; items and ranges already present win."""
        items = merge_items(self.items, other.items)
        ranges = dict(other.ranges)
        ranges.update(self.ranges)
        return PriceData(
            price_list=self.price_list or other.price_list,
            items=items,
            ranges={item.item_id: ranges.get(item.item_id, ()) for item in items},
        )


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _parse_range(raw: Mapping[str, Any], item_id: int) -> PriceRange:
    try:
        qty_min = int(raw["qtyMin"])
    except (KeyError, TypeError, ValueError) as exc:
        raise InputFormatError(f"Range of item {item_id} has no valid qtyMin") from exc

    qty_max = raw.get("qtyMax")
    if qty_max is not None:
        try:
            qty_max = int(qty_max)
        except (TypeError, ValueError) as exc:
            raise InputFormatError(f"Range of item {item_id} has an invalid qtyMax") from exc
    columns = raw.get("columns") or {}
    if not isinstance(columns, Mapping):
        raise InputFormatError(f"Range columns of item {item_id} must be an object")

    return PriceRange(
        qty_min=qty_min,
        qty_max=qty_max,
        columns={str(code).strip(): to_decimal(price) for code, price in columns.items()},
        costing_discount=to_decimal(raw.get("costingDiscountAmt")) or Decimal("0"),
    )


def _parse_item(raw: Mapping[str, Any]) -> Tuple[Item, Optional[Tuple[PriceRange, ...]]]:
    if not isinstance(raw, Mapping):
        raise InputFormatError("Each item must be an object")
    try:
        item_id = int(raw["itemId"])
    except (KeyError, TypeError, ValueError) as exc:
        raise InputFormatError("Item is missing a valid itemId") from exc

    item = Item(
        item_id=item_id,
        item_code=_optional_str(raw.get("itemCode")) or str(item_id),
        description=_optional_str(raw.get("description")) or "",
        format=_optional_str(raw.get("format")),
        caisse=to_decimal(raw.get("caisse")),
        category_name=_optional_str(raw.get("categoryName")),
        class_name=_optional_str(raw.get("className")),
    )
    raw_ranges = raw.get("ranges")
    if raw_ranges is None:
        return item, None
    if not isinstance(raw_ranges, list):
        raise InputFormatError(f"Ranges of item {item_id} must be a list")
    ranges = normalize_ranges((_parse_range(entry, item_id) for entry in raw_ranges), item_id=item_id)
    return item, ranges


def _require_int(raw: Mapping[str, Any], key: str, context: str) -> int:
    try:
        return int(raw[key])
    except (KeyError, TypeError, ValueError) as exc:
        raise InputFormatError(f"{context} has no valid {key}") from exc


def _parse_price_rows(raw_prices: Any) -> List[PriceRow]:
    if not isinstance(raw_prices, list):
        raise InputFormatError("'prices' must be a list")
    rows: List[PriceRow] = []
    for raw in raw_prices:
        if not isinstance(raw, Mapping):
            raise InputFormatError("Each price row must be an object")
        code = _optional_str(raw.get("priceCode"))
        if code is None:
            raise InputFormatError("Price row has no priceCode")
        rows.append(
            PriceRow(
                item_id=_require_int(raw, "itemId", "Price row"),
                qty_min=_require_int(raw, "qtyMin", "Price row"),
                price_code=code,
                price=to_decimal(raw.get("price")),
            )
        )
    return rows


def _parse_discount_tiers(raw_discounts: Any) -> List[DiscountTier]:
    if not isinstance(raw_discounts, list):
        raise InputFormatError("'discounts' must be a list")
    tiers: List[DiscountTier] = []
    for raw in raw_discounts:
        if not isinstance(raw, Mapping):
            raise InputFormatError("Each discount tier must be an object")
        tiers.append(
            DiscountTier(
                item_id=_require_int(raw, "itemId", "Discount tier"),
                greater_than=_require_int(raw, "greaterThan", "Discount tier"),
                amount=to_decimal(raw.get("costingDiscountAmt")) or Decimal("0"),
            )
        )
    return tiers


def parse_price_data(payload: Any, selected_code: Optional[str] = None) -> PriceData:
    """
    Accept a bare item list or an object with 'priceList' and 'items'.

    The object form may carry flat 'prices' rows ({itemId, qtyMin, priceCode,
    price}) and 'discounts' tiers ({itemId, greaterThan, costingDiscountAmt})
    instead of per-item ranges. Those are assembled into ranges restricted to
    the columns of the selected list (``selected_code``, else the payload's
    priceList code). Ranges given inline on an item take precedence.
    """
    price_list: Optional[PriceList] = None
    built: Dict[int, Tuple[PriceRange, ...]] = {}
    if isinstance(payload, Mapping):
        raw_list = payload.get("priceList")
        if isinstance(raw_list, Mapping) and raw_list.get("code"):
            price_list = PriceList(code=str(raw_list["code"]).strip(), name=str(raw_list.get("name") or ""))
        raw_items = payload.get("items", [])
        if payload.get("prices") is not None:
            code = selected_code or (price_list.code if price_list else None)
            built = build_price_ranges(
                _parse_price_rows(payload["prices"]),
                selected_code=code,
                discounts=_parse_discount_tiers(payload.get("discounts") or []),
            )
    else:
        raw_items = payload

    if not isinstance(raw_items, list):
        raise InputFormatError("Expected a list of items")

    data = PriceData(price_list=price_list)
    for raw in raw_items:
        item, ranges = _parse_item(raw)
        if item.item_id in data.ranges:
            logger.warning("duplicate_item_dropped", item_id=item.item_id)
            continue
        data.items.append(item)
        data.ranges[item.item_id] = ranges if ranges is not None else built.get(item.item_id, ())
    return data


def load_price_data(paths: Iterable[Path], selected_code: Optional[str] = None) -> PriceData:
    data = PriceData()
    for path in paths:
        try:
            payload = json.loads(Path(path).read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise InputFormatError(f"Invalid JSON in '{path}': {exc}") from exc
        parsed = parse_price_data(payload, selected_code)
        logger.info("input_loaded", path=str(path), items=len(parsed.items))
        data = data.merge(parsed)
    return data
