"""Domain models for price-list items, quantity breaks and their groupings."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Mapping, Optional, Tuple

UNIT_LITRE = "L"
UNIT_KILOGRAM = "KG"
UNIT_COUNT = "unité"

DEFAULT_CATEGORY = "Sans catégorie"
DEFAULT_CLASS = "Sans classe"


@dataclass(frozen=True, slots=True)
class Item:
    """Catalogue item as served by the price query."""

    item_id: int
    item_code: str
    description: str = ""
    format: Optional[str] = None
    caisse: Optional[Decimal] = None
    category_name: Optional[str] = None
    class_name: Optional[str] = None


@dataclass(frozen=True, slots=True)
class PriceRange:
    """Single quantity break of an item, priced on every fetched column."""

    qty_min: int
    qty_max: Optional[int] = None
    columns: Mapping[str, Optional[Decimal]] = field(default_factory=dict)
    costing_discount: Decimal = Decimal("0")

    def price(self, code: Optional[str]) -> Optional[Decimal]:
        """Return the price for a column code, or None when the column is absent."""
        if not code:
            return None
        return self.columns.get(code.strip())


@dataclass(frozen=True, slots=True)
class NormalizedFormat:
    quantity: Optional[Decimal]
    unit: str
    normalized_unit: str


@dataclass(frozen=True, slots=True)
class PriceList:
    code: str
    name: str = ""


@dataclass(frozen=True, slots=True)
class GroupedClass:
    class_name: str
    items: Tuple[Item, ...]
    all_item_ids: Tuple[int, ...]


@dataclass(frozen=True, slots=True)
class GroupedCategory:
    category_name: str
    classes: Tuple[GroupedClass, ...]
    all_item_ids: Tuple[int, ...]

    @property
    def item_count(self) -> int:
        return len(self.all_item_ids)


@dataclass(frozen=True, slots=True)
class ComposeOptions:
    """Request-level inputs that change the shape of the composed document."""

    selected_code: str
    show_details: bool = False
    locale: str = "fr"
