"""Resolution of grouped items into display-ready table cells."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Mapping, Optional, Sequence, Tuple

from .columns import ColumnSet, PriceColumnCode, display_name, exposition_visible, resolve_column_set
from .formats import common_unit
from .i18n import Labels, get_labels
from .metrics import exposition_label, exposition_percent, price_per_case, price_per_unit
from .models import ComposeOptions, GroupedCategory, GroupedClass, Item, PriceRange
from .numeral import PLACEHOLDER, format_percent, format_price, format_quantity

__all__ = [
    "Cell",
    "ItemTable",
    "ClassTable",
    "CategoryTable",
    "build_header",
    "build_item_rows",
    "build_class_table",
    "build_category_tables",
]

CELL_CODE = "code"
CELL_FORMAT = "format"
CELL_QUANTITY = "quantity"
CELL_PRICE = "price"
CELL_UNIT_PRICE = "unit_price"
CELL_CASE_PRICE = "case_price"
CELL_MARGIN = "margin"


@dataclass(frozen=True, slots=True)
class Cell:
    text: str
    kind: str = CELL_PRICE
    negative: bool = False

    @property
    def is_placeholder(self) -> bool:
        return self.text == PLACEHOLDER


@dataclass(frozen=True, slots=True)
class ItemTable:
    item_id: int
    item_code: str
    rows: Tuple[Tuple[Cell, ...], ...]


@dataclass(frozen=True, slots=True)
class ClassTable:
    class_name: str
    header: Tuple[str, ...]
    items: Tuple[ItemTable, ...]

    @property
    def item_count(self) -> int:
        return len(self.items)


@dataclass(frozen=True, slots=True)
class CategoryTable:
    category_name: str
    classes: Tuple[ClassTable, ...]

    @property
    def item_count(self) -> int:
        return sum(table.item_count for table in self.classes)


def _is_selected(code: str, selected_code: Optional[str]) -> bool:
    return bool(selected_code) and code.strip() == selected_code.strip()


def build_header(columns: ColumnSet, options: ComposeOptions, unit: str, labels: Labels) -> Tuple[str, ...]:
    header: List[str] = [labels.article, labels.format, labels.quantity]
    for column in columns.standard:
        header.append(column.display_name)
        if _is_selected(column.code, options.selected_code):
            header.append(f"$/{unit}")
            if options.show_details:
                header.append(labels.per_case)
            if exposition_visible(options.selected_code, options.show_details):
                header.append(exposition_label(options.selected_code))
    if columns.has_pds:
        header.append(display_name(PriceColumnCode.PDS.value))
    return tuple(header)


def build_item_rows(
    item: Item,
    ranges: Sequence[PriceRange],
    columns: ColumnSet,
    options: ComposeOptions,
) -> Tuple[Tuple[Cell, ...], ...]:
    """One row per range; the item code and format only appear on the first row."""
    rows: List[Tuple[Cell, ...]] = []
    for index, price_range in enumerate(ranges):
        if index == 0:
            row = [Cell(item.item_code, CELL_CODE), Cell(item.format or PLACEHOLDER, CELL_FORMAT)]
        else:
            row = [Cell("", CELL_CODE), Cell("", CELL_FORMAT)]
        row.append(Cell(format_quantity(price_range.qty_min), CELL_QUANTITY))

        for column in columns.standard:
            value = price_range.price(column.code)
            row.append(Cell(format_price(value)))
            if not _is_selected(column.code, options.selected_code):
                continue
            # unit and case prices only make sense for an actual price
            sell = value or None
            row.append(Cell(format_price(price_per_unit(sell, item.format)), CELL_UNIT_PRICE))
            if options.show_details:
                row.append(Cell(format_price(price_per_case(sell, item.caisse)), CELL_CASE_PRICE))
            if exposition_visible(options.selected_code, options.show_details):
                margin = exposition_percent(price_range, options.selected_code)
                row.append(Cell(format_percent(margin), CELL_MARGIN, negative=margin is not None and margin < 0))

        if columns.has_pds:
            row.append(Cell(format_price(price_range.price(PriceColumnCode.PDS.value))))
        rows.append(tuple(row))
    return tuple(rows)


def _reference_codes(items: Sequence[Item], ranges_by_item: Mapping[int, Sequence[PriceRange]]) -> List[str]:
    for item in items:
        ranges = ranges_by_item.get(item.item_id)
        if ranges:
            return list(ranges[0].columns.keys())
    return []


def build_class_table(
    grouped: GroupedClass,
    ranges_by_item: Mapping[int, Sequence[PriceRange]],
    options: ComposeOptions,
    labels: Optional[Labels] = None,
) -> Optional[ClassTable]:
    """Resolve one class into a table; None when no item of the class has ranges."""
    labels = labels or get_labels(options.locale)
    priced = [item for item in grouped.items if ranges_by_item.get(item.item_id)]
    if not priced:
        return None

    columns = resolve_column_set(_reference_codes(priced, ranges_by_item), options.selected_code, options.show_details)
    unit = common_unit(item.format for item in grouped.items)
    header = build_header(columns, options, unit, labels)
    items = tuple(
        ItemTable(
            item_id=item.item_id,
            item_code=item.item_code,
            rows=build_item_rows(item, ranges_by_item[item.item_id], columns, options),
        )
        for item in priced
    )
    return ClassTable(class_name=grouped.class_name, header=header, items=items)


def build_category_tables(
    categories: Sequence[GroupedCategory],
    ranges_by_item: Mapping[int, Sequence[PriceRange]],
    options: ComposeOptions,
) -> List[CategoryTable]:
    labels = get_labels(options.locale)
    tables: List[CategoryTable] = []
    for category in categories:
        classes = []
        for grouped in category.classes:
            table = build_class_table(grouped, ranges_by_item, options, labels)
            if table is not None:
                classes.append(table)
        if classes:
            tables.append(CategoryTable(category_name=category.category_name, classes=tuple(classes)))
    return tables
