"""End-to-end composition: items and ranges in, row blocks or rendered bytes out."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import List, Mapping, Optional, Sequence

from .backends import get_backend
from .blocks import RowBlock
from .grouping import group_items_by_category
from .i18n import get_labels
from .layout import LayoutMetrics, paginate
from .logging import get_logger
from .models import ComposeOptions, Item, PriceRange
from .renderer import DocumentRenderer, PageDecoration, document_title
from .table import build_category_tables

logger = get_logger(__name__)

__all__ = ["ComposeOptions", "compose_document", "render_document"]


def compose_document(
    items: Sequence[Item],
    price_ranges: Mapping[int, Sequence[PriceRange]],
    options: ComposeOptions,
    metrics: Optional[LayoutMetrics] = None,
) -> List[RowBlock]:
    """Group, resolve and paginate a price list. Deterministic for identical input."""
    labels = get_labels(options.locale)
    categories = group_items_by_category(
        items,
        default_category=labels.without_category,
        default_class=labels.without_class,
    )
    tables = build_category_tables(categories, price_ranges, options)
    blocks = paginate(tables, metrics or LayoutMetrics(), labels)
    logger.info(
        "compose_document",
        selected_code=options.selected_code,
        show_details=options.show_details,
        items=len(items),
        categories=len(tables),
        blocks=len(blocks),
    )
    return blocks


def render_document(
    items: Sequence[Item],
    price_ranges: Mapping[int, Sequence[PriceRange]],
    options: ComposeOptions,
    *,
    output_format: str = "pdf",
    price_list_name: str = "",
    tenant_name: str = "",
    address_lines: Sequence[str] = (),
    phone: Optional[str] = None,
    footer_note: Optional[str] = None,
    logo_path: Optional[Path] = None,
    generated_on: Optional[date] = None,
    metrics: Optional[LayoutMetrics] = None,
) -> bytes:
    metrics = metrics or LayoutMetrics()
    blocks = compose_document(items, price_ranges, options, metrics)
    decoration = PageDecoration(
        title=document_title(options.selected_code, price_list_name),
        tenant_name=tenant_name,
        generated_on=generated_on or date.today(),
        address_lines=tuple(line for line in address_lines if line),
        phone=phone,
        footer_note=footer_note,
        logo_path=logo_path,
        labels=get_labels(options.locale),
    )
    renderer = DocumentRenderer(get_backend(output_format), metrics)
    return renderer.render(blocks, decoration)
