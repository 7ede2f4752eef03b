"""Row blocks: the indivisible units emitted by the layout and consumed by renderers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

from .table import Cell

__all__ = [
    "CategoryBanner",
    "ClassBanner",
    "HeaderRow",
    "ItemRows",
    "Spacer",
    "PageBreak",
    "RowBlock",
]


@dataclass(frozen=True, slots=True)
class CategoryBanner:
    title: str
    subtitle: str
    height: float


@dataclass(frozen=True, slots=True)
class ClassBanner:
    title: str
    subtitle: str
    height: float


@dataclass(frozen=True, slots=True)
class HeaderRow:
    labels: Tuple[str, ...]
    height: float


@dataclass(frozen=True, slots=True)
class ItemRows:
    """All price-range rows of one item; closed by a bold separator when drawn."""

    item_id: int
    item_code: str
    rows: Tuple[Tuple[Cell, ...], ...]
    striped: bool
    height: float


@dataclass(frozen=True, slots=True)
class Spacer:
    height: float


@dataclass(frozen=True, slots=True)
class PageBreak:
    page_number: int
    height: float = 0.0


RowBlock = Union[CategoryBanner, ClassBanner, HeaderRow, ItemRows, Spacer, PageBreak]
