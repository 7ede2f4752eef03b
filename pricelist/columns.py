"""Price-list column ordering, abbreviation and visibility policy."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

__all__ = [
    "PriceColumnCode",
    "ResolvedColumn",
    "ColumnSet",
    "PRIORITY_ORDER",
    "COLUMN_MATRIX",
    "abbreviate_column_name",
    "column_priority",
    "sort_price_columns",
    "resolve_columns",
    "resolve_column_set",
    "columns_for_price_list",
]

_ZERO_PREFIX = re.compile(r"^0(\d+-)")


class PriceColumnCode(str, Enum):
    EXP = "01-EXP"
    DET = "02-DET"
    IND = "03-IND"
    GROS_EXP = "04-GROSEXP"
    GROS = "05-GROS"
    IND_HZ = "06-IND HZ"
    DET_HZ = "07-DET HZ"
    PDS = "08-PDS"

    @classmethod
    def parse(cls, code: Optional[str]) -> Optional["PriceColumnCode"]:
        if not code:
            return None
        try:
            return cls(code.strip())
        except ValueError:
            return None

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def priority(self) -> Optional[int]:
        return _PRIORITY_RANK.get(self)


PRIORITY_ORDER: Tuple[PriceColumnCode, ...] = (
    PriceColumnCode.EXP,
    PriceColumnCode.GROS,
    PriceColumnCode.DET,
    PriceColumnCode.IND,
)
_PRIORITY_RANK: Dict[PriceColumnCode, int] = {code: rank for rank, code in enumerate(PRIORITY_ORDER)}

# Columns fetched for each selected price list
COLUMN_MATRIX: Dict[str, Tuple[str, ...]] = {
    "01-EXP": ("01-EXP", "02-DET", "03-IND", "05-GROS", "08-PDS"),
    "02-DET": ("02-DET", "08-PDS"),
    "03-IND": ("03-IND",),
    "04-GROS EXP": ("02-DET", "04-GROS EXP", "05-GROS", "06-IND HZ", "08-PDS"),
    "06-IND HZ": ("06-IND HZ",),
    "07-DET HZ": ("07-DET HZ", "08-PDS"),
}


def abbreviate_column_name(name: str) -> str:
    """Shorten a column code for display: '05-GROS' -> '5-GROS', '04-GROSEXP' -> '4-GREXP'."""
    result = name.strip()
    if result == "04-GROSEXP":
        return "4-GREXP"
    return _ZERO_PREFIX.sub(r"\1", result)


_DISPLAY_NAMES: Dict[PriceColumnCode, str] = {
    code: abbreviate_column_name(code.value) for code in PriceColumnCode
}


def column_priority(code: str) -> Optional[int]:
    """Return the business priority rank of a column code, or None when it has none."""
    known = PriceColumnCode.parse(code)
    if known is not None and known.priority is not None:
        return known.priority
    key = code.strip()
    for rank, token in enumerate(PRIORITY_ORDER):
        if token.value in key:
            return rank
    return None


def _sort_key(code: str) -> Tuple[int, int, str]:
    rank = column_priority(code)
    if rank is not None:
        return (0, rank, "")
    return (1, 0, code.strip())


def sort_price_columns(codes: Iterable[str]) -> List[str]:
    """Order priority columns first (stable within a rank), then the rest alphabetically."""
    return sorted(codes, key=_sort_key)


@dataclass(frozen=True, slots=True)
class ResolvedColumn:
    code: str
    display_name: str


def display_name(code: str) -> str:
    known = PriceColumnCode.parse(code)
    if known is not None:
        return known.display_name
    return abbreviate_column_name(code)


def resolve_columns(codes: Iterable[str]) -> List[ResolvedColumn]:
    return [ResolvedColumn(code=code, display_name=display_name(code)) for code in sort_price_columns(codes)]


@dataclass(frozen=True, slots=True)
class ColumnSet:
    """Columns shown for one class: the standard ones plus an optional trailing PDS column."""

    standard: Tuple[ResolvedColumn, ...]
    has_pds: bool

    @property
    def codes(self) -> Tuple[str, ...]:
        return tuple(column.code for column in self.standard)


def _same_code(code: Optional[str], other: PriceColumnCode) -> bool:
    return bool(code) and code.strip() == other.value


def exposition_visible(selected_code: Optional[str], show_details: bool) -> bool:
    """The exposition cost column is hidden unless details mode is on or the EXP list itself is viewed."""
    return show_details or _same_code(selected_code, PriceColumnCode.EXP)


def resolve_column_set(
    codes: Sequence[str],
    selected_code: Optional[str],
    show_details: bool = False,
) -> ColumnSet:
    """Apply ordering and the display policy to the column codes of a class."""
    if not codes:
        codes = [selected_code.strip() if selected_code else "Prix"]

    ordered = sort_price_columns(codes)
    if not exposition_visible(selected_code, show_details):
        ordered = [code for code in ordered if not _same_code(code, PriceColumnCode.EXP)]

    standard = [code for code in ordered if not _same_code(code, PriceColumnCode.PDS)]
    has_pds = len(standard) != len(ordered) and not _same_code(selected_code, PriceColumnCode.IND)

    return ColumnSet(
        standard=tuple(ResolvedColumn(code=code, display_name=display_name(code)) for code in standard),
        has_pds=has_pds,
    )


def columns_for_price_list(code: str) -> Tuple[str, ...]:
    """Return the column codes fetched alongside a selected price list."""
    key = code.strip()
    return COLUMN_MATRIX.get(key, (key,))
