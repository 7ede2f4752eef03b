"""Plain-text backend, mainly for terminals and tests."""

from __future__ import annotations

from typing import List, Optional, Sequence

from ..blocks import CategoryBanner, ClassBanner, HeaderRow, ItemRows, RowBlock, Spacer
from ..layout import LayoutMetrics
from ..renderer import Page, PageDecoration
from ..table import CELL_CODE, CELL_FORMAT, Cell

FIXED_WIDTHS = (14, 10, 6)
DYNAMIC_WIDTH = 12
PAGE_SEPARATOR = "\f"


def _width(index: int) -> int:
    return FIXED_WIDTHS[index] if index < len(FIXED_WIDTHS) else DYNAMIC_WIDTH


def _align(text: str, index: int, left: bool) -> str:
    width = _width(index)
    return text.ljust(width) if left else text.rjust(width)


class TextBackend:
    extension = "txt"

    def __init__(self, line_width: int = 100) -> None:
        self.line_width = line_width
        self._pages: List[str] = []
        self._lines: List[str] = []
        self._decoration: Optional[PageDecoration] = None
        self._total_pages = 0

    def begin(self, decoration: PageDecoration, metrics: LayoutMetrics, total_pages: int) -> None:
        self._decoration = decoration
        self._total_pages = total_pages
        self._pages = []

    def start_page(self, page: Page) -> None:
        decoration = self._decoration
        self._lines = []
        if page.is_first:
            if decoration.tenant_name:
                self._lines.append(decoration.tenant_name.upper().rjust(self.line_width))
            for line in decoration.address_lines:
                self._lines.append(line.rjust(self.line_width))
            if decoration.phone:
                self._lines.append(f"{decoration.labels.phone}: {decoration.phone}".rjust(self.line_width))
            self._lines.append("=" * self.line_width)
            self._lines.append(decoration.title.center(self.line_width))
            self._lines.append("=" * self.line_width)
            self._lines.append(decoration.effective_line.center(self.line_width))
        else:
            self._lines.append(decoration.title.center(self.line_width, "="))
        self._lines.append("")

    def draw_block(self, block: RowBlock) -> None:
        if isinstance(block, CategoryBanner):
            self._lines.append(self._banner(block.title, block.subtitle, "#"))
        elif isinstance(block, ClassBanner):
            self._lines.append(self._banner(block.title, block.subtitle, "-"))
        elif isinstance(block, HeaderRow):
            self._lines.append(self._row([_align(label, index, index < 3) for index, label in enumerate(block.labels)]))
            self._lines.append("-" * self.line_width)
        elif isinstance(block, ItemRows):
            for row in block.rows:
                self._lines.append(self._row(self._cells(row)))
            self._lines.append("=" * self.line_width)
        elif isinstance(block, Spacer):
            self._lines.append("")

    def end_page(self, page: Page) -> None:
        decoration = self._decoration
        footer = decoration.page_label(page.number, self._total_pages)
        left = decoration.tenant_name
        centre = decoration.footer_note or ""
        padding = max(1, self.line_width - len(left) - len(footer))
        self._lines.append("")
        self._lines.append("_" * self.line_width)
        self._lines.append(f"{left}{centre.center(padding)}{footer}")
        self._pages.append("\n".join(self._lines))

    def finish(self) -> bytes:
        return (("\n" + PAGE_SEPARATOR).join(self._pages) + "\n").encode("utf-8")

    def _banner(self, title: str, subtitle: str, fill: str) -> str:
        left = f"{fill} {title} "
        right = f" {subtitle} {fill}"
        return left + fill * max(1, self.line_width - len(left) - len(right)) + right

    @staticmethod
    def _row(cells: Sequence[str]) -> str:
        return " ".join(cells).rstrip()

    @staticmethod
    def _cells(row: Sequence[Cell]) -> List[str]:
        return [
            _align(cell.text, index, cell.kind in (CELL_CODE, CELL_FORMAT))
            for index, cell in enumerate(row)
        ]
