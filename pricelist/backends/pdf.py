"""PDF backend drawing the block stream with the reportlab canvas."""

from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import List, Optional, Tuple

from reportlab.lib.colors import Color
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas

from ..blocks import CategoryBanner, ClassBanner, HeaderRow, ItemRows, RowBlock
from ..layout import LayoutMetrics
from ..renderer import Page, PageDecoration
from ..table import CELL_CODE, CELL_FORMAT, CELL_QUANTITY, Cell

# ─── PALETTE ───
CORPORATE_RED = Color(200 / 255, 30 / 255, 30 / 255)
BLACK = Color(0, 0, 0)
DARK_GRAY = Color(51 / 255, 51 / 255, 51 / 255)
MEDIUM_GRAY = Color(102 / 255, 102 / 255, 102 / 255)
BORDER_GRAY = Color(200 / 255, 200 / 255, 200 / 255)
CATEGORY_FILL = Color(40 / 255, 40 / 255, 40 / 255)
STRIPE_FILL = Color(248 / 255, 248 / 255, 248 / 255)
WHITE = Color(1, 1, 1)

FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"

MARGIN = 15.0
FIXED_COLUMN_WIDTHS = (30.0, 15.0, 12.0)
CELL_PADDING = 2.0
LOGO_TOP = 14.0
LOGO_WIDTH = 36.0


class PdfBackend:
    extension = "pdf"

    def __init__(self) -> None:
        self._buffer: Optional[BytesIO] = None
        self.c: Optional[canvas.Canvas] = None
        self._decoration: Optional[PageDecoration] = None
        self._metrics = LayoutMetrics()
        self._total_pages = 0
        self.y = 0.0

    # ─── DOCUMENT LIFECYCLE ───

    def begin(self, decoration: PageDecoration, metrics: LayoutMetrics, total_pages: int) -> None:
        self._decoration = decoration
        self._metrics = metrics
        self._total_pages = total_pages
        self._buffer = BytesIO()
        # invariant output keeps identical inputs byte-identical
        self.c = canvas.Canvas(
            self._buffer,
            pagesize=(metrics.page_width * mm, metrics.page_height * mm),
            invariant=1,
        )
        self.c.setTitle(decoration.title)
        if decoration.tenant_name:
            self.c.setAuthor(decoration.tenant_name)

    def start_page(self, page: Page) -> None:
        if page.is_first:
            self._draw_first_page_header()
            self.y = self._metrics.first_page_top
        else:
            self._draw_running_title()
            self.y = self._metrics.page_top

    def draw_block(self, block: RowBlock) -> None:
        if isinstance(block, CategoryBanner):
            self._draw_banner(block.title, block.subtitle, 9.0, CATEGORY_FILL, title_size=10, baseline=6.5)
        elif isinstance(block, ClassBanner):
            self._draw_banner(block.title, block.subtitle, block.height, BLACK, title_size=8, baseline=5.0)
        elif isinstance(block, HeaderRow):
            self._draw_header(block)
        elif isinstance(block, ItemRows):
            self._draw_item_rows(block)
            return
        self.y += block.height

    def end_page(self, page: Page) -> None:
        decoration = self._decoration
        width = self._metrics.page_width
        height = self._metrics.page_height
        self.draw_line(MARGIN, height - 15, width - MARGIN, height - 15, BLACK, 0.5)
        self.draw_text(decoration.tenant_name, MARGIN, height - 10, FONT, 7, MEDIUM_GRAY)
        self.draw_text(
            decoration.page_label(page.number, self._total_pages),
            width - MARGIN,
            height - 10,
            FONT,
            7,
            MEDIUM_GRAY,
            align="right",
        )
        if decoration.footer_note:
            self.draw_text(decoration.footer_note, width / 2, height - 10, FONT_BOLD, 8, BLACK, align="center")
        self.c.showPage()

    def finish(self) -> bytes:
        self.c.save()
        return self._buffer.getvalue()

    # ─── DRAWING PRIMITIVES (millimetres from the top-left corner) ───

    def _to_y(self, top: float) -> float:
        return (self._metrics.page_height - top) * mm

    def draw_rect(self, x: float, top: float, w: float, h: float, fill: Color, stroke: Optional[Color] = None) -> None:
        self.c.saveState()
        self.c.setFillColor(fill)
        if stroke is not None:
            self.c.setStrokeColor(stroke)
            self.c.setLineWidth(0.2 * mm)
        self.c.rect(x * mm, self._to_y(top + h), w * mm, h * mm, fill=1, stroke=1 if stroke is not None else 0)
        self.c.restoreState()

    def draw_line(self, x1: float, top1: float, x2: float, top2: float, color: Color, width: float) -> None:
        self.c.saveState()
        self.c.setStrokeColor(color)
        self.c.setLineWidth(width * mm)
        self.c.line(x1 * mm, self._to_y(top1), x2 * mm, self._to_y(top2))
        self.c.restoreState()

    def draw_text(
        self,
        text: str,
        x: float,
        baseline: float,
        font: str,
        size: float,
        color: Color,
        align: str = "left",
        max_width: Optional[float] = None,
    ) -> None:
        if not text:
            return
        if max_width is not None:
            text = _fit(text, font, size, max_width)
        self.c.saveState()
        self.c.setFont(font, size)
        self.c.setFillColor(color)
        if align == "center":
            self.c.drawCentredString(x * mm, self._to_y(baseline), text)
        elif align == "right":
            self.c.drawRightString(x * mm, self._to_y(baseline), text)
        else:
            self.c.drawString(x * mm, self._to_y(baseline), text)
        self.c.restoreState()

    # ─── PAGE DECORATION ───

    def _draw_first_page_header(self) -> None:
        decoration = self._decoration
        width = self._metrics.page_width
        right = width - MARGIN
        if decoration.logo_path is not None:
            self._draw_logo(decoration.logo_path)
        self.draw_text(decoration.tenant_name.upper(), right, 15, FONT_BOLD, 12, BLACK, align="right")
        baseline = 21.0
        for line in decoration.address_lines:
            self.draw_text(line, right, baseline, FONT, 9, MEDIUM_GRAY, align="right")
            baseline += 5
        if decoration.phone:
            self.draw_text(f"{decoration.labels.phone}: {decoration.phone}", right, 31, FONT, 9, MEDIUM_GRAY, align="right")

        self.draw_rect(MARGIN, 38, width - 2 * MARGIN, 10, CORPORATE_RED)
        self.draw_text(decoration.title, width / 2, 45, FONT_BOLD, 10, WHITE, align="center")
        self.draw_text(decoration.effective_line, width / 2, 54, FONT, 9, DARK_GRAY, align="center")

    def _draw_logo(self, path: Path) -> None:
        image = ImageReader(str(path))
        image_width, image_height = image.getSize()
        height = LOGO_WIDTH * image_height / image_width
        self.c.drawImage(
            image,
            MARGIN * mm,
            self._to_y(LOGO_TOP + height),
            width=LOGO_WIDTH * mm,
            height=height * mm,
            mask="auto",
        )

    def _draw_running_title(self) -> None:
        width = self._metrics.page_width
        self.draw_rect(MARGIN, 10, width - 2 * MARGIN, 8, BLACK)
        self.draw_text(self._decoration.title, width / 2, 15.5, FONT_BOLD, 9, WHITE, align="center")

    # ─── BLOCKS ───

    def _draw_banner(
        self,
        title: str,
        subtitle: str,
        height: float,
        fill: Color,
        title_size: float,
        baseline: float,
    ) -> None:
        width = self._metrics.page_width
        self.draw_rect(MARGIN, self.y, width - 2 * MARGIN, height, fill)
        self.draw_text(title, 18, self.y + baseline, FONT_BOLD, title_size, WHITE, max_width=width * 0.6)
        self.draw_text(subtitle, width - 18, self.y + baseline, FONT, 7, BORDER_GRAY, align="right")

    def _draw_header(self, block: HeaderRow) -> None:
        x = MARGIN
        for label, column_width in zip(block.labels, self._column_widths(len(block.labels))):
            self.draw_rect(x, self.y, column_width, block.height, CORPORATE_RED, CORPORATE_RED)
            self.draw_text(
                label,
                x + column_width / 2,
                self.y + block.height / 2 + 1,
                FONT_BOLD,
                8,
                WHITE,
                align="center",
                max_width=column_width - CELL_PADDING,
            )
            x += column_width

    def _draw_item_rows(self, block: ItemRows) -> None:
        row_height = block.height / len(block.rows) if block.rows else self._metrics.row_height
        for row in block.rows:
            x = MARGIN
            for cell, column_width in zip(row, self._column_widths(len(row))):
                fill = STRIPE_FILL if block.striped else WHITE
                self.draw_rect(x, self.y, column_width, row_height, fill, BORDER_GRAY)
                self._draw_cell(cell, x, column_width, self.y + row_height / 2 + 1)
                x += column_width
            self.y += row_height
        self.draw_line(MARGIN, self.y, self._metrics.page_width - MARGIN, self.y, BLACK, 0.8)

    def _draw_cell(self, cell: Cell, x: float, width: float, baseline: float) -> None:
        inner = width - 2 * CELL_PADDING
        if cell.kind == CELL_CODE:
            self.draw_text(cell.text, x + CELL_PADDING, baseline, FONT_BOLD, 8, CORPORATE_RED, max_width=inner)
        elif cell.kind in (CELL_FORMAT, CELL_QUANTITY):
            self.draw_text(cell.text, x + width / 2, baseline, FONT, 8, DARK_GRAY, align="center", max_width=inner)
        else:
            color = CORPORATE_RED if cell.negative else DARK_GRAY
            font = FONT_BOLD if cell.negative else FONT
            self.draw_text(cell.text, x + width - CELL_PADDING, baseline, font, 8, color, align="right", max_width=inner)

    def _column_widths(self, count: int) -> List[float]:
        return list(column_widths(count, self._metrics.page_width - 2 * MARGIN))


def column_widths(count: int, table_width: float) -> Tuple[float, ...]:
    """Fixed widths for Article/Fmt/Qty, the rest shared evenly so every class table aligns."""
    fixed = FIXED_COLUMN_WIDTHS[:count]
    dynamic_count = count - len(fixed)
    if dynamic_count <= 0:
        return fixed
    dynamic = (table_width - sum(FIXED_COLUMN_WIDTHS)) / dynamic_count
    return fixed + (dynamic,) * dynamic_count


def _fit(text: str, font: str, size: float, max_width: float) -> str:
    limit = max_width * mm
    while pdfmetrics.stringWidth(text, font, size) > limit and len(text) > 3:
        text = text[:-4] + "..."
    return text
