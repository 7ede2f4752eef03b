"""HTML backend: one section per page, one table per run of header and item rows."""

from __future__ import annotations

import base64
import mimetypes
from html import escape
from pathlib import Path
from typing import List, Optional

from ..blocks import CategoryBanner, ClassBanner, HeaderRow, ItemRows, RowBlock, Spacer
from ..layout import LayoutMetrics
from ..renderer import Page, PageDecoration
from ..table import CELL_CODE, CELL_FORMAT, CELL_QUANTITY

_STYLE = """
body { font-family: Helvetica, Arial, sans-serif; font-size: 8pt; color: #333; }
.page { page-break-after: always; }
.page:last-child { page-break-after: auto; }
.title { background: #c81e1e; color: #fff; text-align: center; font-weight: bold; padding: 4px; }
.running-title { background: #000; color: #fff; text-align: center; font-weight: bold; padding: 2px; }
.tenant { text-align: right; }
.logo { float: left; width: 36mm; }
.effective { text-align: center; }
.category { background: #282828; color: #fff; font-weight: bold; padding: 4px; display: flex; justify-content: space-between; }
.class { background: #000; color: #fff; font-weight: bold; padding: 2px 4px; display: flex; justify-content: space-between; }
.subtitle { color: #c8c8c8; font-weight: normal; }
table { width: 100%; border-collapse: collapse; }
th { background: #c81e1e; color: #fff; }
td, th { border: 0.2mm solid #c8c8c8; padding: 2px; text-align: right; }
td.code { color: #c81e1e; font-weight: bold; text-align: left; }
td.format, td.quantity { text-align: center; }
tbody.striped td { background: #f8f8f8; }
tbody.item { border-bottom: 0.8mm solid #000; }
td.negative { color: #c81e1e; font-weight: bold; }
.spacer { height: 4mm; }
footer { border-top: 0.5mm solid #000; display: flex; justify-content: space-between; color: #666; font-size: 7pt; }
""".strip()


class HtmlBackend:
    extension = "html"

    def __init__(self) -> None:
        self._parts: List[str] = []
        self._decoration: Optional[PageDecoration] = None
        self._total_pages = 0
        self._table_open = False

    def begin(self, decoration: PageDecoration, metrics: LayoutMetrics, total_pages: int) -> None:
        self._decoration = decoration
        self._total_pages = total_pages
        self._parts = [
            "<!DOCTYPE html>",
            '<html><head><meta charset="utf-8">',
            f"<title>{escape(decoration.title)}</title>",
            f"<style>{_STYLE}</style>",
            "</head><body>",
        ]

    def start_page(self, page: Page) -> None:
        decoration = self._decoration
        self._parts.append(f'<section class="page" data-page="{page.number}">')
        if page.is_first:
            if decoration.logo_path is not None:
                self._parts.append(f'<img class="logo" alt="" src="{_data_uri(decoration.logo_path)}">')
            lines = [decoration.tenant_name.upper(), *decoration.address_lines]
            if decoration.phone:
                lines.append(f"{decoration.labels.phone}: {decoration.phone}")
            tenant = "<br>".join(escape(line) for line in lines if line)
            self._parts.append(f'<div class="tenant">{tenant}</div>')
            self._parts.append(f'<div class="title">{escape(decoration.title)}</div>')
            self._parts.append(f'<div class="effective">{escape(decoration.effective_line)}</div>')
        else:
            self._parts.append(f'<div class="running-title">{escape(decoration.title)}</div>')

    def draw_block(self, block: RowBlock) -> None:
        if isinstance(block, (CategoryBanner, ClassBanner)):
            self._close_table()
            css = "category" if isinstance(block, CategoryBanner) else "class"
            self._parts.append(
                f'<div class="{css}"><span>{escape(block.title)}</span>'
                f'<span class="subtitle">{escape(block.subtitle)}</span></div>'
            )
        elif isinstance(block, HeaderRow):
            self._close_table()
            self._table_open = True
            labels = "".join(f"<th>{escape(label)}</th>" for label in block.labels)
            self._parts.append(f"<table><thead><tr>{labels}</tr></thead>")
        elif isinstance(block, ItemRows):
            if not self._table_open:
                self._parts.append("<table>")
                self._table_open = True
            css = "item striped" if block.striped else "item"
            self._parts.append(f'<tbody class="{css}" data-item="{block.item_id}">')
            for row in block.rows:
                cells = "".join(
                    f'<td class="{self._cell_class(cell)}">{escape(cell.text)}</td>' for cell in row
                )
                self._parts.append(f"<tr>{cells}</tr>")
            self._parts.append("</tbody>")
        elif isinstance(block, Spacer):
            self._close_table()
            self._parts.append('<div class="spacer"></div>')

    def end_page(self, page: Page) -> None:
        decoration = self._decoration
        self._close_table()
        note = escape(decoration.footer_note or "")
        self._parts.append(
            f"<footer><span>{escape(decoration.tenant_name)}</span><span>{note}</span>"
            f"<span>{escape(decoration.page_label(page.number, self._total_pages))}</span></footer>"
        )
        self._parts.append("</section>")

    def finish(self) -> bytes:
        self._parts.append("</body></html>")
        return "\n".join(self._parts).encode("utf-8")

    def _close_table(self) -> None:
        if self._table_open:
            self._parts.append("</table>")
            self._table_open = False

    @staticmethod
    def _cell_class(cell) -> str:
        css = {CELL_CODE: "code", CELL_FORMAT: "format", CELL_QUANTITY: "quantity"}.get(cell.kind, "number")
        if cell.negative:
            css += " negative"
        return css


def _data_uri(path: Path) -> str:
    """Return the image file as a base64 data URI."""
    mime = mimetypes.guess_type(path.name)[0] or "image/png"
    payload = base64.b64encode(path.read_bytes()).decode("ascii")
    return f"data:{mime};base64,{payload}"
