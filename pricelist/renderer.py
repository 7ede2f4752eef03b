"""Backend-agnostic rendering of a row-block stream into decorated pages."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import List, Optional, Protocol, Sequence, Tuple

from .blocks import PageBreak, RowBlock
from .columns import abbreviate_column_name
from .i18n import Labels, get_labels
from .layout import LayoutMetrics
from .logging import get_logger

logger = get_logger(__name__)

__all__ = [
    "Page",
    "PageDecoration",
    "RenderBackend",
    "DocumentRenderer",
    "split_pages",
    "document_title",
    "suggested_filename",
]


@dataclass(frozen=True, slots=True)
class Page:
    number: int
    blocks: Tuple[RowBlock, ...]

    @property
    def is_first(self) -> bool:
        return self.number == 1


@dataclass(frozen=True, slots=True)
class PageDecoration:
    """Static text drawn around the blocks of every page."""

    title: str
    tenant_name: str = ""
    generated_on: date = field(default_factory=date.today)
    address_lines: Tuple[str, ...] = ()
    phone: Optional[str] = None
    footer_note: Optional[str] = None
    logo_path: Optional[Path] = None
    labels: Labels = field(default_factory=get_labels)

    @property
    def effective_line(self) -> str:
        return f"{self.labels.effective}: {self.generated_on.isoformat()}"

    def page_label(self, number: int, total: int) -> str:
        return f"{self.labels.page} {number} / {total}"


class RenderBackend(Protocol):
    extension: str

    def begin(self, decoration: PageDecoration, metrics: LayoutMetrics, total_pages: int) -> None: ...

    def start_page(self, page: Page) -> None: ...

    def draw_block(self, block: RowBlock) -> None: ...

    def end_page(self, page: Page) -> None: ...

    def finish(self) -> bytes: ...


def split_pages(blocks: Sequence[RowBlock]) -> List[Page]:
    """Cut the stream at page breaks; there is always at least one page."""
    pages: List[Page] = []
    current: List[RowBlock] = []
    for block in blocks:
        if isinstance(block, PageBreak):
            pages.append(Page(number=len(pages) + 1, blocks=tuple(current)))
            current = []
            continue
        current.append(block)
    pages.append(Page(number=len(pages) + 1, blocks=tuple(current)))
    return pages


class DocumentRenderer:
    """Sink for an already laid-out block stream; owns no pricing or grouping logic."""

    def __init__(self, backend: RenderBackend, metrics: Optional[LayoutMetrics] = None) -> None:
        self.backend = backend
        self.metrics = metrics or LayoutMetrics()

    def render(self, blocks: Sequence[RowBlock], decoration: PageDecoration) -> bytes:
        pages = split_pages(blocks)
        logger.info("render_document", backend=self.backend.extension, pages=len(pages), blocks=len(blocks))

        self.backend.begin(decoration, self.metrics, len(pages))
        for page in pages:
            self.backend.start_page(page)
            for block in page.blocks:
                self.backend.draw_block(block)
            self.backend.end_page(page)
        return self.backend.finish()


def document_title(code: str, name: str = "") -> str:
    return f"{abbreviate_column_name(code or '')} - {name or ''}".upper()


def suggested_filename(tenant_name: str, extension: str, on: Optional[date] = None) -> str:
    on = on or date.today()
    tenant = (tenant_name or "").strip().upper().replace(" ", "_") or "TENANT"
    return f"ListePrix_{tenant}_{on.strftime('%m%d%Y')}.{extension}"
