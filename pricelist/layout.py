"""
Page-bounded layout of resolved price tables into a row-block stream.

Layout state is an immutable record threaded through small step functions;
each step returns the next state and the blocks it emitted. Heights are
expressed in millimetres on an A4 portrait page by default.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple

from .blocks import CategoryBanner, ClassBanner, HeaderRow, ItemRows, PageBreak, RowBlock, Spacer
from .i18n import Labels, get_labels
from .logging import get_logger
from .table import CategoryTable, ClassTable, ItemTable

logger = get_logger(__name__)

__all__ = [
    "LayoutMetrics",
    "LayoutState",
    "initial_state",
    "break_page",
    "place_item",
    "add_spacer",
    "paginate",
]


@dataclass(frozen=True, slots=True)
class LayoutMetrics:
    page_width: float = 210.0
    page_height: float = 297.0
    bottom_margin: float = 20.0
    first_page_top: float = 62.0
    page_top: float = 25.0
    category_break_y: float = 240.0
    category_banner_height: float = 13.0
    class_banner_height: float = 7.0
    header_height: float = 10.0
    row_height: float = 8.0
    class_gap: float = 8.0
    category_gap: float = 6.0

    @property
    def page_limit(self) -> float:
        return self.page_height - self.bottom_margin

    @property
    def page_capacity(self) -> float:
        """Usable height of a continuation page."""
        return self.page_limit - self.page_top


@dataclass(frozen=True, slots=True)
class LayoutState:
    current_page_height: float
    page_number: int = 1
    page_has_content: bool = False
    category_banner_drawn: bool = False
    class_header_drawn: bool = False
    current_class_shown_header_this_page: bool = False


Step = Tuple[LayoutState, Tuple[RowBlock, ...]]


def initial_state(metrics: LayoutMetrics) -> LayoutState:
    return LayoutState(current_page_height=metrics.first_page_top)


def _advance(state: LayoutState, block: RowBlock) -> LayoutState:
    return replace(
        state,
        current_page_height=state.current_page_height + block.height,
        page_has_content=True,
    )


def break_page(state: LayoutState, metrics: LayoutMetrics) -> Step:
    page_number = state.page_number + 1
    logger.debug("page_break", page=page_number, at=state.current_page_height)
    next_state = replace(
        state,
        current_page_height=metrics.page_top,
        page_number=page_number,
        page_has_content=False,
        current_class_shown_header_this_page=False,
    )
    return next_state, (PageBreak(page_number=page_number),)


def enter_category(state: LayoutState) -> LayoutState:
    return replace(state, category_banner_drawn=False)


def enter_class(state: LayoutState) -> LayoutState:
    return replace(state, class_header_drawn=False, current_class_shown_header_this_page=False)


def _should_break(state: LayoutState, needed: float, starts_category: bool, metrics: LayoutMetrics) -> bool:
    fits = state.current_page_height + needed <= metrics.page_limit
    if starts_category and state.current_page_height > metrics.category_break_y:
        fits = False
    if fits:
        return False
    if state.page_has_content:
        return True
    # An empty page is only left behind when a fresh page can hold the block.
    return state.current_page_height > metrics.page_top and needed <= metrics.page_capacity


def place_item(
    state: LayoutState,
    category_banner: CategoryBanner,
    class_banner: ClassBanner,
    header: HeaderRow,
    item_rows: ItemRows,
    metrics: LayoutMetrics,
) -> Step:
    """
    Place one item, carrying its pending banners and the header with it.

    Banners not yet drawn for the current category and class travel with the
    item, so a page break taken before the item also moves them.
    """
    pending: List[RowBlock] = []
    if not state.category_banner_drawn:
        pending.append(category_banner)
    if not state.class_header_drawn:
        pending.append(class_banner)

    needed = sum(block.height for block in pending) + item_rows.height
    if not state.current_class_shown_header_this_page:
        needed += header.height

    emitted: List[RowBlock] = []
    if _should_break(state, needed, not state.category_banner_drawn, metrics):
        state, blocks = break_page(state, metrics)
        emitted.extend(blocks)

    for banner in pending:
        emitted.append(banner)
        state = _advance(state, banner)
    state = replace(state, category_banner_drawn=True, class_header_drawn=True)

    if not state.current_class_shown_header_this_page:
        emitted.append(header)
        state = replace(_advance(state, header), current_class_shown_header_this_page=True)

    emitted.append(item_rows)
    state = _advance(state, item_rows)

    if state.current_page_height > metrics.page_limit:
        logger.warning(
            "item_overflows_page",
            item_id=item_rows.item_id,
            page=state.page_number,
            height=item_rows.height,
        )
    return state, tuple(emitted)


def add_spacer(state: LayoutState, height: float) -> Step:
    if height <= 0:
        return state, ()
    spacer = Spacer(height=height)
    return replace(state, current_page_height=state.current_page_height + height), (spacer,)


def category_banner(table: CategoryTable, labels: Labels, metrics: LayoutMetrics) -> CategoryBanner:
    return CategoryBanner(
        title=table.category_name.upper(),
        subtitle=f"{len(table.classes)} {labels.classes} • {table.item_count} {labels.articles}",
        height=metrics.category_banner_height,
    )


def class_banner(table: ClassTable, labels: Labels, metrics: LayoutMetrics) -> ClassBanner:
    return ClassBanner(
        title=table.class_name.upper(),
        subtitle=f"{table.item_count} {labels.articles}",
        height=metrics.class_banner_height,
    )


def item_rows(item: ItemTable, index: int, metrics: LayoutMetrics) -> ItemRows:
    return ItemRows(
        item_id=item.item_id,
        item_code=item.item_code,
        rows=item.rows,
        striped=index % 2 == 1,
        height=len(item.rows) * metrics.row_height,
    )


def paginate(
    tables: Sequence[CategoryTable],
    metrics: Optional[LayoutMetrics] = None,
    labels: Optional[Labels] = None,
) -> List[RowBlock]:
    """Lay category tables out into an ordered block stream with explicit page breaks."""
    metrics = metrics or LayoutMetrics()
    labels = labels or get_labels()

    state = initial_state(metrics)
    blocks: List[RowBlock] = []
    for category in tables:
        state = enter_category(state)
        category_block = category_banner(category, labels, metrics)

        for table in category.classes:
            state = enter_class(state)
            class_block = class_banner(table, labels, metrics)
            header = HeaderRow(labels=table.header, height=metrics.header_height)

            for index, item in enumerate(table.items):
                if not item.rows:
                    continue
                state, emitted = place_item(
                    state,
                    category_block,
                    class_block,
                    header,
                    item_rows(item, index, metrics),
                    metrics,
                )
                blocks.extend(emitted)

            if state.class_header_drawn:
                state, emitted = add_spacer(state, metrics.class_gap)
                blocks.extend(emitted)

        if state.category_banner_drawn:
            state, emitted = add_spacer(state, metrics.category_gap)
            blocks.extend(emitted)

    logger.debug("paginate_done", blocks=len(blocks), pages=state.page_number)
    return blocks
