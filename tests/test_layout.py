from pricelist.blocks import CategoryBanner, ClassBanner, HeaderRow, ItemRows, PageBreak, Spacer
from pricelist.layout import LayoutMetrics, LayoutState, paginate, place_item
from pricelist.renderer import split_pages
from pricelist.table import CategoryTable, Cell, ClassTable, ItemTable

TIGHT = LayoutMetrics(
    page_height=100,
    bottom_margin=0,
    first_page_top=0,
    page_top=0,
    category_break_y=100,
    category_banner_height=10,
    class_banner_height=10,
    header_height=10,
    row_height=10,
    class_gap=0,
    category_gap=0,
)


def _item(item_id, range_count):
    rows = tuple((Cell(f"SKU-{item_id}" if i == 0 else "", "code"), Cell(str(i + 1), "quantity")) for i in range(range_count))
    return ItemTable(item_id=item_id, item_code=f"SKU-{item_id}", rows=rows)


def _class(name, *items):
    return ClassTable(class_name=name, header=("Article", "Qty"), items=tuple(items))


def _kinds(blocks):
    return [type(block).__name__ for block in blocks]


def test_item_that_does_not_fit_moves_to_next_page_with_header():
    tables = [CategoryTable("Cat", (_class("A", _item(1, 3), _item(2, 4), _item(3, 3)),))]

    blocks = paginate(tables, TIGHT)

    assert _kinds(blocks) == [
        "CategoryBanner",
        "ClassBanner",
        "HeaderRow",
        "ItemRows",
        "ItemRows",
        "PageBreak",
        "HeaderRow",
        "ItemRows",
    ]
    assert [block.item_id for block in blocks if isinstance(block, ItemRows)] == [1, 2, 3]
    assert blocks[5] == PageBreak(page_number=2)


def test_class_banner_travels_with_its_first_item():
    tables = [CategoryTable("Cat", (_class("A", _item(1, 6)), _class("B", _item(2, 1))))]

    pages = split_pages(paginate(tables, TIGHT))

    assert len(pages) == 2
    assert not any(isinstance(block, ClassBanner) and block.title == "B" for block in pages[0].blocks)
    assert _kinds(pages[1].blocks) == ["ClassBanner", "HeaderRow", "ItemRows"]


def test_category_banner_is_not_orphaned():
    tables = [
        CategoryTable("One", (_class("A", _item(1, 6)),)),
        CategoryTable("Two", (_class("B", _item(2, 2)),)),
    ]

    pages = split_pages(paginate(tables, TIGHT))

    assert _kinds(pages[0].blocks) == ["CategoryBanner", "ClassBanner", "HeaderRow", "ItemRows"]
    assert _kinds(pages[1].blocks) == ["CategoryBanner", "ClassBanner", "HeaderRow", "ItemRows"]
    assert pages[1].blocks[0].title == "TWO"


def test_header_is_shown_once_per_class_per_page():
    tables = [CategoryTable("Cat", (_class("A", *[_item(i, 1) for i in range(1, 13)]),))]

    pages = split_pages(paginate(tables, TIGHT))

    for page in pages:
        headers = [block for block in page.blocks if isinstance(block, HeaderRow)]
        assert len(headers) == 1
        first_rows = next(i for i, block in enumerate(page.blocks) if isinstance(block, ItemRows))
        assert page.blocks.index(headers[0]) < first_rows


def test_items_are_never_split_and_banners_never_orphaned():
    classes = tuple(
        _class(f"C{c}", *[_item(c * 100 + i, (c + i) % 4 + 1) for i in range(c % 5 + 1)])
        for c in range(12)
    )
    tables = [CategoryTable("Cat", classes[:6]), CategoryTable("Dog", classes[6:])]

    blocks = paginate(tables, TIGHT)
    pages = split_pages(blocks)

    item_ids = [block.item_id for block in blocks if isinstance(block, ItemRows)]
    assert len(item_ids) == len(set(item_ids))
    for page in pages:
        used = sum(block.height for block in page.blocks if not isinstance(block, Spacer))
        assert used <= TIGHT.page_capacity
        for index, block in enumerate(page.blocks):
            if isinstance(block, (CategoryBanner, ClassBanner)):
                assert any(isinstance(after, ItemRows) for after in page.blocks[index + 1:])


def test_striping_follows_item_index_within_class():
    tables = [CategoryTable("Cat", (_class("A", _item(1, 1), _item(2, 1), _item(3, 1)), _class("B", _item(4, 1))))]
    rows = [block for block in paginate(tables) if isinstance(block, ItemRows)]
    assert [block.striped for block in rows] == [False, True, False, False]


def test_spacers_follow_classes_and_categories():
    metrics = LayoutMetrics()
    tables = [CategoryTable("Cat", (_class("A", _item(1, 1)), _class("B", _item(2, 1))))]

    blocks = paginate(tables, metrics)

    spacers = [block.height for block in blocks if isinstance(block, Spacer)]
    assert spacers == [metrics.class_gap, metrics.class_gap, metrics.category_gap]
    assert isinstance(blocks[-1], Spacer)


def test_category_starting_low_on_page_moves_to_next_page():
    metrics = LayoutMetrics(category_break_y=150)
    filler = _class("A", *[_item(i, 1) for i in range(1, 15)])
    tables = [CategoryTable("One", (filler,)), CategoryTable("Two", (_class("B", _item(99, 1)),))]

    pages = split_pages(paginate(tables, metrics))

    assert isinstance(pages[1].blocks[0], CategoryBanner)
    assert pages[1].blocks[0].title == "TWO"


def test_oversized_item_is_placed_on_a_fresh_page():
    tables = [CategoryTable("Cat", (_class("A", _item(1, 1), _item(2, 20)),))]

    blocks = paginate(tables, TIGHT)

    assert _kinds(blocks) == [
        "CategoryBanner",
        "ClassBanner",
        "HeaderRow",
        "ItemRows",
        "PageBreak",
        "HeaderRow",
        "ItemRows",
    ]


def test_place_item_threads_state_explicitly():
    state = LayoutState(current_page_height=0)
    banner = CategoryBanner("CAT", "", 10)
    class_banner = ClassBanner("A", "", 10)
    header = HeaderRow(("Article",), 10)
    rows = ItemRows(item_id=1, item_code="X", rows=(), striped=False, height=20)

    next_state, emitted = place_item(state, banner, class_banner, header, rows, TIGHT)

    assert emitted == (banner, class_banner, header, rows)
    assert next_state.current_page_height == 50
    assert next_state.class_header_drawn
    assert next_state.current_class_shown_header_this_page
    assert state.current_page_height == 0


def test_empty_input_yields_no_blocks():
    assert paginate([]) == []
