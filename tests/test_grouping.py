from pricelist.grouping import group_items_by_category, merge_items
from pricelist.models import Item


def _item(item_id, category=None, klass=None):
    return Item(item_id=item_id, item_code=f"C{item_id}", category_name=category, class_name=klass)


def test_grouping_preserves_first_seen_order():
    a = _item(1, "cat1", "cls1")
    b = _item(2, "cat2", "cls1")
    c = _item(3, "cat1", "cls1")

    grouped = group_items_by_category([a, b, c])

    assert [category.category_name for category in grouped] == ["cat1", "cat2"]
    (cls1,) = grouped[0].classes
    assert cls1.class_name == "cls1"
    assert cls1.items == (a, c)
    assert cls1.all_item_ids == (1, 3)


def test_grouping_does_not_sort_classes_or_items():
    items = [_item(5, "cat", "Zeta"), _item(4, "cat", "Alpha"), _item(3, "cat", "Zeta")]
    grouped = group_items_by_category(items)

    assert [cls.class_name for cls in grouped[0].classes] == ["Zeta", "Alpha"]
    assert grouped[0].all_item_ids == (5, 3, 4)
    assert grouped[0].item_count == 3


def test_grouping_defaults_missing_names():
    grouped = group_items_by_category([_item(1), _item(2, "", "")])

    assert len(grouped) == 1
    assert grouped[0].category_name == "Sans catégorie"
    assert grouped[0].classes[0].class_name == "Sans classe"
    assert grouped[0].classes[0].all_item_ids == (1, 2)


def test_grouping_is_deterministic():
    items = [_item(i, f"cat{i % 3}", f"cls{i % 2}") for i in range(20)]
    assert group_items_by_category(items) == group_items_by_category(list(items))


def test_merge_items_drops_known_identities():
    existing = [_item(1), _item(2)]
    incoming = [Item(item_id=2, item_code="OTHER"), _item(3), _item(1), _item(3)]

    merged = merge_items(existing, incoming)

    assert [item.item_id for item in merged] == [1, 2, 3]
    assert merged[1].item_code == "C2"
