"""Category -> Class -> Item grouping of a flat item list."""

from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from .models import DEFAULT_CATEGORY, DEFAULT_CLASS, GroupedCategory, GroupedClass, Item

__all__ = ["group_items_by_category", "merge_items"]


def group_items_by_category(
    items: Iterable[Item],
    default_category: str = DEFAULT_CATEGORY,
    default_class: str = DEFAULT_CLASS,
) -> List[GroupedCategory]:
    """Group items in a single pass, keeping first-seen order at every level."""
    categories: Dict[str, Dict[str, List[Item]]] = {}
    for item in items:
        category = item.category_name or default_category
        klass = item.class_name or default_class
        categories.setdefault(category, {}).setdefault(klass, []).append(item)

    result: List[GroupedCategory] = []
    for category_name, classes_by_name in categories.items():
        classes: List[GroupedClass] = []
        category_ids: List[int] = []
        for class_name, class_items in classes_by_name.items():
            ids = tuple(item.item_id for item in class_items)
            category_ids.extend(ids)
            classes.append(GroupedClass(class_name=class_name, items=tuple(class_items), all_item_ids=ids))
        result.append(
            GroupedCategory(
                category_name=category_name,
                classes=tuple(classes),
                all_item_ids=tuple(category_ids),
            )
        )
    return result


def merge_items(existing: Sequence[Item], incoming: Iterable[Item]) -> List[Item]:
    """Append incoming items whose identity is not already present; first occurrence wins."""
    seen = {item.item_id for item in existing}
    merged = list(existing)
    for item in incoming:
        if item.item_id in seen:
            continue
        seen.add(item.item_id)
        merged.append(item)
    return merged
