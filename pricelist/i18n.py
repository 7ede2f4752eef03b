"""Labels for the two supported document locales."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

__all__ = ["Labels", "SUPPORTED_LOCALES", "get_labels"]


@dataclass(frozen=True, slots=True)
class Labels:
    articles: str
    classes: str
    without_category: str
    without_class: str
    effective: str
    phone: str
    page: str
    article: str = "Article"
    format: str = "Fmt"
    quantity: str = "Qty"
    per_case: str = "$/Cs"


_LABELS: Dict[str, Labels] = {
    "fr": Labels(
        articles="article(s)",
        classes="classe(s)",
        without_category="Sans catégorie",
        without_class="Sans classe",
        effective="Effective",
        phone="Tél",
        page="Page",
    ),
    "en": Labels(
        articles="item(s)",
        classes="class(es)",
        without_category="Without category",
        without_class="Without class",
        effective="Effective",
        phone="Tel",
        page="Page",
    ),
}

SUPPORTED_LOCALES = tuple(_LABELS)


def get_labels(locale: str = "fr") -> Labels:
    """Return the labels of a locale; unknown locales fall back to French."""
    return _LABELS.get((locale or "fr").lower()[:2], _LABELS["fr"])
