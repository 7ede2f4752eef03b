"""Output backends consuming the row-block stream."""

from __future__ import annotations

from typing import Callable, Dict

from ..renderer import RenderBackend
from .html import HtmlBackend
from .pdf import PdfBackend
from .text import TextBackend

__all__ = ["HtmlBackend", "PdfBackend", "TextBackend", "BACKENDS", "get_backend"]

BACKENDS: Dict[str, Callable[[], RenderBackend]] = {
    "pdf": PdfBackend,
    "html": HtmlBackend,
    "text": TextBackend,
}


def get_backend(name: str) -> RenderBackend:
    try:
        factory = BACKENDS[name.lower()]
    except KeyError as exc:
        raise ValueError(f"Unknown output format '{name}', expected one of {', '.join(BACKENDS)}") from exc
    return factory()
