"""Core package for the price-list composition engine."""

from .compose import ComposeOptions, compose_document, render_document

__all__ = [
    "ComposeOptions",
    "compose_document",
    "render_document",
    "config",
    "models",
    "formats",
    "columns",
    "metrics",
    "grouping",
    "ranges",
    "table",
    "layout",
    "renderer",
    "backends",
    "loader",
    "cli",
]
