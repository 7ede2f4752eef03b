"""Configuration loader for the price-list composer."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from .i18n import SUPPORTED_LOCALES
from .layout import LayoutMetrics


def _get_env(key: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(key)
    if value is not None:
        value = value.strip()
        if value == "":
            return default
        return value
    return default


def _get_float(key: str, default: float) -> float:
    value = _get_env(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ValueError(f"Environment variable {key} must be a number") from exc


def _get_bool(key: str, default: bool) -> bool:
    value = _get_env(key)
    if value is None:
        return default
    value_lower = value.lower()
    if value_lower in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if value_lower in {"0", "false", "f", "no", "n", "off"}:
        return False
    raise ValueError(f"Environment variable {key} must be a boolean")


@dataclass(slots=True)
class AppConfig:
    locale: str
    log_level: str
    tenant_name: str
    tenant_address: Optional[str]
    tenant_city: Optional[str]
    tenant_phone: Optional[str]
    footer_note: Optional[str]
    tenant_logo: Optional[Path]
    output_dir: Path
    show_details: bool
    layout: LayoutMetrics

    @property
    def address_lines(self) -> Tuple[str, ...]:
        return tuple(line for line in (self.tenant_address, self.tenant_city) if line)


def load_config() -> AppConfig:
    locale = _get_env("PRICELIST_LOCALE", "fr").lower()
    if locale not in SUPPORTED_LOCALES:
        raise ValueError(f"PRICELIST_LOCALE must be one of {', '.join(SUPPORTED_LOCALES)}")

    defaults = LayoutMetrics()
    page_height = _get_float("PRICELIST_PAGE_HEIGHT_MM", defaults.page_height)
    bottom_margin = max(0.0, _get_float("PRICELIST_BOTTOM_MARGIN_MM", defaults.bottom_margin))
    row_height = _get_float("PRICELIST_ROW_HEIGHT_MM", defaults.row_height)
    if row_height <= 0:
        raise ValueError("PRICELIST_ROW_HEIGHT_MM must be positive")
    if page_height - bottom_margin <= defaults.first_page_top:
        raise ValueError("PRICELIST_PAGE_HEIGHT_MM leaves no room for content")

    tenant_logo = _get_env("PRICELIST_TENANT_LOGO")
    if tenant_logo is not None and not Path(tenant_logo).is_file():
        raise ValueError(f"PRICELIST_TENANT_LOGO file not found: {tenant_logo}")

    return AppConfig(
        locale=locale,
        log_level=_get_env("LOG_LEVEL", "INFO").upper(),
        tenant_name=_get_env("PRICELIST_TENANT_NAME", ""),
        tenant_address=_get_env("PRICELIST_TENANT_ADDRESS"),
        tenant_city=_get_env("PRICELIST_TENANT_CITY"),
        tenant_phone=_get_env("PRICELIST_TENANT_PHONE"),
        footer_note=_get_env("PRICELIST_FOOTER_NOTE"),
        tenant_logo=Path(tenant_logo) if tenant_logo else None,
        output_dir=Path(_get_env("PRICELIST_OUTPUT_DIR", ".")),
        show_details=_get_bool("PRICELIST_SHOW_DETAILS", False),
        layout=LayoutMetrics(
            page_height=page_height,
            bottom_margin=bottom_margin,
            row_height=row_height,
            category_break_y=min(defaults.category_break_y, page_height - bottom_margin),
        ),
    )
