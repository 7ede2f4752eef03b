from pathlib import Path

import pytest

from pricelist.config import load_config

ENV_KEYS = [
    "PRICELIST_LOCALE",
    "LOG_LEVEL",
    "PRICELIST_TENANT_NAME",
    "PRICELIST_TENANT_ADDRESS",
    "PRICELIST_TENANT_CITY",
    "PRICELIST_TENANT_PHONE",
    "PRICELIST_FOOTER_NOTE",
    "PRICELIST_OUTPUT_DIR",
    "PRICELIST_PAGE_HEIGHT_MM",
    "PRICELIST_BOTTOM_MARGIN_MM",
    "PRICELIST_ROW_HEIGHT_MM",
    "PRICELIST_SHOW_DETAILS",
    "PRICELIST_TENANT_LOGO",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults():
    config = load_config()

    assert config.locale == "fr"
    assert config.log_level == "INFO"
    assert config.tenant_name == ""
    assert config.address_lines == ()
    assert config.output_dir == Path(".")
    assert config.tenant_logo is None
    assert config.show_details is False
    assert config.layout.page_limit == 277
    assert config.layout.row_height == 8


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PRICELIST_LOCALE", "EN")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("PRICELIST_TENANT_NAME", "Acme")
    monkeypatch.setenv("PRICELIST_TENANT_ADDRESS", "12 rue du Port")
    monkeypatch.setenv("PRICELIST_TENANT_CITY", " ")
    monkeypatch.setenv("PRICELIST_SHOW_DETAILS", "yes")
    monkeypatch.setenv("PRICELIST_PAGE_HEIGHT_MM", "279.4")
    monkeypatch.setenv("PRICELIST_ROW_HEIGHT_MM", "6")

    config = load_config()

    assert config.locale == "en"
    assert config.log_level == "DEBUG"
    assert config.tenant_name == "Acme"
    assert config.address_lines == ("12 rue du Port",)
    assert config.show_details is True
    assert config.layout.page_height == pytest.approx(279.4)
    assert config.layout.row_height == 6
    assert config.layout.category_break_y == 240


@pytest.mark.parametrize(
    "key, value",
    [
        ("PRICELIST_LOCALE", "de"),
        ("PRICELIST_SHOW_DETAILS", "maybe"),
        ("PRICELIST_ROW_HEIGHT_MM", "0"),
        ("PRICELIST_ROW_HEIGHT_MM", "tall"),
        ("PRICELIST_PAGE_HEIGHT_MM", "70"),
    ],
)
def test_invalid_values_raise(monkeypatch, key, value):
    monkeypatch.setenv(key, value)
    with pytest.raises(ValueError):
        load_config()


def test_tenant_logo_must_exist(monkeypatch, tmp_path):
    logo = tmp_path / "logo.png"
    logo.write_bytes(b"\x89PNG")
    monkeypatch.setenv("PRICELIST_TENANT_LOGO", str(logo))
    assert load_config().tenant_logo == logo

    monkeypatch.setenv("PRICELIST_TENANT_LOGO", str(tmp_path / "missing.png"))
    with pytest.raises(ValueError, match="PRICELIST_TENANT_LOGO"):
        load_config()
