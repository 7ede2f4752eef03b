"""Command-line interface for the price-list composer."""

from __future__ import annotations

import json
from datetime import date, datetime
from pathlib import Path
from typing import List, Optional

import typer

from .backends import BACKENDS
from .columns import columns_for_price_list, resolve_column_set, resolve_columns
from .compose import render_document
from .config import load_config
from .loader import PriceListError, load_price_data
from .logging import configure_logging, get_logger
from .models import ComposeOptions
from .renderer import suggested_filename

logger = get_logger(__name__)

app = typer.Typer(add_completion=False, help="Price-list composer")


@app.command("render")
def render_command(
    inputs: List[Path] = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Price data JSON file(s)"),
    price_list: Optional[str] = typer.Option(None, "--price-list", help="Selected price-list column code, e.g. 05-GROS"),
    name: Optional[str] = typer.Option(None, "--name", help="Price-list display name"),
    details: Optional[bool] = typer.Option(None, "--details/--no-details", help="Show cost, case price and %Exp"),
    output_format: str = typer.Option("pdf", "--format", help=f"Output format: {', '.join(BACKENDS)}"),
    output: Optional[Path] = typer.Option(None, "--output", help="Output file (default: generated name in output dir)"),
    locale: Optional[str] = typer.Option(None, "--locale", help="Document locale (fr or en)"),
    tenant: Optional[str] = typer.Option(None, "--tenant", help="Tenant name printed on the document"),
    logo: Optional[Path] = typer.Option(None, "--logo", exists=True, dir_okay=False, readable=True, help="Tenant logo image (PNG or JPEG)"),
    effective: Optional[str] = typer.Option(None, "--date", help="Effective date (YYYY-MM-DD), defaults to today"),
) -> None:
    config = _load_config()
    if output_format.lower() not in BACKENDS:
        raise typer.BadParameter(f"--format must be one of {', '.join(BACKENDS)}")

    try:
        data = load_price_data(inputs, price_list)
    except PriceListError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    selected = price_list or (data.price_list.code if data.price_list else None)
    if not selected:
        raise typer.BadParameter("--price-list is required when the input has no priceList")
    list_name = name if name is not None else (data.price_list.name if data.price_list else "")

    options = ComposeOptions(
        selected_code=selected.strip(),
        show_details=config.show_details if details is None else details,
        locale=(locale or config.locale).lower(),
    )
    generated_on = _parse_iso_date(effective) if effective else date.today()
    tenant_name = tenant if tenant is not None else config.tenant_name

    content = render_document(
        data.items,
        data.ranges,
        options,
        output_format=output_format.lower(),
        price_list_name=list_name,
        tenant_name=tenant_name,
        address_lines=config.address_lines,
        phone=config.tenant_phone,
        footer_note=config.footer_note,
        logo_path=logo or config.tenant_logo,
        generated_on=generated_on,
        metrics=config.layout,
    )

    extension = BACKENDS[output_format.lower()].extension
    target = output or config.output_dir / suggested_filename(tenant_name, extension, generated_on)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(content)
    logger.info("document_written", path=str(target), size=len(content))
    typer.echo(f"Price list written to {target}")


@app.command("columns")
def columns_command(
    price_list: str = typer.Option(..., "--price-list", help="Selected price-list column code"),
    column: Optional[List[str]] = typer.Option(None, "--column", help="Column code present on the data (repeatable)"),
    details: bool = typer.Option(False, "--details/--no-details", help="Apply details-mode visibility"),
) -> None:
    _load_config()
    codes = list(column) if column else list(columns_for_price_list(price_list))
    column_set = resolve_column_set(codes, price_list, details)
    typer.echo(json.dumps({
        "price_list": price_list.strip(),
        "order": [resolved.code for resolved in resolve_columns(codes)],
        "visible": [
            {"code": resolved.code, "display_name": resolved.display_name}
            for resolved in column_set.standard
        ],
        "pds": column_set.has_pds,
    }, ensure_ascii=False))


def _load_config():
    try:
        config = load_config()
    except ValueError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    configure_logging(config.log_level)
    return config


def _parse_iso_date(value: str) -> date:
    try:
        return datetime.fromisoformat(value).date()
    except ValueError as exc:  # pragma: no cover - user input guard
        raise typer.BadParameter("Date must be in YYYY-MM-DD format") from exc


def main():
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
