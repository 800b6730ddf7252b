"""CLI commands for price formulas and language."""

from __future__ import annotations

import click

from pricebook.application.dto import format_amount
from pricebook.application.update_settings import UpdateSettingsHandler, preview_prices
from pricebook.domain.exceptions import DomainException
from pricebook.domain.model.settings import SUPPORTED_LANGUAGES
from pricebook.domain.model.value_objects import to_amount, to_margin
from pricebook.infrastructure.bootstrap import activity_log, config, settings_repository


@click.command("show")
def settings_show() -> None:
    """Show the current settings."""
    try:
        settings = settings_repository().get_app_settings()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"B2B formula:      {settings.b2b_formula}")
    click.echo(f"Consumer formula: {settings.consumer_formula}")
    click.echo(f"Language:         {settings.language}")


@click.command("set")
@click.option("--b2b-formula", default=None, help="e.g. 'cost * markup'.")
@click.option("--consumer-formula", default=None, help="e.g. 'cost * 1.25'.")
@click.option("--language", type=click.Choice(SUPPORTED_LANGUAGES), default=None)
def settings_set(b2b_formula: str | None, consumer_formula: str | None, language: str | None) -> None:
    """Change price formulas or the language.

    Formulas may use cost, discount, markup (1 + discount/100) and
    discount_factor (1 - discount/100); "25%" means 25/100.
    """
    handler = UpdateSettingsHandler(settings_repository(), activity_log())
    try:
        handler.handle(b2b_formula, consumer_formula, language)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo("Settings saved.")


@click.command("preview")
@click.option("--cost", default="100", show_default=True)
@click.option("--margin", default="25", show_default=True)
def settings_preview(cost: str, margin: str) -> None:
    """Price a sample cost and margin with the current formulas."""
    try:
        entries = preview_prices(
            settings_repository().get_app_settings(), to_amount(cost), to_margin(margin)
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    currency = config().CURRENCY
    for entry in entries:
        click.echo(f"{entry.price_list.value:<10} {format_amount(entry.final_price, currency):>12}")
