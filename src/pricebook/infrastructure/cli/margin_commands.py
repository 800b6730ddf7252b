"""CLI commands for bulk margin edits."""

from __future__ import annotations

import click

from pricebook.application.bulk_update_margins import BulkUpdateMarginsHandler
from pricebook.domain.exceptions import DomainException
from pricebook.infrastructure.bootstrap import (
    activity_log,
    product_repository,
    settings_repository,
)
from pricebook.infrastructure.cli.product_commands import parse_margins


@click.command("bulk")
@click.argument("skus", nargs=-1, required=True)
@click.option("--b2b-margin", default=None, help="B2B margin in percent.")
@click.option("--consumer-margin", default=None, help="Consumer margin in percent.")
def margins_bulk(skus: tuple[str, ...], b2b_margin: str | None, consumer_margin: str | None) -> None:
    """Set margins on several products at once and reprice them."""
    margins = parse_margins(b2b_margin, consumer_margin)
    if not margins:
        click.echo("Nothing to change.")
        return

    handler = BulkUpdateMarginsHandler(product_repository(), settings_repository(), activity_log())
    try:
        result = handler.handle(list(skus), margins)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Updated {len(result.updated)} products")
    for sku, error in result.failed:
        click.echo(f"  failed {sku}: {error}", err=True)
