"""CLI commands for editing a composite's bill of materials."""

from __future__ import annotations

import click

from pricebook.application.dto import SaveOutcome, format_amount
from pricebook.application.edit_bom import EditBomHandler
from pricebook.domain.exceptions import DomainException
from pricebook.infrastructure.bootstrap import config, product_repository, save_product_handler


def _handler() -> EditBomHandler:
    return EditBomHandler(product_repository(), save_product_handler())


def _report(outcome: SaveOutcome) -> None:
    p = outcome.product
    cost = format_amount(p.purchase_cost, config().CURRENCY)
    click.echo(f"{p.sku}: {len(p.components)} component(s), cost={cost}")


@click.command("add")
@click.argument("composite")
@click.argument("component")
@click.option("--quantity", type=int, default=1, show_default=True)
def bom_add(composite: str, component: str, quantity: int) -> None:
    """Add COMPONENT (a simple product SKU) to COMPOSITE."""
    try:
        outcome = _handler().add_component(composite, component, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    _report(outcome)


@click.command("set")
@click.argument("composite")
@click.argument("component")
@click.option("--quantity", type=int, required=True)
def bom_set(composite: str, component: str, quantity: int) -> None:
    """Change the quantity of COMPONENT in COMPOSITE."""
    try:
        outcome = _handler().set_quantity(composite, component, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    _report(outcome)


@click.command("remove")
@click.argument("composite")
@click.argument("component")
def bom_remove(composite: str, component: str) -> None:
    """Remove COMPONENT (SKU, or id of a deleted product) from COMPOSITE."""
    try:
        outcome = _handler().remove_component(composite, component)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    _report(outcome)
