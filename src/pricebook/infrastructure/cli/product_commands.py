"""CLI commands for the Product aggregate."""

from __future__ import annotations

from decimal import Decimal

import click

from pricebook.application.create_product import CreateProductHandler
from pricebook.application.delete_product import DeleteProductHandler
from pricebook.application.dto import SaveOutcome, format_amount
from pricebook.application.show_products import (
    FILTERS,
    ListProductsHandler,
    ShowProductHandler,
)
from pricebook.application.update_product import UpdateProductHandler
from pricebook.domain.exceptions import DomainException, DuplicateKeyError
from pricebook.domain.model.value_objects import PriceList, ProductKind, to_amount, to_margin
from pricebook.domain.service.validator import validate
from pricebook.infrastructure.bootstrap import (
    activity_log,
    config,
    margin_memory,
    product_repository,
    save_product_handler,
)

KIND_CHOICE = click.Choice([k.value for k in ProductKind])


def parse_margins(b2b: str | None, consumer: str | None) -> dict[PriceList, Decimal]:
    """Turn the --b2b-margin / --consumer-margin options into a mapping."""
    margins: dict[PriceList, Decimal] = {}
    for price_list, raw in ((PriceList.B2B, b2b), (PriceList.CONSUMER, consumer)):
        if raw is None:
            continue
        try:
            margin = to_margin(raw)
        except DomainException as exc:
            raise click.BadParameter(str(exc))
        if margin is not None:
            margins[price_list] = margin
    return margins


def _parse_cost(raw: str | None) -> Decimal | None:
    if raw is None:
        return None
    try:
        return to_amount(raw)
    except DomainException as exc:
        raise click.BadParameter(str(exc))


def _report_save(outcome: SaveOutcome) -> None:
    p = outcome.product
    currency = config().CURRENCY
    verb = "created" if outcome.created else "updated"
    click.echo(f"Product {p.sku} {verb}  (cost={format_amount(p.purchase_cost, currency)})")
    for composite in outcome.cascaded:
        click.echo(
            f"  recomputed {composite.sku}: cost={format_amount(composite.purchase_cost, currency)}"
        )


def _save_error(exc: DomainException) -> click.ClickException:
    if isinstance(exc, DuplicateKeyError):
        return click.ClickException("SKU already exists.")
    return click.ClickException(str(exc))


@click.command("add")
@click.option("--sku", required=True, help="Unique product code.")
@click.option("--name", required=True, help="Product name.")
@click.option("--kind", type=KIND_CHOICE, default="simple", show_default=True)
@click.option("--cost", default=None, help="Purchase cost (simple products only).")
@click.option("--b2b-margin", default=None, help="B2B margin in percent.")
@click.option("--consumer-margin", default=None, help="Consumer margin in percent.")
def product_add(
    sku: str,
    name: str,
    kind: str,
    cost: str | None,
    b2b_margin: str | None,
    consumer_margin: str | None,
) -> None:
    """Add a new product to the catalog.

    Margins that are not given are taken from the last saved product.
    """
    handler = CreateProductHandler(save_product_handler(), margin_memory())

    try:
        outcome = handler.handle(
            sku=sku,
            name=name,
            kind=ProductKind(kind),
            purchase_cost=_parse_cost(cost),
            margins=parse_margins(b2b_margin, consumer_margin),
        )
    except DomainException as exc:
        raise _save_error(exc)

    _report_save(outcome)


@click.command("list")
@click.option("--filter", "filter_mode", type=click.Choice(FILTERS), default="all", show_default=True)
@click.option("--kind", type=KIND_CHOICE, default=None, help="Only this kind.")
def product_list(filter_mode: str, kind: str | None) -> None:
    """List products with their prices and sync status."""
    handler = ListProductsHandler(product_repository(), config().CURRENCY)

    try:
        lines = handler.handle(filter_mode, ProductKind(kind) if kind else None)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not lines:
        click.echo("No products found.")
        return

    click.echo(
        f"{'SKU':<14} {'Name':<24} {'Kind':<10} {'Cost':>10} {'B2B':>10} {'Consumer':>10}  Status"
    )
    click.echo("-" * 96)
    for line in lines:
        click.echo(
            f"{line.sku:<14} {line.name:<24} {line.kind:<10} {line.purchase_cost:>10} "
            f"{line.b2b_price:>10} {line.consumer_price:>10}  {line.status}"
        )


@click.command("show")
@click.argument("sku")
def product_show(sku: str) -> None:
    """Show details of a product."""
    handler = ShowProductHandler(product_repository(), config().CURRENCY)

    try:
        dto = handler.handle(sku)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"{dto.sku}  {dto.name}  ({dto.kind})")
    click.echo(f"Purchase cost: {dto.purchase_cost}")
    if dto.kind == ProductKind.COMPOSITE.value:
        click.echo()
        click.echo(f"  {'Component':<24} {'Qty':>5} {'Unit':>10} {'Total':>10}")
        click.echo(f"  {'-'*52}")
        for line in dto.components:
            label = line.sku or f"<missing {line.component_id}>"
            click.echo(
                f"  {label:<24} {line.quantity:>5} {line.unit_cost:>10} {line.line_total:>10}"
            )
    click.echo()
    for price in dto.prices:
        click.echo(f"  {price.price_list:<10} margin {price.margin:>8}  price {price.final_price:>10}")
    click.echo()
    click.echo(f"Teamleader id: {dto.external_ref or '-'}")
    click.echo(f"Sync pending:  {'yes' if dto.sync_pending else 'no'}")
    click.echo(f"Last edited:   {dto.last_edited_at or '-'}")
    click.echo(f"Last synced:   {dto.last_synced_at or '-'}")
    if dto.validation_error:
        click.echo(f"Incomplete:    {dto.validation_error}")


@click.command("update")
@click.argument("sku")
@click.option("--new-sku", default=None, help="Rename the SKU.")
@click.option("--name", default=None, help="New name.")
@click.option("--kind", type=KIND_CHOICE, default=None, help="Change kind (resets the BOM).")
@click.option("--cost", default=None, help="New purchase cost (simple products only).")
@click.option("--b2b-margin", default=None, help="B2B margin in percent.")
@click.option("--consumer-margin", default=None, help="Consumer margin in percent.")
def product_update(
    sku: str,
    new_sku: str | None,
    name: str | None,
    kind: str | None,
    cost: str | None,
    b2b_margin: str | None,
    consumer_margin: str | None,
) -> None:
    """Edit a product; dependent composites are recomputed."""
    handler = UpdateProductHandler(product_repository(), save_product_handler())

    try:
        outcome = handler.handle(
            sku=sku,
            new_sku=new_sku,
            name=name,
            kind=ProductKind(kind) if kind else None,
            purchase_cost=_parse_cost(cost),
            margins=parse_margins(b2b_margin, consumer_margin),
        )
    except DomainException as exc:
        raise _save_error(exc)

    _report_save(outcome)


@click.command("delete")
@click.argument("sku")
@click.confirmation_option(prompt="Delete this product?")
def product_delete(sku: str) -> None:
    """Delete a product."""
    handler = DeleteProductHandler(product_repository(), activity_log())

    try:
        product = handler.handle(sku)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product.sku} deleted")


@click.command("validate")
@click.argument("sku")
def product_validate(sku: str) -> None:
    """Check whether a product can be synced."""
    repo = product_repository()
    product = repo.get_by_sku(sku)
    if product is None:
        raise click.ClickException(f"Product '{sku}' not found")

    result = validate(product, repo.list_all())
    if result.valid:
        click.echo(f"{product.sku} is ready to sync")
    else:
        click.echo(f"{product.sku} is incomplete: {result.message}")
