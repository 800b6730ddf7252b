"""CLI commands for syncing products to Teamleader."""

from __future__ import annotations

import threading

import click

from pricebook.application.sync_catalog import SyncCatalogHandler, SyncStatusHandler
from pricebook.application.sync_product import SyncProductHandler
from pricebook.domain.exceptions import DomainException
from pricebook.domain.model.value_objects import ProductKind
from pricebook.infrastructure.bootstrap import (
    activity_log,
    product_repository,
    teamleader_client,
)


def _sync_handler() -> SyncProductHandler:
    return SyncProductHandler(product_repository(), teamleader_client(), activity_log())


@click.command("status")
def sync_status() -> None:
    """Show which pending products are ready to sync and which are blocked."""
    status = SyncStatusHandler(product_repository()).handle()

    if not status.ready and not status.blocked:
        click.echo("Everything is up to date.")
        return

    click.echo(f"{len(status.ready)} product(s) ready to sync")
    for sku in status.ready:
        click.echo(f"  {sku}")
    if status.blocked:
        click.echo(f"{len(status.blocked)} product(s) blocked")
        for sku, reason in status.blocked:
            click.echo(f"  {sku}: {reason}")


@click.command("one")
@click.argument("sku")
def sync_one(sku: str) -> None:
    """Sync a single product."""
    try:
        product = _sync_handler().handle(sku)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Synced {product.sku} (Teamleader id {product.external_ref})")


@click.command("all")
@click.option(
    "--kind",
    type=click.Choice([k.value for k in ProductKind]),
    default=None,
    help="Only sync products of this kind.",
)
def sync_all(kind: str | None) -> None:
    """Sync every eligible product, one after the other.

    Ctrl-C stops after the product currently being sent.
    """
    handler = SyncCatalogHandler(product_repository(), _sync_handler(), activity_log())
    cancel = threading.Event()
    result: dict = {}

    def run() -> None:
        try:
            result["summary"] = handler.handle(ProductKind(kind) if kind else None, cancel)
        except DomainException as exc:
            result["error"] = exc

    worker = threading.Thread(target=run)
    worker.start()
    try:
        while worker.is_alive():
            worker.join(0.2)
    except KeyboardInterrupt:
        click.echo("Stopping after the current product...", err=True)
        cancel.set()
        worker.join()

    if "error" in result:
        raise click.ClickException(str(result["error"]))
    summary = result["summary"]
    for item in summary.items:
        click.echo(item.message)
    if summary.cancelled:
        click.echo("Sync cancelled.")
    click.echo(f"Sync finished: {summary.succeeded} succeeded, {summary.failed} failed.")
