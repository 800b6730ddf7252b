import click

from pricebook.infrastructure.bootstrap import configure_logging
from pricebook.infrastructure.cli.bom_commands import bom_add, bom_remove, bom_set
from pricebook.infrastructure.cli.log_commands import log_list
from pricebook.infrastructure.cli.margin_commands import margins_bulk
from pricebook.infrastructure.cli.product_commands import (
    product_add,
    product_delete,
    product_list,
    product_show,
    product_update,
    product_validate,
)
from pricebook.infrastructure.cli.settings_commands import (
    settings_preview,
    settings_set,
    settings_show,
)
from pricebook.infrastructure.cli.sync_commands import sync_all, sync_one, sync_status
from pricebook.infrastructure.cli.teamleader_commands import (
    teamleader_authorize_url,
    teamleader_configure,
    teamleader_connect,
    teamleader_whoami,
)


@click.group()
def cli() -> None:
    """Pricebook: product pricing and Teamleader catalog sync"""
    configure_logging()


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def bom() -> None:
    """Edit bills of materials."""


@cli.group()
def margins() -> None:
    """Edit margins."""


@cli.group()
def sync() -> None:
    """Sync products to Teamleader."""


@cli.group()
def settings() -> None:
    """Price formulas and language."""


@cli.group()
def teamleader() -> None:
    """Teamleader connection."""


@cli.group()
def log() -> None:
    """Activity log."""


# Register subcommands
product.add_command(product_add)
product.add_command(product_delete)
product.add_command(product_list)
product.add_command(product_show)
product.add_command(product_update)
product.add_command(product_validate)
bom.add_command(bom_add)
bom.add_command(bom_remove)
bom.add_command(bom_set)
margins.add_command(margins_bulk)
sync.add_command(sync_all)
sync.add_command(sync_one)
sync.add_command(sync_status)
settings.add_command(settings_preview)
settings.add_command(settings_set)
settings.add_command(settings_show)
teamleader.add_command(teamleader_authorize_url)
teamleader.add_command(teamleader_configure)
teamleader.add_command(teamleader_connect)
teamleader.add_command(teamleader_whoami)
log.add_command(log_list)
