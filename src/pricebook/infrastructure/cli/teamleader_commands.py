"""CLI commands for the Teamleader connection."""

from __future__ import annotations

import click

from pricebook.domain.exceptions import DomainException
from pricebook.infrastructure.bootstrap import teamleader_client


@click.command("configure")
@click.option("--client-id", required=True)
@click.option("--client-secret", required=True)
@click.option("--redirect-uri", required=True, help="Must match the one registered in Teamleader.")
def teamleader_configure(client_id: str, client_secret: str, redirect_uri: str) -> None:
    """Store the OAuth client credentials."""
    try:
        teamleader_client().configure(client_id, client_secret, redirect_uri)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    click.echo("Teamleader credentials saved.")


@click.command("authorize-url")
def teamleader_authorize_url() -> None:
    """Print the URL to open to grant access."""
    try:
        click.echo(teamleader_client().authorize_url())
    except DomainException as exc:
        raise click.ClickException(str(exc))


@click.command("connect")
@click.argument("code")
@click.option("--redirect-uri", default=None, help="Override the stored redirect URI.")
def teamleader_connect(code: str, redirect_uri: str | None) -> None:
    """Exchange the CODE from the redirect for access tokens."""
    client = teamleader_client()
    try:
        settings = client.exchange_code(code, redirect_uri)
        user = client.current_user(settings["access_token"])
    except DomainException as exc:
        message = str(exc)
        if "redirect_uri" in message:
            message += " (the redirect URI must match the one registered in Teamleader)"
        raise click.ClickException(message)

    name = " ".join(filter(None, [user.get("first_name"), user.get("last_name")]))
    click.echo(f"Connected to Teamleader as {name or user.get('email', 'unknown user')}")


@click.command("whoami")
def teamleader_whoami() -> None:
    """Check the connection by fetching the current Teamleader user."""
    try:
        user = teamleader_client().current_user()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"{user.get('first_name', '')} {user.get('last_name', '')} <{user.get('email', '')}>")
