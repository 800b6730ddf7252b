"""CLI commands for the activity log."""

from __future__ import annotations

import click

from pricebook.infrastructure.bootstrap import activity_log


@click.command("list")
@click.option("--limit", type=int, default=100, show_default=True)
def log_list(limit: int) -> None:
    """Show recent activity, newest first."""
    entries = activity_log().list_recent(limit)

    if not entries:
        click.echo("No activity recorded.")
        return

    for entry in entries:
        who = f" [{entry.actor}]" if entry.actor else ""
        click.echo(
            f"{entry.created_at:%Y-%m-%d %H:%M} {entry.kind.value:<8} {entry.message}{who}"
        )
