"""delete command — remove a stored review."""

from __future__ import annotations

import click
from rich.console import Console

from codelens_cli.client import ClientError, ReviewClient

console = Console()


@click.command("delete")
@click.argument("review_id")
@click.option("--server", "server_url", default=None, help="Server base URL. Overrides config file.")
@click.pass_context
def delete_cmd(ctx, review_id: str, server_url: str | None):
    """Delete the review stored under REVIEW_ID.

    Deleting an id that does not exist is not an error.
    """
    client = ReviewClient(server_url or ctx.obj["config"]["server_url"])
    try:
        removed = client.delete(review_id)
    except ClientError as e:
        raise click.ClickException(f"Could not delete review: {e.message}")
    finally:
        client.close()

    if removed:
        console.print(f"[green]Deleted review {review_id}.[/green]")
    else:
        console.print(f"[yellow]No review with id {review_id}; nothing to delete.[/yellow]")
