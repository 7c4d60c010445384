"""history command — list past review records from the server."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from codelens_cli.client import ClientError, ReviewClient
from codelens_cli.display import code_preview

console = Console()


@click.command("history")
@click.option("--limit", default=20, show_default=True, help="Maximum number of records to show.")
@click.option("--server", "server_url", default=None, help="Server base URL. Overrides config file.")
@click.pass_context
def history_cmd(ctx, limit: int, server_url: str | None):
    """Show past reviews, most recent first."""
    client = ReviewClient(server_url or ctx.obj["config"]["server_url"])
    try:
        records = client.list_reviews()
    except ClientError as e:
        raise click.ClickException(f"Error fetching history: {e.message}")
    finally:
        client.close()

    if not records:
        console.print("[yellow]No previous reviews yet.[/yellow]")
        return

    table = Table(title="Review History", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="bold", no_wrap=True)
    table.add_column("Code", max_width=40)
    table.add_column("Reviewed At", no_wrap=True)

    # The server already returns newest first.
    for r in records[:limit]:
        table.add_row(
            r.id,
            code_preview(r.code),
            r.created_at[:16].replace("T", " "),
        )

    console.print(table)
