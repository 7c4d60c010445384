"""show command — display a stored review without re-running it."""

from __future__ import annotations

import click
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax

from codelens_cli.client import ClientError, ReviewClient
from codelens_cli.display import render_review
from codelens_cli.session import ReviewSession

console = Console()


@click.command("show")
@click.argument("review_id")
@click.option("--server", "server_url", default=None, help="Server base URL. Overrides config file.")
@click.option("--plain", is_flag=True, help="Strip markdown markers from the review text.")
@click.pass_context
def show_cmd(ctx, review_id: str, server_url: str | None, plain: bool):
    """Show the code and review stored under REVIEW_ID."""
    client = ReviewClient(server_url or ctx.obj["config"]["server_url"])
    session = ReviewSession(client)
    try:
        # Only the history listing goes over the network; the generator is never involved.
        # Fetched directly so a connection failure is not reported as an unknown id.
        session.history = client.list_reviews()
        session.select(review_id)
    except KeyError:
        raise click.ClickException(f"No review with id {review_id}.")
    except ClientError as e:
        raise click.ClickException(e.message)
    finally:
        client.close()

    console.print(Panel(Syntax(session.displayed_code, "text", word_wrap=True), title="Code", border_style="blue"))
    render_review(console, session.displayed_review, session.displayed_optimized_code, plain=plain)
    console.print(f"[dim]Reviewed at {session.selected.created_at[:19].replace('T', ' ')}[/dim]")
