"""review command — submit a code snippet to the server."""

from __future__ import annotations

import click
from rich.console import Console

from codelens_cli.client import ReviewClient
from codelens_cli.display import render_review
from codelens_cli.session import PLACEHOLDER_MESSAGE, ReviewSession, SubmitState

console = Console()


@click.command("review")
@click.argument("source", type=click.File("r"), default="-")
@click.option("--server", "server_url", default=None, help="Server base URL. Overrides config file.")
@click.option("--plain", is_flag=True, help="Strip markdown markers from the review text.")
@click.pass_context
def review_cmd(ctx, source, server_url: str | None, plain: bool):
    """Review the code in SOURCE (a file path, or - for stdin).

    The review is generated by the server, stored in its history, and printed
    here together with the optimized version of the code when there is one.
    """
    code = source.read()
    client = ReviewClient(server_url or ctx.obj["config"]["server_url"])
    session = ReviewSession(client)
    try:
        with console.status(PLACEHOLDER_MESSAGE):
            sent = session.submit(code)
    finally:
        client.close()

    if not sent:
        raise click.UsageError(session.message)

    if session.state is SubmitState.FAILED:
        console.print(f"[red]{session.review}[/red]")
        ctx.exit(1)

    render_review(console, session.review, session.optimized_code, plain=plain)
    console.print(f"[dim]{len(session.history)} review(s) in history.[/dim]")
