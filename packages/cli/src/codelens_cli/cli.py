"""CLI entry point for codelens.

Commands:
  serve    — run the review HTTP server
  review   — submit a code snippet to a running server
  history  — list past reviews, newest first
  show     — display a stored review without re-running it
  delete   — remove a stored review
"""

from __future__ import annotations

import importlib.metadata
from urllib.parse import urlparse

import click
from rich.console import Console

from codelens_cli.commands.delete import delete_cmd
from codelens_cli.commands.history import history_cmd
from codelens_cli.commands.review import review_cmd
from codelens_cli.commands.serve import serve_cmd
from codelens_cli.commands.show import show_cmd
from codelens_core.errors import ConfigError

console = Console()


def _build_store(config: dict):
    """Instantiate the store named by the ``store_url`` connection string.

    Store selection:
      sqlite:///path/to.db (or a bare path) → SQLiteStore
      gist://<gist_id>                       → GistStore (requires GITHUB_TOKEN)
      memory://                              → MemoryStore (not durable)

    This factory lives in cli.py so neither codelens_server nor
    codelens_store know about the config format.
    """
    url = config.get("store_url") or ""
    parsed = urlparse(url)
    scheme = parsed.scheme

    if scheme in ("", "sqlite"):
        from codelens_store.sqlite import SQLiteStore

        # sqlite:///reviews.db → "reviews.db"; sqlite:////var/lib/reviews.db → "/var/lib/reviews.db"
        if scheme == "sqlite" and not url.startswith("sqlite:///"):
            raise ConfigError(f"Malformed store_url {url!r}: expected sqlite:///path/to.db.")
        db_path = url if scheme == "" else url[len("sqlite:///"):]
        if not db_path:
            raise ConfigError(f"No database path in store_url {url!r}.")
        return SQLiteStore(db_path=db_path)

    if scheme == "gist":
        from codelens_store.gist import GistStore

        gist_id = parsed.netloc or parsed.path.strip("/")
        token = config.get("github_token")
        if not gist_id or not token:
            raise ConfigError("GistStore requires a gist id (gist://<id>) and the GITHUB_TOKEN environment variable.")
        return GistStore(gist_id=gist_id, token=token)

    if scheme == "memory":
        from codelens_store.memory import MemoryStore

        console.print("[yellow]Using in-memory store: review history is lost on restart.[/yellow]")
        return MemoryStore()

    raise ConfigError(f"Unsupported store_url scheme: {scheme!r}. Use sqlite, gist or memory.")


@click.group()
@click.version_option(
    version=importlib.metadata.version("codelens"),
    prog_name="codelens",
)
@click.option(
    "--config",
    "config_path",
    default=".codelens.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="CODELENS_CONFIG",
)
@click.pass_context
def main(ctx: click.Context, config_path: str):
    """AI code snippet reviewer with browsable review history."""
    from codelens_core.config import load_config

    ctx.ensure_object(dict)
    try:
        ctx.obj["config"] = load_config(config_path)
    except ConfigError as e:
        raise click.UsageError(str(e))


main.add_command(serve_cmd)
main.add_command(review_cmd)
main.add_command(history_cmd)
main.add_command(show_cmd)
main.add_command(delete_cmd)
