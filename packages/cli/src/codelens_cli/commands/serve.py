"""serve command — run the review HTTP server."""

from __future__ import annotations

import logging

import click
from rich.console import Console

from codelens_core.errors import ConfigError
from codelens_store.errors import PersistenceError

console = Console()

_NOISY_LOGGERS = ("httpx", "httpcore", "openai", "anthropic", "urllib3")


@click.command("serve")
@click.option("--host", default=None, help="Interface to bind. Overrides config file.")
@click.option("--port", type=int, default=None, help="Port to listen on. Overrides config and PORT.")
@click.option(
    "--provider",
    type=click.Choice(["openrouter", "openai", "anthropic"]),
    default=None,
    help="AI model provider. Overrides config file.",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    show_default=True,
)
@click.pass_context
def serve_cmd(ctx, host: str | None, port: int | None, provider: str | None, log_level: str):
    """Start the review server.

    Refuses to start when the provider's API key is missing.

    \b
    Environment variables:
      OPENROUTER_API_KEY   Required when using --provider openrouter (default)
      OPENAI_API_KEY       Required when using --provider openai
      ANTHROPIC_API_KEY    Required when using --provider anthropic
      CODELENS_STORE_URL   Store connection string (default sqlite:///.codelens.db)
      PORT                 Listening port (default 5002)
    """
    import uvicorn

    from codelens_cli.cli import _build_store
    from codelens_core.generator import get_generator
    from codelens_server.api import create_app
    from codelens_server.service import ReviewService

    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    config = dict(ctx.obj["config"])
    for key, value in {"host": host, "port": port, "provider": provider}.items():
        if value is not None:
            config[key] = value

    try:
        generator = get_generator(config)
        store = _build_store(config)
    except ConfigError as e:
        raise click.UsageError(str(e))
    except PersistenceError as e:
        raise click.ClickException(e.message)

    app = create_app(ReviewService(generator=generator, store=store))
    console.print(f"[bold]codelens[/bold] listening on http://{config['host']}:{config['port']}")
    uvicorn.run(app, host=config["host"], port=config["port"], log_level=log_level.lower())
