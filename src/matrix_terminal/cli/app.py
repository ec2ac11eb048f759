"""Click CLI group with chat, ask, serve, and ping commands."""

from __future__ import annotations

import asyncio

import click
import httpx

from matrix_terminal.core.config import get_settings
from matrix_terminal.core.logging import setup_logging


@click.group(invoke_without_command=True)
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Matrix Terminal — chat with your AI mental coach."""
    if ctx.invoked_subcommand is None:
        ctx.invoke(chat)


@cli.command()
@click.option("--api-url", default=None, help="Relay base URL (default from MATRIX_API_URL)")
def chat(api_url: str | None) -> None:
    """Start an interactive terminal session."""
    settings = get_settings()
    if api_url:
        settings = settings.model_copy(update={"api_url": api_url})
    # Log to file only; stderr output would tear the prompt.
    setup_logging(settings.log_level, settings.log_file, console=False)

    from matrix_terminal.cli.chat import run_terminal

    run_terminal(settings)


@cli.command()
@click.argument("question", nargs=-1, required=True)
def ask(question: tuple[str, ...]) -> None:
    """Ask a single question and print the reply."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_file, console=False)

    from matrix_terminal.cli.chat import ask_once

    click.echo(asyncio.run(ask_once(settings, " ".join(question))))


@cli.command()
def ping() -> None:
    """Check that the relay is up."""
    settings = get_settings()

    from matrix_terminal.cli.chat import check_health
    from matrix_terminal.cli.relay_client import RelayClientError

    try:
        status = asyncio.run(check_health(settings))
    except (httpx.HTTPError, RelayClientError) as e:
        click.echo(f"Relay at {settings.api_url} unreachable: {e}")
        raise SystemExit(1)
    click.echo(f"Relay at {settings.api_url}: {status}")


@cli.command()
@click.option("--host", default=None, help="Host to bind to")
@click.option("--port", default=None, type=int, help="Port to bind to")
def serve(host: str | None, port: int | None) -> None:
    """Start the relay API server."""
    import uvicorn

    settings = get_settings()
    setup_logging(settings.log_level, settings.log_file)

    if not settings.openai_api_key:
        click.echo("Warning: OPENAI_API_KEY not set; chat requests will fail until it is configured.")

    uvicorn.run(
        "matrix_terminal.app:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        reload=False,
    )
