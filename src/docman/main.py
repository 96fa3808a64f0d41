"""Main CLI entry point for DocMan.

This module provides the main Typer application: the web server and the
review maintenance sub-commands.

Usage:
    docman serve --port 8000
    docman review evaluate <document-id>
    docman review purge-duplicates
    docman review open-due-cycles
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console

from docman.cli import review as review_cli
from docman.config import DocmanConfig, load_config
from docman.database.connection import get_engine, get_session_factory
from docman.logging import setup_logging
from docman.notifications import build_notification_sender
from docman.review.cycle import ReviewCycleService

app = typer.Typer(
    name="docman",
    help="DocMan: document review cycle service",
    no_args_is_help=True,
)

app.add_typer(review_cli.app, name="review", help="Review cycle maintenance")

console = Console()


class AppContext:
    """Application context shared across CLI commands.

    Attributes:
        config: Loaded DocMan configuration
        engine: Async SQLAlchemy engine
        session_factory: Factory for creating database sessions
        notifier: Notification sender, or None when disabled
        review_service: Review cycle service bound to the above
    """

    def __init__(self, config: DocmanConfig):
        self.config = config
        self.engine = get_engine(config.database)
        self.session_factory = get_session_factory(self.engine)
        self.notifier = build_notification_sender(config.notifications, self.session_factory)
        self.review_service = ReviewCycleService(
            self.session_factory,
            notifier=self.notifier,
            config=config.review,
        )


# Global context holder
_app_context: AppContext | None = None


def get_app_context() -> AppContext:
    """Get the shared application context.

    Raises:
        RuntimeError: If context has not been initialized
    """
    if _app_context is None:
        raise RuntimeError("Application context not initialized. Call initialize_context first.")
    return _app_context


def initialize_context(config: DocmanConfig) -> AppContext:
    """Initialize the global application context."""
    global _app_context
    _app_context = AppContext(config)
    return _app_context


@app.command()
def serve(
    host: Annotated[
        Optional[str],
        typer.Option("--host", "-h", help="Host to bind to (default from config)"),
    ] = None,
    port: Annotated[
        Optional[int],
        typer.Option("--port", "-p", help="Port to bind to (default from config)"),
    ] = None,
) -> None:
    """Start the DocMan API server."""
    import uvicorn

    from docman.web.app import create_app

    config = get_app_context().config
    bind_host = host or config.web.host
    bind_port = port or config.web.port

    console.print("[bold cyan]Starting DocMan API Server[/bold cyan]")
    console.print(f"[dim]Host:[/dim] {bind_host}")
    console.print(f"[dim]Port:[/dim] {bind_port}")
    console.print()

    uvicorn.run(
        create_app(config),
        host=bind_host,
        port=bind_port,
        log_level="info",
    )


@app.callback()
def main_callback(
    config_path: Annotated[
        Optional[Path],
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file (TOML format)",
            exists=True,
            dir_okay=False,
            readable=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Configure global options and initialize application context."""
    try:
        config = load_config(config_path)
    except Exception as e:
        console.print(f"[red]Error loading configuration:[/red] {e}")
        raise typer.Exit(code=1)

    if verbose:
        config.logging.level = "DEBUG"
        config.logging.format = "console"
    setup_logging(config.logging)

    try:
        initialize_context(config)
    except Exception as e:
        console.print(f"[red]Error initializing application:[/red] {e}")
        raise typer.Exit(code=1)

    if verbose:
        console.print("[dim]Debug logging enabled[/dim]")


if __name__ == "__main__":
    app()
