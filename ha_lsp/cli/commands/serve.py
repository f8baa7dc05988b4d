"""Server commands."""

from typing import Annotated, Literal, Optional

import typer
from rich.panel import Panel

from ha_lsp.cli.utils import console
from ha_lsp.exceptions import ConfigurationError
from ha_lsp.logging_config import configure_logging
from ha_lsp.settings import get_settings


def serve(
    tcp: Annotated[
        bool,
        typer.Option("--tcp", help="Serve over TCP instead of stdio"),
    ] = False,
    host: Annotated[
        str,
        typer.Option("--host", "-h", help="Host to bind to (TCP only)"),
    ] = "127.0.0.1",
    port: Annotated[
        int,
        typer.Option("--port", "-p", help="Port to bind to (TCP only)"),
    ] = 2087,
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", "-l", help="DEBUG, INFO, WARNING or ERROR"),
    ] = None,
) -> None:
    """Start the Home Assistant language server.

    Speaks LSP over stdio by default. Defaults are loaded from settings
    (env vars / .env).
    """
    from ha_lsp.server import create_server

    settings = get_settings()
    level = (log_level or settings.log_level).upper()
    if level not in ("DEBUG", "INFO", "WARNING", "ERROR"):
        raise typer.BadParameter(f"Unknown log level: {log_level}", param_hint="--log-level")
    configure_logging(level)  # type: ignore[arg-type]

    transport: Literal["tcp", "stdio"] = "tcp" if tcp else "stdio"
    console.print(
        Panel(
            f"[bold green]Starting Home Assistant LSP Server[/bold green]\n"
            f"Transport: {transport}"
            + (f"\nHost: {host}\nPort: {port}" if tcp else "")
            + f"\nLive data: {'enabled' if settings.has_token else 'disabled (no token)'}",
            title="ha-lsp",
            border_style="green",
        )
    )

    try:
        server = create_server(settings)
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(code=1) from e

    if tcp:
        server.start_tcp(host, port)
    else:
        server.start_io()
