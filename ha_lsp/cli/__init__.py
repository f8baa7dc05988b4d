"""CLI application setup using Typer.

Provides the command-line interface for the ha-lsp language server.
"""

from ha_lsp.cli.main import app

__all__ = ["app"]
