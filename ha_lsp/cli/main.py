"""CLI entry point.

Provides the main CLI application with commands for:
- serve: Run the language server (stdio or TCP)
- check: Run diagnostics on files from the shell
- status: Show Home Assistant connectivity
"""

import typer

from ha_lsp import __version__
from ha_lsp.cli.commands.check import check
from ha_lsp.cli.commands.serve import serve
from ha_lsp.cli.commands.status import status
from ha_lsp.cli.utils import console
from ha_lsp.logging_config import configure_logging

app = typer.Typer(
    name="ha-lsp",
    help="Language server for Home Assistant YAML configuration",
    add_completion=False,
    no_args_is_help=True,
)


@app.callback()
def main() -> None:
    """Home Assistant configuration language server."""
    configure_logging()


app.command()(serve)
app.command()(check)
app.command()(status)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"ha-lsp [bold]{__version__}[/bold]")


if __name__ == "__main__":
    app()
