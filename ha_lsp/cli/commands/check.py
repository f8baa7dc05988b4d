"""Offline document checks."""

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from lsprotocol import types as lsp
from rich.table import Table

from ha_lsp.cli.utils import console
from ha_lsp.features.diagnostics import DiagnosticsProvider
from ha_lsp.features.paths import path_to_uri
from ha_lsp.ha.cache import RuntimeDataCache
from ha_lsp.ha.client import create_data_source
from ha_lsp.settings import get_settings

SEVERITY_LABELS = {
    lsp.DiagnosticSeverity.Error: "[red]error[/red]",
    lsp.DiagnosticSeverity.Warning: "[yellow]warning[/yellow]",
    lsp.DiagnosticSeverity.Information: "info",
    lsp.DiagnosticSeverity.Hint: "hint",
}


def check(
    files: Annotated[
        list[Path],
        typer.Argument(help="YAML files to check", exists=True, dir_okay=False, readable=True),
    ],
) -> None:
    """Run the language server's diagnostics on files.

    Exits with status 1 when any error-severity finding is reported.
    """
    results = asyncio.run(_check_files(files))

    table = Table(title="Diagnostics", show_header=True)
    table.add_column("File", style="cyan")
    table.add_column("Line", justify="right")
    table.add_column("Col", justify="right")
    table.add_column("Severity")
    table.add_column("Code", style="dim")
    table.add_column("Message")

    errors = 0
    for path, diagnostics in results:
        for diagnostic in diagnostics:
            if diagnostic.severity == lsp.DiagnosticSeverity.Error:
                errors += 1
            table.add_row(
                str(path),
                str(diagnostic.range.start.line + 1),
                str(diagnostic.range.start.character + 1),
                SEVERITY_LABELS.get(diagnostic.severity, "-"),
                str(diagnostic.code or ""),
                diagnostic.message,
            )

    total = sum(len(diagnostics) for _, diagnostics in results)
    if total:
        console.print(table)
    console.print(
        f"[bold]{len(results)}[/bold] file(s) checked, "
        f"[bold]{total}[/bold] finding(s), [bold]{errors}[/bold] error(s)"
    )
    if errors:
        raise typer.Exit(code=1)


async def _check_files(files: list[Path]) -> list[tuple[Path, list[lsp.Diagnostic]]]:
    settings = get_settings()
    cache = RuntimeDataCache(
        create_data_source(settings), ttl_seconds=settings.cache_ttl_seconds
    )
    provider = DiagnosticsProvider(cache)
    results = []
    try:
        for path in files:
            resolved = path.resolve()
            text = resolved.read_text(encoding="utf-8")
            results.append((path, await provider.validate(text, path_to_uri(resolved))))
    finally:
        await cache.close()
    return results
