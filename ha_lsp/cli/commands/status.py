"""Status and info commands."""

import asyncio

from rich.panel import Panel
from rich.table import Table

from ha_lsp.cli.utils import console
from ha_lsp.ha.cache import RuntimeDataCache
from ha_lsp.ha.client import create_data_source
from ha_lsp.settings import get_settings


def status() -> None:
    """Show Home Assistant connectivity.

    Reports whether a token is configured and how much runtime data
    the language server would see.
    """
    asyncio.run(_show_status())


async def _show_status() -> None:
    """Fetch and display runtime counts."""
    settings = get_settings()

    console.print(
        Panel(
            f"[bold]Environment:[/bold] {settings.environment}\n"
            f"[bold]API:[/bold] {settings.ha_api_url}\n"
            f"[bold]Token:[/bold] "
            + ("[green]configured[/green]" if settings.has_token else "[yellow]missing[/yellow]"),
            title="Home Assistant",
            border_style="blue",
        )
    )

    if not settings.has_token:
        console.print(
            "[yellow]Live features disabled: set SUPERVISOR_TOKEN or HA_TOKEN.[/yellow]"
        )
        return

    cache = RuntimeDataCache(create_data_source(settings), ttl_seconds=settings.cache_ttl_seconds)
    queries = {
        "Entities": cache.get_states,
        "Services": cache.get_services,
        "Areas": cache.get_areas,
        "Devices": cache.get_devices,
        "Floors": cache.get_floors,
        "Labels": cache.get_labels,
    }

    table = Table(title="Runtime Data", show_header=True)
    table.add_column("Kind", style="cyan")
    table.add_column("Count", justify="right")
    table.add_column("Status")

    try:
        for name, query in queries.items():
            try:
                count = len(await query())
            except Exception as e:
                table.add_row(name, "-", f"[red]{e}[/red]")
            else:
                table.add_row(name, str(count), "[green]ok[/green]")
    finally:
        await cache.close()

    console.print(table)
