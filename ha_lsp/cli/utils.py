"""Shared CLI helpers."""

from rich.console import Console

# stdout stays free for the LSP wire protocol when serving over stdio
console = Console(stderr=True)
