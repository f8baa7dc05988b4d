"""ha-lsp: Home Assistant configuration language server."""

__version__ = "0.1.0"
