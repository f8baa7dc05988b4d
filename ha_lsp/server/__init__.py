"""LSP transport layer: pygls server, session controller, debounce."""

from ha_lsp.server.app import HALanguageServer, create_server
from ha_lsp.server.scheduler import DiagnosticsScheduler
from ha_lsp.server.session import HASession

__all__ = ["DiagnosticsScheduler", "HALanguageServer", "HASession", "create_server"]
