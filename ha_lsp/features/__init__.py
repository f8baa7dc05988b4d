"""Editor-facing feature providers.

Each provider works on a plain text snapshot plus a position and
reads live data only through the session's RuntimeDataCache.
"""

from ha_lsp.features.completion import CompletionProvider
from ha_lsp.features.definition import DefinitionProvider
from ha_lsp.features.diagnostics import DiagnosticsProvider
from ha_lsp.features.hover import HoverProvider

__all__ = [
    "CompletionProvider",
    "DefinitionProvider",
    "DiagnosticsProvider",
    "HoverProvider",
]
