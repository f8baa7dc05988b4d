"""Language-server session: document lifecycle and feature dispatch.

One ``HASession`` exists per connected editor. It owns the runtime
cache, the document store and the diagnostics scheduler; nothing is
shared between sessions.
"""

from __future__ import annotations

import logging
from typing import Any

from lsprotocol import types as lsp
from pygls.workspace import Workspace

from ha_lsp.features import (
    CompletionProvider,
    DefinitionProvider,
    DiagnosticsProvider,
    HoverProvider,
)
from ha_lsp.ha.cache import RuntimeDataCache
from ha_lsp.ha.client import RuntimeDataSource
from ha_lsp.server.scheduler import DiagnosticsScheduler, Publish
from ha_lsp.settings import Settings

logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")


def is_yaml_document(uri: str) -> bool:
    return uri.lower().endswith(YAML_SUFFIXES)


class HASession:
    """Session controller wiring editor events to the feature providers.

    Args:
        settings: Application settings
        data_source: Connected or disconnected runtime data source
        publish: Sends pushed diagnostics to the editor
    """

    def __init__(self, settings: Settings, data_source: RuntimeDataSource, publish: Publish):
        self.settings = settings
        self.cache = RuntimeDataCache(data_source, ttl_seconds=settings.cache_ttl_seconds)
        self.documents = Workspace(None, sync_kind=lsp.TextDocumentSyncKind.Incremental)

        self.completion = CompletionProvider(self.cache)
        self.hovers = HoverProvider(self.cache)
        self.diagnostics = DiagnosticsProvider(self.cache)
        self.definitions = DefinitionProvider(settings.shared_secrets_path)

        self._publish = publish
        self.scheduler = DiagnosticsScheduler(
            settings.diagnostics_debounce_seconds, self._validate_uri, publish
        )

    def text_of(self, uri: str) -> str | None:
        """Current text of an open YAML document, or None."""
        if not is_yaml_document(uri) or uri not in self.documents.text_documents:
            return None
        return self.documents.get_text_document(uri).source

    async def _validate_uri(self, uri: str) -> list[lsp.Diagnostic] | None:
        text = self.text_of(uri)
        if text is None:
            return None
        return await self.diagnostics.validate(text, uri)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def initialized(self) -> None:
        await self.cache.warm_up()

    async def refresh(self) -> dict[str, Any]:
        """Drop cached runtime data and fetch it again."""
        self.cache.invalidate()
        await self.cache.warm_up()
        return {"connected": self.cache.connected}

    async def shutdown(self) -> None:
        await self.scheduler.shutdown()
        await self.cache.close()

    # ------------------------------------------------------------------
    # Document synchronization
    # ------------------------------------------------------------------

    def did_open(self, params: lsp.DidOpenTextDocumentParams) -> None:
        uri = params.text_document.uri
        if not is_yaml_document(uri):
            return
        self.documents.put_text_document(params.text_document)
        self.scheduler.schedule(uri)

    def did_change(self, params: lsp.DidChangeTextDocumentParams) -> None:
        uri = params.text_document.uri
        if self.text_of(uri) is None:
            return
        for change in params.content_changes:
            self.documents.update_text_document(params.text_document, change)
        self.scheduler.schedule(uri)

    def did_close(self, params: lsp.DidCloseTextDocumentParams) -> None:
        uri = params.text_document.uri
        if not is_yaml_document(uri):
            return
        self.scheduler.cancel(uri)
        if uri in self.documents.text_documents:
            self.documents.remove_text_document(uri)
        self._publish(uri, [])

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    async def complete(self, params: lsp.CompletionParams) -> lsp.CompletionList | None:
        text = self.text_of(params.text_document.uri)
        if text is None:
            return None
        items = await self.completion.complete(text, params.position)
        return lsp.CompletionList(is_incomplete=False, items=items)

    async def resolve_completion(self, item: lsp.CompletionItem) -> lsp.CompletionItem:
        return await self.completion.resolve(item)

    async def hover(self, params: lsp.HoverParams) -> lsp.Hover | None:
        text = self.text_of(params.text_document.uri)
        if text is None:
            return None
        return await self.hovers.hover(text, params.position)

    def definition(self, params: lsp.DefinitionParams) -> lsp.Location | None:
        uri = params.text_document.uri
        text = self.text_of(uri)
        if text is None:
            return None
        return self.definitions.define(text, uri, params.position)

    async def pull_diagnostics(
        self, params: lsp.DocumentDiagnosticParams
    ) -> lsp.RelatedFullDocumentDiagnosticReport:
        items = await self._validate_uri(params.text_document.uri)
        return lsp.RelatedFullDocumentDiagnosticReport(items=items or [])
