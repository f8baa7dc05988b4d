"""pygls wiring for the Home Assistant language server.

Registers LSP capabilities and forwards every request to the
server's ``HASession``.
"""

from __future__ import annotations

import logging

from lsprotocol import types as lsp
from pygls.lsp.server import LanguageServer

from ha_lsp import __version__
from ha_lsp.ha.client import RuntimeDataSource, create_data_source
from ha_lsp.server.session import HASession
from ha_lsp.settings import Settings, get_settings

logger = logging.getLogger(__name__)

SERVER_NAME = "ha-lsp"
REFRESH_CACHE_COMMAND = "ha-lsp.refreshCache"
COMPLETION_TRIGGER_CHARACTERS = [".", ":", " ", '"', "'", "/"]


class HALanguageServer(LanguageServer):
    """LanguageServer bound to a single HASession."""

    def __init__(self, settings: Settings, data_source: RuntimeDataSource):
        super().__init__(
            SERVER_NAME,
            __version__,
            text_document_sync_kind=lsp.TextDocumentSyncKind.Incremental,
        )
        self.session = HASession(settings, data_source, publish=self.push_diagnostics)

    def push_diagnostics(self, uri: str, diagnostics: list[lsp.Diagnostic]) -> None:
        logger.debug("Publishing %d diagnostics for %s", len(diagnostics), uri)
        self.text_document_publish_diagnostics(
            lsp.PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
        )


def create_server(
    settings: Settings | None = None,
    data_source: RuntimeDataSource | None = None,
) -> HALanguageServer:
    """Build a language server with every feature registered.

    Args:
        settings: Application settings (defaults to ``get_settings()``)
        data_source: Runtime data source (defaults to one chosen from settings)

    Returns:
        A server ready for ``start_io()`` or ``start_tcp()``.
    """
    settings = settings or get_settings()
    server = HALanguageServer(settings, data_source or create_data_source(settings))
    session = server.session

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @server.feature(lsp.INITIALIZED)
    async def initialized(params: lsp.InitializedParams) -> None:
        logger.info("Home Assistant LSP server started")
        await session.initialized()

    @server.feature(lsp.SHUTDOWN)
    async def shutdown(params: None) -> None:
        await session.shutdown()

    @server.command(REFRESH_CACHE_COMMAND)
    async def refresh_cache(*args):
        return await session.refresh()

    # ------------------------------------------------------------------
    # Text document synchronisation
    # ------------------------------------------------------------------

    @server.feature(lsp.TEXT_DOCUMENT_DID_OPEN)
    def did_open(params: lsp.DidOpenTextDocumentParams) -> None:
        session.did_open(params)

    @server.feature(lsp.TEXT_DOCUMENT_DID_CHANGE)
    def did_change(params: lsp.DidChangeTextDocumentParams) -> None:
        session.did_change(params)

    @server.feature(lsp.TEXT_DOCUMENT_DID_CLOSE)
    def did_close(params: lsp.DidCloseTextDocumentParams) -> None:
        session.did_close(params)

    # ------------------------------------------------------------------
    # Language features
    # ------------------------------------------------------------------

    @server.feature(
        lsp.TEXT_DOCUMENT_COMPLETION,
        lsp.CompletionOptions(
            trigger_characters=COMPLETION_TRIGGER_CHARACTERS,
            resolve_provider=True,
        ),
    )
    async def completion(params: lsp.CompletionParams) -> lsp.CompletionList | None:
        return await session.complete(params)

    @server.feature(lsp.COMPLETION_ITEM_RESOLVE)
    async def completion_resolve(item: lsp.CompletionItem) -> lsp.CompletionItem:
        return await session.resolve_completion(item)

    @server.feature(lsp.TEXT_DOCUMENT_HOVER)
    async def hover(params: lsp.HoverParams) -> lsp.Hover | None:
        return await session.hover(params)

    @server.feature(lsp.TEXT_DOCUMENT_DEFINITION)
    def definition(params: lsp.DefinitionParams) -> lsp.Location | None:
        return session.definition(params)

    @server.feature(
        lsp.TEXT_DOCUMENT_DIAGNOSTIC,
        lsp.DiagnosticOptions(
            identifier=SERVER_NAME,
            inter_file_dependencies=False,
            workspace_diagnostics=False,
        ),
    )
    async def diagnostic(
        params: lsp.DocumentDiagnosticParams,
    ) -> lsp.RelatedFullDocumentDiagnosticReport:
        return await session.pull_diagnostics(params)

    return server
