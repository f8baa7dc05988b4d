"""Diagnostics provider.

Runs independent checks over a document and merges their findings:

- ``unknown-entity`` / ``unknown-service`` (warnings, live runtime only)
- ``include-not-found`` (error, needs a ``file:`` document URI)
- ``template-syntax`` (error)
- ``yaml-syntax`` (error)

A check that raises is logged and skipped; the others still report.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from lsprotocol import types as lsp

from ha_lsp.analysis.references import (
    ReferenceKind,
    find_entity_references,
    find_include_references,
    find_service_references,
)
from ha_lsp.analysis.template_validator import find_template_errors
from ha_lsp.analysis.text import OffsetIndex
from ha_lsp.analysis.yaml_loader import check_yaml_syntax
from ha_lsp.features.paths import document_directory, resolve_relative
from ha_lsp.ha.cache import RuntimeDataCache

logger = logging.getLogger(__name__)

SOURCE = "ha-lsp"

Check = Callable[[str, OffsetIndex, str | None], Awaitable[list[lsp.Diagnostic]]]


def _diagnostic(
    range_: lsp.Range, message: str, code: str, severity: lsp.DiagnosticSeverity
) -> lsp.Diagnostic:
    return lsp.Diagnostic(
        range=range_, message=message, severity=severity, source=SOURCE, code=code
    )


class DiagnosticsProvider:
    """Validates documents against the runtime and the filesystem.

    Args:
        cache: The session's RuntimeDataCache
    """

    def __init__(self, cache: RuntimeDataCache):
        self._cache = cache

    async def validate(self, text: str, uri: str | None = None) -> list[lsp.Diagnostic]:
        """Run every applicable check on *text*.

        Args:
            text: Full document text.
            uri: Document URI; include paths resolve relative to it.

        Returns:
            All findings, in check order.
        """
        index = OffsetIndex(text)

        checks: list[tuple[str, Check]] = []
        if self._cache.connected:
            checks.append(("entities", self._check_entities))
            checks.append(("services", self._check_services))
        checks.append(("includes", self._check_includes))
        checks.append(("templates", self._check_templates))
        checks.append(("yaml", self._check_yaml))

        diagnostics: list[lsp.Diagnostic] = []
        for name, check in checks:
            try:
                diagnostics.extend(await check(text, index, uri))
            except Exception as e:
                logger.warning("Diagnostics check '%s' failed for %s: %s", name, uri, e)
        return diagnostics

    async def _check_entities(
        self, text: str, index: OffsetIndex, uri: str | None
    ) -> list[lsp.Diagnostic]:
        references = find_entity_references(text, index)
        if not references:
            return []
        entity_map = await self._cache.get_entity_map()
        return [
            _diagnostic(
                ref.range,
                f"Unknown entity: {ref.value}",
                "unknown-entity",
                lsp.DiagnosticSeverity.Warning,
            )
            for ref in references
            if ref.value not in entity_map
        ]

    async def _check_services(
        self, text: str, index: OffsetIndex, uri: str | None
    ) -> list[lsp.Diagnostic]:
        references = find_service_references(text, index)
        if not references:
            return []
        known = {service.full_name for service in await self._cache.get_services()}
        return [
            _diagnostic(
                ref.range,
                f"Unknown service: {ref.value}",
                "unknown-service",
                lsp.DiagnosticSeverity.Warning,
            )
            for ref in references
            if ref.value not in known
        ]

    async def _check_includes(
        self, text: str, index: OffsetIndex, uri: str | None
    ) -> list[lsp.Diagnostic]:
        directory = document_directory(uri) if uri else None
        if directory is None:
            return []

        diagnostics = []
        for ref in find_include_references(text, index):
            target = resolve_relative(directory, ref.value)
            if ref.kind is ReferenceKind.INCLUDE_DIR:
                if target.is_dir():
                    continue
                message = f"Include directory not found: {ref.value}"
            else:
                if target.exists():
                    continue
                message = f"Include file not found: {ref.value}"
            diagnostics.append(
                _diagnostic(ref.range, message, "include-not-found", lsp.DiagnosticSeverity.Error)
            )
        return diagnostics

    async def _check_templates(
        self, text: str, index: OffsetIndex, uri: str | None
    ) -> list[lsp.Diagnostic]:
        return [
            _diagnostic(
                index.range_of(issue.start, issue.end),
                issue.message,
                "template-syntax",
                lsp.DiagnosticSeverity.Error,
            )
            for issue in find_template_errors(text)
        ]

    async def _check_yaml(
        self, text: str, index: OffsetIndex, uri: str | None
    ) -> list[lsp.Diagnostic]:
        error = check_yaml_syntax(text)
        if error is None:
            return []
        if error.line is None or error.column is None:
            range_ = lsp.Range(
                start=lsp.Position(line=0, character=0), end=lsp.Position(line=0, character=1)
            )
        else:
            range_ = lsp.Range(
                start=lsp.Position(line=error.line, character=error.column),
                end=lsp.Position(line=error.line, character=error.column + 1),
            )
        return [
            _diagnostic(
                range_,
                f"YAML syntax error: {error.message}",
                "yaml-syntax",
                lsp.DiagnosticSeverity.Error,
            )
        ]
