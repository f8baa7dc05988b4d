"""Go-to-definition for ``!include`` and ``!secret`` directives."""

from __future__ import annotations

import logging
from pathlib import Path

from lsprotocol import types as lsp

from ha_lsp.analysis.references import (
    ReferenceKind,
    find_include_references,
    find_secret_references,
)
from ha_lsp.analysis.text import line_at
from ha_lsp.features.paths import document_directory, path_to_uri, resolve_relative

logger = logging.getLogger(__name__)

SECRETS_FILE = "secrets.yaml"

_FILE_START = lsp.Range(
    start=lsp.Position(line=0, character=0), end=lsp.Position(line=0, character=0)
)


class DefinitionProvider:
    """Navigates from a directive on the cursor line to the file it names.

    Targets are whole files: the location always points at 0:0.

    Args:
        shared_secrets_path: Last-resort ``secrets.yaml`` location.
    """

    def __init__(self, shared_secrets_path: str | None = None):
        self._shared_secrets_path = Path(shared_secrets_path) if shared_secrets_path else None

    def define(self, text: str, uri: str, position: lsp.Position) -> lsp.Location | None:
        directory = document_directory(uri)
        if directory is None:
            return None
        line = line_at(text, position.line)

        for include in find_include_references(line):
            if include.kind is not ReferenceKind.INCLUDE:
                continue
            target = resolve_relative(directory, include.value)
            if target.is_file():
                return lsp.Location(uri=path_to_uri(target), range=_FILE_START)

        secrets = find_secret_references(line)
        if secrets:
            secrets_file = self.find_secrets_file(directory)
            if secrets_file is not None:
                return lsp.Location(uri=path_to_uri(secrets_file), range=_FILE_START)
            logger.debug("No secrets file found for !secret %s", secrets[0].value)

        return None

    def secrets_candidates(self, directory: Path) -> list[Path]:
        """Ordered secrets file locations probed for *directory*."""
        candidates = [directory / SECRETS_FILE, directory.parent / SECRETS_FILE]
        if self._shared_secrets_path is not None:
            candidates.append(self._shared_secrets_path)
        return candidates

    def find_secrets_file(self, directory: Path) -> Path | None:
        for candidate in self.secrets_candidates(directory):
            if candidate.is_file():
                return candidate
        return None
