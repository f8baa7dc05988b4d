"""Filesystem resolution relative to an open document."""

from __future__ import annotations

import os
from pathlib import Path

from pygls import uris


def document_directory(uri: str) -> Path | None:
    """Directory holding the document, or None for non-``file:`` URIs."""
    if not uri.startswith("file:"):
        return None
    fs_path = uris.to_fs_path(uri)
    if not fs_path:
        return None
    return Path(fs_path).parent


def resolve_relative(directory: Path, value: str) -> Path:
    """Resolve *value* against *directory*; absolute paths pass through unchanged."""
    path = Path(value)
    if path.is_absolute():
        return path
    return Path(os.path.normpath(directory / path))


def path_to_uri(path: Path) -> str:
    return uris.from_fs_path(str(path)) or path.as_uri()
