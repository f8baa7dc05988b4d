"""Locate entity, service, include and secret references in a document.

Every scan is an independent regular-expression pass over the full
text. Ranges are exact: they cover the referenced value only, so an
editor can underline precisely what is wrong.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass

from lsprotocol import types as lsp

from ha_lsp.analysis.text import OffsetIndex

_ENTITY_ID = r"[a-z_]+\.[a-z0-9_]+"

_ENTITY_KEYS = r"(?:entity_id|entities|entity)"

# entity_id: light.kitchen
_ENTITY_VALUE_RE = re.compile(
    rf"\b{_ENTITY_KEYS}:[ \t]*[\"']?({_ENTITY_ID})\b", re.IGNORECASE
)

# entity_id:
#   - light.kitchen
#   - light.hall
_ENTITY_LIST_RE = re.compile(
    rf"\b{_ENTITY_KEYS}:[ \t]*\n((?:[ \t]*-[ \t]+[\"']?{_ENTITY_ID}[\"']?[ \t]*(?:\n|$))+)",
    re.IGNORECASE,
)
_LIST_ITEM_RE = re.compile(rf"-[ \t]+[\"']?({_ENTITY_ID})", re.IGNORECASE)

# {{ states('sensor.x') }} and {{ is_state('sensor.x', 'on') }}
_TEMPLATE_ENTITY_RES = (
    re.compile(rf"\bstates\(\s*['\"]({_ENTITY_ID})['\"]\s*\)", re.IGNORECASE),
    re.compile(rf"\bis_state\(\s*['\"]({_ENTITY_ID})['\"]", re.IGNORECASE),
)

_SERVICE_RE = re.compile(
    rf"\b(?:service|action):[ \t]*[\"']?({_ENTITY_ID})\b", re.IGNORECASE
)

_INCLUDE_RE = re.compile(r"!include[ \t]+[\"']?([^\s\"']+)")
_INCLUDE_DIR_RE = re.compile(
    r"!include_dir_(?:list|named|merge_list|merge_named)[ \t]+[\"']?([^\s\"']+)"
)
_SECRET_RE = re.compile(r"!secret[ \t]+(\w+)")


class ReferenceKind(enum.Enum):
    ENTITY = "entity"
    SERVICE = "service"
    INCLUDE = "include"
    INCLUDE_DIR = "include_dir"
    SECRET = "secret"


@dataclass(frozen=True)
class Reference:
    """One located occurrence of a referenced value."""

    kind: ReferenceKind
    value: str
    range: lsp.Range
    in_template: bool = False


def _scan(
    text: str,
    index: OffsetIndex,
    pattern: re.Pattern[str],
    kind: ReferenceKind,
    *,
    in_template: bool = False,
) -> list[Reference]:
    return [
        Reference(
            kind=kind,
            value=match.group(1),
            range=index.range_of(match.start(1), match.end(1)),
            in_template=in_template,
        )
        for match in pattern.finditer(text)
    ]


def find_entity_value_references(text: str, index: OffsetIndex) -> list[Reference]:
    """Entity IDs written as the scalar value of an entity-bearing key."""
    return _scan(text, index, _ENTITY_VALUE_RE, ReferenceKind.ENTITY)


def find_entity_list_references(text: str, index: OffsetIndex) -> list[Reference]:
    """Entity IDs written as block-list items under an entity-bearing key."""
    references = []
    for block in _ENTITY_LIST_RE.finditer(text):
        base = block.start(1)
        for item in _LIST_ITEM_RE.finditer(block.group(1)):
            start = base + item.start(1)
            references.append(
                Reference(
                    kind=ReferenceKind.ENTITY,
                    value=item.group(1),
                    range=index.range_of(start, start + len(item.group(1))),
                )
            )
    return references


def find_template_entity_references(text: str, index: OffsetIndex) -> list[Reference]:
    """Entity IDs passed to ``states()`` / ``is_state()`` inside templates."""
    references = []
    for pattern in _TEMPLATE_ENTITY_RES:
        references.extend(_scan(text, index, pattern, ReferenceKind.ENTITY, in_template=True))
    return references


def find_entity_references(text: str, index: OffsetIndex | None = None) -> list[Reference]:
    index = index or OffsetIndex(text)
    return [
        *find_entity_value_references(text, index),
        *find_entity_list_references(text, index),
        *find_template_entity_references(text, index),
    ]


def find_service_references(text: str, index: OffsetIndex | None = None) -> list[Reference]:
    return _scan(text, index or OffsetIndex(text), _SERVICE_RE, ReferenceKind.SERVICE)


def find_include_references(text: str, index: OffsetIndex | None = None) -> list[Reference]:
    """``!include`` file paths and ``!include_dir_*`` directory paths."""
    index = index or OffsetIndex(text)
    return [
        *_scan(text, index, _INCLUDE_RE, ReferenceKind.INCLUDE),
        *_scan(text, index, _INCLUDE_DIR_RE, ReferenceKind.INCLUDE_DIR),
    ]


def find_secret_references(text: str, index: OffsetIndex | None = None) -> list[Reference]:
    return _scan(text, index or OffsetIndex(text), _SECRET_RE, ReferenceKind.SECRET)
