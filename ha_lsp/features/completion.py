"""Completion provider.

Dispatch order for a cursor position:

1. Inside ``{{ ... }}``: template functions, plus live entity IDs when
   the cursor sits in the first argument of an entity lookup call.
2. Value position: live IDs or static enumerations chosen by the key.
3. Key position: static keys chosen by the enclosing key chain.

Live candidates carry only a label and detail. The markdown body is
built on demand in ``resolve`` from the item's ``data`` payload.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable, Iterable
from typing import Any

from lsprotocol import types as lsp

from ha_lsp.analysis.context import DocumentContext, analyze_context
from ha_lsp.features import vocabulary
from ha_lsp.ha.cache import RuntimeDataCache

logger = logging.getLogger(__name__)

_PARTIAL_RE = re.compile(r":\s*[\"']?([\w.]*)$")
_ENTITY_CALL_RE = re.compile(
    rf"\b(?:{'|'.join(vocabulary.ENTITY_LOOKUP_FUNCTIONS)})\s*\(\s*([\"']?)([\w.]*)$"
)

MAX_RESOLVED_ATTRIBUTES = 10


def _rank(value: str, needle: str) -> str:
    """Sort key placing prefix matches ahead of substring matches."""
    return f"0{value}" if value.lower().startswith(needle) else f"1{value}"


def _matches(needle: str, *candidates: str) -> bool:
    return not needle or any(needle in c.lower() for c in candidates)


def _replace_range(position: lsp.Position, typed: str) -> lsp.Range:
    start = lsp.Position(line=position.line, character=position.character - len(typed))
    return lsp.Range(start=start, end=position)


def _static_items(
    table: dict[str, str], kind: lsp.CompletionItemKind
) -> list[lsp.CompletionItem]:
    return [
        lsp.CompletionItem(label=label, kind=kind, detail=detail, insert_text=label)
        for label, detail in table.items()
    ]


def _registry_items(
    entries: Iterable[Any],
    needle: str,
    edit_range: lsp.Range,
    kind: lsp.CompletionItemKind,
    describe: Callable[[Any], str],
) -> list[lsp.CompletionItem]:
    items = []
    for entry in entries:
        if not entry.id or not _matches(needle, entry.id, entry.name):
            continue
        items.append(
            lsp.CompletionItem(
                label=entry.id,
                kind=kind,
                detail=entry.name or entry.id,
                documentation=describe(entry),
                sort_text=_rank(entry.id, needle),
                text_edit=lsp.TextEdit(range=edit_range, new_text=entry.id),
            )
        )
    return items


class CompletionProvider:
    """Context-aware completion backed by the session cache.

    Args:
        cache: The session's RuntimeDataCache
    """

    def __init__(self, cache: RuntimeDataCache):
        self._cache = cache

    async def complete(self, text: str, position: lsp.Position) -> list[lsp.CompletionItem]:
        """Return candidates for *position*; any failure yields an empty list."""
        context = analyze_context(text, position.line, position.character)
        try:
            return await self._dispatch(context, position)
        except Exception as e:
            logger.warning(
                "Completion failed at %d:%d: %s", position.line, position.character, e
            )
            return []

    async def _dispatch(
        self, context: DocumentContext, position: lsp.Position
    ) -> list[lsp.CompletionItem]:
        if context.in_template:
            return await self._template_completions(context, position)

        if context.in_value:
            key = (context.key or "").lower()
            match = _PARTIAL_RE.search(context.line_before_cursor)
            typed = match.group(1) if match else ""
            needle = typed.lower()
            edit_range = _replace_range(position, typed)

            if key in vocabulary.ENTITY_KEYS:
                return await self._entity_completions(needle, edit_range)
            if key in vocabulary.SERVICE_KEYS:
                return await self._service_completions(needle, edit_range)
            if key in vocabulary.AREA_KEYS:
                return _registry_items(
                    await self._cache.get_areas(),
                    needle,
                    edit_range,
                    lsp.CompletionItemKind.Folder,
                    lambda area: f"Area: {area.name}",
                )
            if key in vocabulary.DEVICE_KEYS:
                return _registry_items(
                    await self._cache.get_devices(),
                    needle,
                    edit_range,
                    lsp.CompletionItemKind.Module,
                    lambda device: (
                        f"Device in area: {device.area_id}" if device.area_id else "Device"
                    ),
                )
            if key in vocabulary.FLOOR_KEYS:
                return _registry_items(
                    await self._cache.get_floors(),
                    needle,
                    edit_range,
                    lsp.CompletionItemKind.Folder,
                    lambda floor: f"Floor: {floor.name}",
                )
            if key in vocabulary.LABEL_KEYS:
                return _registry_items(
                    await self._cache.get_labels(),
                    needle,
                    edit_range,
                    lsp.CompletionItemKind.Constant,
                    lambda label: f"Label: {label.name}",
                )
            if key in ("platform", "trigger") and context.in_trigger:
                return _static_items(
                    vocabulary.TRIGGER_PLATFORMS, lsp.CompletionItemKind.EnumMember
                )
            if key == "condition":
                return _static_items(vocabulary.CONDITION_TYPES, lsp.CompletionItemKind.EnumMember)
            return []

        return self._key_completions(context)

    async def _entity_completions(
        self, needle: str, edit_range: lsp.Range
    ) -> list[lsp.CompletionItem]:
        items = []
        for entity in await self._cache.get_states():
            if not _matches(needle, entity.entity_id, entity.friendly_name):
                continue
            items.append(
                lsp.CompletionItem(
                    label=entity.entity_id,
                    kind=lsp.CompletionItemKind.Value,
                    detail=entity.friendly_name,
                    sort_text=_rank(entity.entity_id, needle),
                    text_edit=lsp.TextEdit(range=edit_range, new_text=entity.entity_id),
                    data={"type": "entity", "entity_id": entity.entity_id},
                )
            )
        return items

    async def _service_completions(
        self, needle: str, edit_range: lsp.Range
    ) -> list[lsp.CompletionItem]:
        items = []
        for service in await self._cache.get_services():
            if not _matches(needle, service.full_name):
                continue
            items.append(
                lsp.CompletionItem(
                    label=service.full_name,
                    kind=lsp.CompletionItemKind.Function,
                    detail=service.name,
                    sort_text=_rank(service.full_name, needle),
                    text_edit=lsp.TextEdit(range=edit_range, new_text=service.full_name),
                    data={"type": "service", "service": service.full_name},
                )
            )
        return items

    async def _template_completions(
        self, context: DocumentContext, position: lsp.Position
    ) -> list[lsp.CompletionItem]:
        items = []

        call = _ENTITY_CALL_RE.search(context.line_before_cursor)
        if call:
            quote, typed = call.group(1), call.group(2)
            needle = typed.lower()
            edit_range = _replace_range(position, typed)
            for entity in await self._cache.get_states():
                if not _matches(needle, entity.entity_id, entity.friendly_name):
                    continue
                new_text = f"{entity.entity_id}{quote}" if quote else f"'{entity.entity_id}'"
                items.append(
                    lsp.CompletionItem(
                        label=entity.entity_id,
                        kind=lsp.CompletionItemKind.Value,
                        detail=entity.friendly_name,
                        sort_text="0" + _rank(entity.entity_id, needle),
                        text_edit=lsp.TextEdit(range=edit_range, new_text=new_text),
                        data={"type": "entity", "entity_id": entity.entity_id},
                    )
                )

        for label, (detail, snippet) in vocabulary.TEMPLATE_FUNCTIONS.items():
            items.append(
                lsp.CompletionItem(
                    label=label,
                    kind=lsp.CompletionItemKind.Function,
                    detail=detail,
                    insert_text=snippet,
                    insert_text_format=lsp.InsertTextFormat.Snippet,
                    sort_text=f"1{label}",
                )
            )
        return items

    def _key_completions(self, context: DocumentContext) -> list[lsp.CompletionItem]:
        tables = []
        if not context.parent_keys or context.parent_keys[0] == "automation":
            tables.append(vocabulary.AUTOMATION_KEYS)
        if context.in_trigger:
            tables.append(vocabulary.TRIGGER_KEYS)
        if context.in_action:
            tables.append(vocabulary.ACTION_KEYS)

        items = []
        seen: set[str] = set()
        for table in tables:
            for label, detail in table.items():
                if label in seen:
                    continue
                seen.add(label)
                items.append(
                    lsp.CompletionItem(
                        label=label,
                        kind=lsp.CompletionItemKind.Property,
                        detail=detail,
                        insert_text=f"{label}: ",
                    )
                )
        return items

    # ------------------------------------------------------------------
    # Resolve
    # ------------------------------------------------------------------

    async def resolve(self, item: lsp.CompletionItem) -> lsp.CompletionItem:
        """Attach markdown documentation to a live candidate.

        Items whose target no longer exists, or that carry no ``data``,
        are returned unchanged.
        """
        data = item.data if isinstance(item.data, dict) else {}
        kind = data.get("type")
        try:
            if kind == "entity":
                markdown = await self._entity_markdown(str(data.get("entity_id", "")))
            elif kind == "service":
                markdown = await self._service_markdown(str(data.get("service", "")))
            else:
                return item
        except Exception as e:
            logger.debug("Resolve of %s failed: %s", item.label, e)
            return item

        if markdown is not None:
            item.documentation = lsp.MarkupContent(kind=lsp.MarkupKind.Markdown, value=markdown)
        return item

    async def _entity_markdown(self, entity_id: str) -> str | None:
        entity = await self._cache.fetch_entity(entity_id)
        if entity is None:
            return None

        lines = [
            f"**{entity.friendly_name}**",
            "",
            f"**Current State:** {entity.state}",
            "",
            f"- **Domain:** {entity.domain}",
        ]
        if entity.device_class:
            lines.append(f"- **Device Class:** {entity.device_class}")
        if entity.unit:
            lines.append(f"- **Unit:** {entity.unit}")

        attributes = [
            f"- {name}: {json.dumps(value, default=str)}"
            for name, value in entity.attributes.items()
            if not name.startswith("_")
        ][:MAX_RESOLVED_ATTRIBUTES]
        if attributes:
            lines.extend(["", "**Attributes:**", *attributes])
        return "\n".join(lines)

    async def _service_markdown(self, full_name: str) -> str | None:
        service = await self._cache.get_service(full_name)
        if service is None:
            return None

        lines = [f"**{service.full_name}**"]
        if service.description:
            lines.extend(["", service.description])
        if service.fields:
            lines.extend(["", "**Fields:**"])
            for name, field in service.fields.items():
                required = " *(required)*" if field.required else ""
                lines.append(f"- `{name}`{required}: {field.description or 'No description'}")
        return "\n".join(lines)
