"""Hover provider: live entity, service and template documentation."""

from __future__ import annotations

import json
import logging
import re

from lsprotocol import types as lsp

from ha_lsp.analysis.text import OffsetIndex, line_at, token_span_at
from ha_lsp.ha.cache import RuntimeDataCache

logger = logging.getLogger(__name__)

_DOMAIN_NAME_RE = re.compile(r"^[a-z_]+\.[a-z0-9_]+$", re.IGNORECASE)
_SERVICE_LINE_RE = re.compile(r"\b(?:service|action):")
_OPEN_TEMPLATE_RE = re.compile(r"\{\{[^}]*$")

MAX_ATTRIBUTES = 10
MAX_ATTRIBUTE_LENGTH = 50


def _markdown(value: str, hover_range: lsp.Range | None = None) -> lsp.Hover:
    return lsp.Hover(
        contents=lsp.MarkupContent(kind=lsp.MarkupKind.Markdown, value=value),
        range=hover_range,
    )


def _format_attribute(value: object) -> str:
    text = json.dumps(value, default=str) if isinstance(value, (dict, list)) else str(value)
    if len(text) > MAX_ATTRIBUTE_LENGTH:
        return text[:MAX_ATTRIBUTE_LENGTH] + "..."
    return text


def enclosing_template(text: str, offset: int) -> str | None:
    """Return the ``{{ ... }}`` span around *offset*, markers included."""
    if not _OPEN_TEMPLATE_RE.search(text[:offset]):
        return None
    end = text.find("}}", offset)
    if end == -1:
        return None
    start = text.rfind("{{", 0, offset)
    return text[start : end + 2]


class HoverProvider:
    """Renders markdown for the token under the cursor.

    Args:
        cache: The session's RuntimeDataCache
    """

    def __init__(self, cache: RuntimeDataCache):
        self._cache = cache

    async def hover(self, text: str, position: lsp.Position) -> lsp.Hover | None:
        """Resolve the hover for *position*.

        A ``domain.name`` token on a line with a ``service:``/``action:``
        key is looked up as a service, any other ``domain.name`` token as
        an entity. Inside a template with no such token the enclosing
        expression is rendered live.

        Returns:
            The hover, or None when nothing applies or no runtime is connected.
        """
        if not self._cache.connected:
            return None

        index = OffsetIndex(text)
        if position.line >= index.line_count:
            return None
        offset = index.offset_at(position)

        span = token_span_at(text, offset)
        if span is not None:
            token = text[span[0] : span[1]]
            if _DOMAIN_NAME_RE.match(token):
                token_range = index.range_of(*span)
                if _SERVICE_LINE_RE.search(line_at(text, position.line)):
                    return await self._service_hover(token, token_range)
                return await self._entity_hover(token, token_range)

        template = enclosing_template(text, offset)
        if template is not None:
            return await self._template_hover(template)
        return None

    async def _entity_hover(self, entity_id: str, token_range: lsp.Range) -> lsp.Hover | None:
        try:
            entity = await self._cache.get_entity(entity_id)
        except Exception as e:
            logger.debug("Entity hover for %s failed: %s", entity_id, e)
            return None

        if entity is None:
            return _markdown(
                f"**Unknown entity:** `{entity_id}`\n\n"
                "This entity does not exist in Home Assistant.",
                token_range,
            )

        lines = [
            f"## {entity.friendly_name}",
            "",
            f"`{entity.entity_id}`",
            "",
            f"**State:** `{entity.state}`",
            "",
            f"**Domain:** {entity.domain}",
        ]
        if entity.device_class:
            lines.append(f"**Device Class:** {entity.device_class}")
        if entity.unit:
            lines.append(f"**Unit:** {entity.unit}")

        rows = [
            f"| {name} | {_format_attribute(value)} |"
            for name, value in entity.attributes.items()
            if not name.startswith("_") and name != "friendly_name"
        ][:MAX_ATTRIBUTES]
        if rows:
            lines.extend(["", "### Attributes", "| Attribute | Value |", "|-----------|-------|"])
            lines.extend(rows)
        if entity.last_changed:
            lines.extend(["", f"*Last changed: {entity.last_changed}*"])

        return _markdown("\n".join(lines), token_range)

    async def _service_hover(self, full_name: str, token_range: lsp.Range) -> lsp.Hover | None:
        try:
            service = await self._cache.get_service(full_name)
        except Exception as e:
            logger.debug("Service hover for %s failed: %s", full_name, e)
            return None

        if service is None:
            return _markdown(f"**Unknown service:** `{full_name}`", token_range)

        lines = [f"## {service.full_name}"]
        if service.description:
            lines.extend(["", service.description])
        if service.target:
            lines.extend(["", "**Supports targeting** entities, areas, or devices"])
        if service.fields:
            lines.extend(["", "### Fields"])
            for name, field in service.fields.items():
                required = " *(required)*" if field.required else ""
                lines.append(f"- **{name}**{required}: {field.description or 'No description'}")

        return _markdown("\n".join(lines), token_range)

    async def _template_hover(self, template: str) -> lsp.Hover:
        try:
            result = await self._cache.render_template(template)
        except Exception as e:
            return _markdown("\n".join(["### Template Error", "", "```", str(e), "```"]))
        return _markdown("\n".join(["### Template Result", "", "```", str(result), "```"]))
