"""Cursor context inference for Home Assistant YAML.

Works line-by-line on raw text rather than a parse tree: documents are
analyzed while they are being typed and are usually not valid YAML at
that moment. The price is a bounded false-positive rate on exotic
formatting (tabs, colons inside quoted strings, flow mappings).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from ha_lsp.analysis.text import line_at

_INDENT_RE = re.compile(r"^[ \t]*")
_KEY_SEPARATOR_RE = re.compile(r"(?<!\\):")
_LIST_ITEM_RE = re.compile(r"^\s*-\s*")
_LEADING_DASH_RE = re.compile(r"^-\s*")
_BARE_KEY_RE = re.compile(r"^([ \t]*)([A-Za-z_][A-Za-z0-9_]*)\s*:")
_TRIGGER_TYPE_RE = re.compile(r"\b(?:platform|trigger):\s*([A-Za-z_]\w*)")
_SERVICE_RE = re.compile(r"\b(?:service|action):\s*[\"']?([A-Za-z_]\w*)\.\w")

TRIGGER_KEYS = frozenset({"trigger", "triggers"})
ACTION_KEYS = frozenset({"action", "actions"})


@dataclass
class DocumentContext:
    """What surrounds the cursor. Recomputed for every request, never stored."""

    line: str
    line_before_cursor: str
    in_key: bool = False
    in_value: bool = False
    key: str | None = None
    parent_key: str | None = None
    parent_keys: list[str] = field(default_factory=list)
    in_list: bool = False
    in_template: bool = False
    trigger_type: str | None = None
    service_domain: str | None = None

    @property
    def in_trigger(self) -> bool:
        return any(k in TRIGGER_KEYS for k in self.parent_keys)

    @property
    def in_action(self) -> bool:
        return any(k in ACTION_KEYS for k in self.parent_keys)


def _indent_of(line: str) -> int:
    return len(_INDENT_RE.match(line).group(0))  # type: ignore[union-attr]


def is_inside_template(prefix: str) -> bool:
    """True when an opening ``{{`` on *prefix* has not been closed yet."""
    return prefix.rfind("{{") > prefix.rfind("}}")


def enclosing_keys(lines: list[str], line_no: int, indent: int) -> list[str]:
    """Collect the bare keys that enclose *line_no*, outermost first.

    Walks upward; a ``key:`` line counts as a parent only when it is
    strictly shallower than the last parent found (initially *indent*).
    """
    chain: list[str] = []
    threshold = indent
    for i in range(min(line_no, len(lines)) - 1, -1, -1):
        if threshold == 0:
            break
        match = _BARE_KEY_RE.match(lines[i])
        if not match:
            continue
        key_indent = len(match.group(1))
        if key_indent < threshold:
            chain.insert(0, match.group(2))
            threshold = key_indent
    return chain


def _scan_upward(lines: list[str], line_no: int, pattern: re.Pattern[str]) -> str | None:
    for i in range(min(line_no, len(lines) - 1), -1, -1):
        match = pattern.search(lines[i])
        if match:
            return match.group(1)
    return None


def analyze_context(text: str, line: int, character: int) -> DocumentContext:
    """Infer the editing context at a zero-based cursor position.

    Args:
        text: Full document text.
        line: Cursor line.
        character: Cursor column.

    Returns:
        The DocumentContext for the cursor.
    """
    lines = text.split("\n")
    current = line_at(text, line)
    prefix = current[:character]

    context = DocumentContext(line=current, line_before_cursor=prefix)
    context.in_template = is_inside_template(prefix)

    separator = _KEY_SEPARATOR_RE.search(prefix)
    if separator is None:
        context.in_key = True
    else:
        context.in_value = True
        context.key = _LEADING_DASH_RE.sub("", prefix[: separator.start()].strip())

    context.in_list = bool(_LIST_ITEM_RE.match(prefix))

    context.parent_keys = enclosing_keys(lines, line, _indent_of(prefix))
    if context.parent_keys:
        context.parent_key = context.parent_keys[-1]

    if context.in_trigger:
        context.trigger_type = _scan_upward(lines, line, _TRIGGER_TYPE_RE)
    if context.in_action:
        context.service_domain = _scan_upward(lines, line, _SERVICE_RE)

    return context
