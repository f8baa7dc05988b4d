"""Offset/position translation and token lookup over a document buffer."""

from __future__ import annotations

import bisect
import re

from lsprotocol import types as lsp

_TOKEN_CHAR = re.compile(r"[A-Za-z0-9_.]")


class OffsetIndex:
    """Maps character offsets of a text to zero-based (line, character) positions.

    Lines are split on ``\\n`` only, matching how the analyzers split text.
    """

    def __init__(self, text: str) -> None:
        self._text = text
        self._line_starts = [0]
        self._line_starts.extend(m.end() for m in re.finditer("\n", text))

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    def position_at(self, offset: int) -> lsp.Position:
        offset = max(0, min(offset, len(self._text)))
        line = bisect.bisect_right(self._line_starts, offset) - 1
        return lsp.Position(line=line, character=offset - self._line_starts[line])

    def offset_at(self, position: lsp.Position) -> int:
        if position.line >= len(self._line_starts):
            return len(self._text)
        start = self._line_starts[position.line]
        if position.line + 1 < len(self._line_starts):
            line_end = self._line_starts[position.line + 1] - 1
        else:
            line_end = len(self._text)
        return min(start + position.character, line_end)

    def range_of(self, start: int, end: int) -> lsp.Range:
        return lsp.Range(start=self.position_at(start), end=self.position_at(end))


def line_at(text: str, line: int) -> str:
    """Return line *line* of *text*, or an empty string past the end."""
    lines = text.split("\n")
    return lines[line] if 0 <= line < len(lines) else ""


def token_span_at(text: str, offset: int) -> tuple[int, int] | None:
    """Find the maximal run of identifier/dot characters touching *offset*.

    Returns:
        ``(start, end)`` offsets, or None when the cursor touches no token.
    """
    start = end = offset
    while start > 0 and _TOKEN_CHAR.match(text[start - 1]):
        start -= 1
    while end < len(text) and _TOKEN_CHAR.match(text[end]):
        end += 1
    if start == end:
        return None
    return start, end
