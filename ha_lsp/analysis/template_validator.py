"""Jinja2 template syntax validation for HA YAML documents.

Checks that inline ``{{ ... }}`` expressions are syntactically correct
Jinja2 without rendering them.

HA uses a custom Jinja2 environment with extensions (e.g., is_state,
states.*), so we only check syntax -- not filter/function availability.
Statement blocks (``{% ... %}``) usually span several lines and are
left alone.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

import jinja2

_EXPRESSION_RE = re.compile(r"\{\{.*?\}\}")

_env = jinja2.Environment(undefined=jinja2.Undefined)  # nosec B701 - parse only, never rendered


@dataclass(frozen=True)
class TemplateSyntaxIssue:
    """A template expression that failed to parse, with its text offsets."""

    expression: str
    message: str
    start: int
    end: int


def check_template_syntax(template: str) -> str | None:
    """Parse a Jinja2 template string and return an error message if invalid."""
    try:
        _env.parse(template)
        return None
    except jinja2.TemplateSyntaxError as exc:
        return f"Jinja2 syntax error: {exc.message}"


def find_template_errors(text: str) -> list[TemplateSyntaxIssue]:
    """Find every single-line ``{{ }}`` expression in *text* that fails to parse.

    Args:
        text: Full document text.

    Returns:
        One issue per invalid expression (empty if all valid).
    """
    issues: list[TemplateSyntaxIssue] = []
    for match in _EXPRESSION_RE.finditer(text):
        message = check_template_syntax(match.group(0))
        if message:
            issues.append(
                TemplateSyntaxIssue(
                    expression=match.group(0),
                    message=message,
                    start=match.start(),
                    end=match.end(),
                )
            )
    return issues
