"""Text analysis for Home Assistant YAML.

Everything here is pure: functions take document text and return
fresh values. Nothing talks to the runtime and nothing is cached.
"""

from ha_lsp.analysis.context import DocumentContext, analyze_context
from ha_lsp.analysis.references import (
    Reference,
    ReferenceKind,
    find_entity_references,
    find_include_references,
    find_secret_references,
    find_service_references,
)
from ha_lsp.analysis.template_validator import find_template_errors
from ha_lsp.analysis.text import OffsetIndex, token_span_at
from ha_lsp.analysis.yaml_loader import HAYamlLoader, check_yaml_syntax

__all__ = [
    "DocumentContext",
    "HAYamlLoader",
    "OffsetIndex",
    "Reference",
    "ReferenceKind",
    "analyze_context",
    "check_yaml_syntax",
    "find_entity_references",
    "find_include_references",
    "find_secret_references",
    "find_service_references",
    "find_template_errors",
    "token_span_at",
]
