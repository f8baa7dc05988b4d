"""Structural YAML parsing that understands Home Assistant tags.

Home Assistant extends YAML with ``!include``, ``!include_dir_*``,
``!secret``, ``!input`` and ``!env_var``. A plain SafeLoader rejects
them, so every ``!tag`` is accepted here and constructed as a plain
value. Only syntax is checked; nothing is resolved.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import yaml


class HAYamlLoader(yaml.SafeLoader):
    """SafeLoader that tolerates Home Assistant specific tags."""

    pass


def _construct_tagged(loader: HAYamlLoader, tag_suffix: str, node: yaml.Node) -> Any:
    if isinstance(node, yaml.ScalarNode):
        return f"!{tag_suffix} {loader.construct_scalar(node)}"
    if isinstance(node, yaml.SequenceNode):
        return loader.construct_sequence(node)
    return loader.construct_mapping(node)  # type: ignore[arg-type]


HAYamlLoader.add_multi_constructor("!", _construct_tagged)


@dataclass(frozen=True)
class YamlSyntaxError:
    message: str
    line: int | None = None
    column: int | None = None


def check_yaml_syntax(text: str) -> YamlSyntaxError | None:
    """Parse every document in *text* and report the first syntax error.

    Returns:
        None if the text parses, else the error with its zero-based mark
        when the parser provides one.
    """
    try:
        for _ in yaml.load_all(text, Loader=HAYamlLoader):  # nosec B506 - SafeLoader subclass
            pass
    except yaml.MarkedYAMLError as exc:
        mark = exc.problem_mark or exc.context_mark
        message = " ".join(part for part in (exc.context, exc.problem) if part) or str(exc)
        if mark is None:
            return YamlSyntaxError(message=message)
        return YamlSyntaxError(message=message, line=mark.line, column=mark.column)
    except yaml.YAMLError as exc:
        return YamlSyntaxError(message=str(exc))
    return None
