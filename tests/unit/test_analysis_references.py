"""Unit tests for ha_lsp/analysis/references.py and the offset index."""

from lsprotocol import types as lsp

from ha_lsp.analysis.references import (
    ReferenceKind,
    find_entity_references,
    find_include_references,
    find_secret_references,
    find_service_references,
)
from ha_lsp.analysis.text import OffsetIndex, token_span_at


def _span(reference) -> tuple[int, int, int, int]:
    r = reference.range
    return (r.start.line, r.start.character, r.end.line, r.end.character)


class TestOffsetIndex:
    """Test OffsetIndex."""

    def test_round_trip(self):
        """Test offset and position agree."""
        index = OffsetIndex("ab\ncde\n")

        assert index.position_at(4) == lsp.Position(line=1, character=1)
        assert index.offset_at(lsp.Position(line=1, character=1)) == 4

    def test_offset_clamped_to_line_end(self):
        """Test offset clamped to line end."""
        index = OffsetIndex("ab\ncde")

        assert index.offset_at(lsp.Position(line=0, character=99)) == 2
        assert index.offset_at(lsp.Position(line=9, character=0)) == 6

    def test_line_count(self):
        """A trailing newline opens one more, empty line."""
        assert OffsetIndex("ab").line_count == 1
        assert OffsetIndex("ab\ncde\n").line_count == 3

    def test_token_span(self):
        """Test token boundaries around the cursor."""
        text = "service: light.turn_on"

        assert token_span_at(text, 12) == (9, 22)
        assert token_span_at("a:  b", 3) is None


class TestEntityReferences:
    """Test entity reference scanning."""

    def test_single_value_exact_range(self):
        """Test single value exact range."""
        refs = find_entity_references("  entity_id: light.kitchen\n")

        assert [r.value for r in refs] == ["light.kitchen"]
        assert _span(refs[0]) == (0, 13, 0, 26)
        assert refs[0].kind is ReferenceKind.ENTITY

    def test_quoted_value(self):
        """Test quoted value."""
        refs = find_entity_references('entity: "sensor.temp"\n')

        assert refs[0].value == "sensor.temp"
        assert _span(refs[0]) == (0, 9, 0, 20)

    def test_list_form(self):
        """Test list form."""
        text = "entities:\n  - light.a\n  - light.b\nmode: single\n"

        refs = find_entity_references(text)

        assert [r.value for r in refs] == ["light.a", "light.b"]
        assert _span(refs[1]) == (2, 4, 2, 11)

    def test_template_calls(self):
        """Test template calls."""
        text = "value_template: \"{{ states('sensor.a') }} {{ is_state('light.b', 'on') }}\"\n"

        refs = find_entity_references(text)

        assert sorted(r.value for r in refs) == ["light.b", "sensor.a"]
        assert all(r.in_template for r in refs)

    def test_ignores_other_keys(self):
        """Test ignores other keys."""
        assert find_entity_references("target_entity_id: light.a\nname: light.b\n") == []


class TestServiceReferences:
    """Test service reference scanning."""

    def test_service_and_action_keys(self):
        """Test service and action keys."""
        text = "- service: light.turn_on\n- action: 'switch.toggle'\n"

        refs = find_service_references(text)

        assert [r.value for r in refs] == ["light.turn_on", "switch.toggle"]
        assert _span(refs[1]) == (1, 11, 1, 24)

    def test_block_action_key_is_not_a_service(self):
        """Test block action key is not a service."""
        assert find_service_references("action:\n  - delay: 5\n") == []


class TestDirectiveReferences:
    """Test include and secret reference scanning."""

    def test_include(self):
        """Test !include reference."""
        refs = find_include_references("automation: !include automations.yaml\n")

        assert refs[0].value == "automations.yaml"
        assert refs[0].kind is ReferenceKind.INCLUDE
        assert _span(refs[0]) == (0, 21, 0, 37)

    def test_include_dir(self):
        """Test !include_dir_* reference."""
        refs = find_include_references("sensor: !include_dir_merge_list sensors/\n")

        assert [(r.kind, r.value) for r in refs] == [(ReferenceKind.INCLUDE_DIR, "sensors/")]

    def test_secret(self):
        """Test !secret reference."""
        refs = find_secret_references("api_password: !secret http_password\n")

        assert refs[0].value == "http_password"
        assert refs[0].kind is ReferenceKind.SECRET
