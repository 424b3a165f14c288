"""Tests for the interchange object and its JSON text."""

import json

import pytest

from tessera import parse
from tessera.errors import ErrorKind, ParseError
from tessera.nodes import Attribute, AttributeKind
from tessera.serialization import (
    SerializeOptions,
    attribute_to_dict,
    error_to_dict,
    serialize_tree,
    to_dict,
)


def first_block(source: str, options: SerializeOptions | None = None) -> dict:
    return to_dict(parse(source), options)["children"][0]


class TestRootObject:
    def test_root_shape(self) -> None:
        result = to_dict(parse("# Hi"))
        assert result == {
            "type": "root",
            "children": [
                {"type": "heading", "level": 1, "children": [{"type": "text", "value": "Hi"}]}
            ],
            "source": "# Hi",
            "errors": [],
        }

    def test_root_field_order(self) -> None:
        assert list(to_dict(parse("x"))) == ["type", "children", "source", "errors"]

    def test_empty_document(self) -> None:
        assert to_dict(parse("")) == {"type": "root", "children": [], "source": "", "errors": []}

    def test_errors_listed(self) -> None:
        result = to_dict(parse("a </B>"))
        assert len(result["errors"]) == 1
        error = result["errors"][0]
        assert list(error) == ["offset", "message", "kind"]
        assert error["offset"] == 2
        assert error["kind"] == "MismatchedClosingTag"

    def test_error_to_dict(self) -> None:
        error = ParseError(ErrorKind.UNTERMINATED_FENCE, 4, "code fence is never closed")
        assert error_to_dict(error) == {
            "offset": 4,
            "message": "code fence is never closed",
            "kind": "UnterminatedFence",
        }


class TestNodeFields:
    def test_code_block_with_lang(self) -> None:
        assert first_block("```py\nx = 1\n```") == {
            "type": "code_block",
            "value": "x = 1",
            "lang": "py",
        }

    def test_code_block_without_lang(self) -> None:
        block = first_block("```\nx\n```")
        assert "lang" not in block
        assert block["value"] == "x"

    def test_link_fields(self) -> None:
        link = first_block("[a](u)")["children"][0]
        assert list(link) == ["type", "url", "children"]
        assert link["url"] == "u"

    def test_element_fields(self) -> None:
        block = first_block('<A t="x" on={y} open>\nhi\n</A>')
        assert list(block) == ["type", "name", "attributes", "children"]
        assert block["attributes"] == [
            {"name": "t", "type": "literal", "value": "x"},
            {"name": "on", "type": "expression", "value": "y"},
            {"name": "open", "type": "literal"},
        ]

    def test_self_closing_has_no_children_key(self) -> None:
        block = first_block("<Divider />")
        assert block == {"type": "self_closing_element", "name": "Divider", "attributes": []}

    def test_fragment(self) -> None:
        block = first_block("<>\nhi\n</>")
        assert list(block) == ["type", "children"]

    def test_frontmatter(self) -> None:
        assert first_block("---\na: 1\n---") == {
            "type": "frontmatter",
            "format": "yaml",
            "value": "a: 1",
        }

    def test_expressions(self) -> None:
        assert first_block("{x}") == {"type": "flow_expression", "value": "x"}
        inline = first_block("a {b}")["children"][1]
        assert inline == {"type": "text_expression", "value": "b"}

    def test_hr_and_hard_break(self) -> None:
        assert first_block("***") == {"type": "hr"}
        children = first_block("a\\\nb")["children"]
        assert {"type": "hard_break"} in children

    def test_attribute_to_dict_bare(self) -> None:
        bare = Attribute("disabled", AttributeKind.LITERAL, None)
        assert attribute_to_dict(bare) == {"name": "disabled", "type": "literal"}


class TestOptions:
    def test_positions(self) -> None:
        result = to_dict(parse("# Hi"), SerializeOptions(include_positions=True))
        assert result["position"] == {"start": 0, "end": 4}
        heading = result["children"][0]
        assert list(heading)[:3] == ["type", "position", "level"]
        assert heading["children"][0]["position"] == {"start": 2, "end": 4}

    def test_positions_off_by_default(self) -> None:
        assert "position" not in first_block("# Hi")

    def test_emoji_normalization(self) -> None:
        doc = parse("ship :rocket: now")
        plain = to_dict(doc)["children"][0]["children"][0]["value"]
        rich = to_dict(doc, SerializeOptions(normalize_emoji_shortcodes=True))
        assert plain == "ship :rocket: now"
        assert rich["children"][0]["children"][0]["value"] == "ship \U0001f680 now"
        assert rich["source"] == "ship :rocket: now"

    def test_emoji_left_alone_in_code(self) -> None:
        options = SerializeOptions(normalize_emoji_shortcodes=True)
        block = first_block("`:rocket:`", options)
        assert block["children"][0]["value"] == ":rocket:"

    def test_indent(self) -> None:
        text = serialize_tree(parse("x"), SerializeOptions(indent=2))
        assert text.startswith('{\n  "type": "root"')


class TestSerializeTree:
    def test_valid_json(self) -> None:
        text = serialize_tree(parse("# Hi\n\n<Card title='x'>*b*</Card>"))
        assert json.loads(text)["children"][1]["name"] == "Card"

    def test_non_ascii_kept(self) -> None:
        assert "café" in serialize_tree(parse("café"))

    @pytest.mark.parametrize(
        "source",
        [
            "# Hi\n\ntext *em* **strong**",
            "---\na: 1\n---\n<A x={1}>\n- one\n- two\n</A>",
            "> quote\n> more\n\n1. a\n2. b",
            "</Bad> {open",
        ],
    )
    def test_deterministic(self, source: str) -> None:
        assert serialize_tree(parse(source)) == serialize_tree(parse(source))
