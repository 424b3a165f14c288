"""Tests for the canonical text renderer."""

from __future__ import annotations

import pytest

from tessera import ParseConfig, parse, render
from tessera.builder import TreeBuilder
from tessera.errors import RenderError
from tessera.nodes import Attribute, AttributeKind, NodeKind
from tessera.renderer import (
    TextRenderer,
    fence_for,
    format_attribute,
    quote_attribute_value,
)


class TestCanonicalForms:
    """Source is re-emitted in one fixed style."""

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ("## Hi", "## Hi\n"),
            ("# A\nbody", "# A\n\nbody\n"),
            ("___", "***\n"),
            ("* * *", "***\n"),
            ("_a_ and __b__", "*a* and **b**\n"),
            ("``a`b``", "``a`b``\n"),
            ("[a](u) ![b](i.png)", "[a](u) ![b](i.png)\n"),
            ("a\\\nb", "a\\\nb\n"),
            ("a\\  \nb", "a\\  \nb\n"),
            ("> a\\  \n> b", "> a\\  \n> b\n"),
            ("a\\\\  \nb", "a\\\\\\\nb\n"),
            ("{x}", "{x}\n"),
            ("Say <B>hi</B> now", "Say <B>hi</B> now\n"),
            ("a <Icon name='x'/> b", 'a <Icon name="x" /> b\n'),
            ("<Divider/>", "<Divider />\n"),
        ],
    )
    def test_render(self, source: str, expected: str) -> None:
        assert render(parse(source)) == expected

    def test_empty_document(self) -> None:
        assert render(parse("")) == ""

    def test_ordered_list_renumbered(self) -> None:
        assert render(parse("3. a\n7. b")) == "1. a\n2. b\n"

    def test_bullet_kept(self) -> None:
        assert render(parse("+ a\n+ b")) == "+ a\n+ b\n"

    def test_blockquote_prefixes(self) -> None:
        assert render(parse("> a\n> b")) == "> a\n> b\n"

    def test_block_element(self) -> None:
        source = "<Card title='x'>\n\n# T\n\n</Card>"
        assert render(parse(source)) == '<Card title="x">\n# T\n</Card>\n'

    def test_empty_element(self) -> None:
        assert render(parse("<A></A>")) == "<A></A>\n"

    def test_fragment(self) -> None:
        assert render(parse("<>\nhi\n</>")) == "<>\nhi\n</>\n"

    def test_yaml_frontmatter(self) -> None:
        assert render(parse("---\na: 1\n---\n# H")) == "---\na: 1\n---\n\n# H\n"

    def test_json_frontmatter(self) -> None:
        assert render(parse('```hnmd\n{}\n```')) == "```hnmd\n{}\n```\n"

    def test_code_block_fence_lengthened(self) -> None:
        assert render(parse("````\n```\n````")) == "````\n```\n````\n"

    def test_code_block_lang(self) -> None:
        assert render(parse("```py\nx\n```")) == "```py\nx\n```\n"


class TestHelpers:
    @pytest.mark.parametrize(
        ("value", "fence"),
        [
            ("x", "```"),
            ("", "```"),
            ("```", "````"),
            ("a\n  `````  \nb", "``````"),
            ("a ``` b", "```"),
        ],
    )
    def test_fence_for(self, value: str, fence: str) -> None:
        assert fence_for(value) == fence

    @pytest.mark.parametrize(
        ("value", "quoted"),
        [
            ("x", '"x"'),
            ("", '""'),
            ('say "hi"', "'say \"hi\"'"),
            ('a\\"b', '"a\\"b"'),
            ("abc\\", "abc\\"),
            ("abc\\\\", '"abc\\\\"'),
        ],
    )
    def test_quote_attribute_value(self, value: str, quoted: str) -> None:
        assert quote_attribute_value(value) == quoted

    def test_format_attribute(self) -> None:
        assert format_attribute(Attribute("open", AttributeKind.LITERAL)) == " open"
        assert format_attribute(Attribute("on", AttributeKind.EXPRESSION, "go()")) == " on={go()}"
        assert format_attribute(Attribute("t", AttributeKind.LITERAL, "x")) == ' t="x"'


class TestTextRenderer:
    def test_emoji_normalization(self) -> None:
        doc = parse("hi :wave:")
        assert render(doc) == "hi :wave:\n"
        assert render(doc, normalize_emoji_shortcodes=True) == "hi \U0001f44b\n"

    def test_custom_json_tag(self) -> None:
        renderer = TextRenderer(json_frontmatter_tag="meta")
        assert renderer.render(parse('```hnmd\n{}\n```')) == "```meta\n{}\n```\n"

    def test_json_tag_follows_document(self) -> None:
        doc = parse('```meta\n{}\n```', config=ParseConfig(json_frontmatter_tag="meta"))
        assert doc.json_frontmatter_tag == "meta"
        assert render(doc) == "```meta\n{}\n```\n"
        again = parse(render(doc), config=ParseConfig(json_frontmatter_tag="meta"))
        assert doc.node(doc.children(0)[0]).kind is NodeKind.FRONTMATTER
        assert again.node(again.children(0)[0]).kind is NodeKind.FRONTMATTER

    def test_instance_reusable(self) -> None:
        renderer = TextRenderer()
        first = renderer.render(parse("> a\n> b"))
        second = renderer.render(parse("a\nb"))
        assert first == "> a\n> b\n"
        assert second == "a\nb\n"


class TestRenderErrors:
    def test_unknown_block_kind(self) -> None:
        builder = TreeBuilder()
        item = builder.add(NodeKind.LIST_ITEM, 0, 0)
        doc = builder.finish("", (), [item], [])
        with pytest.raises(RenderError, match="list_item"):
            render(doc)

    def test_unknown_inline_kind(self) -> None:
        builder = TreeBuilder()
        rule = builder.add(NodeKind.HR, 0, 3)
        para = builder.add(NodeKind.PARAGRAPH, 0, 3, [rule])
        doc = builder.finish("***", (), [para], [])
        with pytest.raises(RenderError, match="inline"):
            render(doc)


class TestStringBuilder:
    def test_accumulates(self) -> None:
        from tessera.stringbuilder import StringBuilder

        sb = StringBuilder()
        assert not sb
        sb.append("**").extend(["bold", "**"])
        assert len(sb) == 8
        assert sb.build() == "**bold**"

    def test_last(self) -> None:
        from tessera.stringbuilder import StringBuilder

        sb = StringBuilder()
        assert sb.last() == ""
        sb.append("a\\").append("")
        assert sb.last() == "a\\"
