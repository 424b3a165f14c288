"""Tests for element tags, attributes, fragments and closing-tag recovery."""

import pytest

from helpers import child, error_kinds, kinds, texts
from tessera import Attribute, AttributeKind, NodeKind, ParseConfig, parse, render


class TestBlockElements:
    def test_element_with_blocks(self) -> None:
        doc = parse("<Card>\n\n# Title\n\nBody\n\n</Card>")
        card = child(doc, 0)
        assert doc.node(card).kind is NodeKind.ELEMENT
        assert doc.node(card).name == "Card"
        assert kinds(doc, card) == ["heading", "paragraph"]
        assert doc.errors == ()

    def test_close_without_blank_line(self) -> None:
        doc = parse("<Card>\nBody\n</Card>")
        assert kinds(doc, child(doc, 0)) == ["paragraph"]
        assert texts(doc) == ["Body"]
        assert doc.errors == ()

    def test_content_on_open_tag_line(self) -> None:
        doc = parse("<Card>x</Card> tail")
        assert kinds(doc) == ["element", "paragraph"]
        assert texts(doc) == ["x", "tail"]

    def test_nested_elements(self) -> None:
        doc = parse("<Tabs>\n<Tab label='a'>\none\n</Tab>\n</Tabs>")
        tabs = child(doc, 0)
        assert kinds(doc, tabs) == ["element"]
        assert doc.node(child(doc, 0, 0)).name == "Tab"

    def test_self_closing(self) -> None:
        doc = parse("<Divider />")
        node = doc.node(child(doc, 0))
        assert node.kind is NodeKind.SELF_CLOSING_ELEMENT
        assert node.name == "Divider"
        assert doc.children(child(doc, 0)) == ()

    def test_fragment(self) -> None:
        doc = parse("<>\nhi\n</>")
        assert kinds(doc) == ["fragment"]
        assert kinds(doc, child(doc, 0)) == ["paragraph"]
        assert doc.node(child(doc, 0)).name is None

    def test_dotted_name(self) -> None:
        doc = parse("<ui.Card />")
        assert doc.node(child(doc, 0)).name == "ui.Card"

    def test_element_span(self) -> None:
        source = "<A>\nx\n</A>"
        doc = parse(source)
        node = doc.node(child(doc, 0))
        assert (node.start, node.end) == (0, len(source))


class TestInlineElements:
    def test_inline_element(self) -> None:
        doc = parse("Say <B>hi</B> now")
        para = child(doc, 0)
        assert kinds(doc, para) == ["text", "element", "text"]
        assert kinds(doc, child(doc, 0, 1)) == ["text"]
        assert texts(doc) == ["Say ", "hi", " now"]

    def test_inline_self_closing(self) -> None:
        doc = parse('a <Icon name="x" /> b')
        assert kinds(doc, child(doc, 0)) == ["text", "self_closing_element", "text"]

    def test_emphasis_inside_inline_element(self) -> None:
        doc = parse("x <B>*a*</B>")
        assert kinds(doc, child(doc, 0, 1)) == ["emphasis"]

    def test_less_than_not_followed_by_name(self) -> None:
        doc = parse("a <3 b and 1 < 2")
        assert texts(doc) == ["a <3 b and 1 < 2"]
        assert doc.errors == ()


class TestAttributes:
    def test_attribute_forms(self) -> None:
        doc = parse("<Card title=\"Hi\" note='x' count={3} size=4 open />")
        assert doc.node(child(doc, 0)).attributes == (
            Attribute("title", AttributeKind.LITERAL, "Hi"),
            Attribute("note", AttributeKind.LITERAL, "x"),
            Attribute("count", AttributeKind.EXPRESSION, "3"),
            Attribute("size", AttributeKind.LITERAL, "4"),
            Attribute("open", AttributeKind.LITERAL, None),
        )

    def test_escapes_kept_raw(self) -> None:
        doc = parse('<A t="a\\"b" />')
        assert doc.node(child(doc, 0)).attributes[0].value == 'a\\"b'

    def test_spaces_around_equals(self) -> None:
        doc = parse('<A t = "x" />')
        assert doc.node(child(doc, 0)).attributes == (
            Attribute("t", AttributeKind.LITERAL, "x"),
        )

    def test_tag_across_lines(self) -> None:
        doc = parse('<A\n  t="x"\n  on={go()}\n/>')
        node = doc.node(child(doc, 0))
        assert node.kind is NodeKind.SELF_CLOSING_ELEMENT
        assert [a.name for a in node.attributes] == ["t", "on"]
        assert node.attributes[1].value == "go()"

    def test_expression_with_nested_braces(self) -> None:
        doc = parse("<A style={{color: 'red'}} />")
        assert doc.node(child(doc, 0)).attributes[0].value == "{color: 'red'}"

    def test_order_preserved(self) -> None:
        doc = parse("<A z=1 a=2 m=3 />")
        assert [a.name for a in doc.node(child(doc, 0)).attributes] == ["z", "a", "m"]

    def test_spread_stays_literal(self) -> None:
        doc = parse("<A {...props} />")
        assert kinds(doc) == ["paragraph"]
        assert texts(doc) == ["<A {...props} />"]
        assert error_kinds(doc) == ["InvalidAttribute"]

    def test_dangling_equals(self) -> None:
        doc = parse("<A t= />")
        assert kinds(doc) == ["paragraph"]
        assert texts(doc) == ["<A t= />"]
        assert error_kinds(doc) == ["InvalidAttribute"]

    def test_stray_equals(self) -> None:
        doc = parse("<A =x />")
        assert texts(doc) == ["<A =x />"]
        assert error_kinds(doc) == ["InvalidAttribute"]

    def test_unterminated_string(self) -> None:
        doc = parse('<A t="abc\n\nnext')
        assert error_kinds(doc) == ["InvalidAttribute"]
        assert texts(doc) == ['<A t="abc', "next"]

    def test_unterminated_string_keeps_rest_of_tag(self) -> None:
        doc = parse('<A x="abc />')
        assert texts(doc) == ['<A x="abc />']
        assert error_kinds(doc) == ["InvalidAttribute"]

    def test_malformed_inline_tag(self) -> None:
        doc = parse("see <A {...p} /> here")
        assert kinds(doc, child(doc, 0)) == ["text"]
        assert texts(doc) == ["see <A {...p} /> here"]

    def test_only_first_violation_recorded(self) -> None:
        doc = parse("<A {...p} = />")
        assert error_kinds(doc) == ["InvalidAttribute"]
        assert doc.errors[0].offset == 3

    def test_malformed_tag_renders_unchanged(self) -> None:
        assert render(parse("<A {...p} />")) == "<A {...p} />\n"


class TestClosingTagRecovery:
    def test_mismatch_closes_inner_element(self) -> None:
        doc = parse("<Card><Caption>x</Card>")
        assert error_kinds(doc) == ["MismatchedClosingTag"]
        assert "x" in texts(doc)
        card = child(doc, 0)
        assert doc.node(card).name == "Card"
        assert doc.node(child(doc, 0, 0)).name == "Caption"

    def test_inline_mismatch(self) -> None:
        doc = parse("x <B>a <I>b</B> c")
        assert error_kinds(doc) == ["MismatchedClosingTag"]
        para = child(doc, 0)
        assert kinds(doc, para) == ["text", "element", "text"]
        bold = child(doc, 0, 1)
        assert kinds(doc, bold) == ["text", "element"]
        assert texts(doc) == ["x ", "a ", "b", " c"]

    def test_stray_close_is_literal(self) -> None:
        doc = parse("a </B> b")
        assert texts(doc) == ["a </B> b"]
        assert error_kinds(doc) == ["MismatchedClosingTag"]

    def test_stray_close_at_block_start(self) -> None:
        doc = parse("</Card>")
        assert kinds(doc) == ["paragraph"]
        assert error_kinds(doc) == ["MismatchedClosingTag"]

    def test_stray_close_keeps_following_whitespace(self) -> None:
        doc = parse("</A>\te")
        assert texts(doc) == ["</A>\te"]

    def test_unclosed_stray_tag_across_lines(self) -> None:
        doc = parse("x</a\nmore")
        assert texts(doc) == ["x</a\nmore"]
        assert texts(parse(render(doc))) == ["x</a\nmore"]

    def test_unclosed_stray_tag_before_blank_line(self) -> None:
        doc = parse("x</a\nmore\n\nnext")
        assert texts(doc) == ["x</a\nmore", "next"]

    def test_element_never_closed(self) -> None:
        doc = parse("<Card>\nbody")
        assert kinds(doc) == ["element"]
        assert kinds(doc, child(doc, 0)) == ["paragraph"]
        assert error_kinds(doc) == ["UnterminatedTag"]

    def test_tag_cut_by_blank_line(self) -> None:
        doc = parse('<Card title="x"\n\nnext')
        assert kinds(doc) == ["element", "paragraph"]
        assert doc.node(child(doc, 0)).attributes[0].value == "x"
        assert error_kinds(doc) == ["UnterminatedTag"]

    def test_error_offset_points_at_closing_tag(self) -> None:
        source = "<Card><Caption>x</Card>"
        doc = parse(source)
        assert doc.errors[0].offset == source.index("</Card>")


class TestNestingLimit:
    def test_elements_past_limit_are_literal(self) -> None:
        doc = parse("<A><B><C>x</C></B></A>", config=ParseConfig(max_nesting_depth=2))
        assert len(doc.find(NodeKind.ELEMENT)) == 2
        assert texts(doc) == ["<C>x</C>"]
        assert error_kinds(doc) == ["MismatchedClosingTag"]

    def test_deep_nesting_is_bounded(self) -> None:
        doc = parse("<A>" * 100 + "x" + "</A>" * 100)
        assert len(doc.find(NodeKind.ELEMENT)) == 64
        assert doc.error_count == 36
        assert set(error_kinds(doc)) == {"MismatchedClosingTag"}


class TestUnterminatedExpressions:
    def test_flow_expression_cut_by_blank_line(self) -> None:
        doc = parse("{a\n\nb")
        assert kinds(doc) == ["flow_expression", "paragraph"]
        assert doc.node(child(doc, 0)).value == "a\n"
        assert error_kinds(doc) == ["UnterminatedExpression"]

    def test_text_expression_at_end(self) -> None:
        doc = parse("x {a")
        assert kinds(doc, child(doc, 0)) == ["text", "text_expression"]
        assert error_kinds(doc) == ["UnterminatedExpression"]

    @pytest.mark.parametrize("source", ["{", "<", "</", "<A", "<A t=", "<A t='"])
    def test_truncated_inputs(self, source: str) -> None:
        doc = parse(source)
        assert doc.node(doc.root).end == len(source)
