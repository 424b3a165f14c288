"""Tests for inline parsing: emphasis, code spans, links and images."""

import pytest

from helpers import child, kinds, texts
from tessera import NodeKind, ParseConfig, parse


def paragraph(source: str):
    doc = parse(source)
    assert kinds(doc) == ["paragraph"]
    return doc, child(doc, 0)


class TestEmphasis:
    def test_nesting(self) -> None:
        doc, para = paragraph("**a *b* c**")
        assert kinds(doc, para) == ["strong"]
        strong = child(doc, 0, 0)
        assert kinds(doc, strong) == ["text", "emphasis", "text"]
        assert doc.node(doc.children(strong)[0]).value == "a "
        assert doc.node(doc.children(strong)[2]).value == " c"
        emphasis = doc.children(strong)[1]
        assert [doc.node(i).value for i in doc.children(emphasis)] == ["b"]

    @pytest.mark.parametrize(
        ("source", "kind"),
        [("*a*", NodeKind.EMPHASIS), ("_a_", NodeKind.EMPHASIS), ("**a**", NodeKind.STRONG), ("__a__", NodeKind.STRONG)],
    )
    def test_simple(self, source: str, kind: NodeKind) -> None:
        doc, para = paragraph(source)
        assert doc.node(doc.children(para)[0]).kind is kind

    def test_spans_include_delimiters(self) -> None:
        doc, para = paragraph("x **bold** y")
        strong = doc.node(doc.children(para)[1])
        assert (strong.start, strong.end) == (2, 10)

    def test_triple_run(self) -> None:
        doc, para = paragraph("***a***")
        outer = doc.children(para)[0]
        assert doc.node(outer).kind in (NodeKind.EMPHASIS, NodeKind.STRONG)
        inner = doc.children(outer)[0]
        assert {doc.node(outer).kind, doc.node(inner).kind} == {NodeKind.EMPHASIS, NodeKind.STRONG}

    def test_unmatched_opener_is_literal(self) -> None:
        assert texts(parse("a *b")) == ["a *b"]

    def test_space_after_opener_is_literal(self) -> None:
        assert texts(parse("a * b *")) == ["a * b *"]

    def test_intraword_underscore_is_literal(self) -> None:
        assert texts(parse("snake_case_name")) == ["snake_case_name"]

    def test_intraword_star_emphasis(self) -> None:
        doc, para = paragraph("un*frigging*believable")
        assert kinds(doc, para) == ["text", "emphasis", "text"]

    def test_excess_delimiters_stay_literal(self) -> None:
        doc, para = paragraph("**a*")
        assert kinds(doc, para) == ["text", "emphasis"]
        assert doc.node(doc.children(para)[0]).value == "*"

    def test_mixed_characters_do_not_match(self) -> None:
        assert texts(parse("*a_")) == ["*a_"]

    def test_emphasis_across_soft_break(self) -> None:
        doc, para = paragraph("*a\nb*")
        assert kinds(doc, para) == ["emphasis"]

    def test_keycap_is_not_a_delimiter(self) -> None:
        assert texts(parse("press *️⃣ then *️⃣")) == ["press *️⃣ then *️⃣"]


class TestCodeSpans:
    def test_code_span(self) -> None:
        doc, para = paragraph("use `x = *1*` here")
        code = doc.node(doc.children(para)[1])
        assert code.kind is NodeKind.CODE_INLINE
        assert code.value == "x = *1*"

    def test_double_backticks(self) -> None:
        doc, para = paragraph("``a`b``")
        assert doc.node(doc.children(para)[0]).value == "a`b"

    def test_unmatched_run_is_literal(self) -> None:
        assert texts(parse("a `b")) == ["a `b"]

    def test_empty_content(self) -> None:
        doc, para = paragraph("`` ``")
        assert doc.node(doc.children(para)[0]).value == " "


class TestLinks:
    def test_link(self) -> None:
        doc, para = paragraph("see [the docs](https://example.com/a?b=1)")
        link = doc.node(doc.children(para)[1])
        assert link.kind is NodeKind.LINK
        assert link.url == "https://example.com/a?b=1"
        assert kinds(doc, doc.children(para)[1]) == ["text"]

    def test_image(self) -> None:
        doc, para = paragraph("![alt text](img.png)")
        image = doc.node(doc.children(para)[0])
        assert image.kind is NodeKind.IMAGE
        assert image.url == "img.png"
        assert texts(doc) == ["alt text"]

    def test_emphasis_inside_link(self) -> None:
        doc, para = paragraph("[*a*](u)")
        link = doc.children(para)[0]
        assert kinds(doc, link) == ["emphasis"]

    def test_empty_url(self) -> None:
        doc, para = paragraph("[a]()")
        assert doc.node(doc.children(para)[0]).url == ""

    def test_missing_destination_is_literal(self) -> None:
        assert texts(parse("[a] b")) == ["[a] b"]

    def test_unclosed_destination_is_literal(self) -> None:
        assert texts(parse("[a](b")) == ["[a](b"]

    def test_emphasis_does_not_cross_link_bracket(self) -> None:
        doc, para = paragraph("*[a*](u)")
        assert kinds(doc, para) == ["text", "link"]
        assert texts(doc) == ["*", "a*"]


class TestNestingBudget:
    """Inline subtrees taller than the nesting limit stay literal."""

    def test_deep_emphasis_within_limit(self) -> None:
        source = "*" * 5 + "a" + "*" * 5
        doc = parse(source)
        assert doc.find(NodeKind.TEXT)

    def test_limit_applies(self) -> None:
        source = "[" * 10 + "a" + "](u)" * 10
        limited = parse(source, config=ParseConfig(max_nesting_depth=3))
        full = parse(source)
        assert len(full.find(NodeKind.LINK)) == 10
        assert len(limited.find(NodeKind.LINK)) < 10
        assert "".join(texts(limited)).count("a") == 1
