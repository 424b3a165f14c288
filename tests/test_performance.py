"""Adversarial inputs must parse in roughly linear time.

Each case is a long run of a construct that a naive parser would rescan
(unclosed tags, delimiters, brackets, braces). The bound is generous; a
quadratic parser blows through it by orders of magnitude at these sizes.
"""

import time

import pytest

from tessera import parse, render

SIZE = 20_000
TIME_LIMIT = 2.0


def timed_parse(source: str) -> float:
    start = time.perf_counter()
    doc = parse(source)
    elapsed = time.perf_counter() - start
    assert doc.node(doc.root).end == len(source)
    return elapsed


@pytest.mark.parametrize(
    "unit",
    ["<", "*", "_", "[", "{", "`", "</A>", "<A>", "[a](", "<a", "![", "{{", "<A b=", "> "],
)
def test_pathological_runs(unit: str) -> None:
    source = unit * (SIZE // len(unit))
    assert timed_parse(source) < TIME_LIMIT


@pytest.mark.parametrize(
    "unit",
    ["*a ", "**a ", "[a] ", "`a ", "<A>x ", "{a ", "- a\n", "> a\n", "a\n\n"],
)
def test_repeated_unclosed_constructs(unit: str) -> None:
    source = unit * (SIZE // len(unit))
    assert timed_parse(source) < TIME_LIMIT


def test_deep_nesting_is_fast() -> None:
    depth = 5_000
    source = "<A>" * depth + "x" + "</A>" * depth
    assert timed_parse(source) < TIME_LIMIT


def test_render_large_document() -> None:
    source = "# Title\n\nSome *text* with <B>tags</B> and {expr}.\n\n" * 500
    doc = parse(source)
    start = time.perf_counter()
    render(doc)
    assert time.perf_counter() - start < TIME_LIMIT
