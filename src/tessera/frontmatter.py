"""Frontmatter detection.

Two forms are recognized, and only as the first content of a document:

YAML::

    ---
    title: x
    ---

JSON, a leading code fence labelled with the reserved tag::

    ```hnmd
    {"title": "x"}
    ```

The block is stored verbatim and never interpreted. Detection happens in two
places: :func:`find_yaml_frontmatter` runs over raw text so the lexer can
emit frontmatter tokens instead of a thematic break, and
:func:`extract_frontmatter` runs over the token stream so the parser can
lift the block before block parsing starts.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from tessera.errors import ErrorKind, ParseError
from tessera.nodes import FrontmatterFormat
from tessera.parsing.fences import read_fence
from tessera.tokens import Token, TokenKind

YAML_DELIMITER = "---"
_LEADING_GAP = frozenset({TokenKind.BLANK_LINE, TokenKind.INDENT})


@dataclass(frozen=True, slots=True)
class YamlSpan:
    """Offsets of a YAML frontmatter block in raw source.

    Attributes:
        content_start: Start of the raw block (just after the opening line)
        content_end: End of the raw block (before the newline ending it)
        close_start: Start of the closing ``---`` line

    """

    content_start: int
    content_end: int
    close_start: int

    @property
    def close_end(self) -> int:
        return self.close_start + len(YAML_DELIMITER)


@dataclass(frozen=True, slots=True)
class Frontmatter:
    """Frontmatter lifted from the front of the token stream."""

    format: FrontmatterFormat
    value: str
    start: int
    end: int
    next_index: int


def find_yaml_frontmatter(source: str) -> YamlSpan | None:
    """Locate a closed ``---`` block starting at offset 0.

    Both delimiter lines must contain exactly ``---``.

    Returns:
        The block's offsets, or None when the document does not open with a
        closed YAML block
    """
    if not source.startswith(YAML_DELIMITER + "\n"):
        return None
    first = len(YAML_DELIMITER) + 1
    line_start = first
    source_len = len(source)
    while line_start < source_len:
        line_end = source.find("\n", line_start)
        if line_end == -1:
            line_end = source_len
        if source[line_start:line_end] == YAML_DELIMITER:
            return YamlSpan(
                content_start=first,
                content_end=max(first, line_start - 1),
                close_start=line_start,
            )
        line_start = line_end + 1
    return None


def extract_frontmatter(
    tokens: Sequence[Token], source: str, json_tag: str
) -> tuple[Frontmatter | None, ParseError | None]:
    """Lift a leading frontmatter block from the token stream.

    Args:
        tokens: Complete token stream (ends with EOF)
        source: Source text the tokens index into
        json_tag: Fence label marking JSON frontmatter

    Returns:
        ``(frontmatter, error)``. Either may be None. An unclosed ``---``
        opener produces an error and no frontmatter (the line stays a
        thematic break); an unclosed JSON fence produces both, with the
        block running to the end of the document.
    """
    first = tokens[0]
    if first.kind is TokenKind.FRONTMATTER_DELIMITER:
        pos = 1
        value = ""
        while tokens[pos].kind is not TokenKind.FRONTMATTER_DELIMITER:
            if tokens[pos].kind is TokenKind.FRONTMATTER_CONTENT:
                value = source[tokens[pos].start : tokens[pos].end]
            pos += 1
        closing = tokens[pos]
        return (
            Frontmatter(FrontmatterFormat.YAML, value, 0, closing.end, pos + 1),
            None,
        )

    if first.kind is TokenKind.THEMATIC_BREAK and source.startswith(
        YAML_DELIMITER + "\n"
    ):
        if len(source) > len(YAML_DELIMITER) + 1:
            error = ParseError(
                ErrorKind.MALFORMED_FRONTMATTER,
                0,
                "frontmatter opened with '---' is never closed",
            )
            return None, error
        return None, None

    pos = 0
    while tokens[pos].kind in _LEADING_GAP:
        pos += 1
    if tokens[pos].kind is not TokenKind.FENCE_OPEN:
        return None, None
    info = tokens[pos + 1]
    if info.kind is not TokenKind.FENCE_INFO:
        return None, None
    if source[info.start : info.end].strip() != json_tag:
        return None, None

    body = read_fence(tokens, pos, source)
    frontmatter = Frontmatter(
        FrontmatterFormat.JSON,
        body.value,
        tokens[pos].start,
        body.end,
        body.next_index,
    )
    if body.closed:
        return frontmatter, None
    error = ParseError(
        ErrorKind.MALFORMED_FRONTMATTER,
        tokens[pos].start,
        f"'{json_tag}' frontmatter fence is never closed",
    )
    return frontmatter, error
