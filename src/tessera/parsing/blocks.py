"""Block parsing for the tessera parser.

Provides block dispatch and the block grammar: headings, fenced code,
thematic breaks, blockquotes, lists, block elements, flow expressions and
paragraphs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from tessera.errors import ErrorKind
from tessera.nodes import NodeKind
from tessera.parsing.fences import read_fence
from tessera.parsing.inline import ContainerMode
from tessera.tokens import Token, TokenKind

if TYPE_CHECKING:
    from tessera.builder import TreeBuilder

_GAP_KINDS = frozenset({TokenKind.BLANK_LINE, TokenKind.NEWLINE, TokenKind.INDENT})


class BlockParsingMixin:
    """Mixin for block-level content.

    Required Host Attributes:
        - _builder: TreeBuilder
        - _max_depth: int

    """

    _builder: TreeBuilder
    _max_depth: int
    _tokens: list[Token]
    _pos: int
    _current: Token
    _source: str

    # Provided by the other parser mixins
    if TYPE_CHECKING:
        def _advance(self) -> Token:
            raise NotImplementedError

        def _seek(self, pos: int) -> None:
            raise NotImplementedError

        def _text(self, token: Token) -> str:
            raise NotImplementedError

        def _consumed_end(self) -> int:
            raise NotImplementedError

        def _skip_kinds(self, pos: int, kinds: frozenset[TokenKind]) -> int:
            raise NotImplementedError

        def _record_error(self, kind: ErrorKind, offset: int, message: str) -> None:
            raise NotImplementedError

        def _parse_inline(
            self, mode: ContainerMode, budget: int, *, trim_start: bool = False
        ) -> tuple[list[int], int]:
            raise NotImplementedError

        def _close_matches_open(self, pos: int) -> bool:
            raise NotImplementedError

        def _can_open_element(self, pos: int) -> bool:
            raise NotImplementedError

        def _find_expression_close(self, pos: int) -> int:
            raise NotImplementedError

        def _parse_element(
            self, *, inline: bool, mode: ContainerMode, budget: int
        ) -> tuple[int, int]:
            raise NotImplementedError

        def _parse_expression_node(self, kind: NodeKind) -> int:
            raise NotImplementedError

    # =========================================================================
    # Dispatch
    # =========================================================================

    def _parse_blocks(self) -> list[int]:
        """Parse blocks until EOF or a closing tag owned by an open element."""
        children: list[int] = []
        while True:
            self._skip_block_gap()
            token = self._current
            if token.kind is TokenKind.EOF:
                break
            if token.kind is TokenKind.TAG_CLOSE_OPEN and self._close_matches_open(
                self._pos
            ):
                break
            children.append(self._parse_block())
        return children

    def _skip_block_gap(self) -> None:
        """Skip blank lines, newlines, indentation and whitespace left on a line."""
        while True:
            token = self._current
            kind = token.kind
            if kind in _GAP_KINDS:
                self._advance()
            elif kind is TokenKind.TEXT and not self._text(token).strip(" \t\r"):
                self._advance()
            elif kind is TokenKind.HARD_BREAK and self._source[token.start] != "\\":
                self._advance()
            else:
                return

    def _parse_block(self) -> int:
        """Parse one block starting at the current token."""
        kind = self._current.kind
        if kind is TokenKind.HEADING_MARKER:
            return self._parse_heading()
        if kind is TokenKind.FENCE_OPEN:
            return self._parse_code_block()
        if kind is TokenKind.THEMATIC_BREAK:
            token = self._advance()
            return self._builder.add(NodeKind.HR, token.start, token.end)
        if kind is TokenKind.BLOCKQUOTE_MARKER:
            return self._parse_blockquote()
        if kind is TokenKind.LIST_MARKER or kind is TokenKind.ORDERED_LIST_MARKER:
            return self._parse_list()
        if kind is TokenKind.TAG_OPEN and self._can_open_element(self._pos):
            node, _ = self._parse_element(
                inline=False, mode=ContainerMode.PARAGRAPH, budget=self._max_depth
            )
            return node
        if kind is TokenKind.EXPR_OPEN and self._is_flow_expression():
            return self._parse_expression_node(NodeKind.FLOW_EXPRESSION)
        return self._parse_paragraph()

    # =========================================================================
    # Leaf blocks
    # =========================================================================

    def _parse_heading(self) -> int:
        marker = self._advance()
        level = self._text(marker).count("#")
        children, _ = self._parse_inline(ContainerMode.LINE, self._max_depth)
        return self._builder.add(
            NodeKind.HEADING,
            marker.start,
            max(marker.end, self._consumed_end()),
            children,
            level=level,
        )

    def _parse_code_block(self) -> int:
        opener = self._current
        body = read_fence(self._tokens, self._pos, self._source)
        self._seek(body.next_index)
        if not body.closed:
            self._record_error(
                ErrorKind.UNTERMINATED_FENCE,
                opener.start,
                "code fence is never closed",
            )
        lang = self._text(body.info).strip() if body.info is not None else ""
        return self._builder.add(
            NodeKind.CODE_BLOCK,
            opener.start,
            body.end,
            value=body.value,
            lang=lang or None,
        )

    def _is_flow_expression(self) -> bool:
        """``{...}`` at block start that ends its line (or never closes)."""
        close = self._find_expression_close(self._pos)
        if close == -1:
            return True
        after = close + 1
        token = self._tokens[after]
        if token.kind is TokenKind.TEXT and not self._text(token).strip(" \t\r"):
            after += 1
            token = self._tokens[after]
        kind = token.kind
        if kind in (TokenKind.NEWLINE, TokenKind.BLANK_LINE, TokenKind.EOF):
            return True
        if kind is TokenKind.HARD_BREAK:
            return self._source[token.start] != "\\"
        if kind is TokenKind.TAG_CLOSE_OPEN:
            return self._close_matches_open(after)
        return False

    def _parse_paragraph(self) -> int:
        first = self._current
        start = first.start
        if first.kind is TokenKind.TEXT:
            text = self._text(first)
            start += len(text) - len(text.lstrip(" \t"))
        children, _ = self._parse_inline(
            ContainerMode.PARAGRAPH, self._max_depth, trim_start=True
        )
        return self._builder.add(
            NodeKind.PARAGRAPH, start, max(start, self._consumed_end()), children
        )

    # =========================================================================
    # Container blocks
    # =========================================================================

    def _parse_blockquote(self) -> int:
        marker = self._advance()
        children, _ = self._parse_inline(ContainerMode.QUOTE, self._max_depth)
        return self._builder.add(
            NodeKind.BLOCKQUOTE,
            marker.start,
            max(marker.end, self._consumed_end()),
            children,
        )

    def _parse_list(self) -> int:
        """Parse consecutive single-line items of one marker style.

        Blank lines between items do not end the list; a different bullet
        character, or switching between bullets and numbers, does.
        """
        first = self._current
        ordered = first.kind is TokenKind.ORDERED_LIST_MARKER
        bullet = self._source[first.start]
        items: list[int] = []
        while True:
            marker = self._advance()
            children, _ = self._parse_inline(ContainerMode.LINE, self._max_depth)
            items.append(
                self._builder.add(
                    NodeKind.LIST_ITEM,
                    marker.start,
                    max(marker.end, self._consumed_end()),
                    children,
                )
            )
            look = self._skip_kinds(self._pos, _GAP_KINDS)
            following = self._tokens[look]
            if following.kind is not first.kind:
                break
            if not ordered and self._source[following.start] != bullet:
                break
            self._seek(look)

        last = self._builder.node(items[-1])
        return self._builder.add(
            NodeKind.LIST_ORDERED if ordered else NodeKind.LIST_UNORDERED,
            first.start,
            last.end,
            items,
        )
