"""Inline parsing for the tessera parser.

One left-to-right pass per inline container. Literal pieces, finished
nodes, delimiter runs and brackets are appended to an InlineFrame;
emphasis (see emphasis.py) and links are formed the moment their closer
is seen. When the container ends, unmatched delimiters and brackets fall
back to literal text and contiguous literal pieces merge into text nodes
whose value is exactly the covered source.

Container modes decide what a line end means:
- LINE: headings and list items end at the end of their line
- PARAGRAPH: continues across newlines until a blank line or a line that
  starts another block
- QUOTE: continues while the next line starts with ``>``; the markers
  themselves are not content

"""

from __future__ import annotations

from enum import Enum, auto
from typing import TYPE_CHECKING

from tessera.nodes import NodeKind
from tessera.parsing.frames import Bracket, InlineFrame, Item, ItemKind
from tessera.tokens import BLOCK_START_KINDS, Token, TokenKind

if TYPE_CHECKING:
    from tessera.builder import TreeBuilder
    from tessera.parsing.emphasis import Delimiter
    from tessera.parsing.markup import OpenElement

_INDENT_ONLY = frozenset({TokenKind.INDENT})
_LITERAL_KINDS = frozenset({TokenKind.TEXT, TokenKind.ESCAPE, TokenKind.INDENT})


class ContainerMode(Enum):
    LINE = auto()
    PARAGRAPH = auto()
    QUOTE = auto()


class InlineParsingMixin:
    """Mixin for inline content.

    Required Host Attributes:
        - _builder: TreeBuilder
        - _open_elements: list[OpenElement]
        - _source: str

    """

    _builder: TreeBuilder
    _open_elements: list[OpenElement]
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

        def _skip_kinds(self, pos: int, kinds: frozenset[TokenKind]) -> int:
            raise NotImplementedError

        def _char_before(self, index: int) -> str:
            raise NotImplementedError

        def _char_after(self, index: int) -> str:
            raise NotImplementedError

        def _make_delimiter(
            self, char: str, start: int, end: int, before: str, after: str
        ) -> Delimiter:
            raise NotImplementedError

        def _push_delimiter(self, frame: InlineFrame, delimiter: Delimiter) -> None:
            raise NotImplementedError

        def _close_matches_open(self, pos: int) -> bool:
            raise NotImplementedError

        def _can_open_element(self, pos: int) -> bool:
            raise NotImplementedError

        def _add_literal_tag(self, frame: InlineFrame) -> None:
            raise NotImplementedError

        def _add_stray_close(self, frame: InlineFrame) -> None:
            raise NotImplementedError

        def _parse_element(
            self, *, inline: bool, mode: ContainerMode, budget: int
        ) -> tuple[int, int]:
            raise NotImplementedError

        def _parse_expression_node(self, kind: NodeKind) -> int:
            raise NotImplementedError

    # =========================================================================
    # Container loop
    # =========================================================================

    def _parse_inline(
        self, mode: ContainerMode, budget: int, *, trim_start: bool = False
    ) -> tuple[list[int], int]:
        """Parse inline content from the current token.

        Args:
            mode: How line ends are treated
            budget: Maximum height of any node built here
            trim_start: Drop leading whitespace of the first text piece

        Returns:
            ``(children, height)`` where height is the tallest child
        """
        frame = InlineFrame(budget, trim_start)
        while True:
            token = self._current
            kind = token.kind

            if kind is TokenKind.EOF or kind is TokenKind.BLANK_LINE:
                break
            if kind is TokenKind.NEWLINE:
                if mode is ContainerMode.LINE or not self._continues(mode, self._pos + 1):
                    break
                self._advance()
                frame.add_literal(token.start, token.end)
                self._skip_quote_prefix(mode)
                continue
            if kind is TokenKind.HARD_BREAK:
                self._advance()
                frame.add_node(
                    self._builder.add(NodeKind.HARD_BREAK, token.start, token.end), 1
                )
                if mode is ContainerMode.LINE or not self._continues(mode, self._pos):
                    break
                self._skip_quote_prefix(mode)
                continue
            if kind is TokenKind.TAG_CLOSE_OPEN:
                if self._close_matches_open(self._pos):
                    break
                self._add_stray_close(frame)
                frame.trim_start = False
                continue

            self._parse_inline_token(frame, mode)

        if not (self._open_elements and self._open_elements[-1].inline):
            self._trim_trailing_whitespace(frame)
        return self._resolve_with_height(frame.items)

    def _trim_trailing_whitespace(self, frame: InlineFrame) -> None:
        """Drop whitespace ending a block-level container.

        Spaces, tabs and carriage returns go, and so do line breaks that a
        literal tag spanning lines carried to the container's end. A single
        whitespace character survives after a backslash, which would
        otherwise become a hard break once a newline follows it.
        """
        items = frame.items
        while items and items[-1].kind is ItemKind.LITERAL:
            last = items[-1]
            text = self._source[last.start : last.end]
            stripped = text.rstrip(" \t\r\n")
            kept = text[len(stripped) : len(stripped) + 1]
            if stripped.endswith("\\") and kept in (" ", "\t", "\r"):
                stripped = text[: len(stripped) + 1]
            if stripped:
                last.end = last.start + len(stripped)
                return
            items.pop()

    def _parse_inline_token(self, frame: InlineFrame, mode: ContainerMode) -> None:
        """Consume one inline construct into ``frame``."""
        token = self._current
        kind = token.kind

        if kind in _LITERAL_KINDS:
            self._advance()
            start = token.start
            if frame.trim_start and kind is TokenKind.TEXT:
                text = self._source[start : token.end]
                start += len(text) - len(text.lstrip(" \t"))
            frame.add_literal(start, token.end)
        elif kind is TokenKind.DELIMITER:
            delimiter = self._make_delimiter(
                self._source[token.start],
                token.start,
                token.end,
                self._char_before(self._pos),
                self._char_after(self._pos),
            )
            self._advance()
            self._push_delimiter(frame, delimiter)
        elif kind is TokenKind.CODE_SPAN_OPEN:
            self._parse_code_span(frame)
        elif kind is TokenKind.LINK_OPEN or kind is TokenKind.IMAGE_OPEN:
            self._advance()
            frame.brackets.append(
                Bracket(
                    token.start,
                    token.end,
                    kind is TokenKind.IMAGE_OPEN,
                    len(frame.items),
                    {char: len(stack) for char, stack in frame.stacks.items()},
                )
            )
            frame.items.append(Item(ItemKind.BRACKET, token.start, token.end))
        elif kind is TokenKind.LINK_MIDDLE:
            self._parse_link_tail(frame)
        elif kind is TokenKind.TAG_OPEN:
            if self._can_open_element(self._pos) and frame.budget >= 2:
                node, height = self._parse_element(
                    inline=True, mode=mode, budget=frame.budget - 1
                )
                frame.add_node(node, height)
            else:
                self._add_literal_tag(frame)
        elif kind is TokenKind.EXPR_OPEN:
            frame.add_node(self._parse_expression_node(NodeKind.TEXT_EXPRESSION), 1)
        else:
            self._advance()
            frame.add_literal(token.start, token.end)
        frame.trim_start = False

    # =========================================================================
    # Line ends
    # =========================================================================

    def _continues(self, mode: ContainerMode, pos: int) -> bool:
        """Whether the line starting at token ``pos`` continues the container."""
        index = self._skip_kinds(pos, _INDENT_ONLY)
        kind = self._tokens[index].kind
        if mode is ContainerMode.QUOTE:
            return kind is TokenKind.BLOCKQUOTE_MARKER
        if kind is TokenKind.BLANK_LINE or kind is TokenKind.EOF:
            return False
        if kind in BLOCK_START_KINDS:
            return False
        inside_inline = bool(self._open_elements) and self._open_elements[-1].inline
        if inside_inline:
            return True
        if kind is TokenKind.TAG_OPEN:
            return False
        if kind is TokenKind.TAG_CLOSE_OPEN:
            return not self._close_matches_open(index)
        return True

    def _skip_quote_prefix(self, mode: ContainerMode) -> None:
        """In a blockquote, step over the next line's indent and ``>`` marker."""
        if mode is not ContainerMode.QUOTE:
            return
        self._seek(self._skip_kinds(self._pos, _INDENT_ONLY))
        if self._current.kind is TokenKind.BLOCKQUOTE_MARKER:
            self._advance()

    # =========================================================================
    # Code spans and links
    # =========================================================================

    def _parse_code_span(self, frame: InlineFrame) -> None:
        opener = self._advance()
        value_start = opener.end
        if self._current.kind is TokenKind.CODE_SPAN_TEXT:
            self._advance()
        closer = self._advance()
        node = self._builder.add(
            NodeKind.CODE_INLINE,
            opener.start,
            closer.end,
            value=self._source[value_start : closer.start],
        )
        frame.add_node(node, 1)

    def _parse_link_tail(self, frame: InlineFrame) -> None:
        """Handle ``](url)``: close the innermost bracket as a link or image."""
        middle = self._advance()
        url_token = None
        if self._current.kind is TokenKind.LINK_URL:
            url_token = self._advance()
        close = None
        if self._current.kind is TokenKind.LINK_CLOSE:
            close = self._advance()

        if close is None or not frame.brackets:
            if frame.brackets:
                frame.brackets.pop()
            frame.add_literal(middle.start, self._consumed_end())
            return

        bracket = frame.brackets.pop()
        height = frame.tail_height(bracket.index)
        if height > frame.budget:
            tail = Item(ItemKind.LITERAL, middle.start, close.end)
            frame.collapse_literal(bracket.index, [tail])
            return

        frame.truncate_openers(bracket.index)
        inner = frame.items[bracket.index + 1 :]
        del frame.items[bracket.index :]
        children = self._resolve_items(inner)
        url = self._source[url_token.start : url_token.end] if url_token else ""
        node = self._builder.add(
            NodeKind.IMAGE if bracket.image else NodeKind.LINK,
            bracket.start,
            close.end,
            children,
            url=url,
        )
        frame.add_node(node, height)

    # =========================================================================
    # Resolution
    # =========================================================================

    def _resolve_items(self, items: list[Item]) -> list[int]:
        return self._resolve_with_height(items)[0]

    def _resolve_with_height(self, items: list[Item]) -> tuple[list[int], int]:
        """Flatten items into child nodes, merging contiguous literal pieces.

        Returns:
            ``(children, height)``
        """
        children: list[int] = []
        height = 0
        pending_start = pending_end = -1
        stack = list(reversed(items))
        while stack:
            item = stack.pop()
            kind = item.kind
            if kind is ItemKind.GROUP:
                stack.extend(reversed(item.group or ()))
                continue
            if kind is ItemKind.NODE:
                if pending_end > pending_start:
                    children.append(self._add_text(pending_start, pending_end))
                    pending_start = pending_end = -1
                children.append(item.node)
                if item.height > height:
                    height = item.height
                continue

            if kind is ItemKind.DELIMITER and item.delimiter is not None:
                start, end = item.delimiter.start, item.delimiter.end
            else:
                start, end = item.start, item.end
            if end <= start:
                continue
            if start == pending_end:
                pending_end = end
            else:
                if pending_end > pending_start:
                    children.append(self._add_text(pending_start, pending_end))
                pending_start, pending_end = start, end

        if pending_end > pending_start:
            children.append(self._add_text(pending_start, pending_end))
        if not children:
            return children, 0
        return children, max(height, 1)

    def _add_text(self, start: int, end: int) -> int:
        return self._builder.add(
            NodeKind.TEXT, start, end, value=self._source[start:end]
        )
