"""Tag and expression parsing for the tessera parser.

Handles element open tags and their attributes, closing-tag matching and
recovery, and brace-delimited expressions. Everything here consumes tokens
the lexer produced in TAG and EXPRESSION modes; those modes always end at
``>``, ``/>``, ``}``, a blank line or the end of the document, so every
scan in this module is bounded by the tag or expression it belongs to.

Malformed open tags (a spread ``{...x}``, a dangling ``=``, an unterminated
string, a stray character) never become elements. The whole tag stays in
the tree as literal text and one InvalidAttribute error is recorded.

Closing-tag recovery:
- A closing tag whose name matches no open element is stray: it stays in
  the tree as literal text and a MismatchedClosingTag error is recorded.
- A closing tag that matches an element further out ends every element
  inside it; each of those records a MismatchedClosingTag at the closing
  tag's offset and the tag is left for its owner.

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from tessera.errors import ErrorKind
from tessera.nodes import Attribute, AttributeKind, NodeKind
from tessera.tokens import Token, TokenKind

if TYPE_CHECKING:
    from tessera.builder import TreeBuilder
    from tessera.parsing.frames import InlineFrame
    from tessera.parsing.inline import ContainerMode

_TAG_GAP = frozenset({TokenKind.TAG_WHITESPACE, TokenKind.NEWLINE})
_TAG_TERMINATORS = frozenset(
    {TokenKind.TAG_END, TokenKind.TAG_SELF_CLOSE, TokenKind.BLANK_LINE, TokenKind.EOF}
)
_TAG_VALUES = frozenset({TokenKind.TAG_STRING, TokenKind.TAG_NAME, TokenKind.TAG_VALUE})


@dataclass(frozen=True, slots=True)
class OpenElement:
    """An element whose children are being parsed."""

    name: str | None  # None for a fragment
    inline: bool


@dataclass(frozen=True, slots=True)
class TagHead:
    """A parsed open tag: ``<Name attrs>``, ``<Name attrs />`` or ``<>``."""

    start: int
    end: int
    name: str | None
    attributes: tuple[Attribute, ...]
    self_closing: bool
    terminated: bool


@dataclass(frozen=True, slots=True)
class ExpressionSpan:
    """A ``{...}`` region. ``value`` is the raw text between the braces."""

    start: int
    end: int
    value: str
    closed: bool


def tag_label(name: str | None, closing: bool = False) -> str:
    slash = "/" if closing else ""
    return f"<{slash}{name or ''}>"


class MarkupParsingMixin:
    """Mixin for element tags and expressions.

    Required Host Attributes:
        - _builder: TreeBuilder
        - _open_elements: list[OpenElement]
        - _max_depth: int

    """

    _builder: TreeBuilder
    _open_elements: list[OpenElement]
    _max_depth: int
    _tokens: list[Token]
    _pos: int
    _current: Token
    _source: str

    # Provided by TokenNavigationMixin / parser core
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

        def _parse_blocks(self) -> list[int]:
            raise NotImplementedError

        def _parse_inline(
            self, mode: ContainerMode, budget: int, *, trim_start: bool = False
        ) -> tuple[list[int], int]:
            raise NotImplementedError

    # =========================================================================
    # Lookahead
    # =========================================================================

    def _tag_problem(self, pos: int) -> tuple[int, str] | None:
        """First grammar violation in the open tag at ``pos``.

        Looks ahead without consuming. A tag cut off by a blank line or the
        end of the document is not a violation here; the element parser
        records it as UnterminatedTag.

        Returns:
            ``(offset, message)``, or None when the tag is well formed
        """
        tokens = self._tokens
        look = pos + 1
        kind = tokens[look].kind
        if kind is TokenKind.TAG_END:
            return None
        if kind is not TokenKind.TAG_NAME:
            return tokens[pos].start, "expected a tag name after '<'"
        label = tag_label(self._text(tokens[look]))
        look += 1
        while True:
            token = tokens[look]
            kind = token.kind
            if kind in _TAG_GAP:
                look += 1
            elif kind in _TAG_TERMINATORS:
                return None
            elif kind is TokenKind.TAG_NAME:
                name = self._text(token)
                after = self._skip_kinds(look + 1, _TAG_GAP)
                if tokens[after].kind is not TokenKind.TAG_EQUALS:
                    look += 1
                    continue
                value_pos = self._skip_kinds(after + 1, _TAG_GAP)
                value = tokens[value_pos]
                if value.kind in _TAG_VALUES:
                    look = value_pos + 1
                elif value.kind is TokenKind.EXPR_OPEN:
                    close = self._find_expression_close(value_pos)
                    if close == -1:
                        return None
                    look = close + 1
                elif value.kind is TokenKind.TAG_STRING_UNTERMINATED:
                    return value.start, f"unterminated string value for {name!r} in {label}"
                else:
                    return value.start, f"attribute {name!r} in {label} has '=' but no value"
            elif kind is TokenKind.EXPR_OPEN:
                return token.start, f"expression without a name in {label}"
            else:
                return token.start, f"unexpected {self._text(token)!r} in {label}"

    def _can_open_element(self, pos: int) -> bool:
        return len(self._open_elements) < self._max_depth and self._tag_problem(pos) is None

    def _close_tag_name(self, pos: int) -> tuple[bool, str | None]:
        """Name of the closing tag at ``pos``.

        Only ``</>`` and ``</Name>`` (whitespace allowed) are well formed.

        Returns:
            ``(well_formed, name)``; name is None for ``</>``
        """
        look = self._skip_kinds(pos + 1, _TAG_GAP)
        token = self._tokens[look]
        if token.kind is TokenKind.TAG_END:
            return True, None
        if token.kind is not TokenKind.TAG_NAME:
            return False, None
        after = self._skip_kinds(look + 1, _TAG_GAP)
        if self._tokens[after].kind is not TokenKind.TAG_END:
            return False, self._text(token)
        return True, self._text(token)

    def _close_matches_open(self, pos: int) -> bool:
        """Closing tag at ``pos`` names some currently open element."""
        if not self._open_elements:
            return False
        well_formed, name = self._close_tag_name(pos)
        if not well_formed:
            return False
        return any(element.name == name for element in self._open_elements)

    # =========================================================================
    # Literal fallback
    # =========================================================================

    def _consume_tag_span(self) -> tuple[int, int]:
        """Consume a whole tag as raw text, through ``>`` or ``/>`` if present."""
        start = self._advance().start
        while self._current.kind not in _TAG_TERMINATORS:
            self._advance()
        if self._current.kind in (TokenKind.TAG_END, TokenKind.TAG_SELF_CLOSE):
            self._advance()
        return start, self._consumed_end()

    def _add_literal_tag(self, frame: InlineFrame) -> None:
        """Keep a tag that cannot become an element as literal text.

        A malformed tag keeps every character it spans, attributes included;
        only the first violation is recorded.
        """
        problem = self._tag_problem(self._pos)
        if problem is not None:
            self._record_error(ErrorKind.INVALID_ATTRIBUTE, *problem)
        start, end = self._consume_tag_span()
        frame.add_literal(start, end)

    def _add_stray_close(self, frame: InlineFrame) -> None:
        """Keep a closing tag with no open element as literal text."""
        token = self._current
        _, name = self._close_tag_name(self._pos)
        self._record_error(
            ErrorKind.MISMATCHED_CLOSING_TAG,
            token.start,
            f"closing tag {tag_label(name, closing=True)} has no open element",
        )
        start, end = self._consume_tag_span()
        frame.add_literal(start, end)

    # =========================================================================
    # Open tags and attributes
    # =========================================================================

    def _parse_open_tag(self) -> TagHead:
        """Parse from TAG_OPEN through ``>`` or ``/>``.

        Must only be called when ``_tag_problem`` finds nothing. A tag cut
        off by a blank line or the end of the document records
        UnterminatedTag and is returned with ``terminated=False``.
        """
        start = self._advance().start
        if self._current.kind is TokenKind.TAG_END:
            self._advance()
            return TagHead(start, self._consumed_end(), None, (), False, True)

        name = self._text(self._advance())
        attributes: list[Attribute] = []
        while True:
            token = self._current
            kind = token.kind
            if kind in _TAG_GAP:
                self._advance()
            elif kind is TokenKind.TAG_END or kind is TokenKind.TAG_SELF_CLOSE:
                self._advance()
                return TagHead(
                    start,
                    self._consumed_end(),
                    name,
                    tuple(attributes),
                    kind is TokenKind.TAG_SELF_CLOSE,
                    True,
                )
            elif kind is TokenKind.BLANK_LINE or kind is TokenKind.EOF:
                self._record_error(
                    ErrorKind.UNTERMINATED_TAG,
                    start,
                    f"tag {tag_label(name)} is missing its closing '>'",
                )
                return TagHead(
                    start, self._consumed_end(), name, tuple(attributes), False, False
                )
            else:
                attributes.append(self._parse_attribute())

    def _parse_attribute(self) -> Attribute:
        """Parse ``name``, ``name="v"``, ``name='v'``, ``name=v`` or ``name={v}``."""
        name = self._text(self._advance())
        look = self._skip_kinds(self._pos, _TAG_GAP)
        if self._tokens[look].kind is not TokenKind.TAG_EQUALS:
            return Attribute(name, AttributeKind.LITERAL, None)

        self._seek(self._skip_kinds(look + 1, _TAG_GAP))
        token = self._current
        if token.kind is TokenKind.EXPR_OPEN:
            span = self._scan_expression()
            return Attribute(name, AttributeKind.EXPRESSION, span.value)
        self._advance()
        if token.kind is TokenKind.TAG_STRING:
            return Attribute(
                name, AttributeKind.LITERAL, self._source[token.start + 1 : token.end - 1]
            )
        return Attribute(name, AttributeKind.LITERAL, self._text(token))

    # =========================================================================
    # Expressions
    # =========================================================================

    def _scan_expression(self) -> ExpressionSpan:
        """Consume ``{ ... }`` with nested braces.

        An expression cut off by a blank line or the end of the document
        records UnterminatedExpression; its value runs to that bound.
        """
        opener = self._advance()
        depth = 1
        while True:
            token = self._current
            kind = token.kind
            if kind is TokenKind.BLANK_LINE or kind is TokenKind.EOF:
                self._record_error(
                    ErrorKind.UNTERMINATED_EXPRESSION,
                    opener.start,
                    "expression is missing its closing '}'",
                )
                return ExpressionSpan(
                    opener.start,
                    self._consumed_end(),
                    self._source[opener.end : token.start],
                    False,
                )
            self._advance()
            if kind is TokenKind.EXPR_OPEN:
                depth += 1
            elif kind is TokenKind.EXPR_CLOSE:
                depth -= 1
                if depth == 0:
                    return ExpressionSpan(
                        opener.start,
                        token.end,
                        self._source[opener.end : token.start],
                        True,
                    )

    def _find_expression_close(self, pos: int) -> int:
        """Index of the EXPR_CLOSE matching the EXPR_OPEN at ``pos``, or -1."""
        depth = 0
        tokens = self._tokens
        while True:
            kind = tokens[pos].kind
            if kind is TokenKind.BLANK_LINE or kind is TokenKind.EOF:
                return -1
            if kind is TokenKind.EXPR_OPEN:
                depth += 1
            elif kind is TokenKind.EXPR_CLOSE:
                depth -= 1
                if depth == 0:
                    return pos
            pos += 1

    def _parse_expression_node(self, kind: NodeKind) -> int:
        span = self._scan_expression()
        return self._builder.add(kind, span.start, span.end, value=span.value)

    # =========================================================================
    # Elements
    # =========================================================================

    def _parse_element(
        self, *, inline: bool, mode: ContainerMode, budget: int
    ) -> tuple[int, int]:
        """Parse an element, self-closing element or fragment.

        Block elements hold blocks; inline elements hold inline content
        parsed under the enclosing container's line rules.

        Returns:
            ``(node_index, height)``
        """
        head = self._parse_open_tag()
        if head.self_closing:
            node = self._builder.add(
                NodeKind.SELF_CLOSING_ELEMENT,
                head.start,
                head.end,
                name=head.name,
                attributes=head.attributes,
            )
            return node, 1

        height = 1
        children: list[int] = []
        if head.terminated:
            self._open_elements.append(OpenElement(head.name, inline))
            try:
                if inline:
                    children, height = self._parse_inline(mode, budget)
                else:
                    children = self._parse_blocks()
            finally:
                self._open_elements.pop()
            end = self._finish_element(head)
        else:
            end = head.end

        if head.name is None:
            node = self._builder.add(NodeKind.FRAGMENT, head.start, end, children)
        else:
            node = self._builder.add(
                NodeKind.ELEMENT,
                head.start,
                end,
                children,
                name=head.name,
                attributes=head.attributes,
            )
        return node, height + 1

    def _finish_element(self, head: TagHead) -> int:
        """Consume the element's closing tag if it is next; return the end offset."""
        token = self._current
        if token.kind is TokenKind.TAG_CLOSE_OPEN:
            well_formed, name = self._close_tag_name(self._pos)
            if well_formed and name == head.name:
                self._consume_tag_span()
                return self._consumed_end()
            self._record_error(
                ErrorKind.MISMATCHED_CLOSING_TAG,
                token.start,
                f"expected {tag_label(head.name, closing=True)}, "
                f"found {tag_label(name, closing=True)}",
            )
        else:
            self._record_error(
                ErrorKind.UNTERMINATED_TAG,
                head.start,
                f"element {tag_label(head.name)} is never closed",
            )
        return max(head.end, self._consumed_end())
