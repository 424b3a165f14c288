"""Token navigation utilities for the tessera parser.

Provides mixin for token stream navigation and basic parsing operations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from tessera.tokens import Token, TokenKind

if TYPE_CHECKING:
    from collections.abc import Sequence

# Tokens that never carry inline content and count as whitespace when a
# delimiter run sits next to them.
STRUCTURAL_KINDS = frozenset(
    {
        TokenKind.NEWLINE,
        TokenKind.BLANK_LINE,
        TokenKind.INDENT,
        TokenKind.HARD_BREAK,
        TokenKind.EOF,
        TokenKind.HEADING_MARKER,
        TokenKind.BLOCKQUOTE_MARKER,
        TokenKind.LIST_MARKER,
        TokenKind.ORDERED_LIST_MARKER,
    }
)


class TokenNavigationMixin:
    """Mixin providing token stream navigation methods.

    The stream always ends with EOF, and the cursor never moves past it.

    Required Host Attributes:
        - _tokens: Sequence[Token]
        - _tokens_len: int (cached len(_tokens) for hot loops)
        - _pos: int
        - _current: Token
        - _source: str

    """

    _tokens: Sequence[Token]
    _tokens_len: int
    _pos: int
    _current: Token
    _source: str

    def _at_end(self) -> bool:
        """Check if at end of token stream."""
        return self._current.kind is TokenKind.EOF

    def _advance(self) -> Token:
        """Consume the current token and return it."""
        token = self._current
        if self._pos < self._tokens_len - 1:
            self._pos += 1
            self._current = self._tokens[self._pos]
        return token

    def _seek(self, pos: int) -> None:
        """Move the cursor to an absolute token index."""
        self._pos = min(pos, self._tokens_len - 1)
        self._current = self._tokens[self._pos]

    def _peek(self, offset: int = 1) -> Token:
        """Peek at token at offset from current position (clamped to EOF)."""
        pos = self._pos + offset
        if pos < self._tokens_len:
            return self._tokens[pos]
        return self._tokens[-1]

    def _text(self, token: Token) -> str:
        return self._source[token.start : token.end]

    def _consumed_end(self) -> int:
        """End offset of the last consumed token."""
        if self._pos == 0:
            return 0
        return self._tokens[self._pos - 1].end

    def _skip_kinds(self, pos: int, kinds: frozenset[TokenKind]) -> int:
        """First token index at or after ``pos`` whose kind is not in ``kinds``."""
        while pos < self._tokens_len - 1 and self._tokens[pos].kind in kinds:
            pos += 1
        return pos

    def _char_before(self, index: int) -> str:
        """Character before token ``index``, or " " if a structural token precedes it."""
        if index == 0 or self._tokens[index - 1].kind in STRUCTURAL_KINDS:
            return " "
        return self._source[self._tokens[index].start - 1]

    def _char_after(self, index: int) -> str:
        """Character after token ``index``, or " " if a structural token follows it."""
        following = self._tokens[index + 1] if index + 1 < self._tokens_len else None
        if following is None or following.kind in STRUCTURAL_KINDS:
            return " "
        return self._source[self._tokens[index].end]
