"""Token and TokenKind definitions for the tessera lexer.

The lexer produces a stream of Token objects that the parser consumes.
A Token is a kind plus a half-open span ``[start, end)`` into the source.
Token text is never copied; slice the source (or use
``Document.token_slice``) when the text is needed.

Thread Safety:
Token is frozen (immutable) and safe to share across threads.
TokenKind is an enum (inherently immutable).

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenKind(Enum):
    """Token kinds produced by the lexer.

    Organized by the lexer mode that emits them:
    - Document structure (EOF, NEWLINE, BLANK_LINE, INDENT)
    - Line-start block markers
    - Inline markdown
    - Tag markup
    - Expressions
    - Code

    """

    # Document structure
    EOF = auto()
    NEWLINE = auto()  # \n ending a non-blank line
    BLANK_LINE = auto()  # whitespace-only line, including its \n
    INDENT = auto()  # leading spaces/tabs of a line

    # Frontmatter
    FRONTMATTER_DELIMITER = auto()  # --- opening or closing line
    FRONTMATTER_CONTENT = auto()

    # Line-start block markers
    HEADING_MARKER = auto()  # #..###### plus one space
    THEMATIC_BREAK = auto()  # --- *** ___
    BLOCKQUOTE_MARKER = auto()  # > plus optional space
    LIST_MARKER = auto()  # - * + plus one space
    ORDERED_LIST_MARKER = auto()  # 1. plus one space
    FENCE_OPEN = auto()  # ``` run
    FENCE_INFO = auto()  # language label after the opening fence
    FENCE_CLOSE = auto()
    CODE_LINE = auto()  # verbatim line inside a fence

    # Inline markdown
    TEXT = auto()
    ESCAPE = auto()  # \ + ASCII punctuation
    DELIMITER = auto()  # run of * or _
    HARD_BREAK = auto()  # \ or 2+ spaces, then \n; or \ ending the input
    CODE_SPAN_OPEN = auto()
    CODE_SPAN_TEXT = auto()
    CODE_SPAN_CLOSE = auto()
    LINK_OPEN = auto()  # [
    IMAGE_OPEN = auto()  # ![
    LINK_MIDDLE = auto()  # ](
    LINK_URL = auto()
    LINK_CLOSE = auto()  # )

    # Tag markup
    TAG_OPEN = auto()  # <
    TAG_CLOSE_OPEN = auto()  # </
    TAG_END = auto()  # >
    TAG_SELF_CLOSE = auto()  # />
    TAG_NAME = auto()  # identifier, may contain . and :
    TAG_EQUALS = auto()
    TAG_STRING = auto()  # quoted attribute value, quotes included
    TAG_STRING_UNTERMINATED = auto()  # quote never closed before a blank line
    TAG_VALUE = auto()  # bare attribute value or stray characters
    TAG_WHITESPACE = auto()

    # Expressions
    EXPR_OPEN = auto()  # {
    EXPR_CLOSE = auto()  # }
    EXPR_TEXT = auto()


# Tokens that end a line of inline content.
LINE_END_KINDS = frozenset(
    {TokenKind.NEWLINE, TokenKind.BLANK_LINE, TokenKind.HARD_BREAK, TokenKind.EOF}
)

# Tokens that can only appear at the start of a line and open a block.
BLOCK_START_KINDS = frozenset(
    {
        TokenKind.HEADING_MARKER,
        TokenKind.THEMATIC_BREAK,
        TokenKind.BLOCKQUOTE_MARKER,
        TokenKind.LIST_MARKER,
        TokenKind.ORDERED_LIST_MARKER,
        TokenKind.FENCE_OPEN,
    }
)


@dataclass(frozen=True, slots=True)
class Token:
    """A token produced by the lexer.

    Attributes:
        kind: The token kind (from TokenKind enum)
        start: Start offset in source (inclusive)
        end: End offset in source (exclusive)

    Thread Safety:
        Frozen dataclass ensures immutability for safe sharing.

    """

    kind: TokenKind
    start: int
    end: int

    def text(self, source: str) -> str:
        """Return the slice of ``source`` covered by this token."""
        return source[self.start : self.end]

    def __repr__(self) -> str:
        """Compact repr for debugging."""
        return f"Token({self.kind.name}, {self.start}:{self.end})"
