"""Mode-stack lexer with O(n) guaranteed performance.

Every scanner call commits at least one character, and no scanner looks
back past a committed token. Lookahead beyond a single character is only
done in bounded, cached forms (one pass over a line to index backtick runs,
one pass to find a link's closing parenthesis), so adversarial input such
as long runs of ``<``, ``[`` or backticks stays linear.

No regex in the hot path.

Thread Safety:
Lexer instances are single-use. Create one per source string.
All state is instance-local; no shared mutable state.

"""

from __future__ import annotations

from collections.abc import Iterator

from tessera.frontmatter import YamlSpan, find_yaml_frontmatter
from tessera.lexer.modes import WHITESPACE, LexerMode
from tessera.lexer.scanners import (
    CodeScannerMixin,
    MarkdownScannerMixin,
    MarkupScannerMixin,
)
from tessera.tokens import Token, TokenKind


class Lexer(
    MarkdownScannerMixin,
    MarkupScannerMixin,
    CodeScannerMixin,
):
    """Total lexer: every input produces a token stream covering it exactly.

    Tokens are contiguous and ordered; the last token is a zero-width EOF.

    Usage:
            >>> lexer = Lexer("# Hi")
            >>> list(lexer.tokenize())
            [Token(HEADING_MARKER, 0:2), Token(TEXT, 2:4), Token(EOF, 4:4)]

    Thread Safety:
        Lexer instances are single-use. Create one per source string.
        All state is instance-local; no shared mutable state.

    """

    __slots__ = (
        "_source",
        "_source_len",  # Cached len(source)
        "_pos",
        "_modes",  # Mode stack, MARKDOWN at the bottom
        "_fence_length",  # Backtick count of the open fence
        "_run_index",  # Backtick runs of the current line: length -> starts
        "_run_index_end",  # Line end the run index covers
        "_url_fail_until",  # No ")" between a failed link URL and here
    )

    def __init__(self, source: str) -> None:
        """Initialize lexer with source text.

        Args:
            source: Document source text
        """
        self._source = source
        self._source_len = len(source)
        self._pos = 0
        self._modes: list[LexerMode] = [LexerMode.MARKDOWN]
        self._fence_length = 0
        self._run_index: dict[int, list[int]] = {}
        self._run_index_end = -1
        self._url_fail_until = -1

    def tokenize(self) -> Iterator[Token]:
        """Tokenize source into a token stream.

        Yields:
            Token objects one at a time

        Complexity: O(n) where n = len(source)
        """
        span = find_yaml_frontmatter(self._source)
        if span is not None:
            yield from self._emit_frontmatter(span)

        source_len = self._source_len
        while self._pos < source_len:
            yield from self._dispatch_mode()

        yield Token(TokenKind.EOF, source_len, source_len)

    def _dispatch_mode(self) -> Iterator[Token]:
        """Dispatch to the scanner for the mode on top of the stack."""
        mode = self._modes[-1]
        if mode is LexerMode.MARKDOWN:
            yield from self._scan_markdown()
        elif mode is LexerMode.TAG:
            yield from self._scan_tag()
        elif mode is LexerMode.EXPRESSION:
            yield from self._scan_expression()
        elif mode is LexerMode.CODE_FENCE:
            yield from self._scan_code_fence_line()

    def _emit_frontmatter(self, span: YamlSpan) -> Iterator[Token]:
        """Emit the tokens of a closed YAML frontmatter block at offset 0."""
        opener_end = span.content_start - 1
        yield self._make_token(TokenKind.FRONTMATTER_DELIMITER, 0, opener_end)
        yield self._make_token(TokenKind.NEWLINE, opener_end, span.content_start)
        if span.content_end > span.content_start:
            yield self._make_token(
                TokenKind.FRONTMATTER_CONTENT, span.content_start, span.content_end
            )
        if span.close_start > span.content_end:
            yield self._make_token(
                TokenKind.NEWLINE, span.content_end, span.close_start
            )
        yield self._make_token(
            TokenKind.FRONTMATTER_DELIMITER, span.close_start, span.close_end
        )

    # =========================================================================
    # Navigation helpers
    # =========================================================================

    def _make_token(self, kind: TokenKind, start: int, end: int) -> Token:
        """Create a token and commit position to its end."""
        self._pos = end
        return Token(kind, start, end)

    def _at_line_start(self) -> bool:
        pos = self._pos
        return pos == 0 or self._source[pos - 1] == "\n"

    def _find_line_end(self, pos: int) -> int:
        """Position of the next newline at or after ``pos``, or end of source."""
        idx = self._source.find("\n", pos)
        return idx if idx != -1 else self._source_len

    def _blank_line_end(self, pos: int) -> int:
        """End of the whitespace-only line starting at ``pos`` (newline included).

        Returns:
            End offset, or -1 if the line has other content
        """
        source = self._source
        source_len = self._source_len
        while pos < source_len and source[pos] in WHITESPACE:
            pos += 1
        if pos == source_len:
            return pos
        if source[pos] == "\n":
            return pos + 1
        return -1


def tokenize(source: str) -> list[Token]:
    """Tokenize ``source`` into a list of tokens ending with EOF.

    Example:
        >>> [t.kind.name for t in tokenize("*a*")]
        ['DELIMITER', 'TEXT', 'DELIMITER', 'EOF']

    """
    return list(Lexer(source).tokenize())
