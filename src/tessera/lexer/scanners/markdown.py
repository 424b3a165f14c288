"""MARKDOWN mode scanner mixin."""

from collections.abc import Iterator
from typing import TYPE_CHECKING

from tessera.lexer.classifiers import (
    blockquote_marker_end,
    fence_run_length,
    heading_marker_end,
    is_name_start,
    keycap_length,
    list_marker_end,
    ordered_marker_end,
    thematic_break_end,
)
from tessera.lexer.modes import (
    ASCII_PUNCTUATION,
    INLINE_SPECIAL,
    WHITESPACE,
    LexerMode,
)
from tessera.tokens import Token, TokenKind

# Checked in order after headings and fences.
_LINE_MARKERS = (
    (TokenKind.THEMATIC_BREAK, thematic_break_end),
    (TokenKind.LIST_MARKER, list_marker_end),
    (TokenKind.ORDERED_LIST_MARKER, ordered_marker_end),
    (TokenKind.BLOCKQUOTE_MARKER, blockquote_marker_end),
)


class MarkdownScannerMixin:
    """Mixin providing MARKDOWN mode scanning.

    At the start of a line, classifies block markers; everywhere else,
    splits inline syntax from literal text runs.

    """

    # These will be set by the Lexer class
    _source: str
    _source_len: int
    _pos: int
    _modes: list[LexerMode]
    _url_fail_until: int

    def _make_token(self, kind: TokenKind, start: int, end: int) -> Token:
        """Create a token and commit position to its end. Implemented by Lexer."""
        raise NotImplementedError

    def _at_line_start(self) -> bool:
        raise NotImplementedError

    def _blank_line_end(self, pos: int) -> int:
        raise NotImplementedError

    # Provided by CodeScannerMixin, which follows this mixin in the MRO
    if TYPE_CHECKING:
        def _scan_fence_open(self, length: int) -> Iterator[Token]:
            raise NotImplementedError

        def _scan_code_span(self) -> Iterator[Token]:
            raise NotImplementedError

    def _scan_markdown(self) -> Iterator[Token]:
        if self._at_line_start():
            yield from self._scan_line_start()
        else:
            yield from self._scan_inline()

    def _scan_line_start(self) -> Iterator[Token]:
        """Classify the line beginning at the current position.

        Yields:
            BLANK_LINE for a whitespace-only line, otherwise an optional
            INDENT and either a block marker or inline tokens.
        """
        source = self._source
        start = self._pos

        blank_end = self._blank_line_end(start)
        if blank_end != -1:
            yield self._make_token(TokenKind.BLANK_LINE, start, blank_end)
            return

        pos = start
        while source[pos] in WHITESPACE:
            pos += 1
        if pos > start:
            yield self._make_token(TokenKind.INDENT, start, pos)

        end = heading_marker_end(source, pos)
        if end != -1:
            yield self._make_token(TokenKind.HEADING_MARKER, pos, end)
            return

        fence_length = fence_run_length(source, pos)
        if fence_length:
            yield from self._scan_fence_open(fence_length)
            return

        for kind, classify in _LINE_MARKERS:
            end = classify(source, pos)
            if end != -1:
                yield self._make_token(kind, pos, end)
                return

        yield from self._scan_inline()

    def _scan_inline(self) -> Iterator[Token]:
        """Scan one inline token (or a short fixed group) at the current position."""
        source = self._source
        pos = self._pos
        char = source[pos]
        following = source[pos + 1] if pos + 1 < self._source_len else ""

        if char == "\n":
            yield self._make_token(TokenKind.NEWLINE, pos, pos + 1)
        elif char == "\\":
            if following == "\n":
                yield self._make_token(TokenKind.HARD_BREAK, pos, pos + 2)
            elif not following:
                yield self._make_token(TokenKind.HARD_BREAK, pos, pos + 1)
            elif following in ASCII_PUNCTUATION:
                yield self._make_token(TokenKind.ESCAPE, pos, pos + 2)
            else:
                yield from self._scan_text()
        elif char == "*" or char == "_":
            yield self._scan_delimiter_run(char)
        elif char == "`":
            yield from self._scan_code_span()
        elif char == "[":
            yield self._make_token(TokenKind.LINK_OPEN, pos, pos + 1)
        elif char == "!" and following == "[":
            yield self._make_token(TokenKind.IMAGE_OPEN, pos, pos + 2)
        elif char == "]" and following == "(":
            yield from self._scan_link_destination()
        elif char == "<" and following and (
            is_name_start(following) or following in "/>"
        ):
            if following == "/":
                yield self._make_token(TokenKind.TAG_CLOSE_OPEN, pos, pos + 2)
            else:
                yield self._make_token(TokenKind.TAG_OPEN, pos, pos + 1)
            self._modes.append(LexerMode.TAG)
        elif char == "{":
            yield self._make_token(TokenKind.EXPR_OPEN, pos, pos + 1)
            self._modes.append(LexerMode.EXPRESSION)
        else:
            yield from self._scan_text()

    def _scan_text(self) -> Iterator[Token]:
        """Scan a literal run up to the next inline special character.

        A run that reaches a newline after two or more trailing spaces
        turns those spaces and the newline into a HARD_BREAK.
        """
        source = self._source
        source_len = self._source_len
        start = self._pos
        end = start + 1
        while end < source_len and source[end] not in INLINE_SPECIAL:
            end += 1

        if end < source_len and source[end] == "\n":
            trailing = end
            while trailing > start and source[trailing - 1] == " ":
                trailing -= 1
            if end - trailing >= 2:
                if trailing > start:
                    yield self._make_token(TokenKind.TEXT, start, trailing)
                yield self._make_token(TokenKind.HARD_BREAK, trailing, end + 1)
                return

        yield self._make_token(TokenKind.TEXT, start, end)

    def _scan_delimiter_run(self, char: str) -> Token:
        """Scan a run of ``*`` or ``_``. A keycap emoji is never a delimiter."""
        source = self._source
        start = self._pos
        end = start
        while end < self._source_len and source[end] == char:
            if char == "*" and keycap_length(source, end):
                break
            end += 1
        if end == start:
            return self._make_token(
                TokenKind.TEXT, start, start + keycap_length(source, start)
            )
        return self._make_token(TokenKind.DELIMITER, start, end)

    def _scan_link_destination(self) -> Iterator[Token]:
        """Scan ``](`` and, when the line has a ``)``, the URL and close.

        A failed search remembers where the line ends so later ``](`` on the
        same line are not rescanned.
        """
        source = self._source
        start = self._pos
        yield self._make_token(TokenKind.LINK_MIDDLE, start, start + 2)

        url_start = start + 2
        if url_start < self._url_fail_until:
            return
        pos = url_start
        while pos < self._source_len and source[pos] != ")" and source[pos] != "\n":
            pos += 1
        if pos < self._source_len and source[pos] == ")":
            if pos > url_start:
                yield self._make_token(TokenKind.LINK_URL, url_start, pos)
            yield self._make_token(TokenKind.LINK_CLOSE, pos, pos + 1)
        else:
            self._url_fail_until = pos
