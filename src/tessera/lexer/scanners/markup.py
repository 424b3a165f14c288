"""TAG and EXPRESSION mode scanner mixin."""

from collections.abc import Iterator

from tessera.lexer.classifiers import is_name
from tessera.lexer.modes import TAG_WORD_STOP, WHITESPACE, LexerMode
from tessera.tokens import Token, TokenKind


class MarkupScannerMixin:
    """Mixin providing tag and expression scanning.

    Both modes end at a blank line: the mode stack drops back to MARKDOWN so
    an unterminated ``<`` or ``{`` can never swallow the rest of the document.

    """

    # These will be set by the Lexer class
    _source: str
    _source_len: int
    _pos: int
    _modes: list[LexerMode]

    def _make_token(self, kind: TokenKind, start: int, end: int) -> Token:
        """Create a token and commit position to its end. Implemented by Lexer."""
        raise NotImplementedError

    def _at_line_start(self) -> bool:
        raise NotImplementedError

    def _blank_line_end(self, pos: int) -> int:
        raise NotImplementedError

    def _scan_blank_line_reset(self) -> Token | None:
        """At a blank line, emit BLANK_LINE and return to MARKDOWN mode."""
        if not self._at_line_start():
            return None
        end = self._blank_line_end(self._pos)
        if end == -1:
            return None
        self._modes[:] = [LexerMode.MARKDOWN]
        return self._make_token(TokenKind.BLANK_LINE, self._pos, end)

    def _scan_tag(self) -> Iterator[Token]:
        """Scan one token inside ``<...>``."""
        blank = self._scan_blank_line_reset()
        if blank is not None:
            yield blank
            return

        source = self._source
        pos = self._pos
        char = source[pos]

        if char in WHITESPACE:
            end = pos + 1
            while end < self._source_len and source[end] in WHITESPACE:
                end += 1
            yield self._make_token(TokenKind.TAG_WHITESPACE, pos, end)
        elif char == "\n":
            yield self._make_token(TokenKind.NEWLINE, pos, pos + 1)
        elif char == ">":
            yield self._make_token(TokenKind.TAG_END, pos, pos + 1)
            self._modes.pop()
        elif char == "/":
            if pos + 1 < self._source_len and source[pos + 1] == ">":
                yield self._make_token(TokenKind.TAG_SELF_CLOSE, pos, pos + 2)
                self._modes.pop()
            else:
                yield self._make_token(TokenKind.TAG_VALUE, pos, pos + 1)
        elif char == "=":
            yield self._make_token(TokenKind.TAG_EQUALS, pos, pos + 1)
        elif char == '"' or char == "'":
            yield self._scan_tag_string(char)
        elif char == "{":
            yield self._make_token(TokenKind.EXPR_OPEN, pos, pos + 1)
            self._modes.append(LexerMode.EXPRESSION)
        elif char in TAG_WORD_STOP:
            # Stray < or }
            yield self._make_token(TokenKind.TAG_VALUE, pos, pos + 1)
        else:
            end = pos + 1
            while end < self._source_len and source[end] not in TAG_WORD_STOP:
                end += 1
            kind = TokenKind.TAG_NAME if is_name(source[pos:end]) else TokenKind.TAG_VALUE
            yield self._make_token(kind, pos, end)

    def _scan_tag_string(self, quote: str) -> Token:
        """Scan a quoted attribute value with backslash escapes.

        The string may span lines but stops, unterminated, before a blank
        line or at the end of the document.
        """
        source = self._source
        source_len = self._source_len
        start = self._pos
        pos = start + 1
        while pos < source_len:
            char = source[pos]
            if char == quote:
                return self._make_token(TokenKind.TAG_STRING, start, pos + 1)
            if char == "\\":
                pos += 2
                continue
            if char == "\n" and self._blank_line_end(pos + 1) != -1:
                return self._make_token(
                    TokenKind.TAG_STRING_UNTERMINATED, start, pos + 1
                )
            pos += 1
        return self._make_token(
            TokenKind.TAG_STRING_UNTERMINATED, start, min(pos, source_len)
        )

    def _scan_expression(self) -> Iterator[Token]:
        """Scan one token inside ``{...}``, tracking nested braces."""
        blank = self._scan_blank_line_reset()
        if blank is not None:
            yield blank
            return

        source = self._source
        pos = self._pos
        char = source[pos]

        if char == "{":
            yield self._make_token(TokenKind.EXPR_OPEN, pos, pos + 1)
            self._modes.append(LexerMode.EXPRESSION)
        elif char == "}":
            yield self._make_token(TokenKind.EXPR_CLOSE, pos, pos + 1)
            self._modes.pop()
        elif char == "\n":
            yield self._make_token(TokenKind.NEWLINE, pos, pos + 1)
        else:
            end = pos + 1
            while end < self._source_len and source[end] not in "{}\n":
                end += 1
            yield self._make_token(TokenKind.EXPR_TEXT, pos, end)
