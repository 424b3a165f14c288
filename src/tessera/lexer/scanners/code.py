"""Fenced code and code span scanner mixin."""

from bisect import bisect_right
from collections.abc import Iterator

from tessera.lexer.modes import LexerMode
from tessera.tokens import Token, TokenKind


class CodeScannerMixin:
    """Mixin providing fenced code and code span scanning.

    Fence content is read line by line in CODE_FENCE mode until a line that
    holds only a backtick run at least as long as the opener.

    Code spans pair backtick runs of equal length on the same line. The
    runs of the current line are indexed once, so repeated unmatched
    openers cost a lookup each instead of a rescan.

    """

    # These will be set by the Lexer class
    _source: str
    _source_len: int
    _pos: int
    _modes: list[LexerMode]
    _fence_length: int
    _run_index_end: int
    _run_index: dict[int, list[int]]

    def _make_token(self, kind: TokenKind, start: int, end: int) -> Token:
        """Create a token and commit position to its end. Implemented by Lexer."""
        raise NotImplementedError

    def _find_line_end(self, pos: int) -> int:
        raise NotImplementedError

    def _scan_fence_open(self, length: int) -> Iterator[Token]:
        """Emit the opening fence line and enter CODE_FENCE mode.

        Args:
            length: Number of backticks in the opening run
        """
        start = self._pos
        run_end = start + length
        line_end = self._find_line_end(run_end)

        yield self._make_token(TokenKind.FENCE_OPEN, start, run_end)
        if line_end > run_end:
            yield self._make_token(TokenKind.FENCE_INFO, run_end, line_end)
        if line_end < self._source_len:
            yield self._make_token(TokenKind.NEWLINE, line_end, line_end + 1)

        self._fence_length = length
        self._modes.append(LexerMode.CODE_FENCE)

    def _scan_code_fence_line(self) -> Iterator[Token]:
        """Scan one line of fence content, or the closing fence.

        Yields:
            FENCE_CLOSE (leaving CODE_FENCE mode), or CODE_LINE for a non-empty
            line followed by NEWLINE when the line has one.
        """
        source = self._source
        start = self._pos
        line_end = self._find_line_end(start)

        pos = start
        while pos < line_end and source[pos] in " \t":
            pos += 1
        run_start = pos
        while pos < line_end and source[pos] == "`":
            pos += 1
        if pos - run_start >= self._fence_length:
            while pos < line_end and source[pos] in " \t\r":
                pos += 1
            if pos == line_end:
                yield self._make_token(TokenKind.FENCE_CLOSE, start, line_end)
                self._modes.pop()
                return

        if line_end > start:
            yield self._make_token(TokenKind.CODE_LINE, start, line_end)
        if line_end < self._source_len:
            yield self._make_token(TokenKind.NEWLINE, line_end, line_end + 1)

    def _scan_code_span(self) -> Iterator[Token]:
        """Scan a backtick run as a code span, or as text if it has no closer."""
        source = self._source
        start = self._pos
        end = start
        while end < self._source_len and source[end] == "`":
            end += 1
        length = end - start

        close = self._find_closing_run(start, length)
        if close == -1:
            yield self._make_token(TokenKind.TEXT, start, end)
            return

        yield self._make_token(TokenKind.CODE_SPAN_OPEN, start, end)
        if close > end:
            yield self._make_token(TokenKind.CODE_SPAN_TEXT, end, close)
        yield self._make_token(TokenKind.CODE_SPAN_CLOSE, close, close + length)

    def _find_closing_run(self, start: int, length: int) -> int:
        """Start of the next backtick run of ``length`` after ``start`` on this line."""
        if start > self._run_index_end:
            self._index_backtick_runs(start)
        positions = self._run_index.get(length)
        if not positions:
            return -1
        i = bisect_right(positions, start)
        return positions[i] if i < len(positions) else -1

    def _index_backtick_runs(self, start: int) -> None:
        """Record every maximal backtick run from ``start`` to the end of its line."""
        source = self._source
        line_end = self._find_line_end(start)
        runs: dict[int, list[int]] = {}
        pos = source.find("`", start, line_end)
        while pos != -1:
            end = pos
            while end < line_end and source[end] == "`":
                end += 1
            runs.setdefault(end - pos, []).append(pos)
            pos = source.find("`", end, line_end)
        self._run_index = runs
        self._run_index_end = line_end
