"""Offset to line/column translation for error messages and tooling.

Nodes, tokens and errors carry plain offsets into the source string.
Line and column numbers are derived on demand, only where a human reads them
(CLI output, formatted error messages).

Thread Safety:
SourceLocation is frozen (immutable) and LineIndex is read-only after
construction. Both are safe to share across threads.

"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Human-facing position of an offset in source text.

    All positions are 1-indexed (lineno and col_offset start at 1).

    Attributes:
        lineno: Line number (1-indexed)
        col_offset: Column (1-indexed, in code points)
        offset: Absolute offset the location was computed from
        source_file: Source file path (optional)

    Examples:
            >>> loc = SourceLocation(lineno=2, col_offset=5, offset=12)
            >>> str(loc)
            '2:5'

    """

    lineno: int
    col_offset: int
    offset: int = 0
    source_file: str | None = None

    def __str__(self) -> str:
        """Format location for error messages.

        Returns:
            Formatted string like "file.md:10:5" or "10:5"
        """
        if self.source_file:
            return f"{self.source_file}:{self.lineno}:{self.col_offset}"
        return f"{self.lineno}:{self.col_offset}"


class LineIndex:
    """Line-start table for repeated offset lookups over one source.

    Building the table is O(n); each lookup is O(log lines).

    Usage:
            >>> index = LineIndex("a\\nbc")
            >>> index.locate(3)
            SourceLocation(lineno=2, col_offset=2, offset=3, source_file=None)

    """

    __slots__ = ("_line_starts", "_source_len", "_source_file")

    def __init__(self, source: str, source_file: str | None = None) -> None:
        starts = [0]
        pos = source.find("\n")
        while pos != -1:
            starts.append(pos + 1)
            pos = source.find("\n", pos + 1)
        self._line_starts = starts
        self._source_len = len(source)
        self._source_file = source_file

    def locate(self, offset: int) -> SourceLocation:
        """Translate an offset into a 1-indexed line/column location.

        Offsets outside the source are clamped to its bounds.
        """
        offset = max(0, min(offset, self._source_len))
        line = bisect_right(self._line_starts, offset) - 1
        return SourceLocation(
            lineno=line + 1,
            col_offset=offset - self._line_starts[line] + 1,
            offset=offset,
            source_file=self._source_file,
        )


def locate(source: str, offset: int, source_file: str | None = None) -> SourceLocation:
    """One-shot offset lookup. Use LineIndex for many lookups on one source."""
    return LineIndex(source, source_file).locate(offset)
