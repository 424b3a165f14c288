"""StringBuilder for O(n) accumulation of canonical text.

Appends to a list, joins once at the end: O(n) total vs O(n²) for
repeated string concatenation while the renderer walks a tree.

Thread Safety:
StringBuilder instances are local to each render() call.
No shared mutable state.

"""

from __future__ import annotations

from collections.abc import Iterable


class StringBuilder:
    """Efficient string accumulator.

    Tracks the total character count so callers can ask how much has been
    written without joining.

    Usage:
            >>> sb = StringBuilder()
            >>> sb.append("**")
            >>> sb.append("bold")
            >>> sb.append("**")
            >>> sb.build()
            '**bold**'

    Thread Safety:
        Instance is local to each render() call.
        No shared mutable state.

    """

    __slots__ = ("_parts", "_length")

    def __init__(self) -> None:
        """Initialize empty StringBuilder."""
        self._parts: list[str] = []
        self._length = 0

    def append(self, s: str) -> StringBuilder:
        """Append a string to the builder.

        Args:
            s: String to append (empty strings are skipped)

        Returns:
            self for method chaining
        """
        if s:
            self._parts.append(s)
            self._length += len(s)
        return self

    def extend(self, strings: Iterable[str]) -> StringBuilder:
        """Append several strings in order.

        Args:
            strings: Strings to append

        Returns:
            self for method chaining
        """
        for s in strings:
            self.append(s)
        return self

    def last(self) -> str:
        """Return the most recently appended string, or "" if none."""
        return self._parts[-1] if self._parts else ""

    def build(self) -> str:
        """Join all parts into the final string."""
        return "".join(self._parts)

    def __len__(self) -> int:
        """Return the number of characters appended so far."""
        return self._length

    def __bool__(self) -> bool:
        """Return True if anything has been appended."""
        return self._length > 0
