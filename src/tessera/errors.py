"""Error records and exception classes for tessera.

Grammar violations are data: the parser appends a ParseError record to the
document and keeps going. Exceptions are reserved for the boundaries around
the parser (reading files, rendering a node kind nobody knows about).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorKind(Enum):
    """Kinds of recoverable errors recorded during a parse.

    Values are the names used in the interchange format.
    """

    UNTERMINATED_TAG = "UnterminatedTag"
    MISMATCHED_CLOSING_TAG = "MismatchedClosingTag"
    UNTERMINATED_FENCE = "UnterminatedFence"
    UNTERMINATED_EXPRESSION = "UnterminatedExpression"
    MALFORMED_FRONTMATTER = "MalformedFrontmatter"
    INVALID_ATTRIBUTE = "InvalidAttribute"


@dataclass(frozen=True, slots=True)
class ParseError:
    """A recoverable grammar violation, stored on the Document.

    Never raised. The parser records it and degrades the offending
    construct to a bounded node or literal text.

    Attributes:
        kind: What went wrong
        offset: Offset into the source where it was detected
        message: Human-readable description

    """

    kind: ErrorKind
    offset: int
    message: str

    def format(self, source: str, source_file: str | None = None) -> str:
        """Format as ``file:line:col Kind: message`` for display.

        Args:
            source: The source text the offset points into
            source_file: Optional path to prefix the location with

        Returns:
            Formatted one-line description
        """
        from tessera.location import locate

        location = locate(source, self.offset, source_file)
        return f"{location} {self.kind.value}: {self.message}"


class TesseraError(Exception):
    """Base exception for all tessera errors.

    Subclass this for specific error categories.
    """

    pass


class DocumentReadError(TesseraError):
    """A document could not be read from disk.

    Raised at the file boundary only (missing file, permission problem,
    undecodable bytes). Parsing itself never raises.
    """

    def __init__(self, path: str, reason: str) -> None:
        """Initialize read error.

        Args:
            path: Path that failed to load
            reason: Description of the failure
        """
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class RenderError(TesseraError):
    """Error during canonical rendering.

    Raised when the renderer meets a node kind it has no rule for.
    """

    pass
