"""Recursive descent parser producing the flat document tree.

Consumes the token stream from Lexer and writes nodes into a TreeBuilder
arena. Every node is written after all of its children, so a parent's
child indices always point at earlier nodes.

Architecture:
The parser uses a mixin-based design for separation of concerns:
- `TokenNavigationMixin`: Token stream traversal
- `BlockParsingMixin`: Headings, fences, lists, blockquotes, paragraphs
- `InlineParsingMixin`: Inline containers, code spans, links
- `MarkupParsingMixin`: Element tags, attributes, expressions
- `EmphasisMixin`: Delimiter flanking and emphasis matching

Thread Safety:
- Parser produces an immutable Document (frozen dataclasses, tuples)
- Configuration is read from ContextVar (thread-local)
- Safe to share the Document across threads

"""

from __future__ import annotations

from tessera.builder import TreeBuilder
from tessera.config import ParseConfig, get_parse_config, parse_config_context
from tessera.errors import ErrorKind, ParseError
from tessera.frontmatter import extract_frontmatter
from tessera.lexer import Lexer
from tessera.nodes import Document, NodeKind
from tessera.parsing import (
    BlockParsingMixin,
    EmphasisMixin,
    InlineParsingMixin,
    MarkupParsingMixin,
    OpenElement,
    TokenNavigationMixin,
)
from tessera.tokens import Token
from tessera.utils.logger import get_logger

logger = get_logger(__name__)


class Parser(
    TokenNavigationMixin,
    BlockParsingMixin,
    InlineParsingMixin,
    MarkupParsingMixin,
    EmphasisMixin,
):
    """Recursive descent parser for tessera documents.

    Usage:
        >>> doc = Parser("# Hello\\n\\nWorld").parse()
        >>> [doc.node(i).kind.value for i in doc.children(doc.root)]
        ['heading', 'paragraph']

    Thread Safety:
        Parser instances are single-use and not thread-safe. Create one per
        parse operation. Configuration is read from ContextVar (thread-local).
        The resulting Document is immutable and thread-safe.

    """

    __slots__ = (
        "_source",
        "_source_file",
        "_tokens",
        "_tokens_len",
        "_pos",
        "_current",
        "_builder",
        "_errors",
        "_error_count",
        "_max_errors",
        "_max_depth",
        "_open_elements",
    )

    def __init__(self, source: str, source_file: str | None = None) -> None:
        """Initialize parser with source text.

        Configuration is read from ContextVar when ``parse`` runs. Use
        ``parse_config_context()`` around the call for non-default limits.

        Args:
            source: Document source text
            source_file: Optional source file path for error messages

        """
        self._source = source
        self._source_file = source_file
        self._tokens: list[Token] = []
        self._tokens_len = 0
        self._pos = 0
        self._builder = TreeBuilder()
        self._errors: list[ParseError] = []
        self._error_count = 0
        self._max_errors = 0
        self._max_depth = 0
        self._open_elements: list[OpenElement] = []

    def parse(self) -> Document:
        """Parse the source into a Document.

        Never raises for any input string. Grammar violations are recorded
        on ``Document.errors``.

        Returns:
            The finished, immutable Document
        """
        config = get_parse_config()
        self._max_errors = config.max_errors
        self._max_depth = config.max_nesting_depth

        self._tokens = list(Lexer(self._source).tokenize())
        self._tokens_len = len(self._tokens)
        self._seek(0)

        children: list[int] = []
        frontmatter, error = extract_frontmatter(
            self._tokens, self._source, config.json_frontmatter_tag
        )
        if error is not None:
            self._record_error(error.kind, error.offset, error.message)
        if frontmatter is not None:
            children.append(
                self._builder.add(
                    NodeKind.FRONTMATTER,
                    frontmatter.start,
                    frontmatter.end,
                    value=frontmatter.value,
                    format=frontmatter.format,
                )
            )
            self._seek(frontmatter.next_index)

        children.extend(self._parse_blocks())

        document = self._builder.finish(
            self._source,
            self._tokens,
            children,
            self._errors,
            error_count=self._error_count,
            source_file=self._source_file,
            json_frontmatter_tag=config.json_frontmatter_tag,
        )
        logger.debug(
            "Parsed %s: %d tokens, %d nodes, %d errors",
            self._source_file or "<string>",
            self._tokens_len,
            len(document.nodes),
            self._error_count,
        )
        return document

    def _record_error(self, kind: ErrorKind, offset: int, message: str) -> None:
        """Append a recoverable error, up to the configured cap."""
        self._error_count += 1
        if len(self._errors) < self._max_errors:
            self._errors.append(ParseError(kind, offset, message))
        elif self._error_count == self._max_errors + 1:
            logger.warning(
                "Error limit of %d reached in %s; further errors are counted "
                "but not stored",
                self._max_errors,
                self._source_file or "<string>",
            )


def parse(
    source: str,
    *,
    config: ParseConfig | None = None,
    source_file: str | None = None,
) -> Document:
    """Parse ``source`` into a Document.

    Args:
        source: Document source text
        config: Optional ParseConfig applied for the duration of this call
            (defaults to the config active in the current context)
        source_file: Optional source file path for error messages

    Returns:
        Immutable Document holding tokens, nodes and recorded errors

    Example:
        >>> doc = parse("**a *b* c**")
        >>> doc.node(doc.children(doc.root)[0]).kind.value
        'paragraph'

    """
    if config is None:
        return Parser(source, source_file=source_file).parse()
    with parse_config_context(config):
        return Parser(source, source_file=source_file).parse()
