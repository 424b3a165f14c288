"""
Tessera: a parser for Markdown documents with embedded component markup.

Tessera reads Markdown extended with element tags (``<Card title="x">``),
self-closing elements, fragments and brace expressions into a flat,
immutable document tree. Parsing never fails: malformed input degrades to
literal text and a recorded error, in time linear in the input size.

Quick Start:
    >>> from tessera import parse, render, serialize_tree
    >>> doc = parse('# Hello\\n\\n<Note kind="tip">Be **brief**.</Note>')
    >>> [doc.node(i).kind.value for i in doc.children(doc.root)]
    ['heading', 'element']
    >>> render(doc)
    '# Hello\\n\\n<Note kind="tip">Be **brief**.\\n</Note>\\n'

    >>> # The interchange object consumed by renderers
    >>> json_text = serialize_tree(doc)

Configuration:
    >>> from tessera import ParseConfig
    >>> doc = parse(source, config=ParseConfig(max_nesting_depth=16))

Command line:
    tessera page.hnmd --format json
"""

from tessera.config import (
    ParseConfig,
    get_parse_config,
    parse_config_context,
    reset_parse_config,
    set_parse_config,
)
from tessera.emoji import DEFAULT_SHORTCODES, normalize_shortcodes
from tessera.errors import (
    DocumentReadError,
    ErrorKind,
    ParseError,
    RenderError,
    TesseraError,
)
from tessera.lexer import Lexer, tokenize
from tessera.loader import read_document, read_source
from tessera.location import SourceLocation
from tessera.nodes import (
    ROOT_INDEX,
    Attribute,
    AttributeKind,
    Document,
    FrontmatterFormat,
    Node,
    NodeKind,
)
from tessera.parser import Parser, parse
from tessera.renderer import TextRenderer, render
from tessera.serialization import SerializeOptions, serialize_tree, to_dict
from tessera.tokens import Token, TokenKind

__version__ = "0.1.0"


__all__ = [  # noqa: RUF022
    # Version
    "__version__",
    # Core API
    "parse",
    "render",
    "serialize_tree",
    "to_dict",
    "tokenize",
    "read_document",
    "read_source",
    # Document model
    "ROOT_INDEX",
    "Attribute",
    "AttributeKind",
    "Document",
    "FrontmatterFormat",
    "Node",
    "NodeKind",
    "SourceLocation",
    # Tokens
    "Token",
    "TokenKind",
    # Parser components
    "Lexer",
    "Parser",
    # Output
    "SerializeOptions",
    "TextRenderer",
    "DEFAULT_SHORTCODES",
    "normalize_shortcodes",
    # Configuration
    "ParseConfig",
    "get_parse_config",
    "parse_config_context",
    "reset_parse_config",
    "set_parse_config",
    # Errors
    "DocumentReadError",
    "ErrorKind",
    "ParseError",
    "RenderError",
    "TesseraError",
]
