"""Parsing subsystem for the tessera parser.

Provides mixin classes for modular parsing functionality:
- `TokenNavigationMixin`: Token stream traversal
- `BlockParsingMixin`: Block-level content (headings, lists, code blocks)
- `InlineParsingMixin`: Inline containers (text, code spans, links)
- `MarkupParsingMixin`: Element tags, attributes and expressions
- `EmphasisMixin`: Delimiter flanking and emphasis matching

Architecture:
Each mixin handles one aspect of the grammar and declares the host
attributes it relies on. ``tessera.parser.Parser`` composes them and owns
the per-parse state.

Example:
    >>> from tessera.parsing import TokenNavigationMixin, BlockParsingMixin
    >>> class Parser(TokenNavigationMixin, BlockParsingMixin):
    ...     pass

"""

from tessera.parsing.blocks import BlockParsingMixin
from tessera.parsing.emphasis import EmphasisMixin
from tessera.parsing.inline import ContainerMode, InlineParsingMixin
from tessera.parsing.markup import MarkupParsingMixin, OpenElement
from tessera.parsing.token_nav import TokenNavigationMixin

__all__ = [
    "BlockParsingMixin",
    "ContainerMode",
    "EmphasisMixin",
    "InlineParsingMixin",
    "MarkupParsingMixin",
    "OpenElement",
    "TokenNavigationMixin",
]
