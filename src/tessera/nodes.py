"""Flat arena document model for tessera.

A parsed document is a handful of parallel, immutable sequences instead of a
pointer-linked tree:

Document
├── source          the original text
├── tokens          lexer output, ordered and contiguous
├── nodes           Node records, root at index 0
├── child_indices   each node owns the range [children_start, children_end)
└── errors          ParseError records in detection order

Children are always constructed before their parent, so every non-root
node refers only to lower indices. The root is reserved at index 0 and
filled in last.

Node Kinds:
Block: root, heading, paragraph, code_block, blockquote, list_unordered,
    list_ordered, list_item, hr, element, self_closing_element, fragment,
    flow_expression, frontmatter
Inline: text, strong, emphasis, code_inline, link, image, hard_break,
    element, self_closing_element, fragment, text_expression

Thread Safety:
All records are frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from tessera.config import DEFAULT_JSON_FRONTMATTER_TAG
from tessera.errors import ParseError
from tessera.location import SourceLocation, locate
from tessera.tokens import Token

ROOT_INDEX = 0


class NodeKind(Enum):
    """Closed set of node kinds. Values are the interchange ``type`` names."""

    ROOT = "root"
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    TEXT = "text"
    STRONG = "strong"
    EMPHASIS = "emphasis"
    CODE_INLINE = "code_inline"
    CODE_BLOCK = "code_block"
    LINK = "link"
    IMAGE = "image"
    BLOCKQUOTE = "blockquote"
    LIST_UNORDERED = "list_unordered"
    LIST_ORDERED = "list_ordered"
    LIST_ITEM = "list_item"
    HR = "hr"
    HARD_BREAK = "hard_break"
    ELEMENT = "element"
    SELF_CLOSING_ELEMENT = "self_closing_element"
    FRAGMENT = "fragment"
    TEXT_EXPRESSION = "text_expression"
    FLOW_EXPRESSION = "flow_expression"
    FRONTMATTER = "frontmatter"


class AttributeKind(Enum):
    """How an attribute value was written."""

    LITERAL = "literal"  # name="text", name='text', name=word, bare name
    EXPRESSION = "expression"  # name={text}


class FrontmatterFormat(Enum):
    """Frontmatter flavours."""

    YAML = "yaml"  # --- fenced
    JSON = "json"  # ```hnmd fenced


# Kinds that never have children.
LEAF_KINDS = frozenset(
    {
        NodeKind.TEXT,
        NodeKind.CODE_INLINE,
        NodeKind.CODE_BLOCK,
        NodeKind.HR,
        NodeKind.HARD_BREAK,
        NodeKind.SELF_CLOSING_ELEMENT,
        NodeKind.TEXT_EXPRESSION,
        NodeKind.FLOW_EXPRESSION,
        NodeKind.FRONTMATTER,
    }
)


@dataclass(frozen=True, slots=True)
class Attribute:
    """An attribute on an element or self-closing element.

    Attributes:
        name: Attribute name, exactly as written
        kind: Literal or expression
        value: Raw value. For quoted literals this is the text between the
            quotes with escapes kept; for expressions the text between the
            braces; None for a bare attribute (``<Input disabled />``).

    """

    name: str
    kind: AttributeKind
    value: str | None = None


@dataclass(frozen=True, slots=True)
class Node:
    """One record in the node arena.

    Only the fields that apply to ``kind`` are set; the rest stay None.

    Attributes:
        kind: Node kind
        start: Start offset in source (inclusive)
        end: End offset in source (exclusive)
        children_start: Start of this node's range in Document.child_indices
        children_end: End of this node's range in Document.child_indices
        level: Heading level (1-6)
        value: Verbatim text for text, code_inline, code_block, expressions
            and frontmatter
        lang: Code block language label
        url: Link or image destination
        name: Element name
        attributes: Element attributes in source order
        format: Frontmatter format

    """

    kind: NodeKind
    start: int
    end: int
    children_start: int = 0
    children_end: int = 0
    level: int | None = None
    value: str | None = None
    lang: str | None = None
    url: str | None = None
    name: str | None = None
    attributes: tuple[Attribute, ...] = ()
    format: FrontmatterFormat | None = None

    @property
    def child_count(self) -> int:
        return self.children_end - self.children_start


@dataclass(frozen=True, slots=True)
class Document:
    """The result of one parse call.

    Built once by the parser and never mutated. All query helpers are
    read-only, so a Document can be shared freely between threads.

    Attributes:
        source: The original source text
        tokens: Lexer tokens, covering the whole source
        nodes: Node arena; ``nodes[0]`` is the root
        child_indices: Child index storage referenced by node ranges
        errors: Recorded errors in detection order, capped by
            ``ParseConfig.max_errors``
        error_count: Number of errors detected, including any past the cap
        source_file: Path the source was read from, if any
        json_frontmatter_tag: Fence label JSON frontmatter was recognized
            by, so a render can write it back under the same label

    """

    source: str
    tokens: tuple[Token, ...]
    nodes: tuple[Node, ...]
    child_indices: tuple[int, ...]
    errors: tuple[ParseError, ...] = ()
    error_count: int = 0
    source_file: str | None = None
    json_frontmatter_tag: str = DEFAULT_JSON_FRONTMATTER_TAG

    @property
    def root(self) -> int:
        return ROOT_INDEX

    def node(self, index: int) -> Node:
        """Return the node record at ``index``."""
        return self.nodes[index]

    def children(self, index: int) -> tuple[int, ...]:
        """Return the child indices of a node in document order."""
        node = self.nodes[index]
        return self.child_indices[node.children_start : node.children_end]

    def token_slice(self, token: Token) -> str:
        """Return the exact source text covered by ``token``."""
        return self.source[token.start : token.end]

    def node_source(self, index: int) -> str:
        """Return the exact source text covered by the node at ``index``."""
        node = self.nodes[index]
        return self.source[node.start : node.end]

    def node_at_offset(self, offset: int) -> int:
        """Find the innermost node whose span contains ``offset``.

        Spans are half-open, so a node ``[s, e)`` contains ``s`` but not
        ``e``. The root additionally contains ``len(source)``. When sibling
        spans could both claim the offset, the later sibling wins, and the
        descent always prefers a child over its parent, so the result is
        the deepest, most recently constructed candidate.

        Args:
            offset: Offset into the source, ``0 <= offset <= len(source)``

        Returns:
            Index of the matching node

        Raises:
            ValueError: If offset is outside the source

        """
        if offset < 0 or offset > len(self.source):
            raise ValueError(
                f"offset {offset} outside source of length {len(self.source)}"
            )
        current = ROOT_INDEX
        while True:
            found = None
            for child in reversed(self.children(current)):
                node = self.nodes[child]
                if node.start <= offset < node.end:
                    found = child
                    break
                if node.end <= offset:
                    break
            if found is None:
                return current
            current = found

    def walk(self, index: int = ROOT_INDEX) -> Iterator[tuple[int, int]]:
        """Yield ``(node_index, depth)`` pairs depth-first in document order."""
        stack = [(index, 0)]
        while stack:
            current, depth = stack.pop()
            yield current, depth
            children = self.children(current)
            for child in reversed(children):
                stack.append((child, depth + 1))

    def find(self, kind: NodeKind) -> list[int]:
        """Return indices of every node of ``kind`` in document order."""
        return [index for index, _ in self.walk() if self.nodes[index].kind is kind]

    def locate(self, offset: int) -> SourceLocation:
        """Translate an offset into a line/column location."""
        return locate(self.source, offset, self.source_file)


__all__ = [
    "LEAF_KINDS",
    "ROOT_INDEX",
    "Attribute",
    "AttributeKind",
    "Document",
    "FrontmatterFormat",
    "Node",
    "NodeKind",
]
