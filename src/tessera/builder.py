"""Arena writer used by the parser to assemble a Document.

Nodes are appended bottom-up: a node is added only after all of its
children exist. Index 0 is held back for the root, which is written last
by :meth:`TreeBuilder.finish`.

Thread Safety:
A TreeBuilder belongs to a single parse call and is never shared.

"""

from __future__ import annotations

from collections.abc import Sequence

from tessera.config import DEFAULT_JSON_FRONTMATTER_TAG
from tessera.errors import ParseError
from tessera.nodes import ROOT_INDEX, Document, Node, NodeKind
from tessera.tokens import Token


class TreeBuilder:
    """Append-only node arena.

    Usage:
            >>> builder = TreeBuilder()
            >>> text = builder.add(NodeKind.TEXT, 0, 2, value="hi")
            >>> para = builder.add(NodeKind.PARAGRAPH, 0, 2, children=[text])
            >>> doc = builder.finish("hi", (), [para], [])
            >>> doc.children(0)
            (2,)

    """

    __slots__ = ("_nodes", "_child_indices")

    def __init__(self) -> None:
        # Placeholder for the root; replaced in finish().
        self._nodes: list[Node] = [Node(NodeKind.ROOT, 0, 0)]
        self._child_indices: list[int] = []

    def __len__(self) -> int:
        return len(self._nodes)

    def node(self, index: int) -> Node:
        return self._nodes[index]

    def add(
        self,
        kind: NodeKind,
        start: int,
        end: int,
        children: Sequence[int] = (),
        **fields: object,
    ) -> int:
        """Append a node and return its index.

        Args:
            kind: Node kind
            start: Span start
            end: Span end
            children: Indices of already-built children, in order
            **fields: Kind-specific Node fields (level, value, name, ...)

        Returns:
            Index of the new node
        """
        children_start = len(self._child_indices)
        self._child_indices.extend(children)
        self._nodes.append(
            Node(
                kind,
                start,
                end,
                children_start,
                len(self._child_indices),
                **fields,  # type: ignore[arg-type]
            )
        )
        return len(self._nodes) - 1

    def finish(
        self,
        source: str,
        tokens: Sequence[Token],
        children: Sequence[int],
        errors: Sequence[ParseError],
        *,
        error_count: int | None = None,
        source_file: str | None = None,
        json_frontmatter_tag: str = DEFAULT_JSON_FRONTMATTER_TAG,
    ) -> Document:
        """Write the root and freeze everything into a Document."""
        children_start = len(self._child_indices)
        self._child_indices.extend(children)
        self._nodes[ROOT_INDEX] = Node(
            NodeKind.ROOT,
            0,
            len(source),
            children_start,
            len(self._child_indices),
        )
        return Document(
            source=source,
            tokens=tuple(tokens),
            nodes=tuple(self._nodes),
            child_indices=tuple(self._child_indices),
            errors=tuple(errors),
            error_count=len(errors) if error_count is None else error_count,
            source_file=source_file,
            json_frontmatter_tag=json_frontmatter_tag,
        )
