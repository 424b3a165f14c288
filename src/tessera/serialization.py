"""Interchange serialization for tessera documents.

Converts a Document into the JSON-shaped interchange object consumed by
rendering layers outside this package. Field order is fixed per node kind,
so the same Document always produces byte-identical output.

Object shape:
    {"type": <kind>, ["position": {"start", "end"}], <kind fields>, ["children"]}

The root object adds ``source`` (the verbatim text) and ``errors``
(``[{offset, message, kind}]``, possibly empty).

Example:
    >>> from tessera import parse
    >>> from tessera.serialization import serialize_tree
    >>> serialize_tree(parse("# Hi"))
    '{"type": "root", "children": [{"type": "heading", "level": 1, ...'

Thread Safety:
    All functions are pure. Safe to call from any thread.

"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from tessera.emoji import normalize_shortcodes
from tessera.errors import ParseError
from tessera.nodes import LEAF_KINDS, ROOT_INDEX, Attribute, Document, NodeKind


@dataclass(frozen=True, slots=True)
class SerializeOptions:
    """Output options for the interchange object.

    Attributes:
        include_positions: Add ``position: {start, end}`` to every node
        normalize_emoji_shortcodes: Replace ``:name:`` shortcodes in text
            values with their emoji (the parsed tree is not changed)
        indent: JSON indentation for serialize_tree (None for compact)

    """

    include_positions: bool = False
    normalize_emoji_shortcodes: bool = False
    indent: int | None = None


_DEFAULT_OPTIONS = SerializeOptions()


def to_dict(doc: Document, options: SerializeOptions | None = None) -> dict[str, Any]:
    """Convert a Document to the interchange object.

    Args:
        doc: Parsed document
        options: Output options (defaults to SerializeOptions())

    Returns:
        Dict ready for ``json.dumps``; field order is deterministic

    """
    opts = options or _DEFAULT_OPTIONS
    result = _node_to_dict(doc, ROOT_INDEX, opts)
    result["source"] = doc.source
    result["errors"] = [error_to_dict(error) for error in doc.errors]
    return result


def serialize_tree(doc: Document, options: SerializeOptions | None = None) -> str:
    """Serialize a Document to an interchange JSON string.

    Args:
        doc: Parsed document
        options: Output options (defaults to SerializeOptions())

    Returns:
        JSON string. Non-ASCII text is written as-is.

    """
    opts = options or _DEFAULT_OPTIONS
    return json.dumps(to_dict(doc, opts), ensure_ascii=False, indent=opts.indent)


def error_to_dict(error: ParseError) -> dict[str, Any]:
    return {
        "offset": error.offset,
        "message": error.message,
        "kind": error.kind.value,
    }


def attribute_to_dict(attribute: Attribute) -> dict[str, Any]:
    """Attribute object. ``value`` is left out for a bare attribute."""
    result: dict[str, Any] = {"name": attribute.name, "type": attribute.kind.value}
    if attribute.value is not None:
        result["value"] = attribute.value
    return result


def _node_to_dict(doc: Document, index: int, opts: SerializeOptions) -> dict[str, Any]:
    node = doc.nodes[index]
    kind = node.kind
    result: dict[str, Any] = {"type": kind.value}
    if opts.include_positions:
        result["position"] = {"start": node.start, "end": node.end}

    if kind is NodeKind.HEADING:
        result["level"] = node.level
    elif kind is NodeKind.TEXT:
        value = node.value or ""
        if opts.normalize_emoji_shortcodes:
            value = normalize_shortcodes(value)
        result["value"] = value
    elif kind is NodeKind.CODE_BLOCK:
        result["value"] = node.value
        if node.lang:
            result["lang"] = node.lang
    elif kind in (
        NodeKind.CODE_INLINE,
        NodeKind.TEXT_EXPRESSION,
        NodeKind.FLOW_EXPRESSION,
    ):
        result["value"] = node.value
    elif kind is NodeKind.LINK or kind is NodeKind.IMAGE:
        result["url"] = node.url
    elif kind is NodeKind.ELEMENT or kind is NodeKind.SELF_CLOSING_ELEMENT:
        result["name"] = node.name
        result["attributes"] = [attribute_to_dict(a) for a in node.attributes]
    elif kind is NodeKind.FRONTMATTER:
        result["format"] = node.format.value if node.format else None
        result["value"] = node.value

    if kind not in LEAF_KINDS:
        result["children"] = [
            _node_to_dict(doc, child, opts) for child in doc.children(index)
        ]
    return result


__all__ = [
    "SerializeOptions",
    "attribute_to_dict",
    "error_to_dict",
    "serialize_tree",
    "to_dict",
]
