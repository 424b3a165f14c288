"""Shared assertions for tessera tests."""

from __future__ import annotations

from typing import Any

from tessera.nodes import Document, NodeKind


def kinds(doc: Document, index: int = 0) -> list[str]:
    """Kind names of a node's children."""
    return [doc.node(i).kind.value for i in doc.children(index)]


def child(doc: Document, *path: int) -> int:
    """Follow child positions from the root: ``child(doc, 0, 1)``."""
    index = doc.root
    for position in path:
        index = doc.children(index)[position]
    return index


def shape(doc: Document, index: int = 0) -> tuple[Any, ...]:
    """Structural summary of a subtree without source positions."""
    node = doc.node(index)
    return (
        node.kind,
        node.level,
        node.value,
        node.lang,
        node.url,
        node.name,
        node.attributes,
        node.format,
        tuple(shape(doc, c) for c in doc.children(index)),
    )


def texts(doc: Document) -> list[str]:
    """Every text value in document order."""
    return [doc.node(i).value or "" for i in doc.find(NodeKind.TEXT)]


def error_kinds(doc: Document) -> list[str]:
    return [e.kind.value for e in doc.errors]
