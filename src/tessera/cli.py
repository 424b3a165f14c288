"""Command-line interface for tessera.

Usage::

    $ tessera page.hnmd                    # token table, node tree, errors
    $ tessera page.hnmd --format json      # interchange object
    $ tessera page.hnmd --format render    # canonical source

Exit codes:
    0   the file was read and parsed (parse errors are reported, not fatal)
    1   the file could not be read
    2   invalid command-line usage
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from tessera.errors import DocumentReadError
from tessera.loader import read_document
from tessera.nodes import Document, Node, NodeKind
from tessera.renderer import render
from tessera.serialization import SerializeOptions, serialize_tree
from tessera.utils.logger import get_logger

logger = get_logger(__name__)

EXIT_SUCCESS = 0
EXIT_FILE_ERROR = 1
EXIT_USAGE_ERROR = 2

FORMATS = ("inspect", "json", "render")
_PREVIEW_LENGTH = 40


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="tessera",
        description="Parse a tessera document and show its tokens and tree.",
    )
    parser.add_argument("input", metavar="FILE", help="Document to parse")
    parser.add_argument(
        "--format",
        "-f",
        choices=FORMATS,
        default="inspect",
        help="Output format (default: inspect)",
    )
    parser.add_argument(
        "--positions",
        action="store_true",
        help="Include source positions in JSON output",
    )
    parser.add_argument(
        "--emoji",
        action="store_true",
        help="Replace :shortcode: emoji in text output",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=2,
        metavar="N",
        help="JSON indentation (default: 2, 0 for compact)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output with detailed logging (equivalent to --log-level DEBUG)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Set logging level (default: WARNING). Overrides --verbose if both are specified.",
    )
    return parser


def _setup_logging_level(parsed_args: argparse.Namespace) -> None:
    """Configure logging from --verbose / --log-level; messages go to stderr."""
    if parsed_args.verbose and parsed_args.log_level == "WARNING":
        log_level = logging.DEBUG
    else:
        log_level = getattr(logging, parsed_args.log_level.upper())
    logging.basicConfig(
        level=log_level, format="%(levelname)s: %(message)s", stream=sys.stderr, force=True
    )


def _preview(text: str) -> str:
    shown = text if len(text) <= _PREVIEW_LENGTH else text[: _PREVIEW_LENGTH - 1] + "…"
    return escape(repr(shown))


def _node_label(doc: Document, index: int) -> str:
    """One-line description of a node for the tree view."""
    node: Node = doc.nodes[index]
    parts = [f"[bold]{node.kind.value}[/bold]", f"[dim]{node.start}:{node.end}[/dim]"]
    if node.kind is NodeKind.HEADING:
        parts.append(f"level={node.level}")
    if node.name is not None:
        parts.append(f"name={escape(node.name)}")
    for attribute in node.attributes:
        value = "" if attribute.value is None else f"={_preview(attribute.value)}"
        parts.append(f"[cyan]@{escape(attribute.name)}[/cyan]{value}")
    if node.url is not None:
        parts.append(f"url={_preview(node.url)}")
    if node.lang is not None:
        parts.append(f"lang={escape(node.lang)}")
    if node.format is not None:
        parts.append(f"format={node.format.value}")
    if node.value is not None:
        parts.append(_preview(node.value))
    return " ".join(parts)


def build_token_table(doc: Document) -> Table:
    table = Table(title="Tokens")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Kind", style="yellow")
    table.add_column("Span", style="magenta")
    table.add_column("Text", style="white", no_wrap=False)
    for number, token in enumerate(doc.tokens):
        table.add_row(
            str(number),
            token.kind.name,
            f"{token.start}:{token.end}",
            _preview(doc.token_slice(token)),
        )
    return table


def build_node_tree(doc: Document) -> Tree:
    """Indented tree of every node, built from Document.walk()."""
    root = Tree(_node_label(doc, doc.root))
    branches: list[Tree] = [root]
    for index, depth in doc.walk():
        if depth == 0:
            continue
        del branches[depth:]
        branches.append(branches[depth - 1].add(_node_label(doc, index)))
    return root


def print_inspection(doc: Document, console: Console) -> None:
    """Print tokens, the node tree and recorded errors."""
    console.print(build_token_table(doc))
    console.print()
    console.print(build_node_tree(doc))
    console.print()
    if not doc.error_count:
        console.print("[green]No errors[/green]")
        return
    console.print(f"[bold yellow]Errors ({doc.error_count}):[/bold yellow]")
    for error in doc.errors:
        console.print(f"  [red]{escape(error.format(doc.source, doc.source_file))}[/red]")
    hidden = doc.error_count - len(doc.errors)
    if hidden:
        console.print(f"  [dim]... {hidden} more not stored[/dim]")


def main(args: Sequence[str] | None = None) -> int:
    """Run the CLI.

    Args:
        args: Argument list (defaults to sys.argv[1:])

    Returns:
        Process exit code
    """
    parser = create_parser()
    parsed_args = parser.parse_args(args)
    _setup_logging_level(parsed_args)

    try:
        doc = read_document(parsed_args.input)
    except DocumentReadError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FILE_ERROR

    if parsed_args.format == "json":
        options = SerializeOptions(
            include_positions=parsed_args.positions,
            normalize_emoji_shortcodes=parsed_args.emoji,
            indent=parsed_args.indent or None,
        )
        sys.stdout.write(serialize_tree(doc, options) + "\n")
    elif parsed_args.format == "render":
        sys.stdout.write(render(doc, normalize_emoji_shortcodes=parsed_args.emoji))
    else:
        print_inspection(doc, Console())

    logger.debug("Finished %s with %d parse error(s)", parsed_args.input, doc.error_count)
    return EXIT_SUCCESS


__all__ = [
    "EXIT_FILE_ERROR",
    "EXIT_SUCCESS",
    "EXIT_USAGE_ERROR",
    "build_node_tree",
    "build_token_table",
    "create_parser",
    "main",
    "print_inspection",
]
