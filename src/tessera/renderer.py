"""Canonical text renderer.

Re-emits a Document as tessera source in a fixed style, whatever the
original formatting was:

- ``#`` markers plus one space for headings
- ``*`` for emphasis and ``**`` for strong, whatever delimiter the source used
- three-backtick fences, longer only when the content would close them
- ``***`` for thematic breaks, ``\\`` plus newline for hard breaks (two
  spaces plus newline when the text before ends in an unpaired backslash)
- ``name="value"`` for literal attributes, ``name={value}`` for expressions.
  A raw value holding an unescaped ``"`` has no double-quoted form that
  lexes back to it, so it is single-quoted; a bare word ending in an
  unpaired backslash stays bare for the same reason.
- ``<Name />`` for self-closing elements

Re-parsing the output yields the same node kinds, values and attributes.
Text values are written verbatim; the block layout is chosen so they lex
the same way a second time.

Thread Safety:
All per-render state lives in a RenderContext created for each render()
call. A single TextRenderer can be shared across threads.

"""

from __future__ import annotations

from dataclasses import dataclass

from tessera.emoji import normalize_shortcodes
from tessera.errors import RenderError
from tessera.nodes import (
    ROOT_INDEX,
    Attribute,
    AttributeKind,
    Document,
    FrontmatterFormat,
    Node,
    NodeKind,
)
from tessera.stringbuilder import StringBuilder

BLOCK_SEPARATOR = "\n\n"
MIN_FENCE = 3


@dataclass(slots=True)
class RenderContext:
    """Per-render state.

    Attributes:
        doc: Document being rendered
        quote: Inside a blockquote; continuation lines need a ``> `` prefix

    """

    doc: Document
    quote: bool = False


def fence_for(value: str) -> str:
    """Shortest backtick fence (at least three) that no content line can close."""
    longest = 0
    for line in value.split("\n"):
        stripped = line.strip(" \t\r")
        if stripped and stripped.count("`") == len(stripped):
            longest = max(longest, len(stripped))
    return "`" * max(MIN_FENCE, longest + 1)


def quote_attribute_value(value: str) -> str:
    """Quote a literal attribute value so it lexes back to the same raw text.

    Double quotes unless the value holds an unescaped ``"``. A value that
    ends in an unpaired backslash came from a bare word and stays bare.
    """
    trailing = len(value) - len(value.rstrip("\\"))
    if trailing % 2:
        return value
    escaped = False
    for char in value:
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == '"':
            return f"'{value}'"
    return f'"{value}"'


def format_attribute(attribute: Attribute) -> str:
    if attribute.value is None:
        return f" {attribute.name}"
    if attribute.kind is AttributeKind.EXPRESSION:
        return f" {attribute.name}={{{attribute.value}}}"
    return f" {attribute.name}={quote_attribute_value(attribute.value)}"


class TextRenderer:
    """Render a Document back to canonical tessera source.

    Usage:
        >>> from tessera import parse
        >>> TextRenderer().render(parse("Some __bold__ and _em_"))
        'Some **bold** and *em*\\n'

    Thread Safety:
        Multiple threads can share one instance. Each render() call creates
        an independent RenderContext.

    """

    __slots__ = ("_normalize_emoji", "_json_tag")

    def __init__(
        self,
        *,
        normalize_emoji_shortcodes: bool = False,
        json_frontmatter_tag: str | None = None,
    ) -> None:
        """Initialize renderer.

        Args:
            normalize_emoji_shortcodes: Replace ``:name:`` shortcodes in text
            json_frontmatter_tag: Fence label for JSON frontmatter (defaults
                to the label the document was parsed with)
        """
        self._normalize_emoji = normalize_emoji_shortcodes
        self._json_tag = json_frontmatter_tag

    def render(self, doc: Document) -> str:
        """Render the whole document.

        Returns:
            Canonical source ending in a newline, or "" for an empty tree
        """
        ctx = RenderContext(doc)
        sb = StringBuilder()
        self._render_blocks(doc.children(ROOT_INDEX), sb, ctx)
        if sb:
            sb.append("\n")
        return sb.build()

    # =========================================================================
    # Block rendering
    # =========================================================================

    def _render_blocks(
        self, children: tuple[int, ...], sb: StringBuilder, ctx: RenderContext
    ) -> None:
        """Render sibling blocks, separated by blank lines.

        A paragraph that did not start its source line keeps following the
        tag before it, since at the start of a line its text could read as a
        block marker.
        """
        for position, index in enumerate(children):
            if position:
                if self._continues_line(index, ctx):
                    sb.append(" ")
                else:
                    sb.append(BLOCK_SEPARATOR)
            self._render_block(index, sb, ctx)

    def _continues_line(self, index: int, ctx: RenderContext) -> bool:
        node = ctx.doc.nodes[index]
        if node.kind is not NodeKind.PARAGRAPH:
            return False
        source = ctx.doc.source
        line_start = source.rfind("\n", 0, node.start) + 1
        return bool(source[line_start : node.start].strip(" \t"))

    def _render_block(self, index: int, sb: StringBuilder, ctx: RenderContext) -> None:
        """Render a block node."""
        doc = ctx.doc
        node = doc.nodes[index]
        match node.kind:
            case NodeKind.HEADING:
                sb.append("#" * (node.level or 1) + " ")
                self._render_inlines(doc.children(index), sb, ctx)
            case NodeKind.PARAGRAPH:
                self._render_inlines(doc.children(index), sb, ctx)
            case NodeKind.CODE_BLOCK:
                self._render_fenced(node.lang or "", node.value or "", sb)
            case NodeKind.HR:
                sb.append("***")
            case NodeKind.BLOCKQUOTE:
                sb.append("> ")
                ctx.quote = True
                try:
                    self._render_inlines(doc.children(index), sb, ctx)
                finally:
                    ctx.quote = False
            case NodeKind.LIST_UNORDERED | NodeKind.LIST_ORDERED:
                self._render_list(index, node, sb, ctx)
            case NodeKind.ELEMENT | NodeKind.FRAGMENT:
                self._render_block_element(index, node, sb, ctx)
            case NodeKind.SELF_CLOSING_ELEMENT:
                self._render_self_closing(node, sb)
            case NodeKind.FLOW_EXPRESSION:
                sb.append(f"{{{node.value or ''}}}")
            case NodeKind.FRONTMATTER:
                self._render_frontmatter(node, sb, ctx)
            case _:
                raise RenderError(f"cannot render {node.kind.value!r} as a block")

    def _render_fenced(self, label: str, value: str, sb: StringBuilder) -> None:
        fence = fence_for(value)
        sb.extend((fence, label, "\n"))
        if value:
            sb.append(value + "\n")
        sb.append(fence)

    def _render_frontmatter(
        self, node: Node, sb: StringBuilder, ctx: RenderContext
    ) -> None:
        value = node.value or ""
        if node.format is FrontmatterFormat.JSON:
            tag = self._json_tag or ctx.doc.json_frontmatter_tag
            self._render_fenced(tag, value, sb)
            return
        sb.append("---\n")
        if value:
            sb.append(value + "\n")
        sb.append("---")

    def _render_list(
        self, index: int, node: Node, sb: StringBuilder, ctx: RenderContext
    ) -> None:
        """Render list items; ordered lists are renumbered from 1."""
        doc = ctx.doc
        ordered = node.kind is NodeKind.LIST_ORDERED
        bullet = doc.source[node.start] if not ordered else ""
        for number, item in enumerate(doc.children(index), start=1):
            if number > 1:
                sb.append("\n")
            sb.append(f"{number}. " if ordered else f"{bullet} ")
            self._render_inlines(doc.children(item), sb, ctx)

    def _render_block_element(
        self, index: int, node: Node, sb: StringBuilder, ctx: RenderContext
    ) -> None:
        """Render an element or fragment whose children are blocks."""
        open_tag, close_tag = self._tag_pair(node)
        children = ctx.doc.children(index)
        sb.append(open_tag)
        if children:
            if not self._continues_line(children[0], ctx):
                sb.append("\n")
            self._render_blocks(children, sb, ctx)
            sb.append("\n")
        sb.append(close_tag)

    def _tag_pair(self, node: Node) -> tuple[str, str]:
        if node.kind is NodeKind.FRAGMENT:
            return "<>", "</>"
        attributes = "".join(format_attribute(a) for a in node.attributes)
        return f"<{node.name}{attributes}>", f"</{node.name}>"

    def _render_self_closing(self, node: Node, sb: StringBuilder) -> None:
        attributes = "".join(format_attribute(a) for a in node.attributes)
        sb.append(f"<{node.name}{attributes} />")

    # =========================================================================
    # Inline rendering
    # =========================================================================

    def _render_inlines(
        self, children: tuple[int, ...], sb: StringBuilder, ctx: RenderContext
    ) -> None:
        """Render a sequence of inline nodes."""
        for child in children:
            self._render_inline(child, sb, ctx)

    def _render_inline(self, index: int, sb: StringBuilder, ctx: RenderContext) -> None:
        """Render an inline node."""
        doc = ctx.doc
        node = doc.nodes[index]
        match node.kind:
            case NodeKind.TEXT:
                text = node.value or ""
                if self._normalize_emoji:
                    text = normalize_shortcodes(text)
                if ctx.quote:
                    text = text.replace("\n", "\n> ")
                sb.append(text)
            case NodeKind.EMPHASIS | NodeKind.STRONG:
                marker = "**" if node.kind is NodeKind.STRONG else "*"
                sb.append(marker)
                self._render_inlines(doc.children(index), sb, ctx)
                sb.append(marker)
            case NodeKind.CODE_INLINE:
                value = node.value or ""
                run = "`" * ((node.end - node.start - len(value)) // 2)
                sb.append(run + value + run)
            case NodeKind.LINK | NodeKind.IMAGE:
                sb.append("![" if node.kind is NodeKind.IMAGE else "[")
                self._render_inlines(doc.children(index), sb, ctx)
                sb.append(f"]({node.url or ''})")
            case NodeKind.HARD_BREAK:
                sb.append(self._hard_break(sb, ctx))
            case NodeKind.ELEMENT | NodeKind.FRAGMENT:
                open_tag, close_tag = self._tag_pair(node)
                sb.append(open_tag)
                self._render_inlines(doc.children(index), sb, ctx)
                sb.append(close_tag)
            case NodeKind.SELF_CLOSING_ELEMENT:
                self._render_self_closing(node, sb)
            case NodeKind.TEXT_EXPRESSION:
                sb.append(f"{{{node.value or ''}}}")
            case _:
                raise RenderError(f"cannot render {node.kind.value!r} inline")

    def _hard_break(self, sb: StringBuilder, ctx: RenderContext) -> str:
        """Backslash form, unless the text just written would escape it."""
        previous = sb.last()
        backslashes = len(previous) - len(previous.rstrip("\\"))
        newline = "\n> " if ctx.quote else "\n"
        if backslashes % 2:
            return "  " + newline
        return "\\" + newline


def render(doc: Document, *, normalize_emoji_shortcodes: bool = False) -> str:
    """Render a Document to canonical source text.

    Args:
        doc: Parsed document
        normalize_emoji_shortcodes: Replace ``:name:`` shortcodes in text

    Returns:
        Canonical source

    Example:
        >>> from tessera import parse
        >>> render(parse("#  Title\\n\\n<Card title='x'/>"))
        '#  Title\\n\\n<Card title="x" />\\n'

    """
    renderer = TextRenderer(normalize_emoji_shortcodes=normalize_emoji_shortcodes)
    return renderer.render(doc)


__all__ = [
    "RenderContext",
    "TextRenderer",
    "fence_for",
    "format_attribute",
    "quote_attribute_value",
    "render",
]
