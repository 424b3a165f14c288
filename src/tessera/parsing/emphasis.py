"""Emphasis parsing for the tessera parser.

Delimiter runs of ``*`` and ``_`` are matched as soon as a run that can
close is seen: the nearest open run of the same character binds, one
character for emphasis or two for strong, and any excess stays behind as
literal characters. Each character has its own opener stack, so finding
the opener is O(1), and everything between a matched pair is collapsed
exactly once.

Thread Safety:
All methods use instance-local state only.
Safe for concurrent use when each parser instance is used by one thread.

"""

import unicodedata
from typing import TYPE_CHECKING

from tessera.builder import TreeBuilder
from tessera.nodes import NodeKind
from tessera.parsing.frames import Delimiter, InlineFrame, Item, ItemKind


def is_punctuation(char: str) -> bool:
    """Unicode punctuation or symbol."""
    return unicodedata.category(char)[0] in "PS"


class EmphasisMixin:
    """Mixin for emphasis delimiter processing.

    Required Host Attributes:
        - _builder: TreeBuilder

    Required Host Methods:
        - _resolve_items

    """

    _builder: TreeBuilder

    if TYPE_CHECKING:
        def _resolve_items(self, items: list[Item]) -> list[int]:
            raise NotImplementedError

    def _is_left_flanking(self, before: str, after: str) -> bool:
        """Not followed by whitespace, and not followed by punctuation
        unless preceded by whitespace or punctuation."""
        if after.isspace():
            return False
        if not is_punctuation(after):
            return True
        return before.isspace() or is_punctuation(before)

    def _is_right_flanking(self, before: str, after: str) -> bool:
        """Mirror image of left-flanking."""
        if before.isspace():
            return False
        if not is_punctuation(before):
            return True
        return after.isspace() or is_punctuation(after)

    def _make_delimiter(
        self, char: str, start: int, end: int, before: str, after: str
    ) -> Delimiter:
        """Classify a delimiter run from its neighbouring characters."""
        left = self._is_left_flanking(before, after)
        right = self._is_right_flanking(before, after)
        if char == "_":
            can_open = left and (not right or is_punctuation(before))
            can_close = right and (not left or is_punctuation(after))
        else:
            can_open = left
            can_close = right
        return Delimiter(char, start, end, can_open, can_close)

    def _push_delimiter(self, frame: InlineFrame, delimiter: Delimiter) -> None:
        """Process a new run as a closer, then keep what is left."""
        if delimiter.can_close:
            self._close_delimiter(frame, delimiter)
        if delimiter.count == 0:
            return
        if delimiter.can_open:
            delimiter.index = len(frame.items)
            frame.items.append(Item(ItemKind.DELIMITER, delimiter=delimiter))
            frame.stacks[delimiter.char].append(delimiter)
        else:
            frame.add_literal(delimiter.start, delimiter.end)

    def _close_delimiter(self, frame: InlineFrame, closer: Delimiter) -> None:
        """Match ``closer`` against open runs until it is used up or none fit."""
        stack = frame.stacks[closer.char]
        bottom = frame.brackets[-1].bottoms[closer.char] if frame.brackets else 0

        while closer.count > 0 and len(stack) > bottom:
            opener = stack[-1]
            use = 2 if opener.count >= 2 and closer.count >= 2 else 1

            height = frame.tail_height(opener.index)
            if height > frame.budget:
                literal = Item(ItemKind.LITERAL, closer.start, closer.end)
                frame.collapse_literal(opener.index, [literal])
                closer.start = closer.end
                return

            frame.truncate_openers(opener.index + 1)
            inner = frame.items[opener.index + 1 :]
            del frame.items[opener.index + 1 :]
            children = self._resolve_items(inner)

            kind = NodeKind.STRONG if use == 2 else NodeKind.EMPHASIS
            node = self._builder.add(
                kind, opener.end - use, closer.start + use, children
            )
            opener.end -= use
            closer.start += use

            if opener.count == 0:
                frame.items.pop()
                stack.pop()
            frame.add_node(node, height)
