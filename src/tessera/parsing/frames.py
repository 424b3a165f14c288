"""Working state for one inline container.

An inline container (paragraph, heading, list item, blockquote, inline
element) is parsed in a single left-to-right pass. Pieces are appended to
``InlineFrame.items``; emphasis and links are formed as soon as their
closer is seen by collapsing the tail of the list into a node item.

Because matches only ever collapse the tail, an opener's position in the
list stays valid for as long as the opener is alive.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class ItemKind(Enum):
    LITERAL = auto()  # source span that will become text
    NODE = auto()  # finished node in the arena
    DELIMITER = auto()  # * or _ run; literal unless matched
    BRACKET = auto()  # [ or ![; literal unless a link forms
    GROUP = auto()  # items kept literal because nesting was too deep


@dataclass(slots=True)
class Delimiter:
    """A ``*`` or ``_`` run. ``start``/``end`` shrink as characters are used."""

    char: str
    start: int
    end: int
    can_open: bool
    can_close: bool
    index: int = -1

    @property
    def count(self) -> int:
        return self.end - self.start


@dataclass(slots=True)
class Bracket:
    """An open ``[`` or ``![``.

    ``bottoms`` records each delimiter stack height at push time; emphasis
    inside the brackets cannot match openers below them.
    """

    start: int
    end: int
    image: bool
    index: int
    bottoms: dict[str, int]


@dataclass(slots=True)
class Item:
    kind: ItemKind
    start: int = 0
    end: int = 0
    node: int = -1
    height: int = 1
    delimiter: Delimiter | None = None
    group: list[Item] | None = None


@dataclass(slots=True)
class InlineFrame:
    """Items and open delimiters of one inline container.

    Attributes:
        budget: Maximum height of any node built in this container
        trim_start: Strip leading whitespace from the first literal piece

    """

    budget: int
    trim_start: bool = False
    items: list[Item] = field(default_factory=list)
    stacks: dict[str, list[Delimiter]] = field(
        default_factory=lambda: {"*": [], "_": []}
    )
    brackets: list[Bracket] = field(default_factory=list)

    def add_literal(self, start: int, end: int) -> None:
        if end > start:
            self.items.append(Item(ItemKind.LITERAL, start, end))

    def add_node(self, node: int, height: int) -> None:
        self.items.append(Item(ItemKind.NODE, node=node, height=height))

    def truncate_openers(self, index: int) -> None:
        """Forget every opener and bracket at or after item ``index``."""
        for stack in self.stacks.values():
            while stack and stack[-1].index >= index:
                stack.pop()
        while self.brackets and self.brackets[-1].index >= index:
            self.brackets.pop()

    def tail_height(self, index: int) -> int:
        """Height of a node wrapping every item after ``index``."""
        inner = 0
        for item in self.items[index + 1 :]:
            if item.height > inner:
                inner = item.height
        return inner + 1

    def collapse_literal(self, index: int, extra: list[Item] | None = None) -> None:
        """Fold the tail from ``index`` into one GROUP that stays literal."""
        group = self.items[index:]
        del self.items[index:]
        if extra:
            group.extend(extra)
        self.truncate_openers(index)
        self.items.append(Item(ItemKind.GROUP, height=self.budget + 1, group=group))
