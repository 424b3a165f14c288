"""Lexer operating modes and character classes."""

from __future__ import annotations

from enum import Enum, auto


class LexerMode(Enum):
    """Lexer operating modes.

    The lexer keeps a stack of modes; the top one decides how the next
    character is read:
    - MARKDOWN: Block markers at line start, inline syntax elsewhere
    - TAG: Inside ``<...>``, reading names, attributes and strings
    - EXPRESSION: Inside ``{...}``, counting nested braces
    - CODE_FENCE: Inside a fenced code block, line by line

    """

    MARKDOWN = auto()
    TAG = auto()
    EXPRESSION = auto()
    CODE_FENCE = auto()


# Characters that end a TEXT run in MARKDOWN mode
INLINE_SPECIAL = frozenset("\n\\*_`[]!<{")

# Characters that end a bare word inside a tag
TAG_WORD_STOP = frozenset(" \t\r\n/>=<{}\"'")

WHITESPACE = frozenset(" \t\r")

ASCII_PUNCTUATION = frozenset("!\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~")

KEYCAP_COMBINING = "⃣"
VARIATION_SELECTOR = "️"
