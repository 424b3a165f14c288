"""Mode-stack lexer for tessera documents.

This package turns source text into a flat token stream covering every
character. The lexer never fails: anything it cannot classify becomes TEXT.

Architecture:
lexer/
├── __init__.py          # Re-exports Lexer, LexerMode, tokenize
├── core.py              # Lexer class (mixin composition + navigation)
├── modes.py             # LexerMode enum, character classes
├── classifiers.py       # Pure line-start marker classifiers
└── scanners/            # Mode-specific scanners
    ├── markdown.py      # MARKDOWN mode (block markers + inline)
    ├── markup.py        # TAG and EXPRESSION modes
    └── code.py          # CODE_FENCE mode and code spans

Usage:
    >>> from tessera.lexer import tokenize
    >>> tokenize("# Hello")
    [Token(HEADING_MARKER, 0:2), Token(TEXT, 2:7), Token(EOF, 7:7)]

"""

from tessera.lexer.core import Lexer, tokenize
from tessera.lexer.modes import LexerMode

__all__ = ["Lexer", "LexerMode", "tokenize"]
