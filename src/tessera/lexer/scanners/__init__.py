"""Mode-specific scanners for the tessera lexer.

Each scanner is a mixin that provides scanning logic for one or more lexer
modes (MARKDOWN, TAG and EXPRESSION, CODE_FENCE).
"""

from __future__ import annotations

from tessera.lexer.scanners.code import CodeScannerMixin
from tessera.lexer.scanners.markdown import MarkdownScannerMixin
from tessera.lexer.scanners.markup import MarkupScannerMixin

__all__ = [
    "CodeScannerMixin",
    "MarkdownScannerMixin",
    "MarkupScannerMixin",
]
