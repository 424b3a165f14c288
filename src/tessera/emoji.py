"""Emoji shortcode substitution.

Shortcodes such as ``:rocket:`` stay verbatim in the parsed tree. Output
stages (renderer, serializer) may replace them when asked to, using
:func:`normalize_shortcodes` with an explicit lookup table.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from types import MappingProxyType

SHORTCODE_PATTERN = re.compile(r":([A-Za-z0-9_+\-]+):")

DEFAULT_SHORTCODES: Mapping[str, str] = MappingProxyType(
    {
        "thumbsup": "\U0001f44d",
        "+1": "\U0001f44d",
        "thumbsdown": "\U0001f44e",
        "-1": "\U0001f44e",
        "wave": "\U0001f44b",
        "fire": "\U0001f525",
        "rocket": "\U0001f680",
        "sparkles": "✨",
        "tada": "\U0001f389",
        "smile": "\U0001f604",
        "heart": "❤️",
        "white_check_mark": "✅",
        "x": "❌",
        "warning": "⚠️",
        "thinking": "\U0001f914",
        "clap": "\U0001f44f",
        "eyes": "\U0001f440",
        "point_up": "☝️",
        "point_right": "\U0001f449",
        "point_left": "\U0001f448",
        "point_down": "\U0001f447",
        "100": "\U0001f4af",
    }
)


def normalize_shortcodes(
    text: str, table: Mapping[str, str] = DEFAULT_SHORTCODES
) -> str:
    """Replace every known ``:name:`` shortcode in ``text``.

    Unknown shortcodes are left untouched.

    Args:
        text: Text to rewrite
        table: Shortcode name (without colons) to replacement

    Returns:
        The rewritten text

    Example:
        >>> normalize_shortcodes("ship it :rocket:")
        'ship it 🚀'
        >>> normalize_shortcodes(":nope:")
        ':nope:'

    """
    if ":" not in text:
        return text
    return SHORTCODE_PATTERN.sub(lambda m: table.get(m.group(1), m.group(0)), text)


__all__ = ["DEFAULT_SHORTCODES", "SHORTCODE_PATTERN", "normalize_shortcodes"]
