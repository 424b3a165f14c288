"""Line-start classifiers.

Pure functions over ``(source, pos)``: each decides whether a block marker
starts at ``pos`` and returns where the marker ends, or -1. None of them
move the lexer; the scanners commit positions.
"""

from __future__ import annotations

from tessera.lexer.modes import KEYCAP_COMBINING, VARIATION_SELECTOR

MAX_HEADING_LEVEL = 6
MIN_FENCE_LENGTH = 3


def heading_marker_end(source: str, pos: int) -> int:
    """``#`` to ``######`` followed by a space or tab; the marker keeps one."""
    count = 0
    source_len = len(source)
    while pos + count < source_len and source[pos + count] == "#":
        count += 1
        if count > MAX_HEADING_LEVEL:
            return -1
    if count == 0 or pos + count >= source_len:
        return -1
    if source[pos + count] not in " \t":
        return -1
    return pos + count + 1


def fence_run_length(source: str, pos: int) -> int:
    """Length of a backtick run at ``pos`` if it can open a fence, else 0."""
    end = pos
    source_len = len(source)
    while end < source_len and source[end] == "`":
        end += 1
    count = end - pos
    return count if count >= MIN_FENCE_LENGTH else 0


def thematic_break_end(source: str, pos: int) -> int:
    """Three or more of the same ``-``, ``*`` or ``_``, spaces allowed.

    The marker runs to the end of the line.
    """
    if pos >= len(source):
        return -1
    char = source[pos]
    if char not in "-*_":
        return -1
    count = 0
    end = pos
    source_len = len(source)
    while end < source_len and source[end] != "\n":
        current = source[end]
        if current == char:
            count += 1
        elif current not in " \t":
            return -1
        end += 1
    return end if count >= 3 else -1


def list_marker_end(source: str, pos: int) -> int:
    """``-``, ``*`` or ``+`` followed by a space or tab."""
    if pos + 1 >= len(source):
        return -1
    if source[pos] in "-*+" and source[pos + 1] in " \t":
        return pos + 2
    return -1


def ordered_marker_end(source: str, pos: int) -> int:
    """Up to nine digits, a ``.``, then a space or tab."""
    end = pos
    source_len = len(source)
    while end < source_len and "0" <= source[end] <= "9":
        end += 1
        if end - pos > 9:
            return -1
    if end == pos or end + 1 >= source_len:
        return -1
    if source[end] == "." and source[end + 1] in " \t":
        return end + 2
    return -1


def blockquote_marker_end(source: str, pos: int) -> int:
    """``>`` plus one optional space."""
    if pos >= len(source) or source[pos] != ">":
        return -1
    if pos + 1 < len(source) and source[pos + 1] == " ":
        return pos + 2
    return pos + 1


def keycap_length(source: str, pos: int) -> int:
    """Length of a keycap emoji (``#️⃣``, ``*️⃣``, ``1️⃣``) at ``pos``, else 0."""
    end = pos + 1
    if end < len(source) and source[end] == VARIATION_SELECTOR:
        end += 1
    if end < len(source) and source[end] == KEYCAP_COMBINING:
        return end + 1 - pos
    return 0


def is_name_start(char: str) -> bool:
    return char.isalpha() or char == "_" or char == "$"


def is_name(word: str) -> bool:
    """True for tag/attribute names: letter, ``_`` or ``$`` then name chars."""
    if not word or not is_name_start(word[0]):
        return False
    for char in word[1:]:
        if not (char.isalnum() or char in "_$-.:"):
            return False
    return True
