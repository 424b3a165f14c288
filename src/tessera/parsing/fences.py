"""Fenced code body extraction shared by code blocks and JSON frontmatter."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from tessera.tokens import Token, TokenKind


@dataclass(frozen=True, slots=True)
class FenceBody:
    """A fenced region read from the token stream.

    Attributes:
        info: FENCE_INFO token, if the opening line had one
        value: Verbatim content, without the newline before the closing fence
        end: End offset of the whole construct
        closed: Whether a closing fence was found
        next_index: Index of the first token after the construct

    """

    info: Token | None
    value: str
    end: int
    closed: bool
    next_index: int


def read_fence(tokens: Sequence[Token], index: int, source: str) -> FenceBody:
    """Read the fence whose FENCE_OPEN token is at ``tokens[index]``.

    An unterminated fence runs to the end of the document.
    """
    pos = index + 1
    info = None
    if tokens[pos].kind is TokenKind.FENCE_INFO:
        info = tokens[pos]
        pos += 1
    if tokens[pos].kind is TokenKind.NEWLINE:
        content_start = tokens[pos].end
        pos += 1
    else:
        content_start = tokens[pos].start

    while tokens[pos].kind not in (TokenKind.FENCE_CLOSE, TokenKind.EOF):
        pos += 1

    close = tokens[pos]
    closed = close.kind is TokenKind.FENCE_CLOSE
    content_end = close.start
    if content_end > content_start and source[content_end - 1] == "\n":
        content_end -= 1

    return FenceBody(
        info=info,
        value=source[content_start:content_end],
        end=close.end,
        closed=closed,
        next_index=pos + 1 if closed else pos,
    )
