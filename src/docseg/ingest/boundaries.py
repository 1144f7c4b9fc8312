"""Boundary search helpers used to pick natural split points."""
from __future__ import annotations

import re
from typing import Optional

PARAGRAPH_BREAK = "\n\n"
SENTENCE_ENDERS: tuple[str, ...] = (". ", "! ", "? ", ".\n", "!\n", "?\n")

_SENTENCE_END_RE = re.compile("|".join(re.escape(ender) for ender in SENTENCE_ENDERS))


def find_paragraph_boundary(text: str, end: int, start: int = 0) -> Optional[int]:
    """Return the offset right after the last blank line inside ``text[start:end]``."""

    index = text.rfind(PARAGRAPH_BREAK, start, end)
    if index == -1:
        return None
    return index + len(PARAGRAPH_BREAK)


def find_sentence_boundary(text: str, end: int, start: int = 0) -> Optional[int]:
    """Return the offset right after the last sentence terminator inside ``text[start:end]``.

    A terminator is one of :data:`SENTENCE_ENDERS`; the returned offset points
    at the first character of the following sentence and never exceeds ``end``.
    """

    boundary = None
    for match in _SENTENCE_END_RE.finditer(text, start, end):
        boundary = match.end()
    return boundary
