"""Helpers that assemble source text and side data from extraction output."""
from __future__ import annotations

from typing import Iterable, List, Tuple

from .models import PageContent, TimeSegment

PAGE_SEPARATOR = "\n\n"


def transcript_text(segments: Iterable[TimeSegment]) -> str:
    """Join transcript words with single spaces.

    Time back-mapping reconstructs word offsets under exactly this joining
    rule, so transcripts should be assembled through this helper.
    """

    return " ".join(segment.text for segment in segments)


def join_pages(pages: Iterable[PageContent], separator: str = PAGE_SEPARATOR) -> Tuple[str, List[int]]:
    """Concatenate page texts and return the offsets where pages 2..n begin."""

    ordered = sorted(pages, key=lambda page: page.page_number)
    parts: List[str] = []
    page_breaks: List[int] = []
    char_offset = 0
    for position, page in enumerate(ordered):
        if position:
            parts.append(separator)
            char_offset += len(separator)
            page_breaks.append(char_offset)
        parts.append(page.text)
        char_offset += len(page.text)
    return "".join(parts), page_breaks
