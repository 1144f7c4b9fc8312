"""Merging of undersized neighbouring chunks."""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, List, Optional

from .models import ContentChunk

LOGGER = logging.getLogger(__name__)

MERGE_SEPARATOR = "\n\n"


def _absorb(current: ContentChunk, following: ContentChunk) -> ContentChunk:
    metadata = replace(current.metadata, end_offset=following.metadata.end_offset)
    if following.metadata.end_time is not None:
        metadata = replace(metadata, end_time=following.metadata.end_time)
    if following.metadata.page_number is not None:
        metadata = replace(metadata, page_number=following.metadata.page_number)
    return replace(
        current,
        content=current.content + MERGE_SEPARATOR + following.content,
        metadata=metadata,
    )


def coalesce(chunks: Iterable[ContentChunk], min_size: int = 100) -> List[ContentChunk]:
    """Merge consecutive small chunks and re-number the result from 0.

    Chunks are absorbed forward while the combined content stays under
    ``2 * min_size`` characters. A pending chunk still shorter than
    ``min_size`` when it can no longer grow is discarded.
    """

    merged: List[ContentChunk] = []
    current: Optional[ContentChunk] = None
    discarded = 0
    for chunk in chunks:
        if current is None:
            current = chunk
        elif len(current.content) + len(chunk.content) < min_size * 2:
            current = _absorb(current, chunk)
        else:
            if len(current.content) >= min_size:
                merged.append(current)
            else:
                discarded += 1
            current = chunk

    if current is not None:
        if len(current.content) >= min_size:
            merged.append(current)
        else:
            discarded += 1

    if discarded:
        LOGGER.debug("Discarded %s undersized chunks while coalescing", discarded)
    return [replace(chunk, index=index) for index, chunk in enumerate(merged)]
