"""Chunking utilities for breaking document text into embedding-friendly units."""
from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from typing import Any, Iterator, Mapping, Optional, Sequence, Union

from .boundaries import find_paragraph_boundary, find_sentence_boundary
from .models import ChunkMetadata, ContentChunk, SideData, TimeSegment

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_CHUNK_SIZE = 1500
DEFAULT_MIN_CHUNK_SIZE = 100
DEFAULT_OVERLAP = 200


@dataclass(slots=True, frozen=True)
class ChunkingOptions:
    """Tuning knobs for :class:`SemanticTextChunker`.

    Sizes are measured in characters. ``overlap`` is the number of raw
    characters a window rewinds after each split, so neighbouring chunks share
    context across the split point.
    """

    max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE
    min_chunk_size: int = DEFAULT_MIN_CHUNK_SIZE
    overlap: int = DEFAULT_OVERLAP
    preserve_sentences: bool = True

    def with_overrides(self, **overrides: Any) -> "ChunkingOptions":
        """Return a copy with the given fields replaced; ``None`` values are ignored."""

        known = {
            name: value
            for name, value in overrides.items()
            if value is not None and name in _OPTION_FIELDS
        }
        return replace(self, **known) if known else self

    def clamped(self) -> "ChunkingOptions":
        """Return options satisfying ``0 < min < max`` and ``0 <= overlap < max``."""

        max_size = max(int(self.max_chunk_size), 2)
        min_size = min(max(int(self.min_chunk_size), 1), max_size - 1)
        overlap = min(max(int(self.overlap), 0), max_size - 1)
        result = ChunkingOptions(
            max_chunk_size=max_size,
            min_chunk_size=min_size,
            overlap=overlap,
            preserve_sentences=bool(self.preserve_sentences),
        )
        if result != self:
            LOGGER.warning("Chunking options %s clamped to %s", self, result)
        return result


_OPTION_FIELDS = frozenset(option.name for option in fields(ChunkingOptions))


def map_time_range(
    chunk_start: int,
    chunk_end: int,
    timestamps: Sequence[TimeSegment],
) -> tuple[Optional[float], Optional[float]]:
    """Back-map a character range onto the transcript's word timings.

    Character offsets of the segments are reconstructed by assuming the
    transcript was built by joining segment texts with single spaces.
    """

    if not timestamps:
        return None, None

    offset = 0
    start_time: Optional[float] = None
    end_time: Optional[float] = None
    for segment in timestamps:
        segment_end = offset + len(segment.text)
        if offset <= chunk_start < segment_end:
            start_time = segment.start
        if offset < chunk_end <= segment_end:
            end_time = segment.end
            break
        if segment_end <= chunk_end:
            end_time = segment.end
        offset = segment_end + 1
    return start_time, end_time


def map_page_number(chunk_start: int, page_breaks: Optional[Sequence[int]]) -> Optional[int]:
    """Return the 1-based page containing ``chunk_start``, or ``None`` without pagination."""

    if page_breaks is None:
        return None
    for page_index, page_break in enumerate(page_breaks, start=1):
        if chunk_start < page_break:
            return page_index
    return len(page_breaks) + 1


SideDataLike = Union[SideData, Mapping[str, Any], None]


def _resolve_side_data(side_data: SideDataLike) -> SideData:
    if side_data is None:
        return SideData()
    if isinstance(side_data, SideData):
        return side_data
    if isinstance(side_data, Mapping):
        return SideData.from_raw(
            timestamps=side_data.get("timestamps"),
            page_breaks=side_data.get("page_breaks"),
        )
    LOGGER.warning("Ignoring side data of type %s", type(side_data).__name__)
    return SideData()


class SemanticTextChunker:
    """Split document text into overlapping chunks respecting semantic boundaries."""

    def __init__(self, options: Optional[ChunkingOptions] = None) -> None:
        self.options = (options or ChunkingOptions()).clamped()

    def segment(self, text: str, side_data: SideDataLike = None) -> list[ContentChunk]:
        """Return the chunks of ``text`` with provisional sequential indices."""

        if not isinstance(text, str) or not text.strip():
            return []
        resolved = _resolve_side_data(side_data)

        chunks: list[ContentChunk] = []
        for start, end in self._windows(text):
            content = text[start:end].strip()
            if len(content) < self.options.min_chunk_size:
                LOGGER.debug("Dropping %s-char fragment at offsets %s-%s", len(content), start, end)
                continue
            start_time, end_time = map_time_range(start, end, resolved.timestamps)
            metadata = ChunkMetadata(
                start_offset=start,
                end_offset=end,
                start_time=start_time,
                end_time=end_time,
                page_number=map_page_number(start, resolved.page_breaks),
            )
            LOGGER.debug(
                "Chunk %s offsets %s-%s page %s",
                len(chunks),
                start,
                end,
                metadata.page_number,
            )
            chunks.append(ContentChunk(content=content, index=len(chunks), metadata=metadata))
        return chunks

    def _windows(self, text: str) -> Iterator[tuple[int, int]]:
        text_length = len(text)
        max_size = self.options.max_chunk_size
        overlap = self.options.overlap
        start = 0
        previous_end = 0
        while start < text_length:
            end = min(start + max_size, text_length)
            if end < text_length and self.options.preserve_sentences:
                end = self._find_semantic_break(text, start, end, max(start, previous_end))
            yield start, end
            # Every later window would be a suffix of this one.
            if end >= text_length:
                break
            previous_end = end
            start = max(start + 1, end - overlap)

    def _find_semantic_break(self, text: str, start: int, tentative_end: int, floor: int) -> int:
        # Boundaries at or before ``floor`` would end inside the previous window.
        paragraph_break = find_paragraph_boundary(text, tentative_end, floor)
        if paragraph_break is not None and paragraph_break > start + self.options.min_chunk_size:
            return paragraph_break
        sentence_break = find_sentence_boundary(text, tentative_end, floor)
        if sentence_break is not None:
            return sentence_break
        return tentative_end


def segment(
    text: str,
    side_data: SideDataLike = None,
    options: Optional[ChunkingOptions] = None,
    **overrides: Any,
) -> list[ContentChunk]:
    """Split ``text`` into chunks near ``max_chunk_size`` characters.

    ``overrides`` replace individual fields of ``options`` (or of the
    defaults), e.g. ``segment(text, max_chunk_size=500)``.
    """

    resolved = (options or ChunkingOptions()).with_overrides(**overrides)
    return SemanticTextChunker(resolved).segment(text, side_data)
