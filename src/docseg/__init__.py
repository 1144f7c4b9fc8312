"""Content segmentation for document embedding and indexing."""

from docseg.ingest import (
    ChunkMetadata,
    ChunkingOptions,
    ContentChunk,
    SideData,
    TimeSegment,
    coalesce,
    segment,
)

__all__ = [
    "ChunkMetadata",
    "ChunkingOptions",
    "ContentChunk",
    "SideData",
    "TimeSegment",
    "coalesce",
    "segment",
]
