"""Segmentation of extracted document text into overlapping chunks."""
from __future__ import annotations

from .chunking import ChunkingOptions, SemanticTextChunker, segment
from .coalesce import coalesce
from .models import ChunkMetadata, ContentChunk, PageContent, SideData, TimeSegment

__all__ = [
    "ChunkMetadata",
    "ChunkingOptions",
    "ContentChunk",
    "PageContent",
    "SemanticTextChunker",
    "SideData",
    "TimeSegment",
    "coalesce",
    "segment",
]
