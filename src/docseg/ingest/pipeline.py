"""High level segmentation pipeline entry point."""
from __future__ import annotations

import logging
import time
import uuid
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Sequence

from docseg.settings import get_settings
from docseg.telemetry import emit_segmentation_event

from .chunking import ChunkingOptions, SemanticTextChunker
from .coalesce import coalesce
from .format_detection import SourceKind
from .models import ContentChunk, SideData

LOGGER = logging.getLogger(__name__)
AUDIT_LOGGER = logging.getLogger("docseg.ingest.audit")


@dataclass(slots=True)
class ExtractedDocument:
    """Plain text handed over by an extractor, with its optional side data."""

    content: str
    source_kind: SourceKind = SourceKind.TXT
    timestamps: Optional[Sequence[Any]] = None
    page_breaks: Optional[Sequence[Any]] = None
    document_id: Optional[str] = None


@dataclass(slots=True)
class SegmentationResult:
    """Structured result returned from :meth:`SegmentationPipeline.run`."""

    document_id: str
    source_kind: SourceKind
    chunks: List[ContentChunk]
    raw_chunk_count: int
    duration_ms: float

    def records(self) -> List[dict[str, Any]]:
        """Return chunks in the shape expected by the embedding/storage stage."""

        return [
            {
                "document_id": self.document_id,
                "chunk_index": chunk.index,
                "content": chunk.content,
                "metadata": chunk.metadata.as_dict(),
            }
            for chunk in self.chunks
        ]


class SegmentationPipeline:
    """Pipeline running the segmenter and the coalescer over extracted documents."""

    def __init__(
        self,
        options: Optional[ChunkingOptions] = None,
        *,
        merge_small_chunks: Optional[bool] = None,
        merge_min_size: Optional[int] = None,
        max_workers: Optional[int] = None,
    ) -> None:
        settings = get_settings()
        self.options = (options or settings.chunking).clamped()
        self.merge_small_chunks = (
            settings.merge_small_chunks if merge_small_chunks is None else merge_small_chunks
        )
        self.merge_min_size = merge_min_size or settings.merge_min_size
        self.max_workers = max_workers or settings.max_workers
        self.chunker = SemanticTextChunker(self.options)

    def run(
        self,
        document: ExtractedDocument,
        options: Optional[ChunkingOptions] = None,
    ) -> SegmentationResult:
        """Segment one document and return its final, contiguously indexed chunks."""

        document_id = document.document_id or str(uuid.uuid4())
        chunker = self.chunker if options is None else SemanticTextChunker(options)
        # Segmenter output is never shorter than min_chunk_size.
        min_size = self.merge_min_size or chunker.options.min_chunk_size
        started = time.perf_counter()

        side_data = SideData.from_raw(timestamps=document.timestamps, page_breaks=document.page_breaks)
        raw_chunks = chunker.segment(document.content, side_data)
        chunks = coalesce(raw_chunks, min_size) if self.merge_small_chunks else raw_chunks
        duration_ms = (time.perf_counter() - started) * 1000.0

        text_length = len(document.content) if isinstance(document.content, str) else 0
        LOGGER.info(
            "Generated %s chunks (%s before merging) for document %s",
            len(chunks),
            len(raw_chunks),
            document_id,
        )
        emit_segmentation_event(
            document_id=document_id,
            source_kind=document.source_kind.value,
            text_length=text_length,
            raw_chunks=len(raw_chunks),
            chunks=len(chunks),
            duration_ms=duration_ms,
            merged=self.merge_small_chunks,
        )
        AUDIT_LOGGER.info(
            {
                "document_id": document_id,
                "source_kind": document.source_kind.value,
                "text_length": text_length,
                "chunks": len(chunks),
                "covered_chars": sum(len(chunk.content) for chunk in chunks),
            }
        )
        return SegmentationResult(
            document_id=document_id,
            source_kind=document.source_kind,
            chunks=chunks,
            raw_chunk_count=len(raw_chunks),
            duration_ms=duration_ms,
        )

    def run_many(
        self,
        documents: Iterable[ExtractedDocument],
        max_workers: Optional[int] = None,
    ) -> List[SegmentationResult]:
        """Segment independent documents on a thread pool, preserving input order."""

        batch = list(documents)
        if not batch:
            return []
        workers = max_workers or self.max_workers
        LOGGER.info("Segmenting %s documents with %s workers", len(batch), workers or "default")
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(self.run, batch))
