"""API router exposing the segmentation pipeline."""
from __future__ import annotations

from functools import lru_cache
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from docseg.errors import UnsupportedSourceError
from docseg.ingest.format_detection import SourceKind, SourceKindDetector
from docseg.ingest.models import ContentChunk
from docseg.ingest.pipeline import ExtractedDocument, SegmentationPipeline, SegmentationResult

router = APIRouter(prefix="/documents", tags=["chunking"])


class TimeSegmentPayload(BaseModel):
    """One transcribed word with its time range in seconds."""

    text: str
    start: float = Field(..., ge=0)
    end: float = Field(..., ge=0)


class ChunkingOptionsPayload(BaseModel):
    """Per-request overrides for the configured chunking options."""

    max_chunk_size: Optional[int] = Field(None, ge=1)
    min_chunk_size: Optional[int] = Field(None, ge=1)
    overlap: Optional[int] = Field(None, ge=0)
    preserve_sentences: Optional[bool] = None


class ChunkRequest(BaseModel):
    """Request body accepted by the chunk endpoint."""

    text: str = Field(..., description="Full extracted document text.")
    document_id: Optional[str] = None
    mime_type: Optional[str] = Field(None, description="MIME type of the original upload.")
    file_name: Optional[str] = None
    timestamps: Optional[list[TimeSegmentPayload]] = None
    page_breaks: Optional[list[int]] = Field(
        None,
        description="Ascending character offsets where a new page begins.",
    )
    options: Optional[ChunkingOptionsPayload] = None


class ChunkMetadataPayload(BaseModel):
    start_offset: int
    end_offset: int
    start_time: Optional[float] = None
    end_time: Optional[float] = None
    page_number: Optional[int] = None


class ChunkPayload(BaseModel):
    content: str
    index: int
    metadata: ChunkMetadataPayload


class ChunkResponse(BaseModel):
    """Response payload for the chunk endpoint."""

    document_id: str
    source_kind: str
    chunk_count: int
    raw_chunk_count: int
    duration_ms: float
    chunks: list[ChunkPayload]


@lru_cache()
def get_pipeline() -> SegmentationPipeline:
    """Return the shared pipeline configured from the environment."""

    return SegmentationPipeline()


def _resolve_source_kind(request: ChunkRequest) -> SourceKind:
    if not request.mime_type and not request.file_name:
        return SourceKind.TXT
    return SourceKindDetector.detect(request.mime_type, request.file_name)


def _serialise_chunk(chunk: ContentChunk) -> ChunkPayload:
    metadata = chunk.metadata
    return ChunkPayload(
        content=chunk.content,
        index=chunk.index,
        metadata=ChunkMetadataPayload(
            start_offset=metadata.start_offset,
            end_offset=metadata.end_offset,
            start_time=metadata.start_time,
            end_time=metadata.end_time,
            page_number=metadata.page_number,
        ),
    )


@router.post("/chunk", response_model=ChunkResponse)
def chunk_document(
    request: ChunkRequest,
    pipeline: SegmentationPipeline = Depends(get_pipeline),
) -> ChunkResponse:
    """Split extracted document text into final, indexed chunks."""

    try:
        source_kind = _resolve_source_kind(request)
    except UnsupportedSourceError as exc:
        raise HTTPException(status_code=415, detail=str(exc)) from exc

    options = None
    if request.options is not None:
        overrides = request.options
        options = pipeline.options.with_overrides(
            max_chunk_size=overrides.max_chunk_size,
            min_chunk_size=overrides.min_chunk_size,
            overlap=overrides.overlap,
            preserve_sentences=overrides.preserve_sentences,
        )

    document = ExtractedDocument(
        content=request.text,
        source_kind=source_kind,
        timestamps=(
            [{"text": item.text, "start": item.start, "end": item.end} for item in request.timestamps]
            if request.timestamps is not None
            else None
        ),
        page_breaks=request.page_breaks,
        document_id=request.document_id,
    )
    result: SegmentationResult = pipeline.run(document, options=options)
    return ChunkResponse(
        document_id=result.document_id,
        source_kind=result.source_kind.value,
        chunk_count=len(result.chunks),
        raw_chunk_count=result.raw_chunk_count,
        duration_ms=result.duration_ms,
        chunks=[_serialise_chunk(chunk) for chunk in result.chunks],
    )
