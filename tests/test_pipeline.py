"""Tests for the segmentation pipeline."""
from __future__ import annotations

import json
import uuid

from docseg.ingest.assembly import transcript_text
from docseg.ingest.chunking import ChunkingOptions
from docseg.ingest.format_detection import SourceKind
from docseg.ingest.pipeline import ExtractedDocument, SegmentationPipeline
from docseg.logging_config import configure_logging


def _transcript_document(transcript_segments) -> ExtractedDocument:
    return ExtractedDocument(
        content=transcript_text(transcript_segments),
        source_kind=SourceKind.AUDIO,
        timestamps=[{"text": s.text, "start": s.start, "end": s.end} for s in transcript_segments],
        document_id="lecture-1",
    )


def test_pipeline_segments_and_merges(transcript_segments) -> None:
    pipeline = SegmentationPipeline(ChunkingOptions(max_chunk_size=15, min_chunk_size=5, overlap=0))

    result = pipeline.run(_transcript_document(transcript_segments))

    assert result.document_id == "lecture-1"
    assert result.source_kind is SourceKind.AUDIO
    assert result.raw_chunk_count == 2
    assert [chunk.content for chunk in result.chunks] == ["Hello world.", "This is a test."]
    assert result.duration_ms >= 0


def test_pipeline_merges_small_chunks() -> None:
    text = "Short one. Short two. Short three. " * 6
    options = ChunkingOptions(max_chunk_size=12, min_chunk_size=8, overlap=0)

    merged = SegmentationPipeline(options, merge_small_chunks=True, merge_min_size=15).run(
        ExtractedDocument(content=text)
    )
    raw = SegmentationPipeline(options, merge_small_chunks=False).run(ExtractedDocument(content=text))

    assert len(raw.chunks) == raw.raw_chunk_count
    assert len(merged.chunks) < len(raw.chunks)
    assert all(len(chunk.content) >= 15 for chunk in merged.chunks)
    assert [chunk.index for chunk in merged.chunks] == list(range(len(merged.chunks)))
    assert "\n\n" in merged.chunks[0].content


def test_records_follow_storage_shape(transcript_segments) -> None:
    pipeline = SegmentationPipeline(ChunkingOptions(max_chunk_size=15, min_chunk_size=5, overlap=0))

    records = pipeline.run(_transcript_document(transcript_segments)).records()

    assert records[0] == {
        "document_id": "lecture-1",
        "chunk_index": 0,
        "content": "Hello world.",
        "metadata": {"start_offset": 0, "end_offset": 13, "start_time": 0.0, "end_time": 1.0},
    }
    assert records[1]["metadata"]["start_time"] == 1.2


def test_document_id_is_generated_when_missing() -> None:
    result = SegmentationPipeline().run(ExtractedDocument(content="x" * 150))

    assert uuid.UUID(result.document_id)
    assert len(result.chunks) == 1


def test_per_run_options_override_pipeline_defaults() -> None:
    pipeline = SegmentationPipeline(merge_small_chunks=False)
    document = ExtractedDocument(content="a" * 1000)

    result = pipeline.run(document, options=ChunkingOptions(max_chunk_size=300, min_chunk_size=100, overlap=50))

    assert len(result.chunks) == 4
    assert pipeline.options == ChunkingOptions()


def test_pipeline_reads_settings_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("DOCSEG_MAX_CHUNK_SIZE", "250")
    monkeypatch.setenv("DOCSEG_MERGE_SMALL_CHUNKS", "false")
    from docseg.settings import reset_settings_cache

    reset_settings_cache()
    pipeline = SegmentationPipeline()

    assert pipeline.options.max_chunk_size == 250
    assert pipeline.merge_small_chunks is False


def test_empty_document_yields_no_chunks() -> None:
    result = SegmentationPipeline().run(ExtractedDocument(content="   "))

    assert result.chunks == []
    assert result.records() == []


def test_run_many_preserves_order() -> None:
    documents = [
        ExtractedDocument(content=letter * (200 * (position + 1)), document_id=letter)
        for position, letter in enumerate("abcd")
    ]
    pipeline = SegmentationPipeline(ChunkingOptions(max_chunk_size=300, min_chunk_size=50, overlap=0), max_workers=3)

    results = pipeline.run_many(documents)

    assert [result.document_id for result in results] == ["a", "b", "c", "d"]
    assert [result.chunks[0].content[0] for result in results] == ["a", "b", "c", "d"]
    assert pipeline.run_many([]) == []


def test_pipeline_writes_audit_entry(tmp_path, reset_audit_logger) -> None:
    audit_path = configure_logging(tmp_path / "logs")
    pipeline = SegmentationPipeline(ChunkingOptions(max_chunk_size=300, min_chunk_size=50, overlap=0))

    pipeline.run(ExtractedDocument(content="z" * 700, source_kind=SourceKind.PDF, document_id="doc-7"))

    lines = audit_path.read_text(encoding="utf-8").splitlines()
    assert lines, "Audit log should contain at least one entry"
    entry = json.loads(lines[-1])
    assert entry["document_id"] == "doc-7"
    assert entry["source_kind"] == "pdf"
    assert entry["text_length"] == 700
    assert entry["chunks"] == 3
    assert "timestamp" in entry
