"""Structured lifecycle logging helpers."""

from __future__ import annotations

import logging
import traceback
from typing import Any, Optional

LOGGER = logging.getLogger("docseg.telemetry")


def _format_exception(error: BaseException) -> str:
    return "".join(traceback.format_exception(error.__class__, error, error.__traceback__))


def log_event(
    logger: Optional[logging.Logger],
    step: str,
    *,
    level: str = "info",
    document_id: str | None = None,
    duration_ms: float | None = None,
    exc: BaseException | str | None = None,
    details: dict[str, Any] | None = None,
    **payload: Any,
) -> None:
    """Emit a structured log event with the agreed-upon schema."""

    logger = logger or LOGGER
    event: dict[str, Any] = {"step": step, "module": logger.name}
    if document_id:
        event["document_id"] = document_id
    if duration_ms is not None:
        event["duration_ms"] = round(duration_ms, 3)
    if details is not None:
        event["details"] = details
    event.update(payload)

    exc_info = None
    if exc is not None:
        if isinstance(exc, BaseException):
            event["exc"] = _format_exception(exc)
            exc_info = (exc.__class__, exc, exc.__traceback__)
        else:
            event["exc"] = str(exc)

    log_method = getattr(logger, level.lower(), logger.info)
    log_method(event, exc_info=exc_info)


def emit_segmentation_event(
    *,
    document_id: str,
    source_kind: str,
    text_length: int,
    raw_chunks: int,
    chunks: int,
    duration_ms: float,
    merged: bool,
) -> None:
    log_event(
        LOGGER,
        "segmentation",
        document_id=document_id,
        duration_ms=duration_ms,
        details={
            "source_kind": source_kind,
            "text_length": text_length,
            "raw_chunks": raw_chunks,
            "chunks": chunks,
            "merged": merged,
        },
    )
