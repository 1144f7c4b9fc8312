"""Data models used by the segmentation pipeline."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class TimeSegment:
    """A transcribed word together with its time range in seconds."""

    text: str
    start: float
    end: float

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "TimeSegment":
        return cls(text=str(data["text"]), start=float(data["start"]), end=float(data["end"]))


@dataclass(slots=True, frozen=True)
class PageContent:
    """Represents text extracted from a page in the source document."""

    page_number: int
    text: str


@dataclass(slots=True, frozen=True)
class ChunkMetadata:
    """Provenance attached to an individual chunk.

    ``start_offset``/``end_offset`` are half-open character offsets into the
    source text. Time and page annotations are ``None`` when the source did not
    provide the side data needed to compute them.
    """

    start_offset: int
    end_offset: int
    start_time: Optional[float] = None
    end_time: Optional[float] = None
    page_number: Optional[int] = None

    @property
    def has_time(self) -> bool:
        return self.start_time is not None or self.end_time is not None

    @property
    def has_page(self) -> bool:
        return self.page_number is not None

    def as_dict(self) -> dict[str, Any]:
        """Return the metadata without the annotations that are absent."""

        payload: dict[str, Any] = {"start_offset": self.start_offset, "end_offset": self.end_offset}
        if self.start_time is not None:
            payload["start_time"] = self.start_time
        if self.end_time is not None:
            payload["end_time"] = self.end_time
        if self.page_number is not None:
            payload["page_number"] = self.page_number
        return payload


@dataclass(slots=True, frozen=True)
class ContentChunk:
    """Container that pairs chunk text with associated metadata."""

    content: str
    index: int
    metadata: ChunkMetadata


def _coerce_time_segments(items: Iterable[Any]) -> tuple[TimeSegment, ...]:
    segments: list[TimeSegment] = []
    for position, item in enumerate(items):
        if isinstance(item, TimeSegment):
            segments.append(item)
            continue
        try:
            segments.append(TimeSegment.from_mapping(item))
        except (KeyError, TypeError, ValueError) as error:
            LOGGER.warning("Skipping malformed time segment at position %s: %s", position, error)
    return tuple(segments)


def _coerce_page_breaks(items: Iterable[Any]) -> tuple[int, ...]:
    breaks: list[int] = []
    for position, item in enumerate(items):
        try:
            breaks.append(int(item))
        except (TypeError, ValueError) as error:
            LOGGER.warning("Skipping malformed page break at position %s: %s", position, error)
    return tuple(breaks)


@dataclass(slots=True, frozen=True)
class SideData:
    """Optional metadata handed over by the extraction step.

    ``timestamps`` is only meaningful for audio transcripts and
    ``page_breaks`` only for paginated sources. ``page_breaks=None`` means no
    pagination is known; an empty tuple places everything on page 1.
    """

    timestamps: tuple[TimeSegment, ...] = field(default_factory=tuple)
    page_breaks: Optional[tuple[int, ...]] = None

    @classmethod
    def from_raw(
        cls,
        timestamps: Optional[Iterable[Any]] = None,
        page_breaks: Optional[Iterable[Any]] = None,
    ) -> "SideData":
        """Build side data from loosely typed input, skipping malformed entries."""

        segments: tuple[TimeSegment, ...] = ()
        if timestamps is not None and not isinstance(timestamps, (str, bytes)):
            try:
                segments = _coerce_time_segments(timestamps)
            except TypeError:
                LOGGER.warning("Ignoring time segments of type %s", type(timestamps).__name__)

        breaks: Optional[tuple[int, ...]] = None
        if page_breaks is not None and not isinstance(page_breaks, (str, bytes)):
            try:
                breaks = _coerce_page_breaks(page_breaks)
            except TypeError:
                LOGGER.warning("Ignoring page breaks of type %s", type(page_breaks).__name__)

        return cls(timestamps=segments, page_breaks=breaks)
