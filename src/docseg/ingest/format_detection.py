"""Utilities for detecting the kind of source a text was extracted from."""
from __future__ import annotations

import mimetypes
from enum import Enum
from pathlib import Path
from typing import Optional

from docseg.errors import UnsupportedSourceError


class SourceKind(str, Enum):
    """Supported source kinds."""

    PDF = "pdf"
    AUDIO = "audio"
    MARKDOWN = "md"
    TXT = "txt"


_SUFFIX_MAP = {
    "pdf": SourceKind.PDF,
    "md": SourceKind.MARKDOWN,
    "markdown": SourceKind.MARKDOWN,
    "txt": SourceKind.TXT,
    "mp3": SourceKind.AUDIO,
    "wav": SourceKind.AUDIO,
    "m4a": SourceKind.AUDIO,
    "ogg": SourceKind.AUDIO,
    "webm": SourceKind.AUDIO,
}


class SourceKindDetector:
    """Detects the source kind based on MIME type and optional file name."""

    _MIME_MAP = {
        "application/pdf": SourceKind.PDF,
        "text/markdown": SourceKind.MARKDOWN,
        "text/x-markdown": SourceKind.MARKDOWN,
        "text/plain": SourceKind.TXT,
    }

    @classmethod
    def _from_mime(cls, mime_type: Optional[str]) -> Optional[SourceKind]:
        if not mime_type:
            return None
        mime_type = mime_type.split(";", 1)[0].strip().lower()
        if mime_type.startswith("audio/"):
            return SourceKind.AUDIO
        return cls._MIME_MAP.get(mime_type)

    @classmethod
    def detect(cls, mime_type: Optional[str] = None, file_name: Optional[str] = None) -> SourceKind:
        """Return the detected source kind.

        The detector first considers an explicit MIME type value, falling back to
        `mimetypes.guess_type` on the file name and finally checking its suffix.
        """

        kind = cls._from_mime(mime_type)
        if kind is not None:
            return kind

        if file_name:
            guessed_type, _ = mimetypes.guess_type(file_name)
            kind = cls._from_mime(guessed_type)
            if kind is not None:
                return kind
            suffix = Path(file_name).suffix.lower().lstrip(".")
            if suffix in _SUFFIX_MAP:
                return _SUFFIX_MAP[suffix]

        raise UnsupportedSourceError(
            f"Unsupported source type: {mime_type or file_name or 'unknown'}"
        )
