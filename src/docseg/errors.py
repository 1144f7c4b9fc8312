"""Common exceptions raised at the edges of the segmentation service."""
from __future__ import annotations


class UnsupportedSourceError(ValueError):
    """Raised when a document's MIME type or file name maps to no supported source kind."""

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.__cause__ = cause
