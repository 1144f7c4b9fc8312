"""Shared fixtures for the segmentation tests."""
from __future__ import annotations

import logging
import random
import string
from typing import List

import pytest

from docseg.ingest.models import TimeSegment
from docseg.logging_config import AUDIT_LOGGER_NAME
from docseg.settings import reset_settings_cache

_ENV_KEYS = (
    "DOCSEG_MAX_CHUNK_SIZE",
    "DOCSEG_MIN_CHUNK_SIZE",
    "DOCSEG_OVERLAP",
    "DOCSEG_PRESERVE_SENTENCES",
    "DOCSEG_MERGE_SMALL_CHUNKS",
    "DOCSEG_MAX_WORKERS",
    "DOCSEG_MERGE_MIN_SIZE",
)


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture()
def reset_audit_logger():
    root = logging.getLogger()
    root_handlers = list(root.handlers)
    root_level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in root_handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in root_handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(root_level)
    audit_logger = logging.getLogger(AUDIT_LOGGER_NAME)
    for handler in list(audit_logger.handlers):
        audit_logger.removeHandler(handler)
        handler.close()
    audit_logger.propagate = True


def generate_words(words: int = 200, seed: int = 42) -> str:
    rng = random.Random(seed)
    alphabet = string.ascii_letters + "абвгдеёжзийклмнопрстуфхцчшщъыьэюя"
    tokens = []
    for _ in range(words):
        length = rng.randint(3, 12)
        tokens.append("".join(rng.choice(alphabet) for _ in range(length)))
    return " ".join(tokens)


def generate_sentences(sentences: int = 60, seed: int = 7) -> str:
    rng = random.Random(seed)
    parts = []
    for position in range(sentences):
        words = generate_words(rng.randint(4, 18), seed=seed + position)
        ender = rng.choice([".", "!", "?"])
        parts.append(words.capitalize() + ender)
        if position % 7 == 6:
            parts.append("\n\n")
        else:
            parts.append(" ")
    return "".join(parts).strip()


@pytest.fixture()
def transcript_segments() -> List[TimeSegment]:
    return [
        TimeSegment(text="Hello", start=0.0, end=0.5),
        TimeSegment(text="world.", start=0.5, end=1.0),
        TimeSegment(text="This", start=1.2, end=1.4),
        TimeSegment(text="is", start=1.4, end=1.5),
        TimeSegment(text="a", start=1.5, end=1.6),
        TimeSegment(text="test.", start=1.6, end=2.0),
    ]


@pytest.fixture()
def words_text() -> str:
    return generate_words(120)


@pytest.fixture()
def sentences_text() -> str:
    return generate_sentences(80)
