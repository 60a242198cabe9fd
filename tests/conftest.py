"""Pytest configuration: ensure env vars and import path are set early.

This runs before any tests, so modules can import without local path hacks.
Also load .env before setting defaults so real settings are used when present.
"""
from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path
from typing import Any, Sequence

import pytest
from dotenv import load_dotenv

# Ensure repository root is on sys.path for local package imports
sys.path.append(str(Path(__file__).resolve().parents[1]))

load_dotenv(override=False)

# Ensure required env vars exist for config import (fallbacks only)
os.environ.setdefault("REMOTE_BIBLE_ENGINE_URL", "http://engine.example.com")
os.environ.setdefault("DOCUMENT_DIR", tempfile.mkdtemp(prefix="bible-reader-"))

# pylint: disable=wrong-import-position
from bible_reader.core.models import (  # noqa: E402
    BibleBook,
    BibleReferenceRange,
    BibleVersion,
    DictionaryEntry,
    Phrase,
    ReferenceRangeData,
)
from bible_reader.core.v11n_models import V11nRule  # noqa: E402


class FakeEngine:
    """In-memory engine recording calls; raises ``error`` when set."""

    def __init__(self, name: str, error: Exception | None = None) -> None:
        self.name = name
        self.error = error
        self.calls: list[tuple[str, Any]] = []
        self.chapter = ReferenceRangeData()
        self.books: list[BibleBook] = []
        self.versions: list[BibleVersion] = []
        self.phrases: dict[tuple[str, int | None, int | None], list[Phrase]] = {}
        self.dictionary: dict[tuple[str, str], list[DictionaryEntry]] = {}
        self.submitted: list[list[V11nRule]] = []

    def _record(self, operation: str, args: Any) -> None:
        self.calls.append((operation, args))
        if self.error is not None:
            raise self.error

    async def get_full_data_for_reference_range(
        self, reference_range: BibleReferenceRange, with_context: bool = True
    ) -> ReferenceRangeData:
        self._record("get_full_data_for_reference_range", (reference_range, with_context))
        return self.chapter

    async def get_books_for_version(self, version_id: int) -> list[BibleBook]:
        self._record("get_books_for_version", version_id)
        return self.books

    async def get_versions(self) -> list[BibleVersion]:
        self._record("get_versions", None)
        return self.versions

    async def get_phrases(self, reference_range: BibleReferenceRange) -> list[Phrase]:
        self._record("get_phrases", reference_range)
        key = (
            reference_range.book_osis_id,
            reference_range.version_chapter_num,
            reference_range.version_verse_num,
        )
        return self.phrases.get(key, [])

    async def get_dictionary_entries(self, strong: str, dictionary: str) -> list[DictionaryEntry]:
        self._record("get_dictionary_entries", (strong, dictionary))
        return self.dictionary.get((strong, dictionary), [])

    async def add_v11n_rules(self, rules: Sequence[V11nRule]) -> None:
        self._record("add_v11n_rules", len(rules))
        self.submitted.append(list(rules))


class FakeNetwork:
    """Reachability stub with a fixed answer."""

    def __init__(self, available: bool) -> None:
        self.available = available
        self.checks = 0

    async def internet_is_available(self) -> bool:
        self.checks += 1
        return self.available


@pytest.fixture(name="local_engine")
def _local_engine() -> FakeEngine:
    return FakeEngine("local")


@pytest.fixture(name="remote_engine")
def _remote_engine() -> FakeEngine:
    return FakeEngine("remote")
