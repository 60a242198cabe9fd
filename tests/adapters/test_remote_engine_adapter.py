"""Tests for the HTTP engine adapter."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from bible_reader.adapters.remote_engine import HttpBibleEngine
from bible_reader.core.models import BibleReferenceRange, PhraseList, Section
from bible_reader.core.v11n_models import V11nAction, V11nRule, V11nSourceRef, V11nStandardRef


def _engine(handler) -> HttpBibleEngine:
    return HttpBibleEngine(
        "http://engine.test/api/", timeout=1.0, transport=httpx.MockTransport(handler)
    )


def test_full_data_query_parses_sections_and_next_chapter():
    """Section payloads become Section nodes and the next range is extracted."""
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={
                "content": {
                    "contents": [
                        {
                            "type": "section",
                            "title": "The Creation",
                            "contents": [{"content": "In"}, {"content": "the"}],
                        }
                    ]
                },
                "contextRanges": {
                    "normalizedChapter": {
                        "nextRange": {"bookOsisId": "Gen", "versionChapterNum": 2}
                    }
                },
            },
        )

    reference_range = BibleReferenceRange(
        book_osis_id="Gen", version_uid="ESV", version_chapter_num=1
    )
    data = asyncio.run(_engine(handler).get_full_data_for_reference_range(reference_range))

    assert seen["path"] == "/api/getFullDataForReferenceRange"
    assert seen["body"] == {
        "range": {"bookOsisId": "Gen", "versionUid": "ESV", "versionChapterNum": 1},
        "withContext": True,
    }
    (section,) = data.contents
    assert isinstance(section, Section)
    assert section.title == "The Creation"
    (phrases,) = section.contents
    assert isinstance(phrases, PhraseList)
    assert [p.content for p in phrases.phrases] == ["In", "the"]
    assert data.next_chapter is not None
    assert data.next_chapter.version_chapter_num == 2


def test_full_data_query_without_context_has_no_next_chapter():
    """A last chapter (no context ranges) yields no next chapter and flat phrases."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200, json={"content": {"contents": [{"content": "Amen."}, {"content": "Come"}]}}
        )

    data = asyncio.run(
        _engine(handler).get_full_data_for_reference_range(
            BibleReferenceRange(book_osis_id="Rev", version_chapter_num=22)
        )
    )

    assert data.next_chapter is None
    (node,) = data.contents
    assert isinstance(node, PhraseList)
    assert len(node.phrases) == 2


def test_books_query_maps_camel_case_fields():
    """Book payloads validate from the engine's camelCase fields."""

    def handler(request: httpx.Request) -> httpx.Response:
        assert json.loads(request.content) == {"versionId": 1}
        return httpx.Response(
            200, json=[{"osisId": "Gen", "title": "Genesis", "chaptersCount": [31, 25]}]
        )

    (book,) = asyncio.run(_engine(handler).get_books_for_version(1))

    assert book.osis_id == "Gen"
    assert book.chapters_count == [31, 25]


def test_http_errors_propagate():
    """Server errors raise so the caller's fallback can react."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"error": "unavailable"})

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(_engine(handler).get_versions())


def test_add_v11n_rules_posts_camel_case_batch():
    """Rules are submitted as one JSON batch with engine field names."""
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={})

    rule = V11nRule(
        source_ref=V11nSourceRef(
            book_osis_id="Gen", version_chapter_num=1, version_verse_num=1, version_subverse_num=1
        ),
        standard_ref=V11nStandardRef(
            book_osis_id="Gen",
            normalized_chapter_num=1,
            normalized_verse_num=2,
            part_indicator="a",
        ),
        action=V11nAction.KEEP_VERSE,
        source_type_id=1,
    )

    asyncio.run(_engine(handler).add_v11n_rules([rule]))

    assert seen["path"] == "/api/addV11nRules"
    (payload,) = seen["body"]["rules"]
    assert payload["sourceRef"]["versionSubverseNum"] == 1
    assert payload["standardRef"]["partIndicator"] == "a"
    assert payload["action"] == "Keep verse"
    assert payload["sourceTypeId"] == 1
