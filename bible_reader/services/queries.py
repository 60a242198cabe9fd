"""Read operations served by whichever engine the session selects."""

from __future__ import annotations

import asyncio
from typing import Optional, Sequence

from typing_extensions import assert_never

from bible_reader.core.config import config
from bible_reader.core.exceptions import EngineQueryError
from bible_reader.core.logging import data_source_context, get_logger
from bible_reader.core.models import (
    BibleCrossReference,
    BibleReferenceRange,
    BibleVersion,
    BookSummary,
    ChapterResult,
    ContentNode,
    DictionaryEntry,
    PhraseList,
    ReferenceRangeData,
    Section,
)
from bible_reader.core.ports import BibleEnginePort
from bible_reader.services.data_source import (
    DataSourceSession,
    force_remote,
    run_with_fallback,
    run_with_gated_fallback,
    select_engine,
)

logger = get_logger(__name__)


def wrap_phrase_contents(contents: Sequence[ContentNode]) -> list[ContentNode]:
    """Return ``contents`` as a list whose first node is always a section.

    Phrase-level content is wrapped whole in one untitled section.
    """
    if not contents:
        return []
    first = contents[0]
    if isinstance(first, PhraseList):
        return [Section(title="", contents=list(contents))]
    if isinstance(first, Section):
        return list(contents)
    assert_never(first)


async def get_chapter(
    session: DataSourceSession, version_uid: str, book_osis_id: str, chapter_num: int
) -> Optional[ChapterResult]:
    """Return one chapter of ``version_uid``, or None if no engine could serve it."""
    reference_range = BibleReferenceRange(
        book_osis_id=book_osis_id,
        version_uid=version_uid,
        version_chapter_num=chapter_num,
    )

    async def request(engine: BibleEnginePort) -> ReferenceRangeData:
        return await engine.get_full_data_for_reference_range(reference_range, with_context=True)

    try:
        data = await run_with_fallback(session, "get_chapter", request)
    except EngineQueryError:
        return None
    return ChapterResult(
        next_chapter=data.next_chapter,
        contents=wrap_phrase_contents(data.contents),
    )


async def get_books(
    session: DataSourceSession, version_id: Optional[int] = None
) -> list[BookSummary]:
    """List the books of the default version with their chapter counts."""
    target_version = config.DEFAULT_BOOK_VERSION_ID if version_id is None else version_id
    try:
        books = await run_with_gated_fallback(
            session,
            "get_books",
            lambda engine: engine.get_books_for_version(target_version),
        )
    except EngineQueryError:
        return []
    return [
        BookSummary(osis_id=book.osis_id, title=book.title, num_chapters=len(book.chapters_count))
        for book in books
    ]


async def get_versions(session: DataSourceSession) -> list[BibleVersion]:
    """List available versions; any failure yields an empty list."""
    try:
        with data_source_context(session.mode):
            return await select_engine(session).get_versions()
    except Exception as exc:  # pylint: disable=broad-except
        logger.error("error: %s", exc)
    return []


async def get_verse_contents(
    session: DataSourceSession, refs: Sequence[BibleCrossReference]
) -> list[str]:
    """Return the text of each referenced verse range, in order.

    Only the local engine serves this; otherwise every entry is ``""``.
    """
    empty = ["" for _ in refs]
    local_engine = session.local_engine
    if not session.using_local or local_engine is None:
        return empty
    try:
        with data_source_context(session.mode):
            verses = await asyncio.gather(*(local_engine.get_phrases(ref.range) for ref in refs))
    except Exception as exc:  # pylint: disable=broad-except
        force_remote(session, f"get_verse_contents failed locally: {exc}")
        return empty
    return [" ".join(phrase.content for phrase in phrases) for phrases in verses]


def dictionary_for_strong(strong: str) -> Optional[str]:
    """Return the lexicon serving ``strong``: Hebrew for ``H…``, Greek for ``G…``."""
    if strong.startswith("H"):
        return config.HEBREW_DICTIONARY
    if strong.startswith("G"):
        return config.GREEK_DICTIONARY
    return None


async def _first_definition(
    engine: BibleEnginePort, strong: str
) -> Optional[DictionaryEntry]:
    dictionary = dictionary_for_strong(strong)
    if dictionary is None:
        return None
    definitions = await engine.get_dictionary_entries(strong, dictionary)
    return definitions[0] if definitions else None


async def get_dictionary_entries(
    session: DataSourceSession, strongs: Sequence[str]
) -> list[DictionaryEntry]:
    """Return the first lexicon definition for each Strong's code that has one."""

    async def request(engine: BibleEnginePort) -> list[DictionaryEntry]:
        definitions = await asyncio.gather(*(_first_definition(engine, s) for s in strongs))
        return [definition for definition in definitions if definition is not None]

    try:
        return await run_with_gated_fallback(session, "get_dictionary_entries", request)
    except EngineQueryError:
        return []


__all__ = [
    "wrap_phrase_contents",
    "get_chapter",
    "get_books",
    "get_versions",
    "get_verse_contents",
    "dictionary_for_strong",
    "get_dictionary_entries",
]
