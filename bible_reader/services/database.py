"""Database façade combining local sync and fallback-aware queries."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

from bible_reader.core.models import (
    BibleCrossReference,
    BibleVersion,
    BookSummary,
    ChapterResult,
    DictionaryEntry,
)
from bible_reader.core.ports import (
    BibleEnginePort,
    BundledAssetPort,
    KeyValueStorePort,
    LocalEngineFactory,
    NetworkPort,
)
from bible_reader.services import queries
from bible_reader.services.data_source import DataSourceSession
from bible_reader.services.local_sync import LocalAssetSynchronizer


class Database:
    """Entry point the reading UI talks to.

    Holds one :class:`DataSourceSession`; every query goes through it, so the
    local/remote decision made by one call is visible to the next.
    """

    def __init__(
        self,
        remote_engine: BibleEnginePort,
        store: KeyValueStorePort,
        *,
        asset: Optional[BundledAssetPort] = None,
        local_engine_factory: Optional[LocalEngineFactory] = None,
        network: Optional[NetworkPort] = None,
        database_path: Optional[Path] = None,
    ) -> None:
        self.session = DataSourceSession(remote_engine=remote_engine, network=network)
        self.synchronizer = LocalAssetSynchronizer(
            self.session,
            store,
            asset=asset,
            local_engine_factory=local_engine_factory,
            database_path=database_path,
        )

    @property
    def force_remote(self) -> bool:
        """True once a local failure moved this database to the remote engine."""
        return self.session.state.force_remote

    @property
    def local_db_is_ready(self) -> bool:
        return self.session.state.local_ready

    async def set_local_database(self) -> None:
        await self.synchronizer.prepare_local_database()

    async def database_is_available(self) -> bool:
        return await self.synchronizer.database_is_available()

    async def get_chapter(
        self, version_uid: str, book_osis_id: str, chapter_num: int
    ) -> Optional[ChapterResult]:
        return await queries.get_chapter(self.session, version_uid, book_osis_id, chapter_num)

    async def get_books(self) -> list[BookSummary]:
        return await queries.get_books(self.session)

    async def get_versions(self) -> list[BibleVersion]:
        return await queries.get_versions(self.session)

    async def get_verse_contents(self, refs: Sequence[BibleCrossReference]) -> list[str]:
        return await queries.get_verse_contents(self.session, refs)

    async def get_dictionary_entries(self, strongs: Sequence[str]) -> list[DictionaryEntry]:
        return await queries.get_dictionary_entries(self.session, strongs)


__all__ = ["Database"]
