"""Tests for preparing and checking the downloaded local database."""

from __future__ import annotations

import asyncio
import sqlite3
import threading
from pathlib import Path

import pytest

from bible_reader.adapters.bundled_asset import FileBundledAsset
from bible_reader.adapters.key_value import TinyDBKeyValueStore
from bible_reader.core.ports import ResolvedAsset
from bible_reader.core.storage_keys import EXISTING_HASH_KEY, StorageKey
from bible_reader.services.data_source import DataSourceSession
from bible_reader.services.local_sync import LocalAssetSynchronizer


class FailingAsset:
    """Asset whose download always fails."""

    def resolve(self) -> ResolvedAsset:
        return ResolvedAsset(uri="https://cdn.example.com/bibles.db", hash="abc")

    async def download(self, destination: Path) -> None:
        raise OSError("connection reset")


@pytest.fixture(name="bundled_db")
def _bundled_db(tmp_path: Path) -> Path:
    path = tmp_path / "bundle" / "bibles.db"
    path.parent.mkdir()
    conn = sqlite3.connect(str(path))
    conn.execute("CREATE TABLE bible_version (id INTEGER PRIMARY KEY, uid TEXT)")
    conn.commit()
    conn.close()
    return path


@pytest.fixture(name="store")
def _store(tmp_path: Path):
    store = TinyDBKeyValueStore(tmp_path / "storage.json")
    yield store
    store.close()


def _synchronizer(session, store, tmp_path, **kwargs) -> LocalAssetSynchronizer:
    return LocalAssetSynchronizer(
        session, store, database_path=tmp_path / "SQLite" / "bibles.db", **kwargs
    )


def test_prepare_local_database_downloads_and_activates(
    tmp_path, store, bundled_db, local_engine, remote_engine
):
    """A full sync copies the asset, stores its hash, and enables the local engine."""
    session = DataSourceSession(remote_engine=remote_engine)
    session.state.force_remote = True
    store.save(StorageKey.CURRENT_CHAPTER.value, {"book": "Gen", "chapter": 3})
    opened: list[Path] = []

    def factory(path: Path):
        opened.append(path)
        return local_engine

    asset = FileBundledAsset(bundled_db)
    sync = _synchronizer(session, store, tmp_path, asset=asset, local_engine_factory=factory)

    asyncio.run(sync.prepare_local_database())

    assert sync.database_path.read_bytes() == bundled_db.read_bytes()
    assert store.get(EXISTING_HASH_KEY) == asset.resolve().hash
    assert store.get(StorageKey.CURRENT_CHAPTER.value) is None
    assert opened == [sync.database_path]
    assert session.local_engine is local_engine
    assert session.state.force_remote is False
    assert session.state.local_ready is True


def test_prepare_local_database_failure_forces_remote(tmp_path, store, remote_engine):
    """Any failed step leaves the session remote but marks preparation finished."""
    session = DataSourceSession(remote_engine=remote_engine)
    sync = _synchronizer(
        session, store, tmp_path, asset=FailingAsset(), local_engine_factory=lambda p: None
    )

    asyncio.run(sync.prepare_local_database())

    assert session.state.force_remote is True
    assert session.state.local_ready is True
    assert session.local_engine is None
    assert store.get(EXISTING_HASH_KEY) is None


def test_prepare_local_database_without_engine_factory(tmp_path, store, bundled_db, remote_engine):
    """Without a way to build a local engine the session runs remote-only."""
    session = DataSourceSession(remote_engine=remote_engine)
    sync = _synchronizer(session, store, tmp_path, asset=FileBundledAsset(bundled_db))

    asyncio.run(sync.prepare_local_database())

    assert sync.database_path.exists()
    assert session.state.force_remote is True


def test_prepare_local_database_rejects_corrupt_file(tmp_path, store, local_engine, remote_engine):
    """A downloaded file that is not SQLite fails the open step."""
    corrupt = tmp_path / "corrupt.db"
    corrupt.write_bytes(b"this is definitely not a sqlite database" * 10)
    session = DataSourceSession(remote_engine=remote_engine)
    sync = _synchronizer(
        session,
        store,
        tmp_path,
        asset=FileBundledAsset(corrupt),
        local_engine_factory=lambda p: local_engine,
    )

    asyncio.run(sync.prepare_local_database())

    assert session.state.force_remote is True


def test_prepare_local_database_removes_previous_file(
    tmp_path, store, bundled_db, local_engine, remote_engine
):
    """An older local file is replaced, not appended to."""
    session = DataSourceSession(remote_engine=remote_engine)
    sync = _synchronizer(
        session,
        store,
        tmp_path,
        asset=FileBundledAsset(bundled_db),
        local_engine_factory=lambda p: local_engine,
    )
    sync.database_path.parent.mkdir(parents=True)
    sync.database_path.write_bytes(b"stale")

    asyncio.run(sync.prepare_local_database())

    assert sync.database_path.read_bytes() == bundled_db.read_bytes()


class TruncatingAsset:
    """Asset whose download writes a few bytes and then drops the connection."""

    def __init__(self, source: Path) -> None:
        self._inner = FileBundledAsset(source)

    def resolve(self) -> ResolvedAsset:
        return self._inner.resolve()

    async def download(self, destination: Path) -> None:
        destination.write_bytes(b"SQLite for")
        raise ConnectionError("connection dropped")


def test_failed_resync_invalidates_previous_fingerprint(
    tmp_path, store, bundled_db, local_engine, remote_engine
):
    """After an interrupted re-sync the truncated file is never reported as current."""
    session = DataSourceSession(remote_engine=remote_engine)
    good = _synchronizer(
        session,
        store,
        tmp_path,
        asset=FileBundledAsset(bundled_db),
        local_engine_factory=lambda p: local_engine,
    )
    asyncio.run(good.prepare_local_database())
    assert asyncio.run(good.database_is_available()) is True

    broken = _synchronizer(
        session,
        store,
        tmp_path,
        asset=TruncatingAsset(bundled_db),
        local_engine_factory=lambda p: local_engine,
    )
    asyncio.run(broken.prepare_local_database())

    assert session.state.force_remote is True
    assert store.get(EXISTING_HASH_KEY) is None

    fresh_session = DataSourceSession(remote_engine=remote_engine)
    checker = _synchronizer(
        fresh_session, store, tmp_path, asset=FileBundledAsset(bundled_db)
    )
    assert asyncio.run(checker.database_is_available()) is False
    assert fresh_session.state.force_remote is True


def test_database_is_available_when_hash_and_file_match(
    tmp_path, store, bundled_db, local_engine, remote_engine
):
    """A synced database with an unchanged asset is available."""
    session = DataSourceSession(remote_engine=remote_engine)
    sync = _synchronizer(
        session,
        store,
        tmp_path,
        asset=FileBundledAsset(bundled_db),
        local_engine_factory=lambda p: local_engine,
    )
    asyncio.run(sync.prepare_local_database())

    assert asyncio.run(sync.database_is_available()) is True
    assert session.state.force_remote is False
    assert session.state.local_ready is True


def test_database_is_available_detects_changed_asset(
    tmp_path, store, bundled_db, local_engine, remote_engine
):
    """A new bundled asset makes the local copy stale."""
    session = DataSourceSession(remote_engine=remote_engine)
    sync = _synchronizer(
        session,
        store,
        tmp_path,
        asset=FileBundledAsset(bundled_db),
        local_engine_factory=lambda p: local_engine,
    )
    asyncio.run(sync.prepare_local_database())

    conn = sqlite3.connect(str(bundled_db))
    conn.execute("CREATE TABLE bible_book (id INTEGER PRIMARY KEY)")
    conn.commit()
    conn.close()

    assert asyncio.run(sync.database_is_available()) is False
    assert session.state.force_remote is True
    assert session.state.local_ready is False


def test_database_is_available_requires_local_file(tmp_path, store, bundled_db, remote_engine):
    """A matching hash is not enough when the file has been removed."""
    session = DataSourceSession(remote_engine=remote_engine)
    asset = FileBundledAsset(bundled_db)
    store.save(EXISTING_HASH_KEY, asset.resolve().hash)
    sync = _synchronizer(session, store, tmp_path, asset=asset)

    assert asyncio.run(sync.database_is_available()) is False
    assert session.state.force_remote is True


def test_database_is_available_without_asset(tmp_path, store, remote_engine):
    """An unconfigured asset counts as unavailable."""
    session = DataSourceSession(remote_engine=remote_engine)
    sync = _synchronizer(session, store, tmp_path)

    assert asyncio.run(sync.database_is_available()) is False
    assert session.state.force_remote is True


def test_prepare_local_database_hashes_off_the_event_loop(
    tmp_path, store, bundled_db, local_engine, remote_engine
):
    """Hashing the bundled asset runs in a worker thread, not on the loop thread."""
    threads: list[str] = []

    class RecordingAsset(FileBundledAsset):
        def resolve(self) -> ResolvedAsset:
            threads.append(threading.current_thread().name)
            return super().resolve()

    session = DataSourceSession(remote_engine=remote_engine)
    sync = _synchronizer(
        session,
        store,
        tmp_path,
        asset=RecordingAsset(bundled_db),
        local_engine_factory=lambda p: local_engine,
    )

    asyncio.run(sync.prepare_local_database())

    assert threads
    assert threading.main_thread().name not in threads
