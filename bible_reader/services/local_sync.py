"""Preparation and freshness checks for the downloaded local database."""

from __future__ import annotations

import asyncio
import sqlite3
from pathlib import Path
from typing import Optional

from bible_reader.core.config import config
from bible_reader.core.exceptions import LocalDatabaseUnavailableError
from bible_reader.core.logging import get_logger
from bible_reader.core.models import AssetFingerprint
from bible_reader.core.ports import BundledAssetPort, KeyValueStorePort, LocalEngineFactory
from bible_reader.core.storage_keys import EXISTING_HASH_KEY, StorageKey
from bible_reader.services.data_source import DataSourceSession, activate_local_engine, force_remote

logger = get_logger(__name__)


def _open_database(path: Path) -> None:
    """Open ``path`` as SQLite and read its schema version to prove it is valid."""
    conn = sqlite3.connect(str(path))
    try:
        conn.execute("PRAGMA schema_version").fetchone()
    finally:
        conn.close()


class LocalAssetSynchronizer:
    """Keeps the local database file in step with the bundled asset."""

    def __init__(
        self,
        session: DataSourceSession,
        store: KeyValueStorePort,
        *,
        asset: Optional[BundledAssetPort] = None,
        local_engine_factory: Optional[LocalEngineFactory] = None,
        database_path: Optional[Path] = None,
    ) -> None:
        self._session = session
        self._store = store
        self._asset = asset
        self._local_engine_factory = local_engine_factory
        self.database_path = database_path or config.local_database_path

    def _resolve_asset(self) -> BundledAssetPort:
        if self._asset is None:
            raise LocalDatabaseUnavailableError("No bundled database asset configured")
        return self._asset

    def stored_fingerprint(self) -> Optional[AssetFingerprint]:
        """Return the fingerprint of the last synchronized database, if any."""
        value = self._store.get(EXISTING_HASH_KEY)
        return AssetFingerprint(hash=str(value)) if value else None

    async def prepare_local_database(self) -> None:
        """Replace the local database with the bundled asset and open it.

        Any failure trips the session into remote mode without retrying.
        ``local_ready`` stays False while preparation runs and becomes True
        once it finishes, whichever way it ends.
        """
        state = self._session.state
        state.local_ready = False
        try:
            directory = self.database_path.parent
            directory.mkdir(parents=True, exist_ok=True)
            self._store.multi_remove([key.value for key in StorageKey] + [EXISTING_HASH_KEY])
            self.database_path.unlink(missing_ok=True)

            asset = self._resolve_asset()
            resolved = await asyncio.to_thread(asset.resolve)
            await asset.download(self.database_path)
            self._store.save(EXISTING_HASH_KEY, resolved.hash)

            if self._local_engine_factory is None:
                raise LocalDatabaseUnavailableError("No local engine factory configured")
            activate_local_engine(self._session, self._local_engine_factory(self.database_path))
            await asyncio.to_thread(_open_database, self.database_path)
            logger.info("Local database ready at %s (hash %s)", self.database_path, resolved.hash)
        except Exception as exc:  # pylint: disable=broad-except
            logger.error("error preparing local database: %s", exc)
            force_remote(self._session, f"local database preparation failed: {exc}")
        state.local_ready = True

    async def database_is_available(self) -> bool:
        """Return True iff the local file exists and matches the bundled asset's hash.

        A negative answer trips the session into remote mode.
        """
        state = self._session.state
        try:
            incoming_hash = (await asyncio.to_thread(self._resolve_asset().resolve)).hash
            fingerprint = self.stored_fingerprint()
            exists = self.database_path.exists()
            available = exists and fingerprint is not None and fingerprint.hash == incoming_hash
        except Exception as exc:  # pylint: disable=broad-except
            logger.error("database availability check failed: %s", exc)
            available = False
        if not available:
            force_remote(self._session, "local database missing or stale")
        state.local_ready = available
        return available


__all__ = ["LocalAssetSynchronizer"]
