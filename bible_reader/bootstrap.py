"""Application bootstrap helpers for assembling the database façade."""

from __future__ import annotations

from typing import Optional

from bible_reader.adapters.bundled_asset import build_bundled_asset
from bible_reader.adapters.key_value import TinyDBKeyValueStore
from bible_reader.adapters.network import HttpReachability
from bible_reader.adapters.remote_engine import HttpBibleEngine
from bible_reader.core.exceptions import LocalDatabaseUnavailableError
from bible_reader.core.logging import get_logger
from bible_reader.core.ports import BundledAssetPort, LocalEngineFactory
from bible_reader.services.database import Database

logger = get_logger(__name__)


def _configured_asset() -> Optional[BundledAssetPort]:
    try:
        return build_bundled_asset()
    except LocalDatabaseUnavailableError as exc:
        logger.info("Running without a bundled database: %s", exc)
        return None


def build_default_database(local_engine_factory: Optional[LocalEngineFactory] = None) -> Database:
    """Return a database wired to production adapters.

    Without ``local_engine_factory`` every local preparation fails over and
    the database serves from the remote engine only.
    """

    return Database(
        remote_engine=HttpBibleEngine(),
        store=TinyDBKeyValueStore(),
        asset=_configured_asset(),
        local_engine_factory=local_engine_factory,
        network=HttpReachability(),
    )


__all__ = ["build_default_database"]
