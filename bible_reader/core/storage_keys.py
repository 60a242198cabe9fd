"""Names of the values kept in the persistent key-value store."""

from __future__ import annotations

from enum import Enum

# Holds the AssetFingerprint hash; cleared with the StorageKey values and
# written back only after a successful download.
EXISTING_HASH_KEY = "existingHash"


class StorageKey(str, Enum):
    """Cached values derived from the local database, cleared on every sync."""

    CURRENT_VERSION = "currentVersion"
    CURRENT_BOOK = "currentBook"
    CURRENT_CHAPTER = "currentChapter"
    BOOK_LIST = "bookList"
    VERSION_LIST = "versionList"


__all__ = ["EXISTING_HASH_KEY", "StorageKey"]
