"""Key-value store adapter implementing the TinyDB-backed port."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Optional, Sequence, cast

from tinydb import Query, TinyDB

from bible_reader.core.config import config
from bible_reader.core.ports import KeyValueStorePort

# Provide a QueryLike alias for static checkers; at runtime use Any.
if TYPE_CHECKING:  # pragma: no cover - typing only
    from tinydb.queries import QueryLike  # type: ignore
else:
    QueryLike = Any  # type: ignore[misc,assignment]

STORAGE_TABLE = "storage"


class TinyDBKeyValueStore(KeyValueStorePort):
    """Persist small named values in a TinyDB JSON file."""

    def __init__(self, db_path: Path | None = None) -> None:
        document_dir = Path(getattr(config, "DOCUMENT_DIR", Path("/data")))
        self._db_path = db_path or (document_dir / "storage.json")
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._db = TinyDB(str(self._db_path))

    def get(self, key: str) -> Optional[Any]:
        q = Query()
        cond = cast(QueryLike, q.key == key)
        raw = self._db.table(STORAGE_TABLE).get(cond)
        doc = cast(Optional[Dict[str, Any]], raw)
        return doc.get("value") if doc else None

    def save(self, key: str, value: Any) -> None:
        q = Query()
        cond = cast(QueryLike, q.key == key)
        self._db.table(STORAGE_TABLE).upsert({"key": key, "value": value}, cond)

    def multi_remove(self, keys: Sequence[str]) -> None:
        if not keys:
            return
        q = Query()
        cond = cast(QueryLike, q.key.one_of(list(keys)))
        self._db.table(STORAGE_TABLE).remove(cond)

    def close(self) -> None:
        """Release the underlying TinyDB file handle."""
        self._db.close()


__all__ = ["TinyDBKeyValueStore", "STORAGE_TABLE"]
