"""SQLite-backed sink for imported versification rules."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from threading import Lock
from typing import Sequence

from bible_reader.core.config import config
from bible_reader.core.logging import get_logger
from bible_reader.core.ports import V11nRuleSinkPort
from bible_reader.core.v11n_models import V11nRule

logger = get_logger(__name__)


class SqliteV11nRuleStore(V11nRuleSinkPort):
    """Writes rule batches into the ``v11n_rules`` table of a bible database."""

    def __init__(self, db_path: Path | None = None) -> None:
        self._db_path = db_path or Path(config.V11N_OUTPUT_DATABASE)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = Lock()
        self._init_db()

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self) -> None:
        with self._lock, self._get_conn() as conn:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS v11n_rules (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    source_book_osis_id TEXT NOT NULL,
                    source_chapter_num INTEGER NOT NULL,
                    source_verse_num INTEGER NOT NULL,
                    source_subverse_num INTEGER NOT NULL DEFAULT 0,
                    standard_book_osis_id TEXT NOT NULL,
                    standard_chapter_num INTEGER NOT NULL,
                    standard_verse_num INTEGER NOT NULL,
                    standard_subverse_num INTEGER NOT NULL DEFAULT 0,
                    part_indicator TEXT,
                    action TEXT NOT NULL,
                    note_marker TEXT,
                    note TEXT,
                    source_type_id INTEGER NOT NULL,
                    tests TEXT
                );
                CREATE INDEX IF NOT EXISTS idx_v11n_rules_source
                    ON v11n_rules(source_book_osis_id, source_chapter_num, source_verse_num);
            """)

    async def add_v11n_rules(self, rules: Sequence[V11nRule]) -> None:
        rows = [
            (
                rule.source_ref.book_osis_id,
                rule.source_ref.version_chapter_num,
                rule.source_ref.version_verse_num,
                rule.source_ref.version_subverse_num,
                rule.standard_ref.book_osis_id,
                rule.standard_ref.normalized_chapter_num,
                rule.standard_ref.normalized_verse_num,
                rule.standard_ref.normalized_subverse_num,
                rule.standard_ref.part_indicator,
                rule.action.value,
                rule.note_marker,
                rule.note,
                rule.source_type_id,
                rule.tests,
            )
            for rule in rules
        ]
        with self._lock, self._get_conn() as conn:
            conn.executemany(
                """
                INSERT INTO v11n_rules (
                    source_book_osis_id, source_chapter_num, source_verse_num,
                    source_subverse_num, standard_book_osis_id, standard_chapter_num,
                    standard_verse_num, standard_subverse_num, part_indicator, action,
                    note_marker, note, source_type_id, tests
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                rows,
            )
        logger.info("Stored %d v11n rules in %s", len(rows), self._db_path)

    def count_rules(self) -> int:
        """Return how many rules the database holds."""
        with self._lock, self._get_conn() as conn:
            row = conn.execute("SELECT COUNT(*) AS n FROM v11n_rules").fetchone()
        return int(row["n"])


__all__ = ["SqliteV11nRuleStore"]
