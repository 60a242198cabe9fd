"""Import versification rules from the tab-separated rules file.

Columns: SourceRef, StandardRef, Action, NoteMarker, Note, SourceType, Tests.
The first line is a header. Rows with a single field, or whose SourceRef is
``Absent``, carry no mapping and are skipped. Any malformed row aborts the
import before anything is submitted.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from bible_reader.core.books import get_osis_id_from_book_string
from bible_reader.core.exceptions import (
    InvalidActionError,
    MalformedReferenceError,
    UnknownBookError,
    UnknownSourceTypeError,
)
from bible_reader.core.logging import get_logger
from bible_reader.core.ports import V11nRuleSinkPort
from bible_reader.core.v11n_models import (
    V11nAction,
    V11nRule,
    V11nSourceRef,
    V11nStandardRef,
    get_source_type_id,
)

logger = get_logger(__name__)

COLUMN_COUNT = 7
ABSENT_MARKER = "Absent"
PART_INDICATOR_RE = re.compile(r"[a-z]")
VALID_ACTIONS = {action.value: action for action in V11nAction}


def _to_int(token: str, field: str, line_number: int) -> int:
    try:
        return int(token)
    except ValueError as exc:
        raise MalformedReferenceError(f"{field} {token!r} is not a number", line_number) from exc


def _split_reference(ref: str, field: str, line_number: int) -> Tuple[str, str, str, str]:
    """Split ``Book.Chapter:Verse.Subverse`` into its four raw tokens."""
    parts = ref.strip().split(".")
    if len(parts) < 2 or ":" not in parts[1]:
        raise MalformedReferenceError(f"{field} {ref!r} is not Book.Chapter:Verse", line_number)
    chapter, verse = parts[1].split(":", 1)
    subverse = parts[2] if len(parts) > 2 and parts[2] else "0"
    return parts[0], chapter, verse, subverse


def _split_part_indicator(verse: str) -> Tuple[str, Optional[str]]:
    """Strip a trailing lowercase part letter (``5a`` -> ``5``, ``a``)."""
    if verse and PART_INDICATOR_RE.fullmatch(verse[-1]):
        return verse[:-1], verse[-1]
    return verse, None


def parse_v11n_row(row: List[str], line_number: int) -> V11nRule:
    """Build one rule from the fields of a rules-file row."""
    fields = (row + [""] * COLUMN_COUNT)[:COLUMN_COUNT]
    source_ref, standard_ref, action, note_marker, note, source_type, tests = fields

    source_book, source_chapter, source_verse, source_subverse = _split_reference(
        source_ref, "sourceRef", line_number
    )
    book_osis_id = get_osis_id_from_book_string(source_book)
    if not book_osis_id:
        raise UnknownBookError(f"sourceRef book {source_book} no valid book id", line_number)

    _, standard_chapter, standard_verse, standard_subverse = _split_reference(
        standard_ref, "standardRef", line_number
    )
    standard_verse, part_indicator = _split_part_indicator(standard_verse)

    source_type_id = get_source_type_id(source_type)
    if source_type_id is None:
        raise UnknownSourceTypeError(f"unknown sourceType {source_type}", line_number)

    if action not in VALID_ACTIONS:
        raise InvalidActionError(f"invalid action {action}", line_number)

    return V11nRule(
        source_ref=V11nSourceRef(
            book_osis_id=book_osis_id,
            version_chapter_num=_to_int(source_chapter, "sourceRef chapter", line_number),
            version_verse_num=_to_int(source_verse, "sourceRef verse", line_number),
            version_subverse_num=_to_int(source_subverse, "sourceRef subverse", line_number),
        ),
        standard_ref=V11nStandardRef(
            book_osis_id=book_osis_id,
            normalized_chapter_num=_to_int(standard_chapter, "standardRef chapter", line_number),
            normalized_verse_num=_to_int(standard_verse, "standardRef verse", line_number),
            normalized_subverse_num=_to_int(
                standard_subverse, "standardRef subverse", line_number
            ),
            part_indicator=part_indicator,
        ),
        action=VALID_ACTIONS[action],
        note_marker=note_marker,
        note=note,
        source_type_id=source_type_id,
        tests=tests,
    )


def parse_v11n_rules(lines: Iterable[str]) -> List[V11nRule]:
    """Parse every mapping row of a rules file into rules, in file order."""
    rules: List[V11nRule] = []
    for line_number, line in enumerate(lines, start=1):
        row = line.rstrip("\r\n").split("\t")
        if line_number == 1 or len(row) <= 1 or row[0] == ABSENT_MARKER:
            continue
        rules.append(parse_v11n_row(row, line_number))
    return rules


async def import_v11n_rules(path: Path, sink: V11nRuleSinkPort) -> int:
    """Parse the rules file at ``path`` and submit all rules to ``sink`` at once.

    Returns:
        The number of rules submitted.

    Raises:
        V11nImportError: on the first malformed row; nothing is submitted.
    """
    with Path(path).open(encoding="utf-8") as handle:
        rules = parse_v11n_rules(handle)
    logger.info("Parsed %d v11n rules from %s", len(rules), path)
    await sink.add_v11n_rules(rules)
    return len(rules)


__all__ = [
    "parse_v11n_row",
    "parse_v11n_rules",
    "import_v11n_rules",
    "VALID_ACTIONS",
]
