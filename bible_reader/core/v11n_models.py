"""Core domain models for versification (v11n) rules."""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class V11nAction(str, Enum):
    """What a versification rule does to the source verse."""

    KEEP_VERSE = "Keep verse"
    MERGED_ABOVE = "Merged above"
    RENUMBER_VERSE = "Renumber verse"
    EMPTY_VERSE = "Empty verse"


class SourceType(IntEnum):
    """Versification tradition a rule applies to."""

    ENGLISH = 1
    HEBREW = 2
    LATIN = 3
    GREEK = 4
    GREEK2 = 5
    LATIN2 = 6
    BULGARIAN = 7


_SOURCE_TYPE_NAMES = {
    "english": SourceType.ENGLISH,
    "hebrew": SourceType.HEBREW,
    "latin": SourceType.LATIN,
    "greek": SourceType.GREEK,
    "greek2": SourceType.GREEK2,
    "greek*": SourceType.GREEK2,
    "latin2": SourceType.LATIN2,
    "bulgarian": SourceType.BULGARIAN,
}


def get_source_type_id(name: str) -> Optional[int]:
    """Return the numeric source type id for ``name`` (case-insensitive)."""
    source_type = _SOURCE_TYPE_NAMES.get(name.strip().lower())
    return int(source_type) if source_type is not None else None


class V11nSourceRef(BaseModel):
    """Verse reference as numbered in the source tradition."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    book_osis_id: str
    version_chapter_num: int
    version_verse_num: int
    version_subverse_num: int = 0


class V11nStandardRef(BaseModel):
    """Verse reference in the normalized (standard) numbering."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    book_osis_id: str
    normalized_chapter_num: int
    normalized_verse_num: int
    normalized_subverse_num: int = 0
    part_indicator: Optional[str] = Field(default=None, description="Verse part letter, e.g. 'a'")


class V11nRule(BaseModel):
    """One versification mapping, immutable once built."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    source_ref: V11nSourceRef
    standard_ref: V11nStandardRef
    action: V11nAction
    note_marker: str = ""
    note: str = ""
    source_type_id: int
    tests: str = ""


__all__ = [
    "V11nAction",
    "SourceType",
    "get_source_type_id",
    "V11nSourceRef",
    "V11nStandardRef",
    "V11nRule",
]
