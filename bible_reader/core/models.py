"""Domain models exchanged with the Bible-content engine."""

from __future__ import annotations

from typing import Annotated, Any, Iterable, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class EngineModel(BaseModel):
    """Base for records mirrored from the engine's camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


class BibleReferenceRange(EngineModel):
    """A (possibly open-ended) range of verses within one book."""

    book_osis_id: str = Field(..., description="OSIS id of the book, e.g. 'Gen'")
    version_uid: Optional[str] = Field(default=None, description="Version the numbers refer to")
    version_chapter_num: Optional[int] = Field(default=None)
    version_verse_num: Optional[int] = Field(default=None)
    version_chapter_end_num: Optional[int] = Field(default=None)
    version_verse_end_num: Optional[int] = Field(default=None)


class BibleCrossReference(EngineModel):
    """A cross reference pointing at a verse range."""

    key: Optional[str] = Field(default=None)
    range: BibleReferenceRange


class Phrase(EngineModel):
    """Smallest unit of Bible text returned by the engine."""

    content: str = Field(..., description="Text of the phrase")
    strongs: list[str] = Field(default_factory=list)


class PhraseList(BaseModel):
    """A run of phrases not wrapped in any section."""

    kind: Literal["phrases"] = "phrases"
    phrases: list[Phrase] = Field(default_factory=list)


class Section(BaseModel):
    """A titled section wrapping phrases and/or nested sections."""

    kind: Literal["section"] = "section"
    title: str = ""
    group_type: Optional[str] = Field(default=None, description="Engine grouping, e.g. 'paragraph'")
    contents: list["ContentNode"] = Field(default_factory=list)


ContentNode = Annotated[Union[Section, PhraseList], Field(discriminator="kind")]
Section.model_rebuild()


class ReferenceRangeData(BaseModel):
    """Engine answer to a full-data range query."""

    contents: list[ContentNode] = Field(default_factory=list)
    next_chapter: Optional[BibleReferenceRange] = None


class ChapterResult(BaseModel):
    """Normalized chapter payload handed to callers."""

    next_chapter: Optional[BibleReferenceRange] = None
    contents: list[ContentNode] = Field(default_factory=list)


class BibleBook(EngineModel):
    """A book as listed by the engine for one version."""

    osis_id: str
    title: str
    chapters_count: list[int] = Field(default_factory=list)


class BookSummary(BaseModel):
    """Book entry as shown in the book picker."""

    osis_id: str
    title: str
    num_chapters: int


class BibleVersion(EngineModel):
    """A Bible version (translation) known to the engine."""

    uid: str
    title: Optional[str] = None
    language: Optional[str] = None


class DictionaryEntry(EngineModel):
    """A lexicon definition for a Strong's code."""

    strong: Optional[str] = None
    dictionary: Optional[str] = None
    lemma: Optional[str] = None
    content: Optional[str] = None


class AssetFingerprint(BaseModel):
    """Hash of the last successfully synchronized local database."""

    hash: str


def _parse_section(raw: dict[str, Any]) -> Section:
    return Section(
        title=str(raw.get("title") or ""),
        group_type=raw.get("groupType") or raw.get("type"),
        contents=parse_content_nodes(raw.get("contents") or []),
    )


def parse_content_nodes(raw_nodes: Iterable[dict[str, Any]]) -> list[ContentNode]:
    """Convert the engine's raw content list into tagged nodes.

    Consecutive phrase objects (a string ``content`` field) collapse into one
    :class:`PhraseList`; any object carrying a ``contents`` list becomes a
    :class:`Section` keeping its ``groupType``. Other objects are dropped.
    """
    nodes: list[ContentNode] = []
    pending: list[Phrase] = []
    for raw in raw_nodes:
        if isinstance(raw.get("content"), str):
            pending.append(Phrase.model_validate(raw))
            continue
        if pending:
            nodes.append(PhraseList(phrases=pending))
            pending = []
        if isinstance(raw.get("contents"), list):
            nodes.append(_parse_section(raw))
    if pending:
        nodes.append(PhraseList(phrases=pending))
    return nodes


__all__ = [
    "EngineModel",
    "BibleReferenceRange",
    "BibleCrossReference",
    "Phrase",
    "PhraseList",
    "Section",
    "ContentNode",
    "ReferenceRangeData",
    "ChapterResult",
    "BibleBook",
    "BookSummary",
    "BibleVersion",
    "DictionaryEntry",
    "AssetFingerprint",
    "parse_content_nodes",
]
