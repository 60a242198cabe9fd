"""HTTP adapter implementing the Bible engine port against a remote engine.

Every engine operation maps to ``POST {base_url}/{operationName}`` with a JSON
body; responses are validated into the core models at this boundary.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

import httpx

from bible_reader.core.config import config
from bible_reader.core.logging import get_logger
from bible_reader.core.models import (
    BibleBook,
    BibleReferenceRange,
    BibleVersion,
    DictionaryEntry,
    Phrase,
    ReferenceRangeData,
    parse_content_nodes,
)
from bible_reader.core.ports import BibleEnginePort
from bible_reader.core.v11n_models import V11nRule

logger = get_logger(__name__)


def _extract_next_chapter(payload: dict[str, Any]) -> Optional[BibleReferenceRange]:
    """Return the next-chapter range, or None when the payload has none."""
    context_ranges = payload.get("contextRanges") or {}
    normalized_chapter = context_ranges.get("normalizedChapter") or {}
    next_range = normalized_chapter.get("nextRange")
    if not isinstance(next_range, dict):
        return None
    return BibleReferenceRange.model_validate(next_range)


class HttpBibleEngine(BibleEnginePort):
    """Remote engine client speaking JSON over HTTP."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = (base_url or config.REMOTE_BIBLE_ENGINE_URL).rstrip("/")
        self._timeout = timeout if timeout is not None else config.ENGINE_REQUEST_TIMEOUT
        self._transport = transport

    @property
    def base_url(self) -> str:
        """URL the client sends engine operations to."""
        return self._base_url

    async def _call(self, operation: str, payload: dict[str, Any]) -> Any:
        async with httpx.AsyncClient(
            base_url=self._base_url, timeout=self._timeout, transport=self._transport
        ) as client:
            response = await client.post(f"/{operation}", json=payload)
            response.raise_for_status()
            logger.debug("engine call %s -> %s", operation, response.status_code)
            return response.json()

    async def get_full_data_for_reference_range(
        self, reference_range: BibleReferenceRange, with_context: bool = True
    ) -> ReferenceRangeData:
        payload = await self._call(
            "getFullDataForReferenceRange",
            {
                "range": reference_range.model_dump(by_alias=True, exclude_none=True),
                "withContext": with_context,
            },
        )
        content = payload.get("content") or {}
        return ReferenceRangeData(
            contents=parse_content_nodes(content.get("contents") or []),
            next_chapter=_extract_next_chapter(payload),
        )

    async def get_books_for_version(self, version_id: int) -> list[BibleBook]:
        payload = await self._call("getBooksForVersion", {"versionId": version_id})
        return [BibleBook.model_validate(item) for item in payload]

    async def get_versions(self) -> list[BibleVersion]:
        payload = await self._call("getVersions", {})
        return [BibleVersion.model_validate(item) for item in payload]

    async def get_phrases(self, reference_range: BibleReferenceRange) -> list[Phrase]:
        payload = await self._call(
            "getPhrases", {"range": reference_range.model_dump(by_alias=True, exclude_none=True)}
        )
        return [Phrase.model_validate(item) for item in payload]

    async def get_dictionary_entries(self, strong: str, dictionary: str) -> list[DictionaryEntry]:
        payload = await self._call(
            "getDictionaryEntries", {"strong": strong, "dictionary": dictionary}
        )
        return [DictionaryEntry.model_validate(item) for item in payload]

    async def add_v11n_rules(self, rules: Sequence[V11nRule]) -> None:
        await self._call(
            "addV11nRules",
            {"rules": [rule.model_dump(mode="json", by_alias=True) for rule in rules]},
        )
        logger.info("Submitted %d v11n rules to %s", len(rules), self._base_url)


__all__ = ["HttpBibleEngine"]
