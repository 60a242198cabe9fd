"""Protocol definitions for infrastructure adapters."""

# pylint: disable=unnecessary-ellipsis

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional, Protocol, Sequence

from bible_reader.core.models import (
    BibleBook,
    BibleReferenceRange,
    BibleVersion,
    DictionaryEntry,
    Phrase,
    ReferenceRangeData,
)
from bible_reader.core.v11n_models import V11nRule


class V11nRuleSinkPort(Protocol):
    """Port accepting a batch of versification rules."""

    async def add_v11n_rules(self, rules: Sequence[V11nRule]) -> None:
        """Persist ``rules`` in a single submission."""
        ...


class BibleEnginePort(V11nRuleSinkPort, Protocol):
    """Port exposing the Bible-content engine queries."""

    async def get_full_data_for_reference_range(
        self, reference_range: BibleReferenceRange, with_context: bool = True
    ) -> ReferenceRangeData:
        """Return contents (and context ranges) for ``reference_range``."""
        ...

    async def get_books_for_version(self, version_id: int) -> list[BibleBook]:
        """Return every book of the version identified by ``version_id``."""
        ...

    async def get_versions(self) -> list[BibleVersion]:
        """Return the versions the engine can serve."""
        ...

    async def get_phrases(self, reference_range: BibleReferenceRange) -> list[Phrase]:
        """Return the phrases making up ``reference_range``."""
        ...

    async def get_dictionary_entries(self, strong: str, dictionary: str) -> list[DictionaryEntry]:
        """Return the entries for Strong's code ``strong`` in ``dictionary``."""
        ...


LocalEngineFactory = Callable[[Path], BibleEnginePort]


@dataclass(frozen=True)
class ResolvedAsset:
    """A bundled asset resolved to a downloadable location and content hash."""

    uri: str
    hash: str


class BundledAssetPort(Protocol):
    """Port resolving the packaged database asset."""

    def resolve(self) -> ResolvedAsset:
        """Return the asset's download location and current content hash."""
        ...

    async def download(self, destination: Path) -> None:
        """Write the asset's bytes to ``destination``."""
        ...


class KeyValueStorePort(Protocol):
    """Port exposing the small persistent key-value store."""

    def get(self, key: str) -> Optional[Any]:
        """Return the value stored under ``key`` or ``None``."""
        ...

    def save(self, key: str, value: Any) -> None:
        """Persist ``value`` under ``key``."""
        ...

    def multi_remove(self, keys: Sequence[str]) -> None:
        """Delete every key in ``keys``; missing keys are ignored."""
        ...


class NetworkPort(Protocol):
    """Port reporting network reachability."""

    async def internet_is_available(self) -> bool:
        """Return True when the remote engine host is reachable."""
        ...


__all__ = [
    "V11nRuleSinkPort",
    "BibleEnginePort",
    "LocalEngineFactory",
    "ResolvedAsset",
    "BundledAssetPort",
    "KeyValueStorePort",
    "NetworkPort",
]
