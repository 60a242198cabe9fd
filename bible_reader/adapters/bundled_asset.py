"""Adapters resolving and downloading the bundled database asset."""

from __future__ import annotations

import asyncio
import hashlib
import shutil
from pathlib import Path

import httpx

from bible_reader.core.config import Settings, config
from bible_reader.core.exceptions import LocalDatabaseUnavailableError
from bible_reader.core.logging import get_logger
from bible_reader.core.ports import BundledAssetPort, ResolvedAsset

logger = get_logger(__name__)

HASH_CHUNK_SIZE = 1024 * 1024


def file_md5(path: Path) -> str:
    """Return the hex MD5 digest of the file at ``path``."""
    digest = hashlib.md5()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(HASH_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


class FileBundledAsset(BundledAssetPort):
    """Database asset packaged next to the application as a plain file."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    def resolve(self) -> ResolvedAsset:
        return ResolvedAsset(uri=self._path.resolve().as_uri(), hash=file_md5(self._path))

    async def download(self, destination: Path) -> None:
        await asyncio.to_thread(shutil.copyfile, self._path, destination)


class UrlBundledAsset(BundledAssetPort):
    """Database asset published at a URL with a known content hash."""

    def __init__(
        self,
        url: str,
        content_hash: str,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url
        self._hash = content_hash
        self._timeout = timeout if timeout is not None else config.ENGINE_REQUEST_TIMEOUT
        self._transport = transport

    def resolve(self) -> ResolvedAsset:
        return ResolvedAsset(uri=self._url, hash=self._hash)

    async def download(self, destination: Path) -> None:
        """Stream the asset to ``destination``; nothing is left there on failure."""
        partial = destination.with_name(destination.name + ".part")
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                async with client.stream("GET", self._url) as response:
                    response.raise_for_status()
                    with partial.open("wb") as handle:
                        async for chunk in response.aiter_bytes():
                            handle.write(chunk)
            partial.replace(destination)
        finally:
            partial.unlink(missing_ok=True)
        logger.info("Downloaded database asset from %s to %s", self._url, destination)


def build_bundled_asset(settings: Settings | None = None) -> BundledAssetPort:
    """Return the asset adapter selected by configuration."""
    active = settings or config
    if active.BUNDLED_DATABASE_PATH is not None:
        return FileBundledAsset(active.BUNDLED_DATABASE_PATH)
    if active.BUNDLED_DATABASE_URL and active.BUNDLED_DATABASE_HASH:
        return UrlBundledAsset(active.BUNDLED_DATABASE_URL, active.BUNDLED_DATABASE_HASH)
    raise LocalDatabaseUnavailableError(
        "No bundled database configured (set BUNDLED_DATABASE_PATH or "
        "BUNDLED_DATABASE_URL and BUNDLED_DATABASE_HASH)"
    )


__all__ = ["FileBundledAsset", "UrlBundledAsset", "build_bundled_asset", "file_md5"]
