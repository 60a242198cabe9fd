"""Tests for bundled database asset adapters."""

from __future__ import annotations

import asyncio
import hashlib

import httpx
import pytest

from bible_reader.adapters.bundled_asset import (
    FileBundledAsset,
    UrlBundledAsset,
    build_bundled_asset,
)
from bible_reader.core.config import Settings
from bible_reader.core.exceptions import LocalDatabaseUnavailableError


def test_file_asset_hash_and_copy(tmp_path):
    """A packaged file resolves to its file URI and MD5, and copies byte-for-byte."""
    source = tmp_path / "bibles.db"
    source.write_bytes(b"SQLite format 3\x00" + b"\x01" * 64)
    asset = FileBundledAsset(source)

    resolved = asset.resolve()
    assert resolved.uri.startswith("file://")
    assert resolved.hash == hashlib.md5(source.read_bytes()).hexdigest()

    destination = tmp_path / "copy.db"
    asyncio.run(asset.download(destination))
    assert destination.read_bytes() == source.read_bytes()


def test_url_asset_streams_to_destination(tmp_path):
    """A URL asset downloads its body and reports the configured hash."""
    body = b"x" * 4096

    def handler(request: httpx.Request) -> httpx.Response:
        assert str(request.url) == "https://cdn.example.com/bibles.db"
        return httpx.Response(200, content=body)

    asset = UrlBundledAsset(
        "https://cdn.example.com/bibles.db",
        "deadbeef",
        transport=httpx.MockTransport(handler),
    )
    destination = tmp_path / "bibles.db"

    asyncio.run(asset.download(destination))

    assert asset.resolve().hash == "deadbeef"
    assert destination.read_bytes() == body


def test_url_asset_raises_on_http_error(tmp_path):
    """A failed download raises instead of writing a partial file silently."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404)

    asset = UrlBundledAsset(
        "https://cdn.example.com/missing.db", "0", transport=httpx.MockTransport(handler)
    )
    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(asset.download(tmp_path / "bibles.db"))


def test_build_bundled_asset_prefers_packaged_file(tmp_path):
    """Configuration picks the file asset first, then the URL asset."""
    source = tmp_path / "bibles.db"
    source.write_bytes(b"db")
    file_settings = Settings(
        REMOTE_BIBLE_ENGINE_URL="http://engine.test",
        BUNDLED_DATABASE_PATH=source,
        BUNDLED_DATABASE_URL="https://cdn.example.com/bibles.db",
        BUNDLED_DATABASE_HASH="abc",
    )
    url_settings = Settings(
        REMOTE_BIBLE_ENGINE_URL="http://engine.test",
        BUNDLED_DATABASE_PATH=None,
        BUNDLED_DATABASE_URL="https://cdn.example.com/bibles.db",
        BUNDLED_DATABASE_HASH="abc",
    )

    assert isinstance(build_bundled_asset(file_settings), FileBundledAsset)
    assert isinstance(build_bundled_asset(url_settings), UrlBundledAsset)


def test_build_bundled_asset_requires_configuration():
    """No path and no URL/hash pair means no asset."""
    bare = Settings(
        REMOTE_BIBLE_ENGINE_URL="http://engine.test",
        BUNDLED_DATABASE_PATH=None,
        BUNDLED_DATABASE_URL=None,
        BUNDLED_DATABASE_HASH=None,
    )
    with pytest.raises(LocalDatabaseUnavailableError):
        build_bundled_asset(bare)


class _DroppedStream(httpx.AsyncByteStream):
    """Body that breaks off after the first chunk."""

    async def __aiter__(self):
        yield b"SQLite format 3\x00"
        raise httpx.ReadError("connection reset by peer")


def test_url_asset_interrupted_download_leaves_no_file(tmp_path):
    """A stream cut short leaves neither a truncated database nor a partial file."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, stream=_DroppedStream())

    asset = UrlBundledAsset(
        "https://cdn.example.com/bibles.db", "abc", transport=httpx.MockTransport(handler)
    )
    destination = tmp_path / "bibles.db"

    with pytest.raises(httpx.ReadError):
        asyncio.run(asset.download(destination))

    assert not destination.exists()
    assert list(tmp_path.iterdir()) == []
