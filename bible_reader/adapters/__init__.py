"""Infrastructure adapter exports."""

from .bundled_asset import FileBundledAsset, UrlBundledAsset, build_bundled_asset
from .key_value import TinyDBKeyValueStore
from .network import HttpReachability
from .remote_engine import HttpBibleEngine
from .v11n_store import SqliteV11nRuleStore

__all__ = [
    "FileBundledAsset",
    "UrlBundledAsset",
    "build_bundled_asset",
    "TinyDBKeyValueStore",
    "HttpReachability",
    "HttpBibleEngine",
    "SqliteV11nRuleStore",
]
