"""Application service layer: engine selection, sync, queries, and import."""

from __future__ import annotations

from .data_source import DataSourceSession, SyncState

__all__ = ["DataSourceSession", "SyncState"]
