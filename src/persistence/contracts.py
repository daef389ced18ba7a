"""Persistence protocol contracts."""

from __future__ import annotations

from typing import Protocol

from persistence.models import CacheEntry, LatestRequest


class StateStore(Protocol):
    """Per-workflow coordination state.

    Implementations may raise ``OSError`` from the write methods; callers treat
    every write as best-effort. Reads return ``None`` for anything absent or
    unreadable.
    """

    def read_latest_request(self) -> LatestRequest | None: ...

    def write_latest_request(self, request: LatestRequest) -> None: ...

    def read_cache_entry(self, key: str) -> CacheEntry | None: ...

    def write_cache_entry(self, entry: CacheEntry) -> None: ...

    def list_cache_entries(self) -> list[CacheEntry]: ...


__all__ = ["StateStore"]
