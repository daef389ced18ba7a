"""In-memory state store for long-lived hosts and tests."""

from __future__ import annotations

from persistence.models import CacheEntry, LatestRequest


class MemoryStateStore:
    def __init__(self) -> None:
        self._latest: LatestRequest | None = None
        self._entries: dict[str, CacheEntry] = {}

    def read_latest_request(self) -> LatestRequest | None:
        return self._latest

    def write_latest_request(self, request: LatestRequest) -> None:
        self._latest = request

    def read_cache_entry(self, key: str) -> CacheEntry | None:
        return self._entries.get(key)

    def write_cache_entry(self, entry: CacheEntry) -> None:
        self._entries[entry.key] = entry

    def list_cache_entries(self) -> list[CacheEntry]:
        return [self._entries[key] for key in sorted(self._entries)]


__all__ = ["MemoryStateStore"]
