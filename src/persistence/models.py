"""Lightweight coordination records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


CacheStatus = Literal["ok", "err"]
CACHE_STATUSES: frozenset[str] = frozenset({"ok", "err"})


@dataclass(frozen=True)
class LatestRequest:
    sequence: str
    updated_at: int
    query: str


@dataclass(frozen=True)
class CacheEntry:
    key: str
    cached_at: int
    status: CacheStatus
    payload: str


@dataclass(frozen=True)
class CachedResult:
    status: CacheStatus
    payload: str

    @property
    def ok(self) -> bool:
        return self.status == "ok"


__all__ = ["CACHE_STATUSES", "CacheEntry", "CacheStatus", "CachedResult", "LatestRequest"]
