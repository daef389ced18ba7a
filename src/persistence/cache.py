"""TTL-bounded result cache keyed by the exact query string."""

from __future__ import annotations

import logging
import time
from typing import Callable

from persistence.contracts import StateStore
from persistence.hashing import query_cache_key
from persistence.models import CACHE_STATUSES, CacheEntry, CachedResult


logger = logging.getLogger(__name__)

Clock = Callable[[], int]


def epoch_seconds() -> int:
    return int(time.time())


class ResultCache:
    def __init__(self, store: StateStore, *, clock: Clock | None = None) -> None:
        self._store = store
        self._clock = clock or epoch_seconds

    def load(self, query: str, ttl_seconds: int) -> CachedResult | None:
        """Return the cached outcome, or ``None`` on any miss.

        Fails closed: a disabled TTL, a missing or corrupt entry, an empty
        payload and an age outside ``[0, ttl]`` (clock skew included) are all
        misses.
        """
        if ttl_seconds <= 0:
            return None
        entry = self._store.read_cache_entry(query_cache_key(query))
        if entry is None or entry.status not in CACHE_STATUSES or not entry.payload:
            return None
        age = self._clock() - entry.cached_at
        if age < 0 or age > ttl_seconds:
            return None
        return CachedResult(status=entry.status, payload=entry.payload)

    def store(self, query: str, status: str, payload: str) -> bool:
        """Best-effort write; returns False when the store rejected it."""
        if status not in CACHE_STATUSES:
            status = "err"
        entry = CacheEntry(
            key=query_cache_key(query),
            cached_at=self._clock(),
            status=status,  # type: ignore[arg-type]
            payload=payload,
        )
        try:
            self._store.write_cache_entry(entry)
        except (OSError, ValueError) as exc:
            logger.debug("Cache write skipped for key %s: %s", entry.key, exc)
            return False
        return True


__all__ = ["Clock", "ResultCache", "epoch_seconds"]
