"""Settle-window coalescing across independent invocations."""

from __future__ import annotations

import logging
import math
import os
import random

from persistence.cache import Clock, epoch_seconds
from persistence.contracts import StateStore
from persistence.models import LatestRequest


logger = logging.getLogger(__name__)


class Coalescer:
    """Final-query-wins gate driven by the shared ``LatestRequest`` record.

    Each invocation that sees a different query overwrites the record and
    resets the window; only a query observed unchanged for ``settle_seconds``
    is allowed through. Writes are last-writer-wins with no compare-and-swap,
    so two interleaving queries can keep resetting each other until one stops
    arriving.
    """

    def __init__(self, store: StateStore, *, clock: Clock | None = None) -> None:
        self._store = store
        self._clock = clock or epoch_seconds

    def record(self, query: str) -> LatestRequest:
        now = self._clock()
        request = LatestRequest(
            sequence=f"{now}.{os.getpid()}.{random.randrange(32768)}",
            updated_at=now,
            query=query,
        )
        self._store.write_latest_request(request)
        return request

    def wait_for_final_query(self, query: str, settle_seconds: float) -> bool:
        """Return True once ``query`` has been stable for the settle window."""
        if not _positive(settle_seconds):
            try:
                self.record(query)
            except (OSError, ValueError) as exc:
                logger.debug("Latest request not recorded: %s", exc)
            return True

        latest = self._store.read_latest_request()
        if latest is None or latest.query != query:
            try:
                self.record(query)
            except (OSError, ValueError) as exc:
                logger.debug("Latest request not recorded: %s", exc)
            return False

        age = max(0, self._clock() - latest.updated_at)
        return age >= settle_seconds


def _positive(value: float) -> bool:
    return isinstance(value, (int, float)) and math.isfinite(value) and value > 0


__all__ = ["Coalescer"]
