"""In-process coalescing for a long-lived host.

Instead of re-invoking a process and polling, a resident host can submit every
keystroke here. A debounce timer restarts on each submission and fires one
fetch for the last query once input has been quiet for ``settle_seconds``.
Identical concurrent fetches share one backend call.
"""

from __future__ import annotations

import asyncio
import logging

from persistence.cache import Clock, ResultCache
from persistence.contracts import StateStore
from persistence.memory_store import MemoryStateStore
from scriptfilter.backends import SearchBackend
from scriptfilter.dispatcher import emit_cached, fetch_and_emit
from scriptfilter.feedback import pending_item_json


logger = logging.getLogger(__name__)


class DebouncedSearch:
    def __init__(
        self,
        backend: SearchBackend,
        *,
        settle_seconds: float = 2.0,
        ttl_seconds: int = 0,
        rerun_seconds: float = 0.4,
        pending_title: str | None = None,
        pending_subtitle: str | None = None,
        store: StateStore | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._backend = backend
        self._settle_seconds = max(0.0, float(settle_seconds))
        self._ttl_seconds = ttl_seconds
        self._pending_json = pending_item_json(pending_title, pending_subtitle, rerun_seconds)
        self._cache = ResultCache(store or MemoryStateStore(), clock=clock)
        self._timer: asyncio.TimerHandle | None = None
        self._latest_query: str | None = None
        self._waiters: list[asyncio.Future[str]] = []
        self._in_flight: dict[str, asyncio.Future[str]] = {}
        self._backend_calls = 0

    @property
    def backend_calls(self) -> int:
        return self._backend_calls

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    def submit(self, query: str) -> asyncio.Future[str]:
        """Register a keystroke; the future resolves with this query's reply.

        A submission superseded by a different query resolves with the
        pending reply instead.
        """
        loop = asyncio.get_running_loop()
        future: asyncio.Future[str] = loop.create_future()

        cached = self._cache.load(query, self._ttl_seconds)
        if cached is not None:
            future.set_result(emit_cached(cached.status, cached.payload, self._backend))
            return future

        if query != self._latest_query:
            self._release_waiters(self._pending_json)
        self._latest_query = query
        self._waiters.append(future)

        if self._timer is not None:
            self._timer.cancel()
        self._timer = loop.call_later(self._settle_seconds, self._fire)
        return future

    async def fetch(self, query: str) -> str:
        """Single-flight fetch: join an identical in-progress call if any."""
        task = self._in_flight.get(query)
        if task is None:
            task = asyncio.ensure_future(self._run_fetch(query))
            self._in_flight[query] = task
            task.add_done_callback(lambda _: self._in_flight.pop(query, None))
        return await asyncio.shield(task)

    def close(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._release_waiters(self._pending_json)
        self._latest_query = None

    def _fire(self) -> None:
        self._timer = None
        query = self._latest_query
        waiters, self._waiters = self._waiters, []
        self._latest_query = None
        if query is None or not waiters:
            return
        task = asyncio.ensure_future(self.fetch(query))
        task.add_done_callback(lambda done: _settle_waiters(done, waiters))

    async def _run_fetch(self, query: str) -> str:
        self._backend_calls += 1
        logger.debug("Debounced fetch for %r", query)
        return await asyncio.to_thread(
            fetch_and_emit, query, self._ttl_seconds, self._backend, self._cache
        )

    def _release_waiters(self, reply: str) -> None:
        waiters, self._waiters = self._waiters, []
        for waiter in waiters:
            if not waiter.done():
                waiter.set_result(reply)


def _settle_waiters(done: asyncio.Future[str], waiters: list[asyncio.Future[str]]) -> None:
    if done.cancelled():
        for waiter in waiters:
            waiter.cancel()
        return
    error = done.exception()
    for waiter in waiters:
        if waiter.done():
            continue
        if error is not None:
            waiter.set_exception(error)
        else:
            waiter.set_result(done.result())


__all__ = ["DebouncedSearch"]
