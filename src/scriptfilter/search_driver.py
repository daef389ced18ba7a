"""Async-search Script Filter orchestration.

One invocation walks: cache lookup, settle-window check, then either a
pending reply (Alfred reruns us shortly) or a real backend fetch. Workflows
keep their fetch details and error wording in their own backend.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, TextIO

from core.config import QueryFlowSettings, load_query_flow_settings
from persistence.cache import Clock, ResultCache
from persistence.context import WorkflowContext
from persistence.contracts import StateStore
from persistence.fs_store import FsStateStore
from scriptfilter.backends import SearchBackend
from scriptfilter.coalescer import Coalescer
from scriptfilter.dispatcher import emit_cached, fetch_and_emit
from scriptfilter.errors import guarded_map_error
from scriptfilter.feedback import (
    DEFAULT_SHORT_QUERY_SUBTITLE,
    DEFAULT_SHORT_QUERY_TITLE,
    FALLBACK_ERROR_MESSAGE,
    error_item_json,
    pending_item_json,
    short_query_item_json,
)
from scriptfilter.query_policy import is_short_query, normalize_query


logger = logging.getLogger(__name__)


def run_search_flow(
    query: str,
    *,
    workflow_key: str,
    backend: SearchBackend,
    env_prefix: str = "",
    cache_fallback: str | None = None,
    pending_title: str | None = None,
    pending_subtitle: str | None = None,
    settings: QueryFlowSettings | None = None,
    store: StateStore | None = None,
    clock: Clock | None = None,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Return the Alfred JSON reply for one keystroke invocation."""
    flow = settings or load_query_flow_settings(env_prefix)
    if store is None:
        context = WorkflowContext.resolve(workflow_key, cache_fallback, environ=environ)
        store = FsStateStore(context.state_dir)

    ttl_seconds = flow.query_cache_ttl_seconds
    settle_seconds = flow.query_coalesce_settle_seconds
    cache = ResultCache(store, clock=clock)

    try:
        cached = cache.load(query, ttl_seconds)
        if cached is not None:
            logger.debug("Cache hit (%s) for %r", cached.status, query)
            return emit_cached(cached.status, cached.payload, backend)

        if settle_seconds <= 0:
            return fetch_and_emit(query, ttl_seconds, backend, cache)

        coalescer = Coalescer(store, clock=clock)
        if not coalescer.wait_for_final_query(query, settle_seconds):
            logger.debug("Query %r not settled; asking for rerun", query)
            return pending_item_json(pending_title, pending_subtitle, flow.query_coalesce_rerun_seconds)

        return fetch_and_emit(query, ttl_seconds, backend, cache)
    except Exception as exc:
        logger.exception("Search flow failed for %r: %s", query, exc)
        return guarded_map_error(backend.map_error, FALLBACK_ERROR_MESSAGE)


@dataclass
class SearchWorkflow:
    """Identity and wording of one search-backed workflow."""

    workflow_key: str
    backend: SearchBackend
    env_prefix: str = ""
    cache_fallback: str | None = None
    pending_title: str | None = None
    pending_subtitle: str | None = None
    empty_title: str | None = None
    empty_subtitle: str = ""
    short_title: str = DEFAULT_SHORT_QUERY_TITLE
    short_subtitle_template: str = DEFAULT_SHORT_QUERY_SUBTITLE
    min_chars: int | None = None

    def settings(self) -> QueryFlowSettings:
        return load_query_flow_settings(self.env_prefix)

    def run(
        self,
        argument: str | None = None,
        *,
        environ: Mapping[str, str] | None = None,
        stdin: TextIO | None = None,
        store: StateStore | None = None,
        clock: Clock | None = None,
    ) -> str:
        """Normalize the query, answer short ones locally, else run the flow.

        ``environ`` only feeds query resolution; state location and tunables
        come from the process environment.
        """
        flow = self.settings()
        query = normalize_query(argument, environ=environ, stdin=stdin)

        if not query and self.empty_title:
            return error_item_json(self.empty_title, self.empty_subtitle)

        min_chars = self.min_chars if self.min_chars is not None else flow.query_min_chars
        if is_short_query(query, min_chars):
            return short_query_item_json(min_chars, self.short_title, self.short_subtitle_template)

        return run_search_flow(
            query,
            workflow_key=self.workflow_key,
            backend=self.backend,
            env_prefix=self.env_prefix,
            cache_fallback=self.cache_fallback,
            pending_title=self.pending_title,
            pending_subtitle=self.pending_subtitle,
            settings=flow,
            store=store,
            clock=clock,
        )


__all__ = ["SearchWorkflow", "run_search_flow"]
