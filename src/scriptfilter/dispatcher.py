"""Fetch dispatch: run the backend, remember the outcome, emit a reply."""

from __future__ import annotations

import logging

from persistence.cache import ResultCache
from scriptfilter.backends import SearchBackend
from scriptfilter.errors import FetchError, guarded_map_error


logger = logging.getLogger(__name__)


def fetch_and_emit(
    query: str,
    ttl_seconds: int,
    backend: SearchBackend,
    cache: ResultCache,
) -> str:
    """Return the backend payload verbatim, or its mapped error row.

    Both outcomes are cached when ``ttl_seconds > 0`` so a repeated failing
    query does not hit the backend again inside the TTL.
    """
    try:
        payload = backend.fetch(query)
    except FetchError as exc:
        message = exc.message
    except Exception as exc:
        logger.exception("Backend fetch raised for query %r", query)
        message = str(exc) or exc.__class__.__name__
    else:
        if ttl_seconds > 0:
            cache.store(query, "ok", payload)
        return payload

    if ttl_seconds > 0:
        cache.store(query, "err", message)
    return guarded_map_error(backend.map_error, message)


def emit_cached(result_status: str, payload: str, backend: SearchBackend) -> str:
    if result_status == "ok":
        return payload
    return guarded_map_error(backend.map_error, payload)


__all__ = ["emit_cached", "fetch_and_emit"]
