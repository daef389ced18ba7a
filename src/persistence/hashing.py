"""Hashing helpers for cache keys."""

from __future__ import annotations

import hashlib


def sha256_bytes(data: bytes) -> str:
    """Return hex sha256 of raw bytes."""
    return hashlib.sha256(data).hexdigest()


def query_cache_key(query: str) -> str:
    """Key for the exact query string; case and whitespace are significant."""
    return sha256_bytes(query.encode("utf-8", errors="surrogatepass"))


__all__ = ["query_cache_key", "sha256_bytes"]
