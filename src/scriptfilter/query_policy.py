"""Query normalization and minimum-length policy."""

from __future__ import annotations

import logging
import os
import sys
from typing import Mapping, TextIO

from core.config import DEFAULT_MIN_QUERY_CHARS


logger = logging.getLogger(__name__)

NULL_ARGUMENT = "(null)"
QUERY_ENV_VARS = ("alfred_workflow_query", "ALFRED_WORKFLOW_QUERY")


def resolve_query_input(
    argument: str | None,
    *,
    environ: Mapping[str, str] | None = None,
    stdin: TextIO | None = None,
) -> str:
    """Pick the raw query: argument, then query env vars, then piped stdin.

    Alfred passes the literal ``(null)`` when a Script Filter runs without an
    argument; it counts as missing.
    """
    if argument and argument != NULL_ARGUMENT:
        return argument

    env = os.environ if environ is None else environ
    for name in QUERY_ENV_VARS:
        value = env.get(name)
        if value:
            return value

    return _read_stdin(sys.stdin if stdin is None else stdin)


def trim_query(value: str | None) -> str:
    return (value or "").strip()


def normalize_query(
    argument: str | None,
    *,
    environ: Mapping[str, str] | None = None,
    stdin: TextIO | None = None,
) -> str:
    return trim_query(resolve_query_input(argument, environ=environ, stdin=stdin))


def is_short_query(query: str | None, min_chars: int = DEFAULT_MIN_QUERY_CHARS) -> bool:
    if min_chars < 0:
        min_chars = DEFAULT_MIN_QUERY_CHARS
    return len(trim_query(query)) < min_chars


def _read_stdin(stream: TextIO | None) -> str:
    if stream is None:
        return ""
    try:
        if stream.isatty():
            return ""
        return stream.read()
    except (OSError, ValueError) as exc:
        logger.debug("stdin unavailable: %s", exc)
        return ""


__all__ = [
    "NULL_ARGUMENT",
    "QUERY_ENV_VARS",
    "is_short_query",
    "normalize_query",
    "resolve_query_input",
    "trim_query",
]
