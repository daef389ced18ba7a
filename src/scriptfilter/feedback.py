"""Alfred feedback rows emitted by the drivers."""

from __future__ import annotations

import math

from core.config import DEFAULT_MIN_QUERY_CHARS, DEFAULT_RERUN_SECONDS
from schemas.alfred import AlfredItem, ScriptFilterResponse


DEFAULT_PENDING_TITLE = "Searching..."
DEFAULT_PENDING_SUBTITLE = "Waiting for query to stabilize."
DEFAULT_SHORT_QUERY_TITLE = "Keep typing"
DEFAULT_SHORT_QUERY_SUBTITLE = "Type at least {min_chars} characters before continuing."
FALLBACK_ERROR_TITLE = "Workflow runtime error"
FALLBACK_ERROR_MESSAGE = "script-filter command failed"


def non_actionable_item_json(title: str = "Info", subtitle: str = "") -> str:
    item = AlfredItem(title=title, subtitle=subtitle, valid=False)
    return ScriptFilterResponse(items=[item]).to_json()


def error_item_json(title: str = "Error", subtitle: str = "") -> str:
    return non_actionable_item_json(title, subtitle)


def pending_item_json(
    title: str | None = None,
    subtitle: str | None = None,
    rerun_seconds: float = DEFAULT_RERUN_SECONDS,
) -> str:
    """Placeholder row plus a ``rerun`` directive so Alfred polls again."""
    if not isinstance(rerun_seconds, (int, float)) or not math.isfinite(rerun_seconds) or rerun_seconds < 0:
        rerun_seconds = DEFAULT_RERUN_SECONDS
    item = AlfredItem(
        title=title or DEFAULT_PENDING_TITLE,
        subtitle=subtitle or DEFAULT_PENDING_SUBTITLE,
        valid=False,
    )
    return ScriptFilterResponse(items=[item], rerun=float(rerun_seconds)).to_json()


def short_query_item_json(
    min_chars: int = DEFAULT_MIN_QUERY_CHARS,
    title: str = DEFAULT_SHORT_QUERY_TITLE,
    subtitle_template: str = DEFAULT_SHORT_QUERY_SUBTITLE,
) -> str:
    if min_chars < 0:
        min_chars = DEFAULT_MIN_QUERY_CHARS
    # Literal substitution; other braces in a user template are left as typed.
    subtitle = subtitle_template.replace("{min_chars}", str(min_chars))
    return non_actionable_item_json(title, subtitle)


def fallback_error_item_json(message: str | None = None) -> str:
    return error_item_json(FALLBACK_ERROR_TITLE, message or FALLBACK_ERROR_MESSAGE)


__all__ = [
    "DEFAULT_PENDING_SUBTITLE",
    "DEFAULT_PENDING_TITLE",
    "FALLBACK_ERROR_MESSAGE",
    "FALLBACK_ERROR_TITLE",
    "error_item_json",
    "fallback_error_item_json",
    "non_actionable_item_json",
    "pending_item_json",
    "short_query_item_json",
]
