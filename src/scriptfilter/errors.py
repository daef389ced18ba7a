"""Backend failure type and the error-row mapping boundary."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Sequence

from pydantic import ValidationError

from schemas.alfred import ItemsEnvelope
from scriptfilter.feedback import FALLBACK_ERROR_MESSAGE, error_item_json, fallback_error_item_json


logger = logging.getLogger(__name__)

ErrorMapper = Callable[[str], str]


class FetchError(RuntimeError):
    """A backend call failed; ``message`` is what the backend wrote to stderr."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


def normalize_error_message(raw: str | None) -> str:
    value = " ".join((raw or "").split())
    value = value.removeprefix("error: ")
    value = value.removeprefix("Error: ")
    return value


def is_items_json(text: str | None) -> bool:
    """True when ``text`` is a JSON object carrying an ``items`` array."""
    if not text or not text.strip():
        return False
    try:
        ItemsEnvelope.model_validate_json(text)
    except ValidationError:
        return False
    return True


@dataclass(frozen=True)
class ErrorRule:
    needles: tuple[str, ...]
    title: str
    subtitle: str | None = None

    def matches(self, lowered: str) -> bool:
        return any(needle.lower() in lowered for needle in self.needles)


@dataclass
class RuleBasedErrorMapper:
    """Substring classifier turning a raw backend message into one error row.

    The first rule whose needle appears in the lower-cased message wins. A rule
    without a subtitle shows the normalized message itself.
    """

    default_title: str = "Workflow error"
    default_message: str = FALLBACK_ERROR_MESSAGE
    rules: Sequence[ErrorRule] = field(default_factory=tuple)

    def __call__(self, raw_message: str) -> str:
        message = normalize_error_message(raw_message) or self.default_message
        lowered = message.lower()
        for rule in self.rules:
            if rule.matches(lowered):
                return error_item_json(rule.title, rule.subtitle if rule.subtitle is not None else message)
        return error_item_json(self.default_title, message)


def guarded_map_error(map_error: ErrorMapper | None, raw_message: str | None) -> str:
    """Run a caller mapper, falling back to a generic row if it misbehaves."""
    message = raw_message or FALLBACK_ERROR_MESSAGE
    if map_error is None:
        return fallback_error_item_json(message)
    try:
        mapped = map_error(message)
    except Exception:
        logger.exception("Error mapper raised for message %r", message)
        return fallback_error_item_json(message)
    if not is_items_json(mapped):
        logger.debug("Error mapper returned malformed output: %r", mapped)
        return fallback_error_item_json(message)
    return mapped.strip()


__all__ = [
    "ErrorMapper",
    "ErrorRule",
    "FetchError",
    "RuleBasedErrorMapper",
    "guarded_map_error",
    "is_items_json",
    "normalize_error_message",
]
