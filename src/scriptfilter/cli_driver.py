"""Non-search Script Filter execution driver.

No cache and no settle window: execute, check the output looks like Alfred
JSON, map anything else through the workflow's error mapper.
"""

from __future__ import annotations

import logging
from typing import Callable

from scriptfilter.errors import ErrorMapper, FetchError, guarded_map_error, is_items_json
from scriptfilter.feedback import FALLBACK_ERROR_MESSAGE


logger = logging.getLogger(__name__)

MISSING_CALLBACK_MESSAGE = "script-filter execute callback is not defined"
EMPTY_OUTPUT_MESSAGE = "script-filter command returned empty response"
MALFORMED_JSON_MESSAGE = "script-filter command returned malformed Alfred JSON"


def run_cli_flow(
    execute: Callable[..., str] | None,
    map_error: ErrorMapper | None,
    *args: str,
    empty_output_message: str = EMPTY_OUTPUT_MESSAGE,
    malformed_json_message: str = MALFORMED_JSON_MESSAGE,
) -> str:
    if execute is None or not callable(execute):
        return guarded_map_error(map_error, MISSING_CALLBACK_MESSAGE)

    try:
        output = execute(*args)
    except FetchError as exc:
        return guarded_map_error(map_error, exc.message or FALLBACK_ERROR_MESSAGE)
    except Exception as exc:
        logger.exception("Script Filter command raised")
        return guarded_map_error(map_error, str(exc) or FALLBACK_ERROR_MESSAGE)

    if not output or not output.strip():
        return guarded_map_error(map_error, empty_output_message)
    if not is_items_json(output):
        return guarded_map_error(map_error, malformed_json_message)
    return output


__all__ = [
    "EMPTY_OUTPUT_MESSAGE",
    "MALFORMED_JSON_MESSAGE",
    "MISSING_CALLBACK_MESSAGE",
    "run_cli_flow",
]
