import json

from scriptfilter.feedback import (
    error_item_json,
    fallback_error_item_json,
    non_actionable_item_json,
    pending_item_json,
    short_query_item_json,
)


def test_pending_item_has_rerun_and_non_actionable_row() -> None:
    payload = json.loads(pending_item_json("Searching Wikipedia...", "Waiting for typing to pause", 0.4))

    assert payload["rerun"] == 0.4
    assert payload["items"] == [
        {"title": "Searching Wikipedia...", "subtitle": "Waiting for typing to pause", "valid": False}
    ]


def test_pending_item_defaults() -> None:
    payload = json.loads(pending_item_json())

    assert payload["items"][0]["title"] == "Searching..."
    assert payload["items"][0]["subtitle"] == "Waiting for query to stabilize."
    assert payload["rerun"] == 0.4


def test_pending_item_rejects_negative_rerun() -> None:
    assert json.loads(pending_item_json(rerun_seconds=-1))["rerun"] == 0.4
    assert json.loads(pending_item_json(rerun_seconds=float("nan")))["rerun"] == 0.4


def test_non_actionable_rows_have_no_arg_and_no_rerun() -> None:
    payload = json.loads(non_actionable_item_json("Info", "details"))

    assert "rerun" not in payload
    assert "arg" not in payload["items"][0]
    assert payload["items"][0]["valid"] is False


def test_short_query_subtitle_template() -> None:
    payload = json.loads(
        short_query_item_json(3, "Keep typing (3+ chars)", "Type at least {min_chars} characters before searching.")
    )

    assert payload["items"][0]["title"] == "Keep typing (3+ chars)"
    assert payload["items"][0]["subtitle"] == "Type at least 3 characters before searching."


def test_rows_are_single_line() -> None:
    payload = json.loads(error_item_json("Bad\ntitle", "line1\r\nline2"))

    assert payload["items"][0]["title"] == "Bad title"
    assert payload["items"][0]["subtitle"] == "line1  line2"


def test_fallback_error_row() -> None:
    payload = json.loads(fallback_error_item_json(""))

    assert payload["items"][0]["title"] == "Workflow runtime error"
    assert payload["items"][0]["subtitle"] == "script-filter command failed"


def test_short_query_template_keeps_other_braces() -> None:
    payload = json.loads(short_query_item_json(2, "Keep typing", "Need {n} chars {min_chars} {"))

    assert payload["items"][0]["subtitle"] == "Need {n} chars 2 {"
