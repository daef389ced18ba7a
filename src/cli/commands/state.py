"""Coordination state inspection commands."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Optional

import typer

from cli.common import emit_json
from core.config import get_settings
from persistence.cache import epoch_seconds
from persistence.context import WorkflowContext
from persistence.fs_store import FsStateStore


app = typer.Typer(
    help="Inspect per-workflow coalescing state and cached results",
    context_settings={"help_option_names": ["-h", "--help"]},
    add_completion=False,
    no_args_is_help=True,
)


@app.command("show", help="Dump the latest request record and cache entries")
def show_state(
    workflow_key: str = typer.Argument(..., help="Workflow label"),
    fallback_dir: Optional[str] = typer.Option(
        None, "--fallback-dir", help="Temp-dir folder used when no Alfred cache/data dir is set"
    ),
    payloads: bool = typer.Option(False, "--payloads/--no-payloads", help="Include cached payload text"),
) -> None:
    context = WorkflowContext.resolve(workflow_key, fallback_dir or get_settings().fallback_dir)
    store = FsStateStore(context.state_dir)
    now = epoch_seconds()

    latest = store.read_latest_request()
    entries: list[dict[str, Any]] = []
    for entry in store.list_cache_entries():
        record = asdict(entry)
        record["age_seconds"] = now - entry.cached_at
        if not payloads:
            record["payload_bytes"] = len(record.pop("payload").encode("utf-8", errors="surrogateescape"))
        entries.append(record)

    emit_json(
        {
            "workflow_key": context.workflow_key,
            "state_dir": str(context.state_dir),
            "latest_request": asdict(latest) if latest else None,
            "cache_entries": entries,
        }
    )


__all__ = ["app"]
