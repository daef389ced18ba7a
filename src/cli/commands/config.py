"""Configuration inspection commands."""

from __future__ import annotations

from typing import Any, Optional

import typer

from cli.common import emit_json
from core.config import QueryFlowSettings, Settings, env_prefix_for, get_settings, load_query_flow_settings


app = typer.Typer(
    help="Inspect effective configuration",
    context_settings={"help_option_names": ["-h", "--help"]},
    add_completion=False,
    no_args_is_help=True,
)


@app.command("show", help="Show the effective settings")
def show_config(
    env_prefix: Optional[str] = typer.Option(
        None,
        "--env-prefix",
        help="Also resolve the <PREFIX>_QUERY_* variables of one workflow",
    ),
    json_out: bool = typer.Option(True, "--json/--no-json", help="Print JSON"),
) -> None:
    payload: dict[str, Any] = {"settings": get_settings().model_dump()}
    if env_prefix is not None:
        flow = load_query_flow_settings(env_prefix)
        payload["query_flow"] = {
            "env_prefix": env_prefix_for(env_prefix),
            **flow.model_dump(),
        }
    if json_out:
        emit_json(payload)
        return
    for section, values in payload.items():
        for key, value in values.items():
            typer.echo(f"{section}.{key}={value}")


@app.command("diff", help="Show values that differ from the defaults")
def diff_config(
    env_prefix: Optional[str] = typer.Option(None, "--env-prefix", help="Workflow variable prefix"),
) -> None:
    diff: dict[str, dict[str, Any]] = {}
    _collect_diff(diff, get_settings().model_dump(), Settings)
    if env_prefix is not None:
        _collect_diff(diff, load_query_flow_settings(env_prefix).model_dump(), QueryFlowSettings)
    emit_json(diff)


def _collect_diff(diff: dict[str, dict[str, Any]], current: dict[str, Any], model: type) -> None:
    for key, field in model.model_fields.items():
        value = current.get(key)
        if value != field.default:
            diff[key] = {"value": value, "default": field.default}


__all__ = ["app"]
