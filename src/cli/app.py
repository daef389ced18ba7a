"""Typer CLI entrypoint for Script Filter workflows."""

from __future__ import annotations

from importlib import import_module
from typing import List, Optional

import typer

from scriptfilter import __version__

_SUBCOMMAND_SPECS: list[tuple[str, str]] = [
    ("config", "cli.commands.config"),
    ("state", "cli.commands.state"),
]

app = typer.Typer(
    help=(
        "Script Filter runtime for Alfred workflows\n\n"
        "Coalesces keystroke invocations, caches backend results and always prints Alfred JSON.\n"
    ),
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=True,
    add_completion=False,
)


@app.callback()
def root(
    ctx: typer.Context,
    version_flag: bool = typer.Option(
        False,
        "-v",
        "--version",
        help="Print the version and exit",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Log level for stderr diagnostics (default: SCRIPT_FILTER_LOG_LEVEL or WARNING)",
    ),
) -> None:
    from cli.common import configure_logging

    if version_flag:
        typer.echo(__version__)
        raise typer.Exit()
    configure_logging(log_level)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command(help="Run a search-backed Script Filter with caching and coalescing")
def search(
    workflow_key: str = typer.Argument(..., help="Workflow label used to namespace state"),
    command: List[str] = typer.Argument(
        ...,
        metavar="-- COMMAND...",
        help="Backend command; {query} is replaced by the query (appended when absent)",
    ),
    query: Optional[str] = typer.Option(
        None,
        "--query",
        "-q",
        help="Query text (falls back to alfred_workflow_query, ALFRED_WORKFLOW_QUERY, stdin)",
    ),
    env_prefix: Optional[str] = typer.Option(
        None,
        "--env-prefix",
        help="Prefix of the <PREFIX>_QUERY_* tuning variables (default: workflow key)",
    ),
    fallback_dir: Optional[str] = typer.Option(
        None,
        "--fallback-dir",
        help="Temp-dir folder used when no Alfred cache/data dir is set",
    ),
    pending_title: Optional[str] = typer.Option(None, "--pending-title", help="Title of the waiting row"),
    pending_subtitle: Optional[str] = typer.Option(
        None, "--pending-subtitle", help="Subtitle of the waiting row"
    ),
    empty_title: Optional[str] = typer.Option(
        None, "--empty-title", help="Row title shown for an empty query"
    ),
    empty_subtitle: str = typer.Option("", "--empty-subtitle", help="Row subtitle shown for an empty query"),
    short_title: Optional[str] = typer.Option(
        None, "--short-title", help="Row title shown while the query is too short"
    ),
    short_subtitle: Optional[str] = typer.Option(
        None,
        "--short-subtitle",
        help="Short-query subtitle template; {min_chars} is substituted",
    ),
    min_chars: Optional[int] = typer.Option(
        None, "--min-chars", min=0, help="Minimum query length (default: <PREFIX>_QUERY_MIN_CHARS or 2)"
    ),
    error_title: str = typer.Option("Workflow error", "--error-title", help="Default error row title"),
    error_rules: Optional[List[str]] = typer.Option(
        None,
        "--error-rule",
        help="needle[,needle...]=Title[|Subtitle]; first match wins, repeatable",
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", min=0, help="Backend timeout in seconds"
    ),
) -> None:
    from cli.common import build_error_mapper, with_query_placeholder
    from core.config import get_settings
    from scriptfilter.backends import CommandBackend
    from scriptfilter.feedback import DEFAULT_SHORT_QUERY_SUBTITLE, DEFAULT_SHORT_QUERY_TITLE
    from scriptfilter.search_driver import SearchWorkflow

    mapper = build_error_mapper(error_title, error_rules)
    backend = CommandBackend(with_query_placeholder(command), mapper, timeout=timeout)
    workflow = SearchWorkflow(
        workflow_key=workflow_key,
        backend=backend,
        env_prefix=env_prefix if env_prefix is not None else workflow_key,
        cache_fallback=fallback_dir or get_settings().fallback_dir,
        pending_title=pending_title,
        pending_subtitle=pending_subtitle,
        empty_title=empty_title,
        empty_subtitle=empty_subtitle,
        short_title=short_title or DEFAULT_SHORT_QUERY_TITLE,
        short_subtitle_template=short_subtitle or DEFAULT_SHORT_QUERY_SUBTITLE,
        min_chars=min_chars,
    )
    typer.echo(workflow.run(query))


@app.command(help="Run a command-style Script Filter and validate its Alfred JSON")
def run(
    command: List[str] = typer.Argument(..., metavar="-- COMMAND...", help="Command to execute"),
    error_title: str = typer.Option("Workflow error", "--error-title", help="Default error row title"),
    error_rules: Optional[List[str]] = typer.Option(
        None,
        "--error-rule",
        help="needle[,needle...]=Title[|Subtitle]; first match wins, repeatable",
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", min=0, help="Command timeout in seconds"
    ),
) -> None:
    from cli.common import build_error_mapper
    from scriptfilter.backends import CommandBackend
    from scriptfilter.cli_driver import run_cli_flow

    backend = CommandBackend(command, build_error_mapper(error_title, error_rules), timeout=timeout)
    typer.echo(run_cli_flow(backend.execute, backend.map_error))


def _register_subcommands() -> None:
    for name, module_path in _SUBCOMMAND_SPECS:
        module = import_module(module_path)
        app.add_typer(module.app, name=name)


_register_subcommands()


def main() -> None:
    app()


__all__ = ["app", "main"]
