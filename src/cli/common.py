"""Shared helpers for CLI commands."""

from __future__ import annotations

import json
import logging
from typing import Any

import typer
from rich.console import Console
from rich.logging import RichHandler

from core.config import get_settings
from scriptfilter.backends import QUERY_PLACEHOLDER
from scriptfilter.errors import ErrorRule, RuleBasedErrorMapper


def configure_logging(level: str | None = None) -> None:
    """Send diagnostics to stderr; stdout is reserved for Alfred JSON."""
    resolved = (level or get_settings().log_level).strip().upper()
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=False,
    )
    logging.basicConfig(
        level=getattr(logging, resolved, logging.WARNING),
        format="%(name)s: %(message)s",
        handlers=[handler],
        force=True,
    )


def parse_error_rule(raw: str) -> ErrorRule:
    """Parse ``needle[,needle...]=Title[|Subtitle]``."""
    needles_part, sep, rest = raw.partition("=")
    needles = tuple(part.strip() for part in needles_part.split(",") if part.strip())
    if not sep or not needles or not rest.strip():
        raise typer.BadParameter(f"Invalid --error-rule: {raw!r}")
    title, _, subtitle = rest.partition("|")
    return ErrorRule(needles=needles, title=title.strip(), subtitle=subtitle.strip() or None)


def build_error_mapper(default_title: str, rules: list[str] | None) -> RuleBasedErrorMapper:
    parsed = tuple(parse_error_rule(rule) for rule in rules or [])
    return RuleBasedErrorMapper(default_title=default_title, rules=parsed)


def with_query_placeholder(command: list[str]) -> list[str]:
    if any(QUERY_PLACEHOLDER in part for part in command):
        return list(command)
    return [*command, QUERY_PLACEHOLDER]


def emit_json(data: Any) -> None:
    typer.echo(json.dumps(data, ensure_ascii=False, indent=2))


__all__ = [
    "build_error_mapper",
    "configure_logging",
    "emit_json",
    "parse_error_rule",
    "with_query_placeholder",
]
