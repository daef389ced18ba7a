"""Workflow namespace resolution."""

from __future__ import annotations

import os
import re
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping


COALESCE_NAMESPACE = "script-filter-async-coalesce"
DEFAULT_FALLBACK_DIR = "script-filter-workflow"

_CACHE_DIR_ENV_VARS = (
    "alfred_workflow_cache",
    "ALFRED_WORKFLOW_CACHE",
    "alfred_workflow_data",
    "ALFRED_WORKFLOW_DATA",
)
_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def sanitize_workflow_key(raw: str | None) -> str:
    """Keep ``[A-Za-z0-9._-]``, replace the rest with ``_``."""
    value = _UNSAFE_CHARS.sub("_", raw or "workflow")
    value = value.removeprefix("_").removesuffix("_")
    return value or "workflow"


def resolve_cache_root(
    fallback_dir: str | None = None, *, environ: Mapping[str, str] | None = None
) -> Path:
    env = os.environ if environ is None else environ
    for name in _CACHE_DIR_ENV_VARS:
        candidate = env.get(name)
        if candidate:
            return Path(candidate)
    temp_dir = env.get("TMPDIR") or tempfile.gettempdir()
    return Path(temp_dir) / (fallback_dir or DEFAULT_FALLBACK_DIR)


@dataclass(frozen=True)
class WorkflowContext:
    workflow_key: str
    cache_root: Path

    @classmethod
    def resolve(
        cls,
        label: str,
        fallback_dir: str | None = None,
        *,
        environ: Mapping[str, str] | None = None,
    ) -> "WorkflowContext":
        return cls(
            workflow_key=sanitize_workflow_key(label),
            cache_root=resolve_cache_root(fallback_dir, environ=environ),
        )

    @property
    def state_dir(self) -> Path:
        return self.cache_root / COALESCE_NAMESPACE / self.workflow_key


__all__ = [
    "COALESCE_NAMESPACE",
    "DEFAULT_FALLBACK_DIR",
    "WorkflowContext",
    "resolve_cache_root",
    "sanitize_workflow_key",
]
