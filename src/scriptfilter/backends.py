"""Backend adapters: the fetch/map_error seam each workflow implements."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Mapping, Protocol, Sequence

from scriptfilter.errors import ErrorMapper, FetchError, RuleBasedErrorMapper


logger = logging.getLogger(__name__)

QUERY_PLACEHOLDER = "{query}"


class SearchBackend(Protocol):
    def fetch(self, query: str) -> str: ...

    def map_error(self, message: str) -> str: ...


@dataclass
class CallableBackend:
    """Wrap a plain fetch function and error mapper."""

    fetch_fn: Callable[[str], str]
    error_fn: ErrorMapper

    def fetch(self, query: str) -> str:
        return self.fetch_fn(query)

    def map_error(self, message: str) -> str:
        return self.error_fn(message)


class CommandBackend:
    """Run an external workflow CLI and treat stdout as the Alfred payload.

    ``{query}`` inside ``argv`` is replaced with the query; without a
    placeholder the query is not passed, so command-style workflows can reuse
    the adapter with fixed arguments.
    """

    def __init__(
        self,
        argv: Sequence[str],
        error_mapper: ErrorMapper | None = None,
        *,
        env: Mapping[str, str] | None = None,
        timeout: float | None = None,
        cwd: str | Path | None = None,
    ) -> None:
        if not argv:
            raise ValueError("CommandBackend requires a command")
        self._argv = list(argv)
        self._error_mapper = error_mapper or RuleBasedErrorMapper()
        self._env = dict(env) if env is not None else None
        self._timeout = timeout
        self._cwd = cwd

    @property
    def argv(self) -> list[str]:
        return list(self._argv)

    @property
    def name(self) -> str:
        return Path(self._argv[0]).name

    def build_argv(self, query: str | None = None) -> list[str]:
        if query is None:
            return list(self._argv)
        return [part.replace(QUERY_PLACEHOLDER, query) for part in self._argv]

    def fetch(self, query: str) -> str:
        return self.execute(*self.build_argv(query)[1:])

    def execute(self, *args: str) -> str:
        argv = [self._argv[0], *args] if args else self.build_argv()
        env = None
        if self._env is not None:
            env = {**os.environ, **self._env}
        logger.debug("Running %s", argv)
        try:
            completed = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                env=env,
                cwd=self._cwd,
                timeout=self._timeout,
                check=False,
            )
        except FileNotFoundError as exc:
            raise FetchError(f"{self.name} binary not found") from exc
        except PermissionError as exc:
            raise FetchError(f"{self.name} is not executable") from exc
        except subprocess.TimeoutExpired as exc:
            raise FetchError(f"{self.name} timed out after {self._timeout}s") from exc
        if completed.returncode != 0:
            message = (completed.stderr or "").strip()
            raise FetchError(message or f"{self.name} exited with status {completed.returncode}")
        return completed.stdout.rstrip("\n")

    def map_error(self, message: str) -> str:
        return self._error_mapper(message)


def resolve_executable(
    name: str,
    *,
    env_var: str | None = None,
    search_dirs: Iterable[str | Path] = (),
    environ: Mapping[str, str] | None = None,
) -> Path | None:
    """Locate a workflow binary: env override, packaged dirs, then ``PATH``."""
    env = os.environ if environ is None else environ
    if env_var:
        override = env.get(env_var)
        if override and _is_executable(Path(override)):
            return Path(override)
    for directory in search_dirs:
        candidate = Path(directory) / name
        if _is_executable(candidate):
            return candidate
    found = shutil.which(name, path=env.get("PATH"))
    return Path(found) if found else None


def _is_executable(path: Path) -> bool:
    return path.is_file() and os.access(path, os.X_OK)


__all__ = [
    "CallableBackend",
    "CommandBackend",
    "QUERY_PLACEHOLDER",
    "SearchBackend",
    "resolve_executable",
]
