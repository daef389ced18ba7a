# tests/conftest.py
from __future__ import annotations

import pytest

from core.config import get_settings


_ISOLATED_ENV = (
    "alfred_workflow_cache",
    "ALFRED_WORKFLOW_CACHE",
    "alfred_workflow_data",
    "ALFRED_WORKFLOW_DATA",
    "alfred_workflow_query",
    "ALFRED_WORKFLOW_QUERY",
    "SCRIPT_FILTER_LOG_LEVEL",
    "SCRIPT_FILTER_FALLBACK_DIR",
)


class FakeClock:
    """Integer epoch clock the tests advance by hand."""

    def __init__(self, now: int = 1_700_000_000) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch, tmp_path):
    # Host variables must not leak into state resolution.
    for name in _ISOLATED_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("TMPDIR", str(tmp_path / "tmp"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


class CountingBackend:
    """Records every fetch; fails for queries listed in ``failures``."""

    def __init__(self, failures: dict[str, str] | None = None) -> None:
        self.calls: list[str] = []
        self.failures = failures or {}

    def fetch(self, query: str) -> str:
        from scriptfilter.errors import FetchError

        self.calls.append(query)
        if query in self.failures:
            raise FetchError(self.failures[query])
        return '{"items":[{"title":"result for %s","arg":"%s","valid":true}]}' % (query, query)

    def map_error(self, message: str) -> str:
        from scriptfilter.feedback import error_item_json

        return error_item_json("Backend error", message)


@pytest.fixture
def backend() -> CountingBackend:
    return CountingBackend()
