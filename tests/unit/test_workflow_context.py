from pathlib import Path

import pytest

from persistence.context import (
    COALESCE_NAMESPACE,
    WorkflowContext,
    resolve_cache_root,
    sanitize_workflow_key,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("wiki-search", "wiki-search"),
        ("youtube search", "youtube_search"),
        ("a/b:c", "a_b_c"),
        (" spaced ", "spaced"),
        ("", "workflow"),
        (None, "workflow"),
        ("_", "workflow"),
        ("v1.2_beta", "v1.2_beta"),
    ],
)
def test_sanitize_workflow_key(raw, expected) -> None:
    assert sanitize_workflow_key(raw) == expected


def test_cache_root_priority(tmp_path: Path) -> None:
    env = {
        "alfred_workflow_cache": "",
        "ALFRED_WORKFLOW_CACHE": str(tmp_path / "cache"),
        "alfred_workflow_data": str(tmp_path / "data"),
    }
    assert resolve_cache_root("fallback", environ=env) == tmp_path / "cache"

    env.pop("ALFRED_WORKFLOW_CACHE")
    assert resolve_cache_root("fallback", environ=env) == tmp_path / "data"


def test_cache_root_falls_back_to_tmpdir(tmp_path: Path) -> None:
    env = {"TMPDIR": str(tmp_path)}
    assert resolve_cache_root("wiki-fallback", environ=env) == tmp_path / "wiki-fallback"


def test_state_dir_is_namespaced(tmp_path: Path) -> None:
    env = {"alfred_workflow_cache": str(tmp_path)}
    context = WorkflowContext.resolve("wiki search", "unused", environ=env)

    assert context.workflow_key == "wiki_search"
    assert context.state_dir == tmp_path / COALESCE_NAMESPACE / "wiki_search"


def test_unrelated_workflows_do_not_collide(tmp_path: Path) -> None:
    env = {"alfred_workflow_cache": str(tmp_path)}
    first = WorkflowContext.resolve("wiki", environ=env)
    second = WorkflowContext.resolve("youtube", environ=env)

    assert first.state_dir != second.state_dir
