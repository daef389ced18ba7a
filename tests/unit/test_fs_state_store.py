from pathlib import Path

import pytest

from persistence.fs_store import FsStateStore
from persistence.models import CacheEntry, LatestRequest


def test_latest_request_roundtrip(tmp_path: Path) -> None:
    store = FsStateStore(tmp_path / "state")
    assert store.read_latest_request() is None

    request = LatestRequest(sequence="1700000000.42.7", updated_at=1_700_000_000, query="mayday")
    store.write_latest_request(request)

    assert store.request_path.exists()
    assert store.read_latest_request() == request


def test_latest_request_keeps_multiline_query(tmp_path: Path) -> None:
    store = FsStateStore(tmp_path)
    request = LatestRequest(sequence="s", updated_at=5, query="line one\nline two")
    store.write_latest_request(request)

    assert store.read_latest_request() == request


def test_latest_request_rejects_corrupt_file(tmp_path: Path) -> None:
    store = FsStateStore(tmp_path)
    store.request_path.write_text("seq\nnot-a-number\nquery", encoding="utf-8")
    assert store.read_latest_request() is None

    store.request_path.write_text("\n12\nquery", encoding="utf-8")
    assert store.read_latest_request() is None


def test_cache_entry_layout(tmp_path: Path) -> None:
    store = FsStateStore(tmp_path)
    entry = CacheEntry(key="abc", cached_at=1_700_000_000, status="ok", payload='{"items":[]}')
    store.write_cache_entry(entry)

    assert store.meta_path("abc").read_text(encoding="utf-8") == "1700000000\tok\n"
    assert store.payload_path("abc").read_text(encoding="utf-8") == '{"items":[]}'
    assert store.read_cache_entry("abc") == entry


def test_cache_entry_rejects_bad_meta(tmp_path: Path) -> None:
    store = FsStateStore(tmp_path)
    store.write_cache_entry(CacheEntry(key="k", cached_at=10, status="err", payload="boom"))

    store.meta_path("k").write_text("soon\terr\n", encoding="utf-8")
    assert store.read_cache_entry("k") is None

    store.meta_path("k").write_text("10\tmaybe\n", encoding="utf-8")
    assert store.read_cache_entry("k") is None

    store.meta_path("k").write_text("", encoding="utf-8")
    assert store.read_cache_entry("k") is None


def test_cache_entry_requires_payload_file(tmp_path: Path) -> None:
    store = FsStateStore(tmp_path)
    store.write_cache_entry(CacheEntry(key="k", cached_at=10, status="ok", payload="x"))
    store.payload_path("k").unlink()

    assert store.read_cache_entry("k") is None


def test_writes_leave_no_temp_files(tmp_path: Path) -> None:
    store = FsStateStore(tmp_path)
    store.write_latest_request(LatestRequest(sequence="s", updated_at=1, query="q"))
    store.write_cache_entry(CacheEntry(key="k", cached_at=1, status="ok", payload="p"))

    leftovers = [path.name for path in tmp_path.rglob("*") if ".tmp." in path.name]
    assert leftovers == []


def test_list_cache_entries(tmp_path: Path) -> None:
    store = FsStateStore(tmp_path)
    assert store.list_cache_entries() == []

    store.write_cache_entry(CacheEntry(key="b", cached_at=2, status="err", payload="e"))
    store.write_cache_entry(CacheEntry(key="a", cached_at=1, status="ok", payload="p"))

    assert [entry.key for entry in store.list_cache_entries()] == ["a", "b"]


def test_latest_request_written_by_shell_helpers(tmp_path: Path) -> None:
    store = FsStateStore(tmp_path)
    store.request_path.write_text("1700000000.42.7\n1700000000\nmayday\n", encoding="utf-8")

    assert store.read_latest_request() == LatestRequest(
        sequence="1700000000.42.7", updated_at=1_700_000_000, query="mayday"
    )


def test_latest_request_file_ends_with_newline(tmp_path: Path) -> None:
    store = FsStateStore(tmp_path)
    store.write_latest_request(LatestRequest(sequence="s", updated_at=1, query="q"))

    assert store.request_path.read_text(encoding="utf-8") == "s\n1\nq\n"


def test_undecodable_query_bytes_survive(tmp_path: Path) -> None:
    store = FsStateStore(tmp_path)
    request = LatestRequest(sequence="s", updated_at=1, query="caf\udce9")
    store.write_latest_request(request)

    assert store.request_path.read_bytes().endswith(b"caf\xe9\n")
    assert store.read_latest_request() == request


def test_unencodable_write_leaves_no_temp_file(tmp_path: Path) -> None:
    store = FsStateStore(tmp_path)

    with pytest.raises(UnicodeEncodeError):
        store.write_latest_request(LatestRequest(sequence="s", updated_at=1, query="bad \ud800"))

    assert [path.name for path in tmp_path.iterdir()] == []
