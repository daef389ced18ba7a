import json

from persistence.cache import ResultCache
from persistence.memory_store import MemoryStateStore
from scriptfilter.backends import CallableBackend
from scriptfilter.dispatcher import emit_cached, fetch_and_emit
from scriptfilter.errors import FetchError


def test_success_is_emitted_verbatim_and_cached(backend, clock) -> None:
    cache = ResultCache(MemoryStateStore(), clock=clock)

    out = fetch_and_emit("rust", 30, backend, cache)

    assert out == '{"items":[{"title":"result for rust","arg":"rust","valid":true}]}'
    cached = cache.load("rust", 30)
    assert cached is not None
    assert cached.status == "ok"
    assert cached.payload == out


def test_payload_is_not_inspected(clock) -> None:
    backend = CallableBackend(lambda q: "definitely not json", lambda m: "{}")
    cache = ResultCache(MemoryStateStore(), clock=clock)

    assert fetch_and_emit("q", 0, backend, cache) == "definitely not json"


def test_failure_is_mapped_and_negatively_cached(backend, clock) -> None:
    backend.failures["rust"] = "upstream 503"
    cache = ResultCache(MemoryStateStore(), clock=clock)

    out = json.loads(fetch_and_emit("rust", 30, backend, cache))

    assert out["items"][0] == {"title": "Backend error", "subtitle": "upstream 503", "valid": False}
    cached = cache.load("rust", 30)
    assert cached is not None
    assert cached.status == "err"
    assert cached.payload == "upstream 503"


def test_zero_ttl_never_writes_cache(backend, clock) -> None:
    store = MemoryStateStore()
    cache = ResultCache(store, clock=clock)

    fetch_and_emit("rust", 0, backend, cache)
    backend.failures["go"] = "nope"
    fetch_and_emit("go", 0, backend, cache)

    assert store.list_cache_entries() == []


def test_unexpected_exception_becomes_error_row(clock) -> None:
    def broken(query: str) -> str:
        raise ValueError("bad response shape")

    backend = CallableBackend(broken, lambda m: '{"items":[{"title":"Mapped","subtitle":"%s","valid":false}]}' % m)
    out = json.loads(fetch_and_emit("q", 0, backend, ResultCache(MemoryStateStore(), clock=clock)))

    assert out["items"][0]["subtitle"] == "bad response shape"


def test_emit_cached_error_goes_through_mapper(backend) -> None:
    out = json.loads(emit_cached("err", "cached failure", backend))
    assert out["items"][0]["subtitle"] == "cached failure"
    assert emit_cached("ok", '{"items":[]}', backend) == '{"items":[]}'


def test_fetch_error_message_reaches_mapper(clock) -> None:
    seen = []

    def fetch(query: str) -> str:
        raise FetchError("error: quota exceeded")

    def map_error(message: str) -> str:
        seen.append(message)
        return '{"items":[]}'

    fetch_and_emit("q", 0, CallableBackend(fetch, map_error), ResultCache(MemoryStateStore(), clock=clock))

    assert seen == ["error: quota exceeded"]
