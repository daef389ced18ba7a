"""Filesystem state store shared by independent process invocations."""

from __future__ import annotations

import logging
import os
import re
import tempfile
from pathlib import Path

from persistence.models import CACHE_STATUSES, CacheEntry, LatestRequest


logger = logging.getLogger(__name__)

REQUEST_FILE = "request.latest"
CACHE_DIR = "cache"
_EPOCH = re.compile(r"^[0-9]+$")


class FsStateStore:
    """Mailbox directory for one workflow key.

    Every write goes to a temp file in the target directory and is renamed into
    place, so readers see some complete prior write. There is no locking.
    """

    def __init__(self, state_dir: str | Path) -> None:
        self._state_dir = Path(state_dir)

    @property
    def state_dir(self) -> Path:
        return self._state_dir

    @property
    def request_path(self) -> Path:
        return self._state_dir / REQUEST_FILE

    @property
    def cache_dir(self) -> Path:
        return self._state_dir / CACHE_DIR

    def meta_path(self, key: str) -> Path:
        return self.cache_dir / f"{key}.meta"

    def payload_path(self, key: str) -> Path:
        return self.cache_dir / f"{key}.payload"

    def read_latest_request(self) -> LatestRequest | None:
        text = _read_text(self.request_path)
        if text is None:
            return None
        parts = text.removesuffix("\n").split("\n", 2)
        if len(parts) < 2:
            return None
        sequence, updated = parts[0], parts[1]
        query = parts[2] if len(parts) > 2 else ""
        if not sequence or not _EPOCH.match(updated):
            return None
        return LatestRequest(sequence=sequence, updated_at=int(updated), query=query)

    def write_latest_request(self, request: LatestRequest) -> None:
        body = f"{request.sequence}\n{request.updated_at}\n{request.query}\n"
        _atomic_write(self.request_path, body)

    def read_cache_entry(self, key: str) -> CacheEntry | None:
        meta = _read_text(self.meta_path(key))
        if meta is None:
            return None
        fields = meta.splitlines()[0].split("\t") if meta else []
        if len(fields) != 2:
            return None
        cached_at, status = fields
        if not _EPOCH.match(cached_at) or status not in CACHE_STATUSES:
            return None
        payload = _read_text(self.payload_path(key))
        if payload is None:
            return None
        return CacheEntry(key=key, cached_at=int(cached_at), status=status, payload=payload)  # type: ignore[arg-type]

    def write_cache_entry(self, entry: CacheEntry) -> None:
        _atomic_write(self.payload_path(entry.key), entry.payload)
        _atomic_write(self.meta_path(entry.key), f"{entry.cached_at}\t{entry.status}\n")

    def list_cache_entries(self) -> list[CacheEntry]:
        if not self.cache_dir.is_dir():
            return []
        entries: list[CacheEntry] = []
        for meta in sorted(self.cache_dir.glob("*.meta")):
            entry = self.read_cache_entry(meta.stem)
            if entry is not None:
                entries.append(entry)
        return entries


def _read_text(path: Path) -> str | None:
    try:
        with path.open("r", encoding="utf-8", errors="surrogateescape", newline="") as handle:
            return handle.read()
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Unreadable state file %s: %s", path, exc)
        return None


def _atomic_write(path: Path, content: str) -> None:
    # surrogateescape keeps undecodable argv bytes intact on disk.
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        "w",
        encoding="utf-8",
        errors="surrogateescape",
        newline="",
        dir=path.parent,
        prefix=f"{path.name}.tmp.",
        delete=False,
    ) as handle:
        tmp_path = Path(handle.name)
        try:
            handle.write(content)
        except BaseException:
            handle.close()
            tmp_path.unlink(missing_ok=True)
            raise
    try:
        os.replace(tmp_path, path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise


__all__ = ["CACHE_DIR", "FsStateStore", "REQUEST_FILE"]
