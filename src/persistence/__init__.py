"""Persistence subsystem exports."""

from persistence.cache import ResultCache
from persistence.context import WorkflowContext
from persistence.fs_store import FsStateStore
from persistence.memory_store import MemoryStateStore

__all__ = ["FsStateStore", "MemoryStateStore", "ResultCache", "WorkflowContext"]
