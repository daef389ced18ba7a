"""Schema package for Script Filter output contracts."""

from .alfred import AlfredItem, ItemsEnvelope, ScriptFilterResponse

__all__ = ["AlfredItem", "ItemsEnvelope", "ScriptFilterResponse"]
