"""Alfred Script Filter output contracts."""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AlfredItem(BaseModel):
    """A single Script Filter row."""

    title: str
    subtitle: Optional[str] = None
    arg: Optional[str] = None
    autocomplete: Optional[str] = None
    uid: Optional[str] = None
    valid: Optional[bool] = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("title", "subtitle")
    @classmethod
    def _single_line(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.replace("\r", " ").replace("\n", " ")


class ScriptFilterResponse(BaseModel):
    """Top-level Script Filter payload; ``rerun`` only on pending replies."""

    items: List[AlfredItem] = Field(default_factory=list)
    rerun: Optional[float] = Field(default=None, ge=0)

    model_config = ConfigDict(extra="forbid")

    def to_json(self) -> str:
        return self.model_dump_json(exclude_none=True)


class ItemsEnvelope(BaseModel):
    """Loose shape check: a JSON object whose ``items`` is an array."""

    items: List[Any]

    model_config = ConfigDict(extra="allow")


__all__ = ["AlfredItem", "ItemsEnvelope", "ScriptFilterResponse"]
