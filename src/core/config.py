"""Application configuration and .env loading."""

from __future__ import annotations

import math
import re
from functools import lru_cache
from typing import Any

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_NON_NEGATIVE_INT = re.compile(r"^[0-9]+$")
_NON_NEGATIVE_NUMBER = re.compile(r"^[0-9]+(\.[0-9]+)?$")

DEFAULT_CACHE_TTL_SECONDS = 0
DEFAULT_SETTLE_SECONDS = 2.0
DEFAULT_RERUN_SECONDS = 0.4
DEFAULT_MIN_QUERY_CHARS = 2


class Settings(BaseSettings):
    """Process-wide runtime configuration."""

    log_level: str = Field(default="WARNING", validation_alias="SCRIPT_FILTER_LOG_LEVEL")
    fallback_dir: str = Field(
        default="script-filter-workflow", validation_alias="SCRIPT_FILTER_FALLBACK_DIR"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_level(cls, value: Any) -> str:
        text = str(value or "").strip().upper()
        return text or "WARNING"


class QueryFlowSettings(BaseSettings):
    """Per-workflow tunables, read as ``<PREFIX>_QUERY_*`` variables.

    Build with ``QueryFlowSettings(_env_prefix="WIKI_")`` or use
    :func:`load_query_flow_settings`. Invalid or negative values never fail the
    request; they fall back to the field default.
    """

    query_cache_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS
    query_coalesce_settle_seconds: float = DEFAULT_SETTLE_SECONDS
    query_coalesce_rerun_seconds: float = DEFAULT_RERUN_SECONDS
    query_min_chars: int = DEFAULT_MIN_QUERY_CHARS

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("query_cache_ttl_seconds", "query_min_chars", mode="before")
    @classmethod
    def _soft_int(cls, value: Any, info: ValidationInfo) -> int:
        default = cls.model_fields[info.field_name].default
        if isinstance(value, bool):
            return default
        if isinstance(value, int):
            return value if value >= 0 else default
        text = "".join(str(value).split())
        if not _NON_NEGATIVE_INT.match(text):
            return default
        return int(text)

    @field_validator(
        "query_coalesce_settle_seconds", "query_coalesce_rerun_seconds", mode="before"
    )
    @classmethod
    def _soft_number(cls, value: Any, info: ValidationInfo) -> float:
        default = cls.model_fields[info.field_name].default
        if isinstance(value, bool):
            return default
        if isinstance(value, (int, float)):
            number = float(value)
            return number if math.isfinite(number) and number >= 0 else default
        text = "".join(str(value).split())
        if not _NON_NEGATIVE_NUMBER.match(text):
            return default
        return float(text)

    @property
    def cache_enabled(self) -> bool:
        return self.query_cache_ttl_seconds > 0


def env_prefix_for(name: str) -> str:
    """Turn ``wiki`` / ``WIKI`` / ``WIKI_`` into ``WIKI_``."""
    cleaned = re.sub(r"[^A-Za-z0-9]+", "_", name.strip()).strip("_").upper()
    return f"{cleaned}_" if cleaned else ""


def load_query_flow_settings(prefix: str) -> QueryFlowSettings:
    return QueryFlowSettings(_env_prefix=env_prefix_for(prefix))


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings once from .env/environment."""
    return Settings()


__all__ = [
    "DEFAULT_CACHE_TTL_SECONDS",
    "DEFAULT_MIN_QUERY_CHARS",
    "DEFAULT_RERUN_SECONDS",
    "DEFAULT_SETTLE_SECONDS",
    "QueryFlowSettings",
    "Settings",
    "env_prefix_for",
    "get_settings",
    "load_query_flow_settings",
]
