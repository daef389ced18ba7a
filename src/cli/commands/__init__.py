"""CLI command groups."""

__all__ = ["config", "state"]

from . import config, state
