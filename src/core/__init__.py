"""Core configuration and shared utilities."""

from dotenv import load_dotenv

from .config import QueryFlowSettings, Settings, get_settings, load_query_flow_settings

load_dotenv()

__all__ = ["QueryFlowSettings", "Settings", "get_settings", "load_query_flow_settings"]
