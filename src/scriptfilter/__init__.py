from importlib.metadata import PackageNotFoundError, version as pkg_version

try:
    __version__ = pkg_version("script-filter-coalesce")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

__all__ = [
    "backends",
    "cli_driver",
    "coalescer",
    "debounce",
    "dispatcher",
    "errors",
    "feedback",
    "query_policy",
    "search_driver",
]
