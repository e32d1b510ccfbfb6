"""CLI utilities for running async operations and formatting output."""

from smartdns_web.cli.utils.async_runner import coro
from smartdns_web.cli.utils.formatters import error, info, success, table, warning

__all__ = [
    "coro",
    "error",
    "info",
    "success",
    "table",
    "warning",
]
