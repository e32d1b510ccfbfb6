"""Logging infrastructure.

Exports:
    setup_logging / configure_logging: dictConfig + QueueHandler setup
    set_log_context / get_log_context / clear_log_context: request context
    ContextInjectingFilter: root filter copying context onto records
    JSONFormatter: JSON Lines formatter with trace correlation
    get_lazy_logger: logger adapter with lazy message evaluation
"""

from smartdns_web.infra.logging.config import (
    configure_logging,
    setup_logging,
    shutdown,
)
from smartdns_web.infra.logging.context import (
    ContextInjectingFilter,
    clear_log_context,
    get_log_context,
    set_log_context,
)
from smartdns_web.infra.logging.formatters import JSONFormatter
from smartdns_web.infra.logging.lazy import LazyLoggerAdapter, get_lazy_logger

__all__ = [
    "ContextInjectingFilter",
    "JSONFormatter",
    "LazyLoggerAdapter",
    "clear_log_context",
    "configure_logging",
    "get_lazy_logger",
    "get_log_context",
    "set_log_context",
    "setup_logging",
    "shutdown",
]
