"""Context management for structured logging.

Request-scoped fields (request id, method, path) are kept in a ContextVar and
injected into every LogRecord by ``ContextInjectingFilter``, so service code
can log without threading the request through every call.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any

# Each async task gets its own copy automatically
_log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})


def set_log_context(**kwargs: Any) -> None:
    """Add fields to the logging context of the current task.

    Example:
        ```python
        set_log_context(request_id="abc-123", path="/v1/acl/ip/cidr")
        logger.info("Submitting block")  # carries request_id and path
        ```
    """
    current = _log_context.get().copy()
    current.update(kwargs)
    _log_context.set(current)


def get_log_context() -> dict[str, Any]:
    """Return a copy of the current logging context."""
    return _log_context.get().copy()


def clear_log_context() -> None:
    """Drop every field from the logging context of the current task."""
    _log_context.set({})


class ContextInjectingFilter(logging.Filter):
    """Copy the ContextVar fields onto each LogRecord.

    Installed on the root logger through dictConfig::

        "filters": {
            "context": {
                "()": "smartdns_web.infra.logging.context.ContextInjectingFilter"
            }
        }
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _log_context.get().items():
            # Explicit ``extra=`` values win over context
            if not hasattr(record, key):
                setattr(record, key, value)
        return True
