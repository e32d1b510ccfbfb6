"""FastAPI dependencies for route handlers.

This module acts as the dependency injection registry: features import their
dependencies from here rather than from ``infra`` directly.
"""

from smartdns_web.core.dependencies.kv import (
    KVStoreDep,
    get_kv_store_dep,
    require_kv_store,
)

__all__ = [
    "KVStoreDep",
    "get_kv_store_dep",
    "require_kv_store",
]
