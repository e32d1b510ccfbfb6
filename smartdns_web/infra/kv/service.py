"""Process-wide key-value store handle.

The store is created once in the application lifespan and shared by every
request. Tests bypass this module and inject an InMemoryKVStore through
FastAPI dependency overrides.
"""

from __future__ import annotations

import logging

from smartdns_web.core.settings import get_etcd_settings
from smartdns_web.core.settings.etcd import EtcdSettings
from smartdns_web.infra.kv.client import EtcdClient
from smartdns_web.infra.kv.metrics import kv_store_backend_info
from smartdns_web.infra.kv.mock_client import InMemoryKVStore
from smartdns_web.infra.kv.protocols import KVStoreProtocol

logger = logging.getLogger(__name__)

_kv_store: KVStoreProtocol | None = None


def create_kv_store(settings: EtcdSettings | None = None) -> KVStoreProtocol:
    """Build the store selected by settings.

    Args:
        settings: etcd settings; loaded via get_etcd_settings() when omitted.

    Returns:
        EtcdClient when etcd is configured, otherwise an InMemoryKVStore.
    """
    settings = settings or get_etcd_settings()

    if settings.is_configured:
        kv_store_backend_info.labels(backend="etcd").set(1)
        return EtcdClient(settings)

    logger.warning("etcd is disabled, policy is kept in memory and lost on restart")
    kv_store_backend_info.labels(backend="memory").set(1)
    return InMemoryKVStore()


async def start_kv_store() -> KVStoreProtocol:
    """Initialize the global store handle.

    This should be called during application startup.
    """
    global _kv_store
    logger.info("Starting key-value store")

    _kv_store = create_kv_store()
    logger.info(
        "Key-value store started",
        extra={"backend": type(_kv_store).__name__},
    )
    return _kv_store


async def stop_kv_store() -> None:
    """Close the global store handle.

    This should be called during application shutdown.
    """
    global _kv_store

    if _kv_store is None:
        return

    logger.info("Stopping key-value store")
    try:
        await _kv_store.close()
    finally:
        _kv_store = None


def get_kv_store() -> KVStoreProtocol | None:
    """Get the global store handle if initialized."""
    return _kv_store
