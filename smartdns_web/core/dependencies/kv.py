"""Key-value store dependencies for FastAPI route handlers.

Usage:
    from smartdns_web.core.dependencies.kv import KVStoreDep

    @router.get("/acl/ip/pool")
    async def list_pool(store: KVStoreDep):
        return await store.get_prefix("/acl/ip/pool/")

Tests override ``get_kv_store_dep`` with an InMemoryKVStore.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from smartdns_web.core.exceptions import StoreUnavailableError
from smartdns_web.infra.kv import KVStoreProtocol


def get_kv_store_dep() -> KVStoreProtocol | None:
    """Get the process-wide store handle.

    The import is deferred to runtime to avoid circular dependencies.

    Returns:
        The store, or None if the lifespan has not started it.
    """
    from smartdns_web.infra.kv import get_kv_store

    return get_kv_store()


async def require_kv_store(
    store: Annotated[KVStoreProtocol | None, Depends(get_kv_store_dep)],
) -> KVStoreProtocol:
    """Dependency that requires the store to be available.

    Raises:
        StoreUnavailableError: 503 when the store was never started.
    """
    if store is None:
        raise StoreUnavailableError("Key-value store is not initialized")
    return store


KVStoreDep = Annotated[KVStoreProtocol, Depends(require_kv_store)]
"""Store dependency that requires the store to be initialized."""
