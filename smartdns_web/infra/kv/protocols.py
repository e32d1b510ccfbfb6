"""Protocol definitions for the hierarchical key-value store.

Keys are UTF-8 strings whose ``/`` separated segments encode an entity path,
e.g. ``/acl/ip/pool/10.0.0.7``. Values are UTF-8 strings (JSON documents for
policy records). Every call takes an optional timeout in seconds; ``None``
selects the implementation's default for that kind of call.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class KeyValue:
    """A key and its value as returned by a prefix scan.

    Attributes:
        key: Full key path.
        value: Stored value.
        lease: Lease id the key is attached to, 0 when the key has no lease.
    """

    key: str
    value: str
    lease: int = 0


@runtime_checkable
class KVStoreProtocol(Protocol):
    """Contract shared by the etcd client and the in-memory store.

    Failures raise ``StoreError`` subclasses from ``core.exceptions``:
    ``StoreTimeoutError`` when the call exceeded its timeout and
    ``StoreUnavailableError`` for every other failure to talk to the store.
    """

    async def get(self, key: str, *, timeout: float | None = None) -> str | None:
        """Return the value at ``key`` or None when the key does not exist."""
        ...

    async def get_prefix(
        self, prefix: str, *, timeout: float | None = None
    ) -> list[KeyValue]:
        """Return every key starting with ``prefix``, ordered by key."""
        ...

    async def put(self, key: str, value: str, *, timeout: float | None = None) -> None:
        """Create or replace the value at ``key``."""
        ...

    async def delete(self, key: str, *, timeout: float | None = None) -> int:
        """Delete ``key``; returns the number of keys removed (0 or 1)."""
        ...

    async def delete_prefix(self, prefix: str, *, timeout: float | None = None) -> int:
        """Delete every key starting with ``prefix``; returns the count removed."""
        ...

    async def close(self) -> None:
        """Release connections held by the store."""
        ...
