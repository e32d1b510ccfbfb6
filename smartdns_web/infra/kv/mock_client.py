"""In-memory key-value store.

Implements KVStoreProtocol with a plain dict. It backs the service when etcd
is disabled (local development) and is the store every unit test runs
against.

Usage in tests:
    from smartdns_web.infra.kv.mock_client import InMemoryKVStore

    @pytest.fixture
    def kv_store():
        return InMemoryKVStore()

    async def test_put(kv_store):
        await kv_store.put("/acl/ip/pool/10.0.0.1", "{}")
        assert "/acl/ip/pool/10.0.0.1" in kv_store.data
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from smartdns_web.core.exceptions import StoreError, StoreUnavailableError
from smartdns_web.infra.kv.protocols import KeyValue

logger = logging.getLogger(__name__)


@dataclass
class CallRecord:
    """Record of a method call for assertion in tests."""

    method: str
    args: dict[str, Any]
    success: bool


@dataclass
class InMemoryKVStore:
    """Dict-backed store with failure injection.

    Attributes:
        data: Stored values by key.
        leases: Lease ids by key, for keys written with ``put_with_lease``.
        call_history: List of all method calls for assertion.
        fail_next_call: Set to True to make the next call raise
            StoreUnavailableError.
        fail_keys: Errors to raise whenever a given key is read, written or
            deleted. Entries stay until removed.
        closed: Whether close() has been called.
    """

    data: dict[str, str] = field(default_factory=dict)
    leases: dict[str, int] = field(default_factory=dict)
    call_history: list[CallRecord] = field(default_factory=list)
    fail_next_call: bool = False
    fail_keys: dict[str, StoreError] = field(default_factory=dict)
    closed: bool = False

    def fail_on(self, key: str, error: StoreError | None = None) -> None:
        """Make every call touching ``key`` raise ``error``."""
        self.fail_keys[key] = error or StoreUnavailableError(key=key)

    def calls(self, method: str) -> list[CallRecord]:
        """Return recorded calls of one method."""
        return [call for call in self.call_history if call.method == method]

    def _check(self, method: str, key: str, args: dict[str, Any]) -> None:
        failure: StoreError | None = None
        if self.fail_next_call:
            self.fail_next_call = False
            failure = StoreUnavailableError(f"Simulated {method} failure", key=key)
        elif key in self.fail_keys:
            failure = self.fail_keys[key]

        self.call_history.append(CallRecord(method=method, args=args, success=failure is None))
        if failure is not None:
            raise failure

    async def get(self, key: str, *, timeout: float | None = None) -> str | None:
        self._check("get", key, {"key": key, "timeout": timeout})
        return self.data.get(key)

    async def get_prefix(
        self, prefix: str, *, timeout: float | None = None
    ) -> list[KeyValue]:
        self._check("get_prefix", prefix, {"prefix": prefix, "timeout": timeout})
        return [
            KeyValue(key=key, value=self.data[key], lease=self.leases.get(key, 0))
            for key in sorted(self.data)
            if key.startswith(prefix)
        ]

    async def put(self, key: str, value: str, *, timeout: float | None = None) -> None:
        self._check("put", key, {"key": key, "value": value, "timeout": timeout})
        self.data[key] = value
        self.leases.pop(key, None)

    async def put_with_lease(self, key: str, value: str, lease: int) -> None:
        """Store a lease-bound key, as registered by smartdns instances."""
        self._check("put_with_lease", key, {"key": key, "value": value, "lease": lease})
        self.data[key] = value
        self.leases[key] = lease

    async def delete(self, key: str, *, timeout: float | None = None) -> int:
        self._check("delete", key, {"key": key, "timeout": timeout})
        self.leases.pop(key, None)
        return 1 if self.data.pop(key, None) is not None else 0

    async def delete_prefix(self, prefix: str, *, timeout: float | None = None) -> int:
        self._check("delete_prefix", prefix, {"prefix": prefix, "timeout": timeout})
        doomed = [key for key in self.data if key.startswith(prefix)]
        for key in doomed:
            del self.data[key]
            self.leases.pop(key, None)
        return len(doomed)

    async def close(self) -> None:
        self.closed = True
        logger.debug("InMemoryKVStore closed")
