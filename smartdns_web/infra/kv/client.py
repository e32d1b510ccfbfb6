"""etcd v3 client over the gRPC JSON gateway with observability.

This module provides the production store implementation that:
- Uses httpx for async HTTP calls against ``/v3/kv/*``
- Fails over to the next configured endpoint when one is unreachable
- Authenticates lazily with user/password and re-authenticates once on 401
- Bounds each call, authentication and failover included, by its timeout
- Includes OpenTelemetry tracing for all store calls
- Records Prometheus metrics for monitoring

The gateway speaks JSON with base64 encoded keys and values, and encodes
int64 fields (such as ``lease`` and ``deleted``) as strings.
"""

from __future__ import annotations

import asyncio
import base64
import logging
import time
from typing import TYPE_CHECKING, Any

import httpx
from opentelemetry import trace

from smartdns_web.core.exceptions import (
    StoreError,
    StoreTimeoutError,
    StoreUnavailableError,
)
from smartdns_web.infra.kv.metrics import (
    kv_store_errors_total,
    kv_store_failovers_total,
    kv_store_operation_duration_seconds,
)
from smartdns_web.infra.kv.protocols import KeyValue

if TYPE_CHECKING:
    from smartdns_web.core.settings.etcd import EtcdSettings

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


def encode(value: str | bytes) -> str:
    """Base64 encode a key or value for the JSON gateway."""
    raw = value.encode("utf-8") if isinstance(value, str) else value
    return base64.b64encode(raw).decode("ascii")


def decode(value: str | None) -> str:
    """Decode a base64 key or value from the JSON gateway."""
    if not value:
        return ""
    return base64.b64decode(value).decode("utf-8", errors="replace")


def prefix_range_end(prefix: str) -> str:
    """Return the encoded ``range_end`` selecting every key under ``prefix``.

    The range end is the prefix with its last byte below 0xff incremented
    and everything after it dropped. A prefix of only 0xff bytes (or an
    empty one) selects every key, which etcd spells as a single zero byte.
    """
    raw = bytearray(prefix.encode("utf-8"))
    for i in range(len(raw) - 1, -1, -1):
        if raw[i] < 0xFF:
            raw[i] += 1
            return encode(bytes(raw[: i + 1]))
    return encode(b"\x00")


class EtcdClient:
    """HTTP client for the etcd v3 KV API.

    Implements ``KVStoreProtocol``. A single instance is shared by every
    request; httpx.AsyncClient is safe for concurrent use.

    Example:
        settings = get_etcd_settings()
        client = EtcdClient(settings)

        await client.put("/acl/ip/pool/10.0.0.1", '{"ip": "10.0.0.1"}')
        value = await client.get("/acl/ip/pool/10.0.0.1")

        await client.close()
    """

    def __init__(
        self,
        settings: EtcdSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the etcd client.

        Args:
            settings: EtcdSettings instance with connection configuration.
            transport: Optional httpx transport, used by tests.
        """
        self._settings = settings
        self._endpoints = list(settings.base_urls)
        self._active = 0
        self._token: str | None = None
        self._auth_lock = asyncio.Lock()

        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.read_timeout, connect=settings.dial_timeout),
            verify=settings.verify_ssl,
            transport=transport,
        )

        logger.debug(
            "EtcdClient initialized",
            extra={"endpoints": self._endpoints, "auth": settings.auth_enabled},
        )

    @property
    def active_endpoint(self) -> str:
        """Endpoint that answered the most recent call."""
        return self._endpoints[self._active]

    # ──────────────────────────────────────────────────────────────
    # KV operations
    # ──────────────────────────────────────────────────────────────

    async def get(self, key: str, *, timeout: float | None = None) -> str | None:
        data = await self._call(
            "get",
            "/v3/kv/range",
            {"key": encode(key)},
            timeout=self._settings.read_timeout if timeout is None else timeout,
            key=key,
        )
        kvs = data.get("kvs") or []
        if not kvs:
            return None
        return decode(kvs[0].get("value"))

    async def get_prefix(
        self, prefix: str, *, timeout: float | None = None
    ) -> list[KeyValue]:
        data = await self._call(
            "get_prefix",
            "/v3/kv/range",
            {
                "key": encode(prefix),
                "range_end": prefix_range_end(prefix),
                "sort_order": "ASCEND",
                "sort_target": "KEY",
            },
            timeout=self._settings.read_timeout if timeout is None else timeout,
            key=prefix,
        )
        return [
            KeyValue(
                key=decode(kv.get("key")),
                value=decode(kv.get("value")),
                lease=int(kv.get("lease") or 0),
            )
            for kv in data.get("kvs") or []
        ]

    async def put(self, key: str, value: str, *, timeout: float | None = None) -> None:
        await self._call(
            "put",
            "/v3/kv/put",
            {"key": encode(key), "value": encode(value)},
            timeout=self._settings.write_timeout if timeout is None else timeout,
            key=key,
        )

    async def delete(self, key: str, *, timeout: float | None = None) -> int:
        data = await self._call(
            "delete",
            "/v3/kv/deleterange",
            {"key": encode(key)},
            timeout=self._settings.write_timeout if timeout is None else timeout,
            key=key,
        )
        return int(data.get("deleted") or 0)

    async def delete_prefix(self, prefix: str, *, timeout: float | None = None) -> int:
        data = await self._call(
            "delete_prefix",
            "/v3/kv/deleterange",
            {"key": encode(prefix), "range_end": prefix_range_end(prefix)},
            timeout=self._settings.write_timeout if timeout is None else timeout,
            key=prefix,
        )
        return int(data.get("deleted") or 0)

    async def close(self) -> None:
        """Close the HTTP client and release resources."""
        await self._client.aclose()
        logger.debug("EtcdClient closed")

    # ──────────────────────────────────────────────────────────────
    # Transport
    # ──────────────────────────────────────────────────────────────

    async def _call(
        self,
        operation: str,
        path: str,
        payload: dict[str, Any],
        *,
        timeout: float,
        key: str,
    ) -> dict[str, Any]:
        """Run one store call inside a span, recording duration and errors."""
        start_time = time.perf_counter()

        with tracer.start_as_current_span(f"etcd.{operation}") as span:
            span.set_attribute("etcd.key", key)
            span.set_attribute("etcd.timeout", timeout)

            try:
                data = await self._post(operation, path, payload, timeout=timeout, key=key)
            except StoreError as e:
                span.set_attribute("etcd.success", False)
                span.record_exception(e)
                kv_store_errors_total.labels(operation=operation, error_type=e.type).inc()
                logger.warning(
                    "etcd %s failed",
                    operation,
                    extra={"key": key, "error": e.detail, "error_type": e.type},
                )
                raise
            finally:
                kv_store_operation_duration_seconds.labels(operation=operation).observe(
                    time.perf_counter() - start_time
                )

            span.set_attribute("etcd.success", True)
            span.set_attribute("etcd.endpoint", self.active_endpoint)
            return data

    async def _post(
        self,
        operation: str,
        path: str,
        payload: dict[str, Any],
        *,
        timeout: float,
        key: str,
    ) -> dict[str, Any]:
        """Run the exchange for one call, authentication and failover included,
        within ``timeout`` seconds."""
        try:
            async with asyncio.timeout(timeout):
                return await self._exchange(operation, path, payload, timeout=timeout, key=key)
        except TimeoutError as e:
            raise StoreTimeoutError(operation, timeout, key=key) from e

    async def _exchange(
        self,
        operation: str,
        path: str,
        payload: dict[str, Any],
        *,
        timeout: float,
        key: str,
    ) -> dict[str, Any]:
        headers = await self._auth_headers(timeout)
        response = await self._send(
            operation, path, payload, headers=headers, timeout=timeout, key=key
        )

        if response.status_code == 401 and self._settings.auth_enabled:
            # Token expired or revoked; authenticate again once
            self._token = None
            headers = await self._auth_headers(timeout)
            response = await self._send(
                operation, path, payload, headers=headers, timeout=timeout, key=key
            )

        if response.status_code != 200:
            raise StoreUnavailableError(
                f"etcd answered {response.status_code} to {operation}",
                key=key,
                extra={"status_code": response.status_code, "response": response.text[:200]},
            )

        try:
            return response.json()
        except ValueError as e:
            raise StoreUnavailableError(
                f"etcd returned a malformed body to {operation}", key=key
            ) from e

    async def _send(
        self,
        operation: str,
        path: str,
        payload: dict[str, Any],
        *,
        headers: dict[str, str],
        timeout: float,
        key: str | None,
    ) -> httpx.Response:
        """POST to the active endpoint, moving on to the next when unreachable."""
        errors: list[httpx.HTTPError] = []
        request_timeout = httpx.Timeout(timeout, connect=self._settings.dial_timeout)

        for attempt in range(len(self._endpoints)):
            index = (self._active + attempt) % len(self._endpoints)
            endpoint = self._endpoints[index]

            try:
                response = await self._client.post(
                    f"{endpoint}{path}",
                    json=payload,
                    headers=headers,
                    timeout=request_timeout,
                )
            except (httpx.ConnectError, httpx.ConnectTimeout) as e:
                errors.append(e)
                kv_store_failovers_total.labels(endpoint=endpoint).inc()
                logger.warning(
                    "etcd endpoint unreachable",
                    extra={"endpoint": endpoint, "operation": operation, "error": str(e)},
                )
                continue
            except httpx.TimeoutException as e:
                raise StoreTimeoutError(operation, timeout, key=key) from e
            except httpx.HTTPError as e:
                raise StoreUnavailableError(
                    f"etcd {operation} failed: {e}", key=key, extra={"endpoint": endpoint}
                ) from e

            self._active = index
            return response

        last_error = errors[-1] if errors else None
        if errors and all(isinstance(e, httpx.ConnectTimeout) for e in errors):
            raise StoreTimeoutError(operation, timeout, key=key) from last_error
        raise StoreUnavailableError(
            "No etcd endpoint is reachable",
            key=key,
            extra={"endpoints": self._endpoints},
        ) from last_error

    async def _auth_headers(self, timeout: float) -> dict[str, str]:
        if not self._settings.auth_enabled:
            return {}
        if self._token is None:
            async with self._auth_lock:
                if self._token is None:
                    self._token = await self._authenticate(timeout)
        return {"Authorization": self._token}

    async def _authenticate(self, timeout: float) -> str:
        password = self._settings.password
        response = await self._send(
            "authenticate",
            "/v3/auth/authenticate",
            {
                "name": self._settings.username,
                "password": password.get_secret_value() if password else "",
            },
            headers={},
            timeout=timeout,
            key=None,
        )
        if response.status_code != 200:
            raise StoreUnavailableError(
                "etcd authentication failed",
                extra={"status_code": response.status_code, "user": self._settings.username},
            )
        try:
            token = response.json().get("token")
        except ValueError as e:
            raise StoreUnavailableError("etcd authentication returned a malformed body") from e
        if not token:
            raise StoreUnavailableError("etcd authentication returned no token")

        logger.info("Authenticated with etcd", extra={"user": self._settings.username})
        return token
