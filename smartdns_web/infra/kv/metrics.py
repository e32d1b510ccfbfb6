"""Prometheus metrics for the key-value store client.

These metrics cover every call the service makes against etcd, so a slow or
flapping cluster shows up before users report failed submissions.
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

from smartdns_web.infra.metrics.prometheus import DEFAULT_LATENCY_BUCKETS, REGISTRY

# ──────────────────────────────────────────────────────────────
# Latency metrics
# ──────────────────────────────────────────────────────────────

kv_store_operation_duration_seconds = Histogram(
    "kv_store_operation_duration_seconds",
    "Duration of key-value store calls in seconds. "
    "Usage: Observe duration of each get/get_prefix/put/delete/delete_prefix call.",
    ["operation"],
    buckets=DEFAULT_LATENCY_BUCKETS,
    registry=REGISTRY,
)

# ──────────────────────────────────────────────────────────────
# Error metrics
# ──────────────────────────────────────────────────────────────

kv_store_errors_total = Counter(
    "kv_store_errors_total",
    "Total failed key-value store calls. "
    "Categorized by operation and error type (store-timeout, store-unavailable).",
    ["operation", "error_type"],
    registry=REGISTRY,
)

kv_store_failovers_total = Counter(
    "kv_store_failovers_total",
    "Total times an etcd endpoint was unreachable and the next one was tried.",
    ["endpoint"],
    registry=REGISTRY,
)

# ──────────────────────────────────────────────────────────────
# State metrics
# ──────────────────────────────────────────────────────────────

kv_store_backend_info = Gauge(
    "kv_store_backend_info",
    "Key-value backend in use (1 for the active backend).",
    ["backend"],
    registry=REGISTRY,
)
