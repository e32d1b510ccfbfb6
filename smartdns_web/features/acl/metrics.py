"""Prometheus metrics for ACL materialization.

Fan-out writes are best-effort, so per-host outcomes are only visible here
and in the logs.
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

from smartdns_web.infra.metrics.prometheus import FANOUT_LATENCY_BUCKETS, REGISTRY

acl_fanout_hosts_total = Counter(
    "acl_fanout_hosts_total",
    "Host keys processed by block submissions and deletions. "
    "Outcome is one of written, skipped_precedence, read_failed, "
    "write_failed, deleted, delete_failed.",
    ["operation", "outcome"],  # operation: submit/delete
    registry=REGISTRY,
)

acl_fanout_duration_seconds = Histogram(
    "acl_fanout_duration_seconds",
    "Duration of a whole block submission or deletion in seconds.",
    ["operation"],
    buckets=FANOUT_LATENCY_BUCKETS,
    registry=REGISTRY,
)

acl_malformed_entries_total = Counter(
    "acl_malformed_entries_total",
    "Stored ACL values skipped because they could not be decoded.",
    ["namespace"],  # block, host
    registry=REGISTRY,
)
