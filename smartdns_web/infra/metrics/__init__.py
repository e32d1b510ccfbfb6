"""Metrics infrastructure for Prometheus monitoring."""

from __future__ import annotations

from prometheus_client import generate_latest

from smartdns_web.infra.metrics.prometheus import (
    DEFAULT_LATENCY_BUCKETS,
    FANOUT_LATENCY_BUCKETS,
    REGISTRY,
)

__all__ = [
    "DEFAULT_LATENCY_BUCKETS",
    "FANOUT_LATENCY_BUCKETS",
    "REGISTRY",
    "generate_latest",
]
