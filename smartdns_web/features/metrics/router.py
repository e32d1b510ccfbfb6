"""Prometheus metrics endpoint.

Endpoints:
    GET /metrics - Prometheus scrape endpoint

Metrics Exposed:
    - http_requests_total, http_request_duration_seconds,
      http_requests_in_progress
    - kv_store_operation_duration_seconds, kv_store_errors_total,
      kv_store_failovers_total, kv_store_backend_info
    - acl_fanout_hosts_total, acl_fanout_duration_seconds,
      acl_malformed_entries_total
"""

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from smartdns_web.infra.metrics.prometheus import REGISTRY

router = APIRouter(tags=["observability"])


@router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    """Expose Prometheus metrics in text exposition format."""
    return Response(
        content=generate_latest(REGISTRY),
        media_type=CONTENT_TYPE_LATEST,
        headers={"Cache-Control": "no-cache, no-store, must-revalidate"},
    )
