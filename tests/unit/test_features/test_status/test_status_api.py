"""Tests for status listings, liveness and metrics endpoints."""

from __future__ import annotations

import pytest

from smartdns_web.features.status.service import StatusService


@pytest.mark.unit
class TestStatusService:
    """Tests for StatusService."""

    async def test_smartdns_instances_from_keys(self, kv_store):
        await kv_store.put_with_lease("/smartdns/app/node-b", "", lease=11)
        await kv_store.put_with_lease("/smartdns/app/node-a", "", lease=10)
        await kv_store.put("/smartdns/app/", "")

        instances = await StatusService(kv_store, read_timeout=1.0).list_smartdns()

        assert [(i.name, i.status, i.lease) for i in instances] == [
            ("node-a", "online", 10),
            ("node-b", "online", 11),
        ]

    async def test_line_dns_skips_short_keys(self, kv_store):
        await kv_store.put_with_lease("/line/dns/example.com/ct/1.2.3.4", "", lease=5)
        await kv_store.put("/line/dns/example.com/ct", "")

        lines = await StatusService(kv_store, read_timeout=1.0).list_line_dns()

        assert len(lines) == 1
        assert lines[0].zone_name == "example.com"
        assert lines[0].line_type == "ct"
        assert lines[0].addr == "1.2.3.4"


@pytest.mark.unit
class TestStatusEndpoints:
    """Tests for /v1/ping, /v1/smartdns, /v1/linedns and /metrics."""

    async def test_ping(self, client):
        response = await client.get("/v1/ping")

        assert response.status_code == 200
        assert response.text == "pong"

    async def test_smartdns_table(self, client, kv_store):
        await kv_store.put_with_lease("/smartdns/app/node-a", "", lease=10)

        body = (await client.get("/v1/smartdns")).json()

        assert body["data"] == [{"name": "node-a", "status": "online", "lease": 10}]
        assert [c["prop"] for c in body["column"]] == ["name", "status", "lease"]

    async def test_linedns_uses_wire_names(self, client, kv_store):
        await kv_store.put("/line/dns/example.com/cu/5.6.7.8", "")

        row = (await client.get("/v1/linedns")).json()["data"][0]

        assert row == {"zoneName": "example.com", "lineType": "cu", "addr": "5.6.7.8", "lease": 0}

    async def test_store_outage_is_503(self, client, kv_store):
        kv_store.fail_next_call = True

        response = await client.get("/v1/smartdns")

        assert response.status_code == 503
        assert response.headers["content-type"].startswith("application/json")

    async def test_metrics_exposition(self, client):
        await client.get("/v1/ping")

        response = await client.get("/metrics")

        assert response.status_code == 200
        assert "http_requests_total" in response.text
        assert "kv_store_operation_duration_seconds" in response.text

    async def test_request_id_is_echoed(self, client):
        response = await client.get("/v1/ping", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"
        assert "X-Process-Time" in response.headers
