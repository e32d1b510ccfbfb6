"""Tests for the forward group service and endpoints."""

from __future__ import annotations

import json

import pytest

from smartdns_web.core.exceptions import ValidationException
from smartdns_web.features.forward import ForwardRule, ForwardService

RULE = {
    "groupName": "office",
    "domain": "corp.example.com",
    "lineDnsReStr": "ct",
    "dns": ["10.1.1.53"],
}


@pytest.fixture
def service(kv_store) -> ForwardService:
    return ForwardService(kv_store, read_timeout=1.0, write_timeout=2.0)


@pytest.mark.unit
class TestForwardService:
    """Tests for ForwardService."""

    async def test_upsert_creates_group_marker(self, service, kv_store):
        await service.upsert_rule(ForwardRule.model_validate(RULE))

        assert kv_store.data["/forward/groups/office"] == "ok"
        stored = json.loads(kv_store.data["/forward/group/office/corp.example.com"])
        assert stored == RULE

    async def test_upsert_keeps_existing_marker(self, service, kv_store):
        await service.upsert_rule(ForwardRule.model_validate(RULE))
        await service.upsert_rule(ForwardRule.model_validate({**RULE, "domain": "b.example.com"}))

        assert len(kv_store.calls("put")) == 3
        assert await service.list_groups() == ["office"]

    @pytest.mark.parametrize("group", ["", "  ", "a/b"])
    async def test_rejects_bad_group_names(self, service, kv_store, group):
        with pytest.raises(ValidationException):
            await service.upsert_rule(ForwardRule.model_validate({**RULE, "groupName": group}))

        assert kv_store.data == {}

    async def test_delete_group_removes_rules_and_marker(self, service, kv_store):
        await service.upsert_rule(ForwardRule.model_validate(RULE))
        await service.upsert_rule(
            ForwardRule.model_validate({**RULE, "groupName": "officers", "domain": "x.com"})
        )

        removed = await service.delete_group("office")

        assert removed == 1
        assert "/forward/groups/office" not in kv_store.data
        assert await service.list_groups() == ["officers"]
        assert [r.domain for r in await service.list_rules("officers")] == ["x.com"]

    async def test_explicit_zero_timeout_is_kept(self, kv_store):
        zero = ForwardService(kv_store, read_timeout=0.0, write_timeout=0.0)

        await zero.list_groups()

        assert kv_store.call_history[-1].args["timeout"] == 0.0

    async def test_get_missing_rule_returns_none(self, service):
        assert await service.get_rule("office", "nothing.example.com") is None


@pytest.mark.unit
class TestForwardEndpoints:
    """Tests for /v1/forward."""

    async def test_empty_groups_returns_template_row(self, client):
        body = (await client.get("/v1/forward/groups")).json()

        assert len(body["data"]) == 1
        assert body["data"][0]["dns"] == [""]
        assert body["data"][0]["updateUrl"] == "/v1/forward/group"

    async def test_rule_lifecycle(self, client):
        response = await client.post("/v1/forward/group", json=RULE)
        assert response.json() == {"mesg": "update done"}

        groups = (await client.get("/v1/forward/groups")).json()["data"]
        assert groups[0]["groupName"] == "office"
        assert groups[0]["id"] == 20000
        assert groups[0]["dataUrl"] == "/v1/forward/group/office"

        rules = (await client.get("/v1/forward/group/office")).json()["data"]
        assert rules[0]["domain"] == "corp.example.com"
        assert rules[0]["delUrl"] == "/v1/forward/group/office/corp.example.com"

        single = (await client.get("/v1/forward/group/office/corp.example.com")).json()["data"]
        assert single[0]["id"] == 40000
        assert single[0]["dns"] == ["10.1.1.53"]

        await client.delete("/v1/forward/group/office/corp.example.com")
        missing = (await client.get("/v1/forward/group/office/corp.example.com")).json()
        assert missing["data"] == []

    async def test_delete_group(self, client, kv_store):
        await client.post("/v1/forward/group", json=RULE)

        response = await client.delete("/v1/forward/group/office")

        assert response.status_code == 200
        assert kv_store.data == {}

    async def test_missing_group_name_is_422(self, client):
        response = await client.post("/v1/forward/group", json={**RULE, "groupName": ""})

        assert response.status_code == 422
        assert response.json()["type"] == "invalid-forward-name"
