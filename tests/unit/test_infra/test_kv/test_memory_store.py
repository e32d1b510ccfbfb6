"""Unit tests for InMemoryKVStore, the record codec and store selection."""

from __future__ import annotations

import pytest
from pydantic import BaseModel, Field

from smartdns_web.core.exceptions import DeserializationError, StoreTimeoutError, StoreUnavailableError
from smartdns_web.core.settings.etcd import EtcdSettings
from smartdns_web.infra.kv import (
    EtcdClient,
    InMemoryKVStore,
    KVStoreProtocol,
    create_kv_store,
    dump_record,
    load_record,
)


class Record(BaseModel):
    line: str = Field(default="", alias="lineDnsReStr")
    dns: list[str] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


@pytest.mark.unit
class TestInMemoryKVStore:
    """Tests for the in-memory store."""

    def test_implements_protocol(self, kv_store):
        assert isinstance(kv_store, KVStoreProtocol)

    async def test_prefix_scan_is_sorted_and_bounded(self, kv_store):
        for key in ("/acl/ip/pool/10.0.0.2", "/acl/ip/pool/10.0.0.1", "/acl/ip/cidr/10.0.0.0/30"):
            await kv_store.put(key, "{}")

        entries = await kv_store.get_prefix("/acl/ip/pool/")

        assert [e.key for e in entries] == ["/acl/ip/pool/10.0.0.1", "/acl/ip/pool/10.0.0.2"]

    async def test_leases_are_reported_and_cleared_by_put(self, kv_store):
        await kv_store.put_with_lease("/smartdns/app/node1", "", lease=42)
        assert (await kv_store.get_prefix("/smartdns/app/"))[0].lease == 42

        await kv_store.put("/smartdns/app/node1", "")
        assert (await kv_store.get_prefix("/smartdns/app/"))[0].lease == 0

    async def test_delete_prefix_counts(self, kv_store):
        await kv_store.put("/forward/group/a/x.com", "{}")
        await kv_store.put("/forward/group/a/y.com", "{}")
        await kv_store.put("/forward/groups/a", "ok")

        assert await kv_store.delete_prefix("/forward/group/a/") == 2
        assert list(kv_store.data) == ["/forward/groups/a"]

    async def test_fail_next_call_fails_once(self, kv_store):
        kv_store.fail_next_call = True

        with pytest.raises(StoreUnavailableError):
            await kv_store.get("/k")
        assert await kv_store.get("/k") is None
        assert [call.success for call in kv_store.calls("get")] == [False, True]

    async def test_fail_on_uses_given_error(self, kv_store):
        kv_store.fail_on("/k", StoreTimeoutError("get", 1.0, key="/k"))

        with pytest.raises(StoreTimeoutError):
            await kv_store.get("/k")

    async def test_close(self, kv_store):
        await kv_store.close()
        assert kv_store.closed


@pytest.mark.unit
class TestRecordCodec:
    """Tests for dump_record/load_record."""

    def test_dump_uses_wire_names(self):
        assert dump_record(Record(line="ct", dns=["1.1.1.1"])) == '{"lineDnsReStr":"ct","dns":["1.1.1.1"]}'

    def test_load_accepts_wire_names(self):
        record = load_record("/k", '{"lineDnsReStr": "cu"}', Record)
        assert record.line == "cu"

    @pytest.mark.parametrize("raw", ["", "not json", '{"dns": "1.1.1.1"}'])
    def test_load_malformed_raises(self, raw):
        with pytest.raises(DeserializationError) as exc_info:
            load_record("/acl/ip/pool/10.0.0.1", raw, Record)

        assert exc_info.value.key == "/acl/ip/pool/10.0.0.1"


@pytest.mark.unit
class TestCreateKVStore:
    """Tests for backend selection."""

    def test_disabled_etcd_selects_memory(self):
        store = create_kv_store(EtcdSettings(enabled=False))
        assert isinstance(store, InMemoryKVStore)

    async def test_enabled_etcd_selects_client(self):
        store = create_kv_store(EtcdSettings(enabled=True, endpoints=["10.0.0.1:2379"]))
        try:
            assert isinstance(store, EtcdClient)
            assert store.active_endpoint == "http://10.0.0.1:2379"
        finally:
            await store.close()
