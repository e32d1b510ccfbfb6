"""Unit tests for AclQueryService and AclDeletionService."""

from __future__ import annotations

import pytest

from smartdns_web.core.exceptions import (
    InvalidRangeError,
    NotFoundException,
    StoreTimeoutError,
    StoreUnavailableError,
)
from smartdns_web.features.acl.schemas import PolicyBlock
from smartdns_web.features.acl.service import (
    AclDeletionService,
    AclMaterializer,
    AclQueryService,
    block_key,
    host_key,
)
from smartdns_web.infra.metrics import REGISTRY

TIMEOUTS = {"read_timeout": 1.0, "write_timeout": 2.0, "max_block_hosts": 1024}


def _malformed_hosts() -> float:
    return REGISTRY.get_sample_value("acl_malformed_entries_total", {"namespace": "host"}) or 0.0


@pytest.fixture
def materializer(kv_store) -> AclMaterializer:
    return AclMaterializer(kv_store, **TIMEOUTS)


@pytest.fixture
def query(kv_store) -> AclQueryService:
    return AclQueryService(kv_store, **TIMEOUTS)


@pytest.fixture
def deletion(kv_store) -> AclDeletionService:
    return AclDeletionService(kv_store, **TIMEOUTS)


@pytest.mark.unit
class TestListBlocks:
    """Tests for AclQueryService.list_blocks."""

    async def test_empty_store_returns_placeholder(self, query):
        """No blocks yields a single empty row template."""
        blocks = await query.list_blocks()

        assert len(blocks) == 1
        assert blocks[0].is_placeholder

    async def test_lists_blocks_in_key_order(self, query, materializer):
        await materializer.submit_block(PolicyBlock(cidr="10.0.1.0/30", netmask=30))
        await materializer.submit_block(PolicyBlock(cidr="10.0.0.0/30", netmask=30))

        blocks = await query.list_blocks()

        assert [block.cidr for block in blocks] == ["10.0.0.0/30", "10.0.1.0/30"]
        assert all(block.host == block.cidr for block in blocks)

    async def test_malformed_entries_are_skipped(self, kv_store, query, materializer):
        """Undecodable values do not stop the scan."""
        kv_store.data[block_key("10.9.0.0/30")] = "{broken"
        kv_store.data[block_key("10.8.0.0/30")] = '["not", "an", "object"]'
        await materializer.submit_block(PolicyBlock(cidr="10.0.0.0/30", netmask=30))

        blocks = await query.list_blocks()

        assert [block.cidr for block in blocks] == ["10.0.0.0/30"]

    async def test_only_malformed_entries_returns_placeholder(self, kv_store, query):
        kv_store.data[block_key("10.9.0.0/30")] = "{broken"

        blocks = await query.list_blocks()

        assert len(blocks) == 1
        assert blocks[0].is_placeholder

    async def test_records_with_null_fields_decode(self, kv_store, query):
        """Values written by older tools with nulls still decode."""
        kv_store.data[block_key("10.0.0.0/30")] = (
            '{"ip": "10.0.0.0/30", "cidr": "10.0.0.0/30", "netmask": 30,'
            ' "masterDns": null, "forwardGroup": null, "backupLineDnsReStr": null}'
        )

        blocks = await query.list_blocks()

        assert blocks[0].master_dns == []
        assert blocks[0].forward_groups == []
        assert blocks[0].backup_line == ""

    async def test_store_failure_propagates(self, kv_store, query):
        kv_store.fail_next_call = True

        with pytest.raises(StoreUnavailableError):
            await query.list_blocks()


@pytest.mark.unit
class TestGetBlock:
    """Tests for AclQueryService.get_block."""

    async def test_returns_stored_block(self, query, materializer):
        await materializer.submit_block(
            PolicyBlock(cidr="10.0.0.0/30", netmask=30, forward_groups=["office", "office"])
        )

        block = await query.get_block("10.0.0.1/30")

        assert block.cidr == "10.0.0.0/30"
        assert block.forward_groups == ["office"]

    async def test_missing_block_raises_not_found(self, query):
        with pytest.raises(NotFoundException) as exc_info:
            await query.get_block("10.0.0.0/30")

        assert exc_info.value.type == "acl-block-not-found"

    async def test_malformed_block_raises_not_found(self, kv_store, query):
        kv_store.data[block_key("10.0.0.0/30")] = "{broken"

        with pytest.raises(NotFoundException) as exc_info:
            await query.get_block("10.0.0.0/30")

        assert exc_info.value.type == "acl-block-not-found"


@pytest.mark.unit
class TestHostSnapshots:
    """Tests for host snapshot listings and lookups."""

    async def test_hosts_in_block_are_in_address_order(self, query, materializer):
        await materializer.submit_block(PolicyBlock(cidr="10.0.0.0/29", netmask=29))

        snapshots = await query.list_host_snapshots_in_block("10.0.0.0/29")

        assert [s.host for s in snapshots] == [f"10.0.0.{i}" for i in range(1, 7)]

    async def test_hosts_in_block_reports_current_owner(self, query, materializer):
        """A sub-block's hosts show the sub-block's policy."""
        await materializer.submit_block(PolicyBlock(cidr="10.0.0.0/29", netmask=29))
        await materializer.submit_block(PolicyBlock(cidr="10.0.0.4/30", netmask=30))

        snapshots = await query.list_host_snapshots_in_block("10.0.0.0/29")
        owners = {s.host: s.cidr for s in snapshots}

        assert owners["10.0.0.1"] == "10.0.0.0/29"
        assert owners["10.0.0.5"] == "10.0.0.4/30"

    async def test_hosts_without_snapshot_are_omitted(self, query):
        assert await query.list_host_snapshots_in_block("10.0.0.0/30") == []

    async def test_unreadable_host_is_omitted(self, kv_store, query, materializer):
        await materializer.submit_block(PolicyBlock(cidr="10.0.0.0/30", netmask=30))
        kv_store.fail_on(host_key("10.0.0.1"), StoreTimeoutError("get", 1.0))

        snapshots = await query.list_host_snapshots_in_block("10.0.0.0/30")

        assert [s.host for s in snapshots] == ["10.0.0.2"]

    async def test_list_all_skips_malformed(self, kv_store, query, materializer):
        await materializer.submit_block(PolicyBlock(cidr="10.0.0.0/30", netmask=30))
        kv_store.data[host_key("10.5.5.5")] = "garbage"

        snapshots = await query.list_all_host_snapshots()

        assert [s.host for s in snapshots] == ["10.0.0.1", "10.0.0.2"]

    async def test_get_host_snapshot(self, query, materializer):
        await materializer.submit_block(
            PolicyBlock(cidr="10.0.0.0/30", netmask=30, master_dns=["223.5.5.5"])
        )

        snapshot = await query.get_host_snapshot("10.0.0.2")

        assert snapshot.host == "10.0.0.2"
        assert snapshot.master_dns == ["223.5.5.5"]

    async def test_get_host_snapshot_not_found(self, query):
        with pytest.raises(NotFoundException) as exc_info:
            await query.get_host_snapshot("10.0.0.2")

        assert exc_info.value.type == "acl-host-not-found"

    async def test_malformed_host_snapshot_is_not_found(self, kv_store, query):
        """An undecodable snapshot reads as absent and is counted."""
        kv_store.data[host_key("10.0.0.1")] = "not json"
        before = _malformed_hosts()

        with pytest.raises(NotFoundException) as exc_info:
            await query.get_host_snapshot("10.0.0.1")

        assert exc_info.value.type == "acl-host-not-found"
        assert _malformed_hosts() == before + 1

    async def test_get_host_snapshot_rejects_bad_address(self, query, kv_store):
        with pytest.raises(InvalidRangeError):
            await query.get_host_snapshot("10.0.0")

        assert kv_store.call_history == []


@pytest.mark.unit
class TestDeleteBlock:
    """Tests for AclDeletionService.delete_block."""

    async def test_removes_block_and_hosts(self, kv_store, deletion, materializer):
        await materializer.submit_block(PolicyBlock(cidr="10.0.0.0/30", netmask=30))

        ack = await deletion.delete_block("10.0.0.0/30")

        assert ack.deleted == 2
        assert ack.failed == 0
        assert kv_store.data == {}

    async def test_deletes_hosts_owned_by_other_blocks(self, kv_store, deletion, materializer):
        """Hosts in range are removed even when a more specific block owns them."""
        await materializer.submit_block(PolicyBlock(cidr="10.0.0.0/29", netmask=29))
        await materializer.submit_block(PolicyBlock(cidr="10.0.0.4/30", netmask=30))

        await deletion.delete_block("10.0.0.0/29")

        assert block_key("10.0.0.4/30") in kv_store.data
        assert host_key("10.0.0.5") not in kv_store.data
        assert host_key("10.0.0.6") not in kv_store.data

    async def test_missing_hosts_are_not_errors(self, kv_store, deletion):
        ack = await deletion.delete_block("10.0.0.0/30")

        assert ack.deleted == 0
        assert ack.failed == 0
        assert len(kv_store.calls("delete")) == 3

    async def test_host_delete_failure_continues(self, kv_store, deletion, materializer):
        await materializer.submit_block(PolicyBlock(cidr="10.0.0.0/30", netmask=30))
        kv_store.fail_on(host_key("10.0.0.1"))

        ack = await deletion.delete_block("10.0.0.0/30")

        assert ack.failed == 1
        assert ack.deleted == 1
        assert host_key("10.0.0.1") in kv_store.data
        assert block_key("10.0.0.0/30") not in kv_store.data

    async def test_block_delete_failure_raises(self, kv_store, deletion, materializer):
        await materializer.submit_block(PolicyBlock(cidr="10.0.0.0/30", netmask=30))
        kv_store.fail_on(block_key("10.0.0.0/30"))

        with pytest.raises(StoreUnavailableError):
            await deletion.delete_block("10.0.0.0/30")

        assert host_key("10.0.0.1") not in kv_store.data

    async def test_oversized_block_is_rejected(self, kv_store):
        deletion = AclDeletionService(kv_store, read_timeout=1.0, write_timeout=2.0, max_block_hosts=2)

        with pytest.raises(InvalidRangeError):
            await deletion.delete_block("10.0.0.0/24")

        assert kv_store.call_history == []


@pytest.mark.unit
class TestServiceTimeouts:
    """Tests for timeout and limit defaults of the ACL services."""

    async def test_explicit_zero_timeout_is_kept(self, kv_store):
        query = AclQueryService(kv_store, read_timeout=0.0, write_timeout=0.0, max_block_hosts=16)

        await query.list_blocks()

        assert kv_store.call_history[-1].args["timeout"] == 0.0

    async def test_omitted_values_come_from_settings(self, kv_store, monkeypatch):
        monkeypatch.setenv("ETCD_READ_TIMEOUT", "4")
        monkeypatch.setenv("ACL_MAX_BLOCK_HOSTS", "2")
        query = AclQueryService(kv_store)

        await query.list_blocks()

        assert kv_store.call_history[-1].args["timeout"] == 4.0
        with pytest.raises(InvalidRangeError):
            await query.list_host_snapshots_in_block("10.0.0.0/29")
