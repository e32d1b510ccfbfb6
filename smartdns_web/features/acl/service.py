"""Service layer for ACL policy materialization.

A policy block is stored once under ``/acl/ip/cidr/<cidr>`` and copied to
``/acl/ip/pool/<ip>`` for every usable host of the block, so a smartdns
instance resolves the policy of a client address with a single point read.

Overlapping blocks are resolved per host by the precedence rule: a host
keeps its current snapshot when the snapshot's netmask is strictly greater
than the netmask of the incoming block. Equal netmasks overwrite.

The store has no multi-key transactions. Host fan-out is best-effort and
idempotent; only the block-level key write or delete decides whether the
operation failed.
"""

from __future__ import annotations

import logging
import time
from collections import Counter
from typing import TYPE_CHECKING

from smartdns_web.core.exceptions import (
    DeserializationError,
    InvalidRangeError,
    NotFoundException,
    StoreError,
)
from smartdns_web.features.acl.expander import canonical_cidr, expand, parse_host, usable_count
from smartdns_web.features.acl.metrics import (
    acl_fanout_duration_seconds,
    acl_fanout_hosts_total,
    acl_malformed_entries_total,
)
from smartdns_web.features.acl.schemas import AclAck, HostPolicySnapshot, PolicyBlock
from smartdns_web.infra.kv import dump_record, load_record
from smartdns_web.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from smartdns_web.infra.kv import KVStoreProtocol

# Standard logger for INFO/WARNING/ERROR
logger = logging.getLogger(__name__)
# Lazy logger for DEBUG (zero overhead when DEBUG disabled)
lazy_logger = get_lazy_logger(__name__)

BLOCK_PREFIX = "/acl/ip/cidr/"
HOST_PREFIX = "/acl/ip/pool/"


def block_key(cidr: str) -> str:
    return f"{BLOCK_PREFIX}{cidr}"


def host_key(ip: str) -> str:
    return f"{HOST_PREFIX}{ip}"


class _AclStoreService:
    """Store handle, timeouts and block size limit shared by the ACL services."""

    def __init__(
        self,
        store: KVStoreProtocol,
        *,
        read_timeout: float | None = None,
        write_timeout: float | None = None,
        max_block_hosts: int | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            store: Key-value store handle.
            read_timeout: Timeout of point reads and listings in seconds.
                Defaults to ETCD_READ_TIMEOUT.
            write_timeout: Timeout of each write and delete in seconds.
                Defaults to ETCD_WRITE_TIMEOUT.
            max_block_hosts: Largest block accepted. Defaults to
                ACL_MAX_BLOCK_HOSTS.
        """
        if read_timeout is None or write_timeout is None or max_block_hosts is None:
            from smartdns_web.core.settings import get_acl_settings, get_etcd_settings

            etcd_settings = get_etcd_settings()
            if read_timeout is None:
                read_timeout = etcd_settings.read_timeout
            if write_timeout is None:
                write_timeout = etcd_settings.write_timeout
            if max_block_hosts is None:
                max_block_hosts = get_acl_settings().max_block_hosts

        self._store = store
        self._read_timeout = read_timeout
        self._write_timeout = write_timeout
        self._max_block_hosts = max_block_hosts

    def _resolve_block(self, cidr: str) -> tuple[str, list[str]]:
        """Canonicalize ``cidr`` and expand it, enforcing the size limit.

        Raises:
            InvalidRangeError: If ``cidr`` is malformed or too large.
        """
        canonical = canonical_cidr(cidr)
        count = usable_count(canonical)
        if count > self._max_block_hosts:
            raise InvalidRangeError(
                cidr,
                f"block has {count} hosts, the limit is {self._max_block_hosts}",
                extra={"hosts": count, "limit": self._max_block_hosts},
            )
        return canonical, expand(canonical).addresses

    async def _read_snapshot(self, ip: str) -> HostPolicySnapshot | None:
        key = host_key(ip)
        raw = await self._store.get(key, timeout=self._read_timeout)
        if raw is None:
            return None
        return load_record(key, raw, HostPolicySnapshot)


class AclMaterializer(_AclStoreService):
    """Writes policy blocks and merges them into per-host snapshots."""

    async def submit_block(self, block: PolicyBlock) -> AclAck:
        """Store ``block`` and materialize it onto every host of its range.

        Args:
            block: Policy to apply. ``cidr`` may carry host bits; they are
                masked away before any key is derived.

        Returns:
            Counts of written, skipped and failed hosts.

        Raises:
            InvalidRangeError: Malformed or oversized CIDR, nothing written.
            StoreError: The block-level write failed.
        """
        cidr, hosts = self._resolve_block(block.cidr)
        block = block.model_copy(update={"cidr": cidr, "host": cidr})
        start_time = time.perf_counter()

        await self._store.put(block_key(cidr), dump_record(block), timeout=self._write_timeout)

        outcomes: Counter[str] = Counter()
        for ip in hosts:
            outcome = await self._merge_host(block, ip)
            outcomes[outcome] += 1
            acl_fanout_hosts_total.labels(operation="submit", outcome=outcome).inc()

        acl_fanout_duration_seconds.labels(operation="submit").observe(
            time.perf_counter() - start_time
        )

        ack = AclAck(
            cidr=cidr,
            hosts=len(hosts),
            written=outcomes["written"],
            skipped=outcomes["skipped_precedence"],
            failed=outcomes["read_failed"] + outcomes["write_failed"],
        )
        logger.info(
            "ACL block submitted",
            extra={"cidr": cidr, "netmask": block.netmask, **ack.model_dump(exclude={"cidr"})},
        )
        return ack

    async def _merge_host(self, block: PolicyBlock, ip: str) -> str:
        """Apply the precedence rule for one host; returns the outcome label."""
        try:
            existing = await self._read_snapshot(ip)
        except StoreError as e:
            logger.warning(
                "Skipping host, existing snapshot could not be read",
                extra={"ip": ip, "cidr": block.cidr, "error": e.detail, "error_type": e.type},
            )
            return "read_failed"

        if existing is not None and existing.netmask > block.netmask:
            lazy_logger.debug(
                lambda: f"{ip} kept by {existing.cidr} (netmask {existing.netmask} > {block.netmask})"
            )
            return "skipped_precedence"

        snapshot = HostPolicySnapshot.from_block(block, ip)
        try:
            await self._store.put(host_key(ip), dump_record(snapshot), timeout=self._write_timeout)
        except StoreError as e:
            logger.warning(
                "Host snapshot write failed",
                extra={"ip": ip, "cidr": block.cidr, "error": e.detail, "error_type": e.type},
            )
            return "write_failed"
        return "written"


class AclQueryService(_AclStoreService):
    """Reads block definitions and host snapshots."""

    async def list_blocks(self) -> list[PolicyBlock]:
        """List every stored block, or a single placeholder when none exists.

        Malformed entries are logged and skipped.
        """
        entries = await self._store.get_prefix(BLOCK_PREFIX, timeout=self._read_timeout)

        blocks: list[PolicyBlock] = []
        for entry in entries:
            try:
                blocks.append(load_record(entry.key, entry.value, PolicyBlock))
            except DeserializationError as e:
                acl_malformed_entries_total.labels(namespace="block").inc()
                logger.warning("Skipping malformed ACL block", extra={"key": e.key, "error": e.detail})

        lazy_logger.debug(lambda: f"service.list_blocks() -> {len(blocks)} blocks")
        return blocks or [PolicyBlock.placeholder()]

    async def get_block(self, cidr: str) -> PolicyBlock:
        """Return the stored definition of one block.

        Raises:
            InvalidRangeError: Malformed CIDR.
            NotFoundException: No block is stored for ``cidr``.
        """
        canonical = canonical_cidr(cidr)
        key = block_key(canonical)
        raw = await self._store.get(key, timeout=self._read_timeout)
        if raw is not None:
            try:
                return load_record(key, raw, PolicyBlock)
            except DeserializationError as e:
                acl_malformed_entries_total.labels(namespace="block").inc()
                logger.warning("Ignoring malformed ACL block", extra={"key": e.key, "error": e.detail})
        raise NotFoundException(
            detail=f"No ACL block for {canonical}",
            type="acl-block-not-found",
            extra={"cidr": canonical},
        )

    async def list_host_snapshots_in_block(self, cidr: str) -> list[HostPolicySnapshot]:
        """Return the snapshots of the hosts in ``cidr``, in address order.

        Hosts without a snapshot, or whose snapshot cannot be read, are
        omitted.
        """
        _, hosts = self._resolve_block(cidr)

        snapshots: list[HostPolicySnapshot] = []
        for ip in hosts:
            try:
                snapshot = await self._read_snapshot(ip)
            except StoreError as e:
                if isinstance(e, DeserializationError):
                    acl_malformed_entries_total.labels(namespace="host").inc()
                logger.warning(
                    "Skipping unreadable host snapshot",
                    extra={"ip": ip, "error": e.detail, "error_type": e.type},
                )
                continue
            if snapshot is not None:
                snapshots.append(snapshot)
        return snapshots

    async def list_all_host_snapshots(self) -> list[HostPolicySnapshot]:
        """Return every host snapshot in key order, skipping malformed ones."""
        entries = await self._store.get_prefix(HOST_PREFIX, timeout=self._read_timeout)

        snapshots: list[HostPolicySnapshot] = []
        for entry in entries:
            try:
                snapshots.append(load_record(entry.key, entry.value, HostPolicySnapshot))
            except DeserializationError as e:
                acl_malformed_entries_total.labels(namespace="host").inc()
                logger.warning("Skipping malformed host snapshot", extra={"key": e.key, "error": e.detail})
        return snapshots

    async def get_host_snapshot(self, ip: str) -> HostPolicySnapshot:
        """Return the policy currently applied to one address.

        A malformed snapshot is logged and reported like a missing one.

        Raises:
            InvalidRangeError: ``ip`` is not an address.
            NotFoundException: No block covers the address.
        """
        address = parse_host(ip)
        try:
            snapshot = await self._read_snapshot(address)
        except DeserializationError as e:
            acl_malformed_entries_total.labels(namespace="host").inc()
            logger.warning("Ignoring malformed host snapshot", extra={"key": e.key, "error": e.detail})
            snapshot = None
        if snapshot is None:
            raise NotFoundException(
                detail=f"No ACL policy for host {address}",
                type="acl-host-not-found",
                extra={"ip": address},
            )
        return snapshot


class AclDeletionService(_AclStoreService):
    """Removes blocks together with the host snapshots in their range."""

    async def delete_block(self, cidr: str) -> AclAck:
        """Delete every host snapshot in ``cidr``, then the block itself.

        Host snapshots are removed whichever block currently owns them.
        Host delete failures are logged and do not stop the loop.

        Raises:
            InvalidRangeError: Malformed or oversized CIDR, nothing deleted.
            StoreError: The block-level delete failed.
        """
        canonical, hosts = self._resolve_block(cidr)
        start_time = time.perf_counter()

        outcomes: Counter[str] = Counter()
        for ip in hosts:
            try:
                removed = await self._store.delete(host_key(ip), timeout=self._write_timeout)
            except StoreError as e:
                outcome = "delete_failed"
                logger.warning(
                    "Host snapshot delete failed",
                    extra={"ip": ip, "cidr": canonical, "error": e.detail, "error_type": e.type},
                )
            else:
                outcome = "deleted"
                outcomes["removed"] += removed
            outcomes[outcome] += 1
            acl_fanout_hosts_total.labels(operation="delete", outcome=outcome).inc()

        await self._store.delete(block_key(canonical), timeout=self._write_timeout)

        acl_fanout_duration_seconds.labels(operation="delete").observe(
            time.perf_counter() - start_time
        )

        ack = AclAck(
            cidr=canonical,
            hosts=len(hosts),
            deleted=outcomes["removed"],
            failed=outcomes["delete_failed"],
        )
        logger.info("ACL block deleted", extra={"cidr": canonical, **ack.model_dump(exclude={"cidr"})})
        return ack
