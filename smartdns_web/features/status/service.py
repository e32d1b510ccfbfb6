"""Status listings of smartdns instances and line resolvers.

Both are derived from key paths only; smartdns instances keep the keys alive
with etcd leases, so a listed key means a live registration.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from smartdns_web.features.status.schemas import LineDnsStatus, SmartdnsStatus

if TYPE_CHECKING:
    from smartdns_web.infra.kv import KVStoreProtocol

logger = logging.getLogger(__name__)

SMARTDNS_PREFIX = "/smartdns/app/"
LINE_DNS_PREFIX = "/line/dns/"


class StatusService:
    """Reads liveness registrations from the store."""

    def __init__(self, store: KVStoreProtocol, *, read_timeout: float | None = None) -> None:
        if read_timeout is None:
            from smartdns_web.core.settings import get_etcd_settings

            read_timeout = get_etcd_settings().read_timeout
        self._store = store
        self._read_timeout = read_timeout

    async def list_smartdns(self) -> list[SmartdnsStatus]:
        entries = await self._store.get_prefix(SMARTDNS_PREFIX, timeout=self._read_timeout)

        instances: list[SmartdnsStatus] = []
        for entry in entries:
            name = entry.key.removeprefix(SMARTDNS_PREFIX).split("/")[0]
            if not name:
                logger.warning("Skipping smartdns key without name", extra={"key": entry.key})
                continue
            instances.append(SmartdnsStatus(name=name, lease=entry.lease))
        return instances

    async def list_line_dns(self) -> list[LineDnsStatus]:
        entries = await self._store.get_prefix(LINE_DNS_PREFIX, timeout=self._read_timeout)

        lines: list[LineDnsStatus] = []
        for entry in entries:
            segments = entry.key.removeprefix(LINE_DNS_PREFIX).split("/")
            if len(segments) < 3 or not all(segments[:3]):
                logger.warning("Skipping malformed line DNS key", extra={"key": entry.key})
                continue
            zone, line, addr = segments[:3]
            lines.append(LineDnsStatus(zone_name=zone, line_type=line, addr=addr, lease=entry.lease))
        return lines
