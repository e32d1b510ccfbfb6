"""Service layer for DNS forward groups.

A group exists when its marker ``/forward/groups/<group>`` is present; its
rules live under ``/forward/group/<group>/``. Upserting a rule creates the
marker on first use.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from smartdns_web.core.exceptions import DeserializationError, ValidationException
from smartdns_web.features.forward.schemas import ForwardRule
from smartdns_web.infra.kv import dump_record, load_record

if TYPE_CHECKING:
    from smartdns_web.infra.kv import KVStoreProtocol

logger = logging.getLogger(__name__)

GROUPS_PREFIX = "/forward/groups/"
RULES_PREFIX = "/forward/group/"
GROUP_MARKER = "ok"


def group_key(group: str) -> str:
    return f"{GROUPS_PREFIX}{group}"


def rules_prefix(group: str) -> str:
    return f"{RULES_PREFIX}{group}/"


def rule_key(group: str, domain: str) -> str:
    return f"{rules_prefix(group)}{domain}"


def _require_segment(field: str, value: str) -> str:
    """Reject names that are empty or would add key segments."""
    value = value.strip()
    if not value or "/" in value:
        raise ValidationException(
            detail=f"Invalid {field} '{value}'",
            type="invalid-forward-name",
            extra={"field": field, "value": value},
        )
    return value


class ForwardService:
    """CRUD over forward groups and their domain rules."""

    def __init__(
        self,
        store: KVStoreProtocol,
        *,
        read_timeout: float | None = None,
        write_timeout: float | None = None,
    ) -> None:
        if read_timeout is None or write_timeout is None:
            from smartdns_web.core.settings import get_etcd_settings

            settings = get_etcd_settings()
            if read_timeout is None:
                read_timeout = settings.read_timeout
            if write_timeout is None:
                write_timeout = settings.write_timeout

        self._store = store
        self._read_timeout = read_timeout
        self._write_timeout = write_timeout

    async def list_groups(self) -> list[str]:
        """Return group names in key order."""
        entries = await self._store.get_prefix(GROUPS_PREFIX, timeout=self._read_timeout)
        return [
            entry.key.removeprefix(GROUPS_PREFIX)
            for entry in entries
            if entry.key.removeprefix(GROUPS_PREFIX)
        ]

    async def upsert_rule(self, rule: ForwardRule) -> ForwardRule:
        """Create or replace a domain rule, creating its group if needed."""
        group = _require_segment("groupName", rule.group_name)
        domain = _require_segment("domain", rule.domain)
        rule = rule.model_copy(update={"group_name": group, "domain": domain})

        if await self._store.get(group_key(group), timeout=self._read_timeout) is None:
            await self._store.put(group_key(group), GROUP_MARKER, timeout=self._write_timeout)
            logger.info("Forward group created", extra={"group": group})

        await self._store.put(rule_key(group, domain), dump_record(rule), timeout=self._write_timeout)
        logger.info("Forward rule stored", extra={"group": group, "domain": domain})
        return rule

    async def list_rules(self, group: str) -> list[ForwardRule]:
        """Return the rules of a group; malformed entries are skipped."""
        group = _require_segment("group", group)
        entries = await self._store.get_prefix(rules_prefix(group), timeout=self._read_timeout)

        rules: list[ForwardRule] = []
        for entry in entries:
            try:
                rules.append(load_record(entry.key, entry.value, ForwardRule))
            except DeserializationError as e:
                logger.warning("Skipping malformed forward rule", extra={"key": e.key, "error": e.detail})
        return rules

    async def get_rule(self, group: str, domain: str) -> ForwardRule | None:
        key = rule_key(_require_segment("group", group), _require_segment("domain", domain))
        raw = await self._store.get(key, timeout=self._read_timeout)
        if raw is None:
            return None
        return load_record(key, raw, ForwardRule)

    async def delete_group(self, group: str) -> int:
        """Delete a group's rules and its marker; returns the rules removed."""
        group = _require_segment("group", group)
        removed = await self._store.delete_prefix(rules_prefix(group), timeout=self._write_timeout)
        await self._store.delete(group_key(group), timeout=self._write_timeout)
        logger.info("Forward group deleted", extra={"group": group, "rules": removed})
        return removed

    async def delete_rule(self, group: str, domain: str) -> int:
        key = rule_key(_require_segment("group", group), _require_segment("domain", domain))
        removed = await self._store.delete(key, timeout=self._write_timeout)
        logger.info("Forward rule deleted", extra={"group": group, "domain": domain, "removed": removed})
        return removed
