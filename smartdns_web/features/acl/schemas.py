"""Pydantic schemas for ACL policy blocks and host snapshots.

Stored JSON keeps the field names the admin UI and the smartdns instances
read (``ip``, ``masterLineDnsReStr``, ``forwardGroup``...). Python code uses
snake_case attributes; both names are accepted on input.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from smartdns_web.core.schemas import TableColumn


class AclPolicy(BaseModel):
    """Policy fields shared by blocks and host snapshots.

    Every field has a zero default so records written by older tools with
    missing or null fields still decode.
    """

    host: str = Field(default="", alias="ip", description="Host address, or the CIDR for a block")
    cidr: str = Field(default="", description="Block the policy was defined on")
    netmask: int = Field(
        default=0,
        description="Specificity of the block; the higher value wins for a contested host",
    )
    master_line: str = Field(default="", alias="masterLineDnsReStr")
    master_dns: list[str] = Field(default_factory=list, alias="masterDns")
    backup_line: str = Field(default="", alias="backupLineDnsReStr")
    backup_dns: list[str] = Field(default_factory=list, alias="backupDns")
    forward_groups: list[str] = Field(default_factory=list, alias="forwardGroup")
    timeout: int = Field(default=0, description="Resolver timeout in seconds")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("host", "cidr", "master_line", "backup_line", mode="before")
    @classmethod
    def _none_as_empty_str(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("master_dns", "backup_dns", mode="before")
    @classmethod
    def _none_as_empty_list(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("forward_groups", mode="before")
    @classmethod
    def _dedupe_groups(cls, value: Any) -> Any:
        """Groups form a set; keep first-seen order."""
        if value is None:
            return []
        if isinstance(value, list | tuple):
            return list(dict.fromkeys(value))
        return value


class PolicyBlock(AclPolicy):
    """CIDR-scoped policy as submitted by the user."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        json_schema_extra={
            "example": {
                "cidr": "10.0.0.0/24",
                "netmask": 24,
                "masterLineDnsReStr": "ct",
                "masterDns": ["114.114.114.114"],
                "backupLineDnsReStr": "cu",
                "backupDns": ["223.5.5.5"],
                "forwardGroup": ["office"],
                "timeout": 3,
            }
        },
    )

    @classmethod
    def placeholder(cls) -> PolicyBlock:
        """Empty row template returned when no block is defined."""
        return cls()

    @property
    def is_placeholder(self) -> bool:
        return not self.cidr


class HostPolicySnapshot(AclPolicy):
    """Materialized policy of one host address.

    ``netmask`` records the netmask of the block that last won precedence.
    """

    @classmethod
    def from_block(cls, block: PolicyBlock, ip: str) -> HostPolicySnapshot:
        """Copy the policy of ``block`` for address ``ip``."""
        data = block.model_dump()
        data["host"] = ip
        return cls.model_validate(data)


class AclAck(BaseModel):
    """Outcome of a block submission or deletion."""

    cidr: str
    hosts: int = Field(description="Usable host addresses in the block")
    written: int = 0
    deleted: int = 0
    skipped: int = Field(default=0, description="Hosts kept by a more specific block")
    failed: int = Field(default=0, description="Hosts whose read, write or delete failed")


# ──────────────────────────────────────────────────────────────
# Table rows
# ──────────────────────────────────────────────────────────────


class AclRow(AclPolicy):
    """Policy row of the admin table view."""

    id: int = 0
    has_children: bool = Field(default=False, alias="hasChildren")
    data_url: str = Field(default="", alias="dataUrl")
    update_url: str = Field(default="", alias="updateUrl")
    del_url: str = Field(default="", alias="DelUrl")

    @classmethod
    def for_block(cls, block: PolicyBlock, row_id: int, base_url: str) -> AclRow:
        """Row of a block; expandable into its hosts."""
        if block.is_placeholder:
            return cls(update_url=base_url)
        url = f"{base_url}/{block.cidr}"
        return cls(
            **block.model_dump(exclude={"host"}),
            host=block.cidr,
            id=row_id,
            has_children=True,
            data_url=url,
            update_url=base_url,
            del_url=url,
        )

    @classmethod
    def for_host(cls, snapshot: HostPolicySnapshot, row_id: int, base_url: str) -> AclRow:
        """Row of a host snapshot; deleting it deletes its owning block."""
        return cls(
            **snapshot.model_dump(),
            id=row_id,
            update_url=base_url,
            del_url=f"{base_url}/{snapshot.cidr}" if snapshot.cidr else "",
        )


ACL_COLUMNS: tuple[TableColumn, ...] = (
    TableColumn(label="IP", prop="ip", width="180"),
    TableColumn(label="CIDR", prop="cidr", width="180"),
    TableColumn(label="Master line", prop="masterLineDnsReStr", width="100"),
    TableColumn(label="Master DNS", prop="masterDns", width="140"),
    TableColumn(label="Backup line", prop="backupLineDnsReStr", width="100"),
    TableColumn(label="Backup DNS", prop="backupDns", width="140"),
    TableColumn(label="Forward group", prop="forwardGroup", width="100"),
)

# Row ids of host rows start here so they never collide with block rows
HOST_ROW_ID_OFFSET = 1000
