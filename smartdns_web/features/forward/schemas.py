"""Pydantic schemas for DNS forward groups."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from smartdns_web.core.schemas import TableColumn


class ForwardRule(BaseModel):
    """Forwarding of one domain inside a group.

    Stored as JSON at ``/forward/group/<group>/<domain>``.
    """

    group_name: str = Field(default="", alias="groupName")
    domain: str = ""
    line: str = Field(default="", alias="lineDnsReStr", description="Line the rule applies to")
    dns: list[str] = Field(default_factory=list, description="Resolvers the domain is forwarded to")

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        json_schema_extra={
            "example": {
                "groupName": "office",
                "domain": "corp.example.com",
                "lineDnsReStr": "ct",
                "dns": ["10.1.1.53"],
            }
        },
    )

    @field_validator("group_name", "domain", "line", mode="before")
    @classmethod
    def _none_as_empty_str(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("dns", mode="before")
    @classmethod
    def _none_as_empty_list(cls, value: Any) -> Any:
        return [] if value is None else value


class ForwardRow(ForwardRule):
    """Group or rule row of the admin table view."""

    id: int = 0
    has_children: bool = Field(default=False, alias="hasChildren")
    data_url: str = Field(default="", alias="dataUrl")
    update_url: str = Field(default="", alias="updateUrl")
    del_url: str = Field(default="", alias="delUrl")

    @classmethod
    def placeholder(cls, base_url: str) -> ForwardRow:
        """Empty row template returned when no group exists."""
        return cls(dns=[""], update_url=f"{base_url}/group")

    @classmethod
    def for_group(cls, group: str, row_id: int, base_url: str) -> ForwardRow:
        url = f"{base_url}/group/{group}"
        return cls(
            group_name=group,
            id=row_id,
            has_children=True,
            data_url=url,
            update_url=f"{base_url}/group",
            del_url=url,
        )

    @classmethod
    def for_rule(cls, rule: ForwardRule, row_id: int, base_url: str) -> ForwardRow:
        return cls(
            **rule.model_dump(),
            id=row_id,
            update_url=f"{base_url}/group",
            del_url=f"{base_url}/group/{rule.group_name}/{rule.domain}",
        )


FORWARD_COLUMNS: tuple[TableColumn, ...] = (
    TableColumn(label="Group", prop="groupName", width="150"),
    TableColumn(label="Domain", prop="domain", width="150"),
    TableColumn(label="Line", prop="lineDnsReStr", width="150"),
    TableColumn(label="DNS", prop="dns", width="250"),
)

GROUP_ROW_ID_OFFSET = 20000
RULE_ROW_ID_OFFSET = 30000
SINGLE_RULE_ROW_ID_OFFSET = 40000
