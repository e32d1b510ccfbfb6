"""Schemas for smartdns instance and line DNS status listings."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from smartdns_web.core.schemas import TableColumn


class SmartdnsStatus(BaseModel):
    """A smartdns instance holding a lease on ``/smartdns/app/<name>``."""

    name: str
    status: str = "online"
    lease: int = 0


class LineDnsStatus(BaseModel):
    """A resolver registered on ``/line/dns/<zone>/<line>/<addr>``."""

    zone_name: str = Field(alias="zoneName")
    line_type: str = Field(alias="lineType")
    addr: str
    lease: int = 0

    model_config = ConfigDict(populate_by_name=True)


SMARTDNS_COLUMNS: tuple[TableColumn, ...] = (
    TableColumn(label="Name", prop="name", width="100"),
    TableColumn(label="Status", prop="status", width="100"),
    TableColumn(label="Lease", prop="lease", width="100"),
)

LINE_DNS_COLUMNS: tuple[TableColumn, ...] = (
    TableColumn(label="Zone", prop="zoneName", width="100"),
    TableColumn(label="Line", prop="lineType", width="100"),
    TableColumn(label="Address", prop="addr", width="150"),
    TableColumn(label="Lease", prop="lease", width="100"),
)
