"""API router for status listings.

Endpoints:
    GET /ping      - Liveness check, answers ``pong``
    GET /smartdns  - smartdns instances holding a lease
    GET /linedns   - Line resolvers registered per zone
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from smartdns_web.core.dependencies import KVStoreDep
from smartdns_web.core.schemas import TableResponse
from smartdns_web.features.status.schemas import (
    LINE_DNS_COLUMNS,
    SMARTDNS_COLUMNS,
    LineDnsStatus,
    SmartdnsStatus,
)
from smartdns_web.features.status.service import StatusService

router = APIRouter(tags=["status"])


def get_status_service(store: KVStoreDep) -> StatusService:
    return StatusService(store)


StatusServiceDep = Annotated[StatusService, Depends(get_status_service)]


@router.get("/ping", response_class=PlainTextResponse, summary="Liveness check")
async def ping() -> str:
    return "pong"


@router.get(
    "/smartdns",
    response_model=TableResponse[SmartdnsStatus],
    summary="List smartdns instances",
)
async def list_smartdns(service: StatusServiceDep) -> TableResponse[SmartdnsStatus]:
    instances = await service.list_smartdns()
    return TableResponse[SmartdnsStatus].build(instances, SMARTDNS_COLUMNS)


@router.get(
    "/linedns",
    response_model=TableResponse[LineDnsStatus],
    summary="List line resolvers",
)
async def list_line_dns(service: StatusServiceDep) -> TableResponse[LineDnsStatus]:
    lines = await service.list_line_dns()
    return TableResponse[LineDnsStatus].build(lines, LINE_DNS_COLUMNS)
