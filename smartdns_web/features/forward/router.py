"""API router for DNS forward groups.

Endpoints:
    GET    /forward/groups                  - List groups
    POST   /forward/group                   - Create or replace a domain rule
    GET    /forward/group/{group}           - Rules of a group
    DELETE /forward/group/{group}           - Delete a group and its rules
    GET    /forward/group/{group}/{domain}  - One rule, as a table
    DELETE /forward/group/{group}/{domain}  - Delete one rule
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from smartdns_web.core.dependencies import KVStoreDep
from smartdns_web.core.schemas import MessageResponse, TableResponse
from smartdns_web.core.settings import get_app_settings
from smartdns_web.features.forward.schemas import (
    FORWARD_COLUMNS,
    GROUP_ROW_ID_OFFSET,
    RULE_ROW_ID_OFFSET,
    SINGLE_RULE_ROW_ID_OFFSET,
    ForwardRow,
    ForwardRule,
)
from smartdns_web.features.forward.service import ForwardService

router = APIRouter(prefix="/forward", tags=["forward"])


def get_forward_service(store: KVStoreDep) -> ForwardService:
    return ForwardService(store)


ForwardServiceDep = Annotated[ForwardService, Depends(get_forward_service)]


def _base_url() -> str:
    return f"{get_app_settings().api_prefix}/forward"


@router.get("/groups", response_model=TableResponse[ForwardRow], summary="List forward groups")
async def list_groups(service: ForwardServiceDep) -> TableResponse[ForwardRow]:
    groups = await service.list_groups()
    base_url = _base_url()
    rows = [
        ForwardRow.for_group(group, GROUP_ROW_ID_OFFSET + index, base_url)
        for index, group in enumerate(groups)
    ] or [ForwardRow.placeholder(base_url)]
    return TableResponse[ForwardRow].build(rows, FORWARD_COLUMNS)


@router.post("/group", response_model=MessageResponse, summary="Create or replace a domain rule")
async def upsert_rule(rule: ForwardRule, service: ForwardServiceDep) -> MessageResponse:
    await service.upsert_rule(rule)
    return MessageResponse()


@router.get(
    "/group/{group}",
    response_model=TableResponse[ForwardRow],
    summary="List the rules of a group",
)
async def list_rules(group: str, service: ForwardServiceDep) -> TableResponse[ForwardRow]:
    rules = await service.list_rules(group)
    base_url = _base_url()
    rows = [
        ForwardRow.for_rule(rule, RULE_ROW_ID_OFFSET + index, base_url)
        for index, rule in enumerate(rules)
    ]
    return TableResponse[ForwardRow].build(rows, FORWARD_COLUMNS)


@router.delete("/group/{group}", response_model=MessageResponse, summary="Delete a group")
async def delete_group(group: str, service: ForwardServiceDep) -> MessageResponse:
    await service.delete_group(group)
    return MessageResponse()


@router.get(
    "/group/{group}/{domain}",
    response_model=TableResponse[ForwardRow],
    summary="Get one rule",
    description="Return a table with the rule, or an empty table when it does not exist.",
)
async def get_rule(group: str, domain: str, service: ForwardServiceDep) -> TableResponse[ForwardRow]:
    rule = await service.get_rule(group, domain)
    rows = [] if rule is None else [ForwardRow.for_rule(rule, SINGLE_RULE_ROW_ID_OFFSET, _base_url())]
    return TableResponse[ForwardRow].build(rows, FORWARD_COLUMNS)


@router.delete("/group/{group}/{domain}", response_model=MessageResponse, summary="Delete one rule")
async def delete_rule(group: str, domain: str, service: ForwardServiceDep) -> MessageResponse:
    await service.delete_rule(group, domain)
    return MessageResponse()
