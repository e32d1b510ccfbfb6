"""API router for the ACL feature.

Endpoints:
    Blocks:
        GET    /acl/ip/cidr                      - List policy blocks
        POST   /acl/ip/cidr                      - Submit (create or replace) a block
        GET    /acl/ip/cidr/{network}/{netmask}  - Host snapshots inside a block
        GET    /acl/ip/cidr/{network}/{netmask}/block - Stored definition of a block
        DELETE /acl/ip/cidr/{network}/{netmask}  - Delete a block and its hosts

    Hosts:
        GET    /acl/ip/pool                      - List every host snapshot
        GET    /acl/ip/pool/{ip}                 - Policy applied to one host

Listings answer with ``{"data": [...], "column": [...]}`` tables consumed
by the admin UI; rows carry the URLs the UI uses to expand, edit and delete.

Example Usage:
    # Apply a policy to 10.0.0.0/24
    POST /v1/acl/ip/cidr
    {"cidr": "10.0.0.0/24", "netmask": 24, "masterDns": ["114.114.114.114"]}

    # Override it for a /28 inside
    POST /v1/acl/ip/cidr
    {"cidr": "10.0.0.16/28", "netmask": 28, "masterDns": ["223.5.5.5"]}
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, status

from smartdns_web.core.schemas import MessageResponse, TableResponse
from smartdns_web.core.settings import get_app_settings
from smartdns_web.features.acl.dependencies import (
    AclDeletionServiceDep,
    AclMaterializerDep,
    AclQueryServiceDep,
)
from smartdns_web.features.acl.schemas import (
    ACL_COLUMNS,
    HOST_ROW_ID_OFFSET,
    AclRow,
    HostPolicySnapshot,
    PolicyBlock,
)

router = APIRouter(prefix="/acl/ip", tags=["acl"])
logger = logging.getLogger(__name__)


def _blocks_url() -> str:
    return f"{get_app_settings().api_prefix}/acl/ip/cidr"


# ──────────────────────────────────────────────────────────────
# Block endpoints
# ──────────────────────────────────────────────────────────────


@router.get(
    "/cidr",
    response_model=TableResponse[AclRow],
    summary="List policy blocks",
    description="Return every stored block, or one empty row template when none exists.",
)
async def list_blocks(service: AclQueryServiceDep) -> TableResponse[AclRow]:
    blocks = await service.list_blocks()
    base_url = _blocks_url()
    rows = [AclRow.for_block(block, row_id, base_url) for row_id, block in enumerate(blocks)]
    return TableResponse[AclRow].build(rows, ACL_COLUMNS)


@router.post(
    "/cidr",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Submit a policy block",
    description=(
        "Store the block and copy its policy to every host of the range. "
        "Hosts already owned by a block with a greater netmask are left unchanged."
    ),
)
async def submit_block(block: PolicyBlock, service: AclMaterializerDep) -> MessageResponse:
    await service.submit_block(block)
    return MessageResponse()


@router.get(
    "/cidr/{network}/{netmask}",
    response_model=TableResponse[AclRow],
    summary="List hosts of a block",
    description="Return the snapshot of each host inside the block, in address order.",
)
async def list_block_hosts(
    network: str,
    netmask: str,
    service: AclQueryServiceDep,
) -> TableResponse[AclRow]:
    snapshots = await service.list_host_snapshots_in_block(f"{network}/{netmask}")
    base_url = _blocks_url()
    rows = [
        AclRow.for_host(snapshot, HOST_ROW_ID_OFFSET + index, base_url)
        for index, snapshot in enumerate(snapshots)
    ]
    return TableResponse[AclRow].build(rows, ACL_COLUMNS)


@router.get(
    "/cidr/{network}/{netmask}/block",
    response_model=PolicyBlock,
    summary="Get a policy block",
    responses={404: {"description": "No block is stored for the range"}},
)
async def get_block(
    network: str,
    netmask: str,
    service: AclQueryServiceDep,
) -> PolicyBlock:
    return await service.get_block(f"{network}/{netmask}")


@router.delete(
    "/cidr/{network}/{netmask}",
    response_model=MessageResponse,
    summary="Delete a policy block",
    description=(
        "Delete every host snapshot inside the block, then the block. "
        "Snapshots owned by other overlapping blocks are deleted too."
    ),
)
async def delete_block(
    network: str,
    netmask: str,
    service: AclDeletionServiceDep,
) -> MessageResponse:
    await service.delete_block(f"{network}/{netmask}")
    return MessageResponse()


# ──────────────────────────────────────────────────────────────
# Host endpoints
# ──────────────────────────────────────────────────────────────


@router.get(
    "/pool",
    response_model=TableResponse[AclRow],
    summary="List host snapshots",
)
async def list_hosts(service: AclQueryServiceDep) -> TableResponse[AclRow]:
    snapshots = await service.list_all_host_snapshots()
    base_url = _blocks_url()
    rows = [
        AclRow.for_host(snapshot, HOST_ROW_ID_OFFSET + index, base_url)
        for index, snapshot in enumerate(snapshots)
    ]
    return TableResponse[AclRow].build(rows, ACL_COLUMNS)


@router.get(
    "/pool/{ip}",
    response_model=HostPolicySnapshot,
    summary="Get the policy of a host",
    responses={404: {"description": "No block covers the address"}},
)
async def get_host(ip: str, service: AclQueryServiceDep) -> HostPolicySnapshot:
    return await service.get_host_snapshot(ip)
