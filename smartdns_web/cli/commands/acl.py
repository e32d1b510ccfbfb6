"""ACL policy commands operating directly on the configured store."""

import sys

import click

from smartdns_web.cli.utils import coro, error, info, success, table, warning
from smartdns_web.core.exceptions import AppException
from smartdns_web.features.acl import (
    AclDeletionService,
    AclMaterializer,
    AclQueryService,
    PolicyBlock,
)
from smartdns_web.infra.kv import create_kv_store

POLICY_HEADERS = ("IP", "CIDR", "NETMASK", "MASTER LINE", "MASTER DNS", "BACKUP LINE", "BACKUP DNS", "GROUPS")


def _policy_row(policy) -> tuple[str, ...]:
    return (
        policy.host,
        policy.cidr,
        str(policy.netmask),
        policy.master_line,
        ",".join(policy.master_dns),
        policy.backup_line,
        ",".join(policy.backup_dns),
        ",".join(policy.forward_groups),
    )


@click.group(name="acl")
def acl() -> None:
    """Manage ACL policy blocks."""


@acl.command()
@click.argument("cidr")
@click.option("--netmask", type=int, required=True, help="Specificity; the greater value wins per host")
@click.option("--master-line", default="", help="Master routing line")
@click.option("--master-dns", multiple=True, help="Master resolver (repeatable)")
@click.option("--backup-line", default="", help="Backup routing line")
@click.option("--backup-dns", multiple=True, help="Backup resolver (repeatable)")
@click.option("--forward-group", multiple=True, help="Forward group (repeatable)")
@click.option("--timeout", type=int, default=0, help="Resolver timeout in seconds")
@coro
async def submit(
    cidr: str,
    netmask: int,
    master_line: str,
    master_dns: tuple[str, ...],
    backup_line: str,
    backup_dns: tuple[str, ...],
    forward_group: tuple[str, ...],
    timeout: int,
) -> None:
    """Create or replace the policy of CIDR and apply it to its hosts."""
    block = PolicyBlock(
        cidr=cidr,
        netmask=netmask,
        master_line=master_line,
        master_dns=list(master_dns),
        backup_line=backup_line,
        backup_dns=list(backup_dns),
        forward_groups=list(forward_group),
        timeout=timeout,
    )
    store = create_kv_store()
    try:
        ack = await AclMaterializer(store).submit_block(block)
    except AppException as e:
        error(e.detail)
        sys.exit(1)
    finally:
        await store.close()

    success(f"{ack.cidr}: {ack.written} of {ack.hosts} hosts written")
    if ack.skipped:
        info(f"{ack.skipped} hosts kept by a more specific block")
    if ack.failed:
        warning(f"{ack.failed} hosts failed, see logs")


@acl.command(name="list")
@coro
async def list_blocks() -> None:
    """List policy blocks."""
    store = create_kv_store()
    try:
        blocks = await AclQueryService(store).list_blocks()
    except AppException as e:
        error(e.detail)
        sys.exit(1)
    finally:
        await store.close()

    blocks = [block for block in blocks if not block.is_placeholder]
    if not blocks:
        info("No ACL blocks defined")
        return
    table(POLICY_HEADERS, (_policy_row(block) for block in blocks))


@acl.command()
@click.argument("cidr")
@coro
async def show(cidr: str) -> None:
    """Show the stored definition of the block CIDR."""
    store = create_kv_store()
    try:
        block = await AclQueryService(store).get_block(cidr)
    except AppException as e:
        error(e.detail)
        sys.exit(1)
    finally:
        await store.close()

    table(POLICY_HEADERS, [_policy_row(block)])
    if block.timeout:
        info(f"Resolver timeout: {block.timeout}s")


@acl.command()
@click.argument("cidr", required=False)
@coro
async def hosts(cidr: str | None) -> None:
    """List host snapshots, all of them or those inside CIDR."""
    store = create_kv_store()
    service = AclQueryService(store)
    try:
        if cidr:
            snapshots = await service.list_host_snapshots_in_block(cidr)
        else:
            snapshots = await service.list_all_host_snapshots()
    except AppException as e:
        error(e.detail)
        sys.exit(1)
    finally:
        await store.close()

    if not snapshots:
        info("No host snapshots found")
        return
    table(POLICY_HEADERS, (_policy_row(snapshot) for snapshot in snapshots))


@acl.command()
@click.argument("cidr")
@click.confirmation_option(prompt="Delete the block and every host snapshot in its range?")
@coro
async def delete(cidr: str) -> None:
    """Delete the block CIDR and every host snapshot in its range."""
    store = create_kv_store()
    try:
        ack = await AclDeletionService(store).delete_block(cidr)
    except AppException as e:
        error(e.detail)
        sys.exit(1)
    finally:
        await store.close()

    success(f"{ack.cidr} deleted, {ack.deleted} host snapshots removed")
    if ack.failed:
        warning(f"{ack.failed} host deletes failed, see logs")
