"""ACL policy blocks and their per-host materialization."""

from smartdns_web.features.acl.expander import HostRange, canonical_cidr, expand
from smartdns_web.features.acl.schemas import AclAck, HostPolicySnapshot, PolicyBlock
from smartdns_web.features.acl.service import (
    AclDeletionService,
    AclMaterializer,
    AclQueryService,
)

__all__ = [
    "AclAck",
    "AclDeletionService",
    "AclMaterializer",
    "AclQueryService",
    "HostPolicySnapshot",
    "HostRange",
    "PolicyBlock",
    "canonical_cidr",
    "expand",
]
