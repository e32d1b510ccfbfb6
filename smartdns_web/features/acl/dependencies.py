"""Dependencies for ACL endpoints."""

from typing import Annotated

from fastapi import Depends

from smartdns_web.core.dependencies import KVStoreDep
from smartdns_web.features.acl.service import (
    AclDeletionService,
    AclMaterializer,
    AclQueryService,
)


def get_acl_materializer(store: KVStoreDep) -> AclMaterializer:
    return AclMaterializer(store)


def get_acl_query_service(store: KVStoreDep) -> AclQueryService:
    return AclQueryService(store)


def get_acl_deletion_service(store: KVStoreDep) -> AclDeletionService:
    return AclDeletionService(store)


AclMaterializerDep = Annotated[AclMaterializer, Depends(get_acl_materializer)]
AclQueryServiceDep = Annotated[AclQueryService, Depends(get_acl_query_service)]
AclDeletionServiceDep = Annotated[AclDeletionService, Depends(get_acl_deletion_service)]

__all__ = ["AclDeletionServiceDep", "AclMaterializerDep", "AclQueryServiceDep"]
