"""Caller identity taken from request headers.

Authentication happens upstream; the gateway forwards the authenticated user
and tenant as ``X-User-Id`` and ``X-Tenant-Id``.
"""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Header, HTTPException


@dataclass(frozen=True)
class CallerIdentity:
    user_id: str
    tenant_id: str


def get_caller_identity(
    user_id: Annotated[str, Header(alias="X-User-Id")],
    tenant_id: Annotated[str, Header(alias="X-Tenant-Id")],
) -> CallerIdentity:
    if not user_id.strip() or not tenant_id.strip():
        raise HTTPException(
            status_code=400, detail="X-User-Id and X-Tenant-Id are required"
        )
    return CallerIdentity(user_id=user_id.strip(), tenant_id=tenant_id.strip())


def get_caller_tenant(
    tenant_id: Annotated[str, Header(alias="X-Tenant-Id")],
) -> str:
    if not tenant_id.strip():
        raise HTTPException(status_code=400, detail="X-Tenant-Id is required")
    return tenant_id.strip()


CallerDep = Annotated[CallerIdentity, Depends(get_caller_identity)]
TenantDep = Annotated[str, Depends(get_caller_tenant)]
