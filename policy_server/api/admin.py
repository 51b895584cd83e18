"""
Admin endpoints for tenants and endpoint rules (X-Admin-Key required)
"""

from typing import List

from fastapi import APIRouter, Depends

from ..auth import require_admin
from ..dependencies import get_admin_service
from ..schemas import (
    EndpointDelete,
    EndpointRuleView,
    EndpointUpsert,
    OkResponse,
    TenantUpsert,
    TenantView,
)
from ..services.admin import AdminService
from ..services.prometheus_metrics import prometheus_metrics

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.get("/tenants", response_model=List[TenantView])
def list_tenants(admin: AdminService = Depends(get_admin_service)):
    return admin.list_tenants()


@router.post("/tenant/upsert", response_model=OkResponse)
def upsert_tenant(body: TenantUpsert, admin: AdminService = Depends(get_admin_service)):
    admin.upsert_tenant(
        body.tenant_id,
        kill_all=body.kill_all,
        default_rate_limit_per_minute=body.default_rate_limit_per_minute,
        enable_audit=body.enable_audit,
        enable_pii=body.enable_pii,
    )
    prometheus_metrics.increment_admin_writes("tenant_upsert")
    return OkResponse(ok=True)


@router.get("/endpoints/{tenant_id}", response_model=List[EndpointRuleView])
def list_endpoint_rules(tenant_id: str, admin: AdminService = Depends(get_admin_service)):
    return admin.list_endpoint_rules(tenant_id)


@router.post("/endpoint/upsert", response_model=OkResponse)
def upsert_endpoint_rule(body: EndpointUpsert, admin: AdminService = Depends(get_admin_service)):
    admin.upsert_endpoint_rule(
        body.tenant_id,
        body.endpoint_id,
        disabled=body.disabled,
        rate_limit_per_minute=body.rate_limit_per_minute,
        requires_feature=body.requires_feature,
    )
    prometheus_metrics.increment_admin_writes("endpoint_upsert")
    return OkResponse(ok=True)


@router.post("/endpoint/delete", response_model=OkResponse)
def delete_endpoint_rule(body: EndpointDelete, admin: AdminService = Depends(get_admin_service)):
    admin.delete_endpoint_rule(body.tenant_id, body.endpoint_id)
    prometheus_metrics.increment_admin_writes("endpoint_delete")
    return OkResponse(ok=True)
