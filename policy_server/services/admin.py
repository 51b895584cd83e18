"""
Admin operations: validate and normalize input, then write through the store.

Authorization is not checked here; the HTTP boundary does it before any
operation runs.
"""

import logging
from typing import List, Optional

from ..errors import ValidationError
from ..schemas import EndpointRuleRecord, EndpointRuleView, TenantView
from .store import PolicyStore

logger = logging.getLogger(__name__)


def _required(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _clamp(n: int) -> int:
    return max(0, int(n))


def normalize_feature(requires_feature: Optional[str]) -> Optional[str]:
    """Trim; blank means no feature gate"""
    if requires_feature is None:
        return None
    return requires_feature.strip() or None


class AdminService:

    def __init__(self, store: PolicyStore):
        self.store = store

    def list_tenants(self) -> List[TenantView]:
        return self.store.list_tenants()

    def upsert_tenant(
        self,
        tenant_id: Optional[str],
        kill_all: bool = False,
        default_rate_limit_per_minute: int = 0,
        enable_audit: bool = True,
        enable_pii: bool = True,
    ) -> TenantView:
        tenant_id = _required(tenant_id)
        if tenant_id is None:
            raise ValidationError("tenantId required")

        tenant = TenantView(
            tenant_id=tenant_id,
            kill_all=kill_all,
            default_rate_limit_per_minute=_clamp(default_rate_limit_per_minute),
            enable_audit=enable_audit,
            enable_pii=enable_pii,
        )
        self.store.upsert_tenant(tenant)
        logger.info("tenant upserted: %s", tenant_id, extra={
            "tenant_id": tenant_id,
            "component": "admin",
            "kill_all": tenant.kill_all,
        })
        return tenant

    def upsert_endpoint_rule(
        self,
        tenant_id: Optional[str],
        endpoint_id: Optional[str],
        disabled: bool = False,
        rate_limit_per_minute: int = 0,
        requires_feature: Optional[str] = None,
    ) -> EndpointRuleRecord:
        tenant_id = _required(tenant_id)
        endpoint_id = _required(endpoint_id)
        if tenant_id is None or endpoint_id is None:
            raise ValidationError("tenantId and endpointId required")

        rule = EndpointRuleRecord(
            tenant_id=tenant_id,
            endpoint_id=endpoint_id,
            disabled=disabled,
            rate_limit_per_minute=_clamp(rate_limit_per_minute),
            requires_feature=normalize_feature(requires_feature),
        )
        self.store.upsert_endpoint_rule(rule)
        logger.info("endpoint rule upserted: %s/%s", tenant_id, endpoint_id,
                    extra={"tenant_id": tenant_id, "component": "admin"})
        return rule

    def delete_endpoint_rule(self, tenant_id: Optional[str], endpoint_id: Optional[str]) -> None:
        tenant_id = _required(tenant_id)
        endpoint_id = _required(endpoint_id)
        if tenant_id is None or endpoint_id is None:
            raise ValidationError("tenantId and endpointId required")

        removed = self.store.delete_endpoint_rule(tenant_id, endpoint_id)
        logger.info("endpoint rule delete: %s/%s removed=%d", tenant_id, endpoint_id, removed,
                    extra={"tenant_id": tenant_id, "component": "admin"})

    def list_endpoint_rules(self, tenant_id: Optional[str]) -> List[EndpointRuleView]:
        tenant_id = _required(tenant_id)
        if tenant_id is None:
            raise ValidationError("tenantId required")
        return [r.view() for r in self.store.list_endpoint_rules(tenant_id)]
