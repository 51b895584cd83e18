"""
Policy composition: stored tenant settings + endpoint rules -> TenantPolicy.

Nothing is cached; every call reads the store so the result is always current.
"""

import logging

from requests.structures import CaseInsensitiveDict

from ..schemas import EndpointPolicy, GlobalPolicy, TenantPolicy, TenantView
from .prometheus_metrics import prometheus_metrics
from .store import PolicyStore

logger = logging.getLogger(__name__)


class PolicyComposer:

    def __init__(self, store: PolicyStore):
        self.store = store

    def compose(self, tenant_id: str) -> TenantPolicy:
        tenant = self.store.get_tenant(tenant_id)
        if tenant is None:
            # Unknown tenants are provisioned with defaults, not rejected.
            # This response uses the defaults directly rather than re-reading.
            if self.store.ensure_tenant_exists(tenant_id):
                prometheus_metrics.increment_tenants_provisioned()
                logger.info("Provisioned default tenant %s", tenant_id,
                            extra={"tenant_id": tenant_id, "component": "composer"})
            tenant = TenantView(tenant_id=tenant_id)

        # Rules arrive ordered by endpoint id; ids equal ignoring case collapse
        # to the last one read, spelling and position included.
        endpoints = CaseInsensitiveDict()
        for rule in self.store.list_endpoint_rules(tenant_id):
            endpoints.pop(rule.endpoint_id, None)
            endpoints[rule.endpoint_id] = EndpointPolicy(
                disabled=rule.disabled,
                rate_limit_per_minute=rule.rate_limit_per_minute,
                requires_feature=rule.requires_feature,
            )

        return TenantPolicy(
            tenant_id=tenant_id,
            global_policy=GlobalPolicy(
                kill_all=tenant.kill_all,
                default_rate_limit_per_minute=tenant.default_rate_limit_per_minute,
                enable_audit_logs=tenant.enable_audit,
                enable_pii_redaction=tenant.enable_pii,
            ),
            endpoints=dict(endpoints.items()),
        )

    def compose_json(self, tenant_id: str) -> str:
        """Canonical serialized policy for ``tenant_id``; this is what gets signed"""
        return self.compose(tenant_id).to_canonical_json()
