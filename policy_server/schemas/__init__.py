from .base import CamelModel, OkResponse
from .tenant import TenantUpsert, TenantView
from .endpoint_rule import EndpointUpsert, EndpointDelete, EndpointRuleView, EndpointRuleRecord
from .policy import GlobalPolicy, EndpointPolicy, TenantPolicy, SignedPolicyEnvelope

__all__ = [
    "CamelModel", "OkResponse",
    "TenantUpsert", "TenantView",
    "EndpointUpsert", "EndpointDelete", "EndpointRuleView", "EndpointRuleRecord",
    "GlobalPolicy", "EndpointPolicy", "TenantPolicy", "SignedPolicyEnvelope",
]
