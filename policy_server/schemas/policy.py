"""
Policy documents handed to agents.

``TenantPolicy`` is the composed document; its canonical JSON form is what
gets signed. ``SignedPolicyEnvelope`` is the transport wrapper.
"""
import json
from datetime import datetime
from typing import Dict, Optional

from pydantic import Field
from requests.structures import CaseInsensitiveDict

from .base import CamelModel


class GlobalPolicy(CamelModel):
    kill_all: bool = False
    default_rate_limit_per_minute: int = 0
    enable_audit_logs: bool = True
    enable_pii_redaction: bool = True


class EndpointPolicy(CamelModel):
    disabled: bool = False
    rate_limit_per_minute: int = 0
    requires_feature: Optional[str] = None


class TenantPolicy(CamelModel):
    tenant_id: str
    global_policy: GlobalPolicy = Field(default_factory=GlobalPolicy, alias="global")
    endpoints: Dict[str, EndpointPolicy] = Field(default_factory=dict)

    def endpoint(self, endpoint_id: str) -> Optional[EndpointPolicy]:
        """Case-insensitive endpoint lookup"""
        return CaseInsensitiveDict(self.endpoints).get(endpoint_id)

    def to_canonical_json(self) -> str:
        # Field order is declaration order; endpoint order is insertion order.
        return json.dumps(
            self.model_dump(by_alias=True, mode="json"),
            separators=(",", ":"),
            ensure_ascii=False,
        )


class SignedPolicyEnvelope(CamelModel):
    tenant_id: str
    issued_at_utc: datetime
    expires_at_utc: datetime
    policy_json: str = Field(..., description="Exact bytes covered by the signature")
    signature: str = Field(..., description="base64(HMAC-SHA256(secret, policyJson))")
