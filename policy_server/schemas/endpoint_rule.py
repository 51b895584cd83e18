from typing import Optional
from pydantic import Field

from .base import MAX_RATE_LIMIT, CamelModel


class EndpointUpsert(CamelModel):
    tenant_id: Optional[str] = Field(None, description="Tenant ID (required, trimmed)")
    endpoint_id: Optional[str] = Field(None, description="Endpoint ID (required, trimmed)")
    disabled: bool = False
    rate_limit_per_minute: int = Field(0, le=MAX_RATE_LIMIT, description="Rate limit, clamped to >= 0")
    requires_feature: Optional[str] = Field(None, description="Feature gate; blank means none")


class EndpointDelete(CamelModel):
    tenant_id: Optional[str] = None
    endpoint_id: Optional[str] = None


class EndpointRuleView(CamelModel):
    endpoint_id: str
    disabled: bool = False
    rate_limit_per_minute: int = 0
    requires_feature: Optional[str] = None


class EndpointRuleRecord(EndpointRuleView):
    """Stored rule including its owning tenant"""
    tenant_id: str

    def view(self) -> EndpointRuleView:
        return EndpointRuleView(
            endpoint_id=self.endpoint_id,
            disabled=self.disabled,
            rate_limit_per_minute=self.rate_limit_per_minute,
            requires_feature=self.requires_feature,
        )
