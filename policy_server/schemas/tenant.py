from typing import Optional
from pydantic import Field

from .base import MAX_RATE_LIMIT, CamelModel


class TenantUpsert(CamelModel):
    tenant_id: Optional[str] = Field(None, description="Tenant ID (required, trimmed)")
    kill_all: bool = Field(False, description="Global kill switch")
    default_rate_limit_per_minute: int = Field(0, le=MAX_RATE_LIMIT, description="Default rate limit, clamped to >= 0")
    enable_audit: bool = Field(True, description="Agent audit logging")
    enable_pii: bool = Field(True, description="PII redaction enabled")


class TenantView(CamelModel):
    tenant_id: str
    kill_all: bool = False
    default_rate_limit_per_minute: int = 0
    enable_audit: bool = True
    enable_pii: bool = True
