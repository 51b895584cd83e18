from sqlalchemy import Boolean, Column, Integer, Text, true, false
from ..db import Base


class Tenant(Base):
    __tablename__ = "tenants"
    tenant_id = Column(Text, primary_key=True)  # case-sensitive
    kill_all = Column(Boolean, nullable=False, default=False, server_default=false())
    default_rate_limit = Column(Integer, nullable=False, default=0, server_default="0")
    enable_audit = Column(Boolean, nullable=False, default=True, server_default=true())
    enable_pii = Column(Boolean, nullable=False, default=True, server_default=true())  # true = redact
