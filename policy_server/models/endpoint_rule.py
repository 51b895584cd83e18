from sqlalchemy import Boolean, Column, Integer, Index, Text, false
from ..db import Base


class EndpointRule(Base):
    __tablename__ = "endpoint_rules"
    tenant_id = Column(Text, primary_key=True)
    endpoint_id = Column(Text, primary_key=True)
    disabled = Column(Boolean, nullable=False, default=False, server_default=false())
    rate_limit = Column(Integer, nullable=False, default=0, server_default="0")
    requires_feature = Column(Text, nullable=True)

    __table_args__ = (
        Index("ix_endpoint_rules_tenant", "tenant_id"),
    )
