from .tenant import Tenant
from .endpoint_rule import EndpointRule

__all__ = ["Tenant", "EndpointRule"]
