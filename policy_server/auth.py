import hmac
import logging
from typing import Optional

from fastapi import Header, Request

from .errors import AuthorizationError
from .services.prometheus_metrics import prometheus_metrics

log = logging.getLogger(__name__)


def is_admin_key(presented: Optional[str], expected: str) -> bool:
    # An empty configured key disables the admin surface
    if not expected or presented is None:
        return False
    return hmac.compare_digest(presented.encode("utf-8"), expected.encode("utf-8"))


def require_admin(request: Request, x_admin_key: Optional[str] = Header(default=None)) -> None:
    if is_admin_key(x_admin_key, request.app.state.settings.admin_key):
        return
    prometheus_metrics.increment_admin_auth_failures()
    log.warning("AUTH: admin key rejected for %s", request.url.path,
                extra={"path": request.url.path, "component": "auth"})
    raise AuthorizationError()
