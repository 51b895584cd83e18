"""
Prometheus metrics for the Policy Server
"""

from prometheus_client import Counter, Gauge, Histogram, generate_latest, CONTENT_TYPE_LATEST

from .. import __version__

# Build info
BUILD_INFO = Gauge(
    'policy_server_build_info',
    'Build information',
    ['version']
)

# Request counters
REQUESTS_TOTAL = Counter(
    'policy_server_requests_total',
    'Total number of requests',
    ['status_class', 'path_group']
)

REQUEST_LATENCY_SECONDS = Histogram(
    'policy_server_request_latency_seconds',
    'Request latency in seconds',
    ['path_group']
)

# Policy pipeline
POLICY_FETCH_TOTAL = Counter(
    'policy_server_policy_fetch_total',
    'Total number of signed policy envelopes issued'
)

TENANTS_PROVISIONED_TOTAL = Counter(
    'policy_server_tenants_provisioned_total',
    'Tenants auto-created with default values on first policy fetch'
)

# Admin surface
ADMIN_WRITES_TOTAL = Counter(
    'policy_server_admin_writes_total',
    'Admin mutations applied',
    ['action']
)

ADMIN_AUTH_FAILURES_TOTAL = Counter(
    'policy_server_admin_auth_failures_total',
    'Admin requests rejected for a missing or wrong admin key'
)


def _path_group(path: str) -> str:
    if "/policies/" in path:
        return "policies"
    if "/admin/" in path:
        return "admin"
    if path.endswith("/health"):
        return "health"
    return "other"


class PrometheusMetrics:
    """Service for managing Prometheus metrics."""

    def __init__(self):
        BUILD_INFO.labels(version=__version__).set(1)

    def increment_requests(self, status_code: int, path: str = "/unknown"):
        """Increment request counter."""
        if 200 <= status_code < 300:
            status_class = "2xx"
        elif 400 <= status_code < 500:
            status_class = "4xx"
        elif 500 <= status_code < 600:
            status_class = "5xx"
        else:
            status_class = "other"

        REQUESTS_TOTAL.labels(status_class=status_class, path_group=_path_group(path)).inc()

    def observe_latency(self, path: str, seconds: float):
        REQUEST_LATENCY_SECONDS.labels(path_group=_path_group(path)).observe(seconds)

    def increment_policy_fetch(self):
        POLICY_FETCH_TOTAL.inc()

    def increment_tenants_provisioned(self):
        TENANTS_PROVISIONED_TOTAL.inc()

    def increment_admin_writes(self, action: str):
        ADMIN_WRITES_TOTAL.labels(action=action).inc()

    def increment_admin_auth_failures(self):
        ADMIN_AUTH_FAILURES_TOTAL.inc()

    def get_metrics(self) -> bytes:
        """Get Prometheus metrics in text format."""
        return generate_latest()

    def get_content_type(self) -> str:
        """Get the content type for Prometheus metrics."""
        return CONTENT_TYPE_LATEST

# Global metrics instance
prometheus_metrics = PrometheusMetrics()
