import random
import time
import uuid
from typing import Callable, Iterable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp
import logging

from .logging_config import trace_id_var
from .services.prometheus_metrics import prometheus_metrics

logger = logging.getLogger("policy_server.http")


class TracingMiddleware(BaseHTTPMiddleware):
    """Request tracing and structured request logging"""

    def __init__(self, app: ASGIApp, exclude_paths: Iterable[str] = (), sample_rate: float = 1.0):
        super().__init__(app)
        self.exclude_paths = set(exclude_paths)
        self.sample_rate = sample_rate

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        trace_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        token = trace_id_var.set(trace_id)

        client_ip = request.client.host if request.client else "unknown"
        path = request.url.path
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            latency = time.perf_counter() - start_time
            # Storage faults and other bugs end up here; log and let them surface as 500
            logger.exception(f"Request failed: {e}", extra={
                "method": request.method,
                "path": path,
                "status": 500,
                "latency_ms": round(latency * 1000, 2),
                "client_ip": client_ip,
            })
            prometheus_metrics.increment_requests(500, path)
            prometheus_metrics.observe_latency(path, latency)
            raise
        else:
            latency = time.perf_counter() - start_time
            prometheus_metrics.increment_requests(response.status_code, path)
            prometheus_metrics.observe_latency(path, latency)
            self._log_request(request.method, path, response.status_code,
                              round(latency * 1000, 2), client_ip)
            response.headers["X-Request-ID"] = trace_id
            return response
        finally:
            trace_id_var.reset(token)

    def _log_request(self, method: str, path: str, status: int, latency_ms: float, client_ip: str):
        """Log HTTP request with structured data and sampling"""
        if path in self.exclude_paths:
            return

        extra = {
            "method": method,
            "path": path,
            "status": status,
            "latency_ms": latency_ms,
            "client_ip": client_ip,
        }

        # Always log errors
        if status >= 400:
            level = logging.ERROR if status >= 500 else logging.WARNING
            logger.log(level, "HTTP Request", extra=extra)
            return

        if random.random() > self.sample_rate:
            return

        logger.info("HTTP Request", extra=extra)
