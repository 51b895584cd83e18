"""
Prometheus metrics endpoint
"""

import logging
from fastapi import APIRouter, Response
from fastapi.responses import PlainTextResponse
from ..services.prometheus_metrics import prometheus_metrics

logger = logging.getLogger(__name__)

router = APIRouter(tags=["metrics"])


@router.get("/metrics", summary="Prometheus metrics")
def get_prometheus_metrics() -> Response:
    """Metrics in Prometheus exposition format"""
    return PlainTextResponse(
        content=prometheus_metrics.get_metrics(),
        media_type=prometheus_metrics.get_content_type()
    )
