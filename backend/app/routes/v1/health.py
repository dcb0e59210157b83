# backend/app/routes/v1/health.py
"""
Health check and metrics endpoints for monitoring and load balancer probes.
"""

from __future__ import annotations

from datetime import datetime, timezone
import logging

from fastapi import APIRouter, Response

from app.core.config import settings
from app.core.constants import API_VERSION, BRAND_NAME
from app.monitoring.prometheus_metrics import prometheus_metrics
from app.schemas.main_responses import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])
# Mounted at the application root, where Prometheus scrapes by default
metrics_router = APIRouter(tags=["monitoring"])


@router.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """
    Health check endpoint.

    Does not touch the database; used by load balancers.
    """
    return HealthResponse(
        status="healthy",
        service=f"{BRAND_NAME.lower().replace(' ', '-')}-api",
        version=API_VERSION,
        environment=settings.environment,
        timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    )


@metrics_router.get("/metrics", include_in_schema=False, response_class=Response, response_model=None)
def get_prometheus_metrics() -> Response:
    """
    Expose Prometheus metrics for scraping.

    Public, as is usual for Prometheus; only performance counters are exposed.
    """
    return Response(
        content=prometheus_metrics.get_metrics(),
        media_type=prometheus_metrics.get_content_type(),
        headers={"Cache-Control": "no-cache, no-store, must-revalidate"},
    )
