"""
Prometheus metrics middleware for HTTP request tracking.
"""

import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from ..monitoring.prometheus_metrics import prometheus_metrics

_ULID_LENGTH = 26


def normalize_path(raw_path: str) -> str:
    """Replace ULID path segments so endpoint labels stay low-cardinality.

    Example: /api/v1/bookings/01J0ZQ8M3W7T9V2K4N6P8R0S1X/payment -> /api/v1/bookings/:id/payment
    """
    return "/".join(
        ":id" if len(segment) == _ULID_LENGTH and segment.isalnum() else segment
        for segment in raw_path.split("/")
    )


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Middleware to collect Prometheus metrics for HTTP requests."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path == "/metrics":
            return await call_next(request)

        method = request.method
        path = normalize_path(request.url.path)

        prometheus_metrics.track_http_request_start(method, path)
        start_time = time.time()
        try:
            response = await call_next(request)
            prometheus_metrics.record_http_request(
                method=method,
                endpoint=path,
                duration=time.time() - start_time,
                status_code=response.status_code,
            )
            return response
        finally:
            prometheus_metrics.track_http_request_end(method, path)
