"""
Prometheus metrics for the studio booking API.

Service timings come from the @measure_operation decorator on services;
HTTP timings come from PrometheusMiddleware.
"""

from typing import Optional, cast

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

# Custom registry keeps the default process collectors out of the payload
REGISTRY = CollectorRegistry()

http_request_duration_seconds = Histogram(
    "studio_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint", "status_code"],
    registry=REGISTRY,
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

http_requests_total = Counter(
    "studio_http_requests_total",
    "Total number of HTTP requests",
    ["method", "endpoint", "status_code"],
    registry=REGISTRY,
)

http_requests_in_progress = Gauge(
    "studio_http_requests_in_progress",
    "Number of HTTP requests currently being processed",
    ["method", "endpoint"],
    registry=REGISTRY,
)

service_operation_duration_seconds = Histogram(
    "studio_service_operation_duration_seconds",
    "Service operation duration in seconds",
    ["service", "operation"],
    registry=REGISTRY,
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

service_operations_total = Counter(
    "studio_service_operations_total",
    "Total number of service operations",
    ["service", "operation", "status"],
    registry=REGISTRY,
)

errors_total = Counter(
    "studio_errors_total",
    "Total number of errors",
    ["service", "operation", "error_type"],
    registry=REGISTRY,
)

booking_conflicts_total = Counter(
    "studio_booking_conflicts_total",
    "Booking attempts rejected because the slot was taken",
    ["resource_type", "source"],  # room | class; engine | database
    registry=REGISTRY,
)


class PrometheusMetrics:
    """Records and exposes Prometheus metrics."""

    @staticmethod
    def record_http_request(method: str, endpoint: str, duration: float, status_code: int) -> None:
        labels = {"method": method, "endpoint": endpoint, "status_code": str(status_code)}
        http_request_duration_seconds.labels(**labels).observe(duration)
        http_requests_total.labels(**labels).inc()

    @staticmethod
    def track_http_request_start(method: str, endpoint: str) -> None:
        http_requests_in_progress.labels(method=method, endpoint=endpoint).inc()

    @staticmethod
    def track_http_request_end(method: str, endpoint: str) -> None:
        http_requests_in_progress.labels(method=method, endpoint=endpoint).dec()

    @staticmethod
    def record_service_operation(
        service: str,
        operation: str,
        duration: float,
        status: str = "success",
        error_type: Optional[str] = None,
    ) -> None:
        """
        Record service operation metrics from @measure_operation decorator.

        Args:
            service: Service name (e.g., 'RoomBookingService')
            operation: Operation/method name (e.g., 'create_booking')
            duration: Operation duration in seconds
            status: Operation status ('success' or 'error')
            error_type: Type of error if status is 'error'
        """
        service_operation_duration_seconds.labels(service=service, operation=operation).observe(
            duration
        )
        service_operations_total.labels(service=service, operation=operation, status=status).inc()
        if status == "error" and error_type:
            errors_total.labels(service=service, operation=operation, error_type=error_type).inc()

    @staticmethod
    def inc_booking_conflict(resource_type: str, source: str = "engine") -> None:
        booking_conflicts_total.labels(resource_type=resource_type, source=source).inc()

    @staticmethod
    def get_metrics() -> bytes:
        """Generate metrics in Prometheus text exposition format."""
        return cast(bytes, generate_latest(REGISTRY))

    @staticmethod
    def get_content_type() -> str:
        return cast(str, CONTENT_TYPE_LATEST)


# Singleton instance
prometheus_metrics = PrometheusMetrics()
