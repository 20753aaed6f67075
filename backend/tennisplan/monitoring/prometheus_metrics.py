"""
Prometheus metrics module for the Tennisplan backend.

Exposes HTTP request metrics, the service-operation timings recorded by
@measure_operation, and a few domain counters.
"""

from typing import Optional

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

# Own registry, so the default process collectors stay out of the payload
REGISTRY = CollectorRegistry()

http_request_duration_seconds = Histogram(
    "tennisplan_http_request_duration_seconds",
    "Latency of API requests in seconds",
    ["method", "endpoint", "status_code"],
    registry=REGISTRY,
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

http_requests_total = Counter(
    "tennisplan_http_requests_total",
    "API requests by route and status",
    ["method", "endpoint", "status_code"],
    registry=REGISTRY,
)

http_requests_in_progress = Gauge(
    "tennisplan_http_requests_in_progress",
    "API requests being handled right now",
    ["method", "endpoint"],
    registry=REGISTRY,
)

service_operation_duration_seconds = Histogram(
    "tennisplan_service_operation_duration_seconds",
    "Duration of measured service operations in seconds",
    ["service", "operation"],
    registry=REGISTRY,
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

service_operations_total = Counter(
    "tennisplan_service_operations_total",
    "Measured service operations by outcome",
    ["service", "operation", "status"],
    registry=REGISTRY,
)

errors_total = Counter(
    "tennisplan_errors_total",
    "Failed service operations by exception type",
    ["service", "operation", "error_type"],
    registry=REGISTRY,
)

# Domain-specific counters
training_sessions_completed_total = Counter(
    "tennisplan_training_sessions_completed_total",
    "Training sessions marked as completed",
    registry=REGISTRY,
)

payments_recorded_total = Counter(
    "tennisplan_payments_recorded_total",
    "Monthly payments recorded",
    ["method"],  # cash | transfer | sepa
    registry=REGISTRY,
)

emails_sent_total = Counter(
    "tennisplan_emails_sent_total",
    "Outgoing emails by outcome",
    ["kind", "status"],  # kind: newsletter | registration | sepa_mandate, status: sent | error
    registry=REGISTRY,
)


class PrometheusMetrics:
    """Thin facade over the module-level collectors."""

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
            service: Service name (e.g., 'BillingService')
            operation: Operation/method name (e.g., 'monthly_summary')
            duration: Operation duration in seconds
            status: Operation status ('success' or 'error')
            error_type: Type of error if status is 'error'
        """
        service_operation_duration_seconds.labels(service=service, operation=operation).observe(duration)
        service_operations_total.labels(service=service, operation=operation, status=status).inc()
        if status == "error" and error_type:
            errors_total.labels(service=service, operation=operation, error_type=error_type).inc()

    @staticmethod
    def inc_sessions_completed() -> None:
        training_sessions_completed_total.inc()

    @staticmethod
    def inc_payment_recorded(method: str) -> None:
        payments_recorded_total.labels(method=method).inc()

    @staticmethod
    def inc_email(kind: str, status: str) -> None:
        emails_sent_total.labels(kind=kind, status=status).inc()

    @staticmethod
    def get_metrics() -> bytes:
        return generate_latest(REGISTRY)

    @staticmethod
    def get_content_type() -> str:
        return CONTENT_TYPE_LATEST


prometheus_metrics = PrometheusMetrics()
