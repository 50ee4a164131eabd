"""Prometheus metrics definitions and helpers."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests processed",
    ("method", "route", "status"),
)

REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ("method", "route"),
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0),
)

ERROR_COUNTER = Counter(
    "app_internal_errors_total",
    "Number of requests ending in internal server error responses",
    ("method", "route"),
)

OWNER_LOGIN_COUNTER = Counter(
    "myvoice_owner_logins_total",
    "Number of successful owner login events",
)

UPLOAD_CHUNK_COUNTER = Counter(
    "myvoice_upload_chunks_total",
    "Temporary audio chunks accepted",
)

UPLOAD_COMPLETED_COUNTER = Counter(
    "myvoice_uploads_completed_total",
    "Chunked uploads reassembled into a final audio blob",
)

UPSTREAM_FAILURE_COUNTER = Counter(
    "myvoice_completion_failures_total",
    "Completion API calls that returned a non-success status",
    ("operation",),
)


def observe_request(
    method: str,
    route: str,
    status_code: int,
    duration_seconds: float,
) -> None:
    """Record metrics for a completed HTTP request."""

    safe_route = route or "unknown"
    safe_method = method or "UNKNOWN"

    REQUEST_COUNT.labels(method=safe_method, route=safe_route, status=str(status_code)).inc()
    REQUEST_LATENCY.labels(method=safe_method, route=safe_route).observe(max(duration_seconds, 0))

    if status_code >= 500:
        ERROR_COUNTER.labels(method=safe_method, route=safe_route).inc()
