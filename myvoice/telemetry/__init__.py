"""Telemetry helpers and metrics."""

from .metrics import (
    ERROR_COUNTER,
    OWNER_LOGIN_COUNTER,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    UPLOAD_CHUNK_COUNTER,
    UPLOAD_COMPLETED_COUNTER,
    UPSTREAM_FAILURE_COUNTER,
    observe_request,
)

__all__ = [
    "ERROR_COUNTER",
    "OWNER_LOGIN_COUNTER",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "UPLOAD_CHUNK_COUNTER",
    "UPLOAD_COMPLETED_COUNTER",
    "UPSTREAM_FAILURE_COUNTER",
    "observe_request",
]
