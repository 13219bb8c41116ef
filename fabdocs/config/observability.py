"""Prometheus instrumentation for the HTTP layer and the render pipeline.

Native prometheus_client collectors keep metric exposure deterministic; the
/metrics router serves them from the default registry.
"""
from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Iterator

from prometheus_client import Counter, Gauge, Histogram

APP_REQUEST_COUNT = Counter(
    "app_requests_total",
    "Total HTTP requests processed",
    ["method", "path", "status"],
)
APP_REQUEST_LATENCY = Histogram(
    "app_request_duration_seconds",
    "Request latency in seconds",
    ["method", "path", "status"],
)
APP_UPTIME_SECONDS = Gauge(
    "app_uptime_seconds",
    "Application uptime in seconds",
)

DOCUMENT_RENDERS = Counter(
    "document_renders_total",
    "Document renders by type and outcome",
    ["document_type", "outcome"],
)
DOCUMENT_RENDER_LATENCY = Histogram(
    "document_render_duration_seconds",
    "Wall time spent laying out and serializing a document",
    ["document_type"],
)
ASSET_FAILURES = Counter(
    "branding_asset_failures_total",
    "Branding images that failed to load or draw",
    ["slot"],
)


def record_request(method: str, path: str, status: int, duration_s: float) -> None:
    APP_REQUEST_COUNT.labels(method, path, str(status)).inc()
    APP_REQUEST_LATENCY.labels(method, path, str(status)).observe(duration_s)


def record_asset_failure(slot: str) -> None:
    ASSET_FAILURES.labels(slot).inc()


@contextmanager
def track_render(document_type: str) -> Iterator[None]:
    """Time a render and count its outcome (``success`` or ``failure``)."""
    start = time.perf_counter()
    try:
        yield
    except Exception:
        DOCUMENT_RENDERS.labels(document_type, "failure").inc()
        raise
    else:
        DOCUMENT_RENDERS.labels(document_type, "success").inc()
    finally:
        DOCUMENT_RENDER_LATENCY.labels(document_type).observe(time.perf_counter() - start)


__all__ = [
    "APP_REQUEST_COUNT",
    "APP_REQUEST_LATENCY",
    "APP_UPTIME_SECONDS",
    "DOCUMENT_RENDERS",
    "DOCUMENT_RENDER_LATENCY",
    "ASSET_FAILURES",
    "record_request",
    "record_asset_failure",
    "track_render",
]
