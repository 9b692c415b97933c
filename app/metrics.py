# =============================================================================
# app/metrics.py - Prometheus Metrics
# =============================================================================
# A dedicated registry for the service so /metrics only exposes what this
# process records (plus the standard process/platform collectors).
# =============================================================================

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    PlatformCollector,
    ProcessCollector,
    generate_latest,
)

from lib.utils import process_uptime

REGISTRY = CollectorRegistry()

ProcessCollector(registry=REGISTRY)
PlatformCollector(registry=REGISTRY)

HTTP_REQUESTS_TOTAL = Counter(
    "http_requests_total",
    "Total number of HTTP requests",
    ["method", "route", "status"],
    registry=REGISTRY,
)

HTTP_REQUEST_DURATION_MS = Histogram(
    "http_request_duration_ms",
    "HTTP request duration in milliseconds",
    ["method", "route", "status"],
    buckets=(5, 10, 25, 50, 100, 250, 500, 1000, 2500, 5000, 10000),
    registry=REGISTRY,
)

PROCESS_UPTIME_SECONDS = Gauge(
    "app_uptime_seconds",
    "Seconds since the application started",
    registry=REGISTRY,
)
PROCESS_UPTIME_SECONDS.set_function(process_uptime)


def render_metrics() -> tuple[bytes, str]:
    """Return the exposition payload and its content type."""
    return generate_latest(REGISTRY), CONTENT_TYPE_LATEST
