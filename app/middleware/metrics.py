# =============================================================================
# app/middleware/metrics.py - Request Metrics Middleware
# =============================================================================
# Counts requests and records their duration, labelled by method, route
# template (not the raw path, to keep label cardinality bounded) and status.
# =============================================================================

import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.metrics import HTTP_REQUEST_DURATION_MS, HTTP_REQUESTS_TOTAL

UNKNOWN_ROUTE = "unknown_route"


def route_template(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", None) or UNKNOWN_ROUTE


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = time.perf_counter()
        status = "500"
        try:
            response = await call_next(request)
            status = str(response.status_code)
            return response
        finally:
            labels = {
                "method": request.method,
                "route": route_template(request),
                "status": status,
            }
            HTTP_REQUESTS_TOTAL.labels(**labels).inc()
            HTTP_REQUEST_DURATION_MS.labels(**labels).observe(
                (time.perf_counter() - started) * 1000
            )
