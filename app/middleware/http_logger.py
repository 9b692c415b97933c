# =============================================================================
# app/middleware/http_logger.py - HTTP Access Log
# =============================================================================
# One line per request:
#   201 POST    /api/v1/items                    3.42ms
# Level follows the status: error for 5xx, warning for 4xx, debug otherwise.
# =============================================================================

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from lib.utils import shorten_path

logger = logging.getLogger("app.http")


def level_for_status(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.DEBUG


def format_access_line(status_code: int, method: str, path: str, duration_ms: float) -> str:
    return (
        f"{status_code:<3} {method:<7} {shorten_path(path, 30):<32} {duration_ms:.2f}ms"
    )


class HttpLoggerMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = time.perf_counter()
        path = request.url.path
        if request.url.query:
            path = f"{path}?{request.url.query}"

        try:
            response = await call_next(request)
        except Exception:
            duration = (time.perf_counter() - started) * 1000
            logger.error(format_access_line(500, request.method, path, duration))
            raise

        duration = (time.perf_counter() - started) * 1000
        logger.log(
            level_for_status(response.status_code),
            format_access_line(response.status_code, request.method, path, duration),
        )
        return response
