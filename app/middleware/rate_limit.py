# =============================================================================
# app/middleware/rate_limit.py - Sliding-Window Rate Limiting
# =============================================================================
# Every request is recorded under a client key (the client IP by default).
# Once more than `max_requests` land inside the trailing window the request
# is rejected with 429 and a Retry-After header. Allowed responses carry
# RateLimit-Limit / RateLimit-Remaining.
#
# Storage is pluggable (lib.rate_limit_store): in-memory per process or
# Redis shared across workers.
# =============================================================================

import logging
import time
from collections.abc import Callable

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.exceptions import RateLimitError
from lib.rate_limit_store import MemoryRateLimitStore, RateLimitStore

logger = logging.getLogger(__name__)

KeyFunc = Callable[[Request], str]


def client_ip_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def _format_seconds(value: float) -> str:
    return f"{value:g}"


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app,
        *,
        window_seconds: float = 60.0,
        max_requests: int = 200,
        store: RateLimitStore | None = None,
        key_func: KeyFunc = client_ip_key,
        clock: Callable[[], float] = time.time,
    ):
        super().__init__(app)
        self.window_seconds = window_seconds
        self.max_requests = max_requests
        self.store = store or MemoryRateLimitStore()
        self.key_func = key_func
        self.clock = clock

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        key = self.key_func(request)
        count = await self.store.hit(key, self.clock(), self.window_seconds)

        if count > self.max_requests:
            window = _format_seconds(self.window_seconds)
            logger.warning(f"Rate limit triggered for {key} on {request.url.path}")
            return RateLimitError(
                f"Too many requests - limit is {self.max_requests} per {window}s.",
                headers={
                    "Retry-After": str(int(self.window_seconds)),
                    "RateLimit-Limit": str(self.max_requests),
                    "RateLimit-Remaining": "0",
                },
            ).to_response()

        response = await call_next(request)
        response.headers["RateLimit-Limit"] = str(self.max_requests)
        response.headers["RateLimit-Remaining"] = str(self.max_requests - count)
        return response
