# =============================================================================
# app/middleware/base.py - Guard Middleware Base
# =============================================================================
# Most hardening middleware are a predicate over one request: look at the
# method, path or headers and either let the request through or reject it.
# GuardMiddleware runs `check()` and turns a raised HttpError into the
# standard error response. Middleware sit outside FastAPI's exception
# handlers, so they build the response themselves.
# =============================================================================

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.exceptions import HttpError


class GuardMiddleware(BaseHTTPMiddleware):
    """Reject requests for which `check()` raises an HttpError."""

    def check(self, request: Request) -> None:
        raise NotImplementedError

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            self.check(request)
        except HttpError as exc:
            return exc.to_response()
        return await call_next(request)
