# =============================================================================
# app/middleware/request_context.py - Request Context Middleware
# =============================================================================
# Opens a request context (id, path, method, client ip) for the lifetime of
# the request and echoes the id as X-Request-ID.
# =============================================================================

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app import context

REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Store request metadata in a ContextVar and on request.state."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = context.clean_request_id(request.headers.get(REQUEST_ID_HEADER))
        data = context.build_context(
            request_id=request_id,
            path=request.url.path,
            method=request.method,
            ip=request.client.host if request.client else None,
        )
        request.state.request_id = request_id

        token = context.initialize(data)
        try:
            response = await call_next(request)
        finally:
            context.reset(token)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
