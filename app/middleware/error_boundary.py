# =============================================================================
# app/middleware/error_boundary.py - Unhandled Exception Boundary
# =============================================================================
# Innermost middleware. Exceptions the route handlers do not handle become
# the 500 envelope here, while the request context is still active, so the
# response carries the request id and passes back out through the CORS and
# security header middleware like any other response.
#
# HTTP errors are left to FastAPI's handlers. If the response has already
# started there is nothing left to send, so the exception propagates.
# =============================================================================

import logging

from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from app.exceptions import internal_error_response

logger = logging.getLogger(__name__)


class ErrorBoundaryMiddleware:
    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def tracked_send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, tracked_send)
        except StarletteHTTPException:
            raise
        except Exception as exc:
            if response_started:
                raise
            logger.exception(f"Unexpected error on {scope['method']} {scope['path']}: {exc}")
            await internal_error_response()(scope, receive, send)
