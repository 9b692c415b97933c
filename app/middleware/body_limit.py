# =============================================================================
# app/middleware/body_limit.py - Request Body Size Limit
# =============================================================================
# Meters the request body as it streams in. A declared Content-Length above
# the limit is rejected before any body is read; otherwise bytes are counted
# chunk by chunk and the request fails with 413 as soon as the running total
# passes the limit. Responses report the limit and the bytes left:
#   X-Body-Limit-Bytes: 1048576
#   X-Body-Remaining-Bytes: 1048490
# =============================================================================

from collections.abc import Iterable

from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from app.exceptions import BadRequestError, RequestBodyTooLargeError


class BodyLimitMiddleware:
    def __init__(
        self,
        app: ASGIApp,
        *,
        default_limit: int = 1_048_576,
        route_overrides: Iterable[tuple[str, int]] = (),
    ):
        self.app = app
        self.default_limit = default_limit
        self.route_overrides = list(route_overrides)

    def select_limit(self, path: str) -> int:
        for prefix, limit in self.route_overrides:
            if path.startswith(prefix):
                return limit
        return self.default_limit

    @staticmethod
    def _too_large(limit: int) -> RequestBodyTooLargeError:
        return RequestBodyTooLargeError(
            limit,
            headers={"X-Body-Limit-Bytes": str(limit), "X-Body-Remaining-Bytes": "0"},
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        limit = self.select_limit(scope["path"])

        declared = Headers(scope=scope).get("content-length")
        if declared is not None:
            try:
                declared_length = int(declared)
            except ValueError:
                await BadRequestError("Invalid Content-Length header.").to_response()(
                    scope, receive, send
                )
                return
            if declared_length > limit:
                await self._too_large(limit).to_response()(scope, receive, send)
                return

        total = 0
        response_started = False

        async def metered_receive() -> Message:
            nonlocal total
            message = await receive()
            if message["type"] == "http.request":
                total += len(message.get("body", b""))
                if total > limit:
                    raise self._too_large(limit)
            return message

        async def annotated_send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
                headers = MutableHeaders(scope=message)
                headers.setdefault("X-Body-Limit-Bytes", str(limit))
                headers.setdefault("X-Body-Remaining-Bytes", str(max(limit - total, 0)))
            await send(message)

        try:
            await self.app(scope, metered_receive, annotated_send)
        except RequestBodyTooLargeError as exc:
            if response_started:
                raise
            await exc.to_response()(scope, receive, send)
