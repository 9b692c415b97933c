# =============================================================================
# app/middleware/request_timeout.py - Request Timeout Watchdog
# =============================================================================
# Three budgets, all answered with 408:
# - header timeout: time until the first body chunk arrives
# - chunk timeout: gap between two consecutive body chunks
# - total timeout: time until the application finishes the request
#
# Written as a plain ASGI middleware because it has to wrap `receive`.
# Once the body is complete, later receive() calls (disconnect listeners)
# are passed through without a deadline.
# =============================================================================

import asyncio
import logging

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from app.exceptions import RequestTimeoutError

logger = logging.getLogger(__name__)


class RequestTimeoutMiddleware:
    def __init__(
        self,
        app: ASGIApp,
        *,
        header_timeout: float = 5.0,
        chunk_timeout: float = 2.0,
        total_timeout: float = 10.0,
    ):
        self.app = app
        self.header_timeout = header_timeout
        self.chunk_timeout = chunk_timeout
        self.total_timeout = total_timeout

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        first_chunk = True
        body_complete = False
        response_started = False

        async def timed_receive() -> Message:
            nonlocal first_chunk, body_complete
            if body_complete:
                return await receive()

            timeout = self.header_timeout if first_chunk else self.chunk_timeout
            try:
                message = await asyncio.wait_for(receive(), timeout=timeout)
            except asyncio.TimeoutError:
                if first_chunk:
                    raise RequestTimeoutError("Header timeout exceeded.") from None
                raise RequestTimeoutError("Chunk timeout exceeded.") from None

            first_chunk = False
            if message["type"] != "http.request" or not message.get("more_body", False):
                body_complete = True
            return message

        async def tracked_send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await asyncio.wait_for(
                self.app(scope, timed_receive, tracked_send),
                timeout=self.total_timeout,
            )
        except asyncio.TimeoutError:
            if response_started:
                logger.warning(f"Total timeout hit after response started: {scope['path']}")
                return
            await RequestTimeoutError("Request exceeded total timeout.").to_response()(
                scope, receive, send
            )
        except RequestTimeoutError as exc:
            if response_started:
                raise
            await exc.to_response()(scope, receive, send)
