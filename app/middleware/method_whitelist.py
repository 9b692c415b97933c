# =============================================================================
# app/middleware/method_whitelist.py - HTTP Method Whitelist
# =============================================================================

from collections.abc import Iterable

from starlette.requests import Request

from app.exceptions import MethodNotAllowedError
from app.middleware.base import GuardMiddleware

DEFAULT_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS")


class MethodWhitelistMiddleware(GuardMiddleware):
    """405 for any method outside the server-wide whitelist."""

    def __init__(self, app, *, allowed_methods: Iterable[str] = DEFAULT_METHODS):
        super().__init__(app)
        self.allowed_methods = frozenset(m.upper() for m in allowed_methods)

    def check(self, request: Request) -> None:
        method = request.method.upper()
        if method not in self.allowed_methods:
            raise MethodNotAllowedError(
                method,
                headers={"Allow": ", ".join(sorted(self.allowed_methods))},
            )
