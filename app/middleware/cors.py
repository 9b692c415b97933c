# =============================================================================
# app/middleware/cors.py - CORS
# =============================================================================
# Requests from origins outside the allowlist are rejected with 403 instead
# of merely lacking CORS headers. Requests without an Origin header (same
# origin, curl, health checks) pass through. OPTIONS preflights are answered
# here with 204.
# =============================================================================

from collections.abc import Iterable

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.exceptions import ForbiddenError

DEFAULT_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS")
DEFAULT_ALLOWED_HEADERS = ("content-type", "authorization", "x-requested-with")
DEFAULT_EXPOSED_HEADERS = ("authorization", "set-cookie", "x-request-id")


class CORSGuardMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app,
        *,
        origins: Iterable[str] = ("http://localhost:3000",),
        methods: Iterable[str] = DEFAULT_METHODS,
        allowed_headers: Iterable[str] = DEFAULT_ALLOWED_HEADERS,
        exposed_headers: Iterable[str] = DEFAULT_EXPOSED_HEADERS,
        credentials: bool = True,
        max_age: int = 86_400,
    ):
        super().__init__(app)
        self.origins = list(origins)
        self.allow_all = "*" in self.origins
        self.methods = list(methods)
        self.allowed_headers = list(allowed_headers)
        self.exposed_headers = list(exposed_headers)
        self.credentials = credentials
        self.max_age = max_age

    def is_allowed_origin(self, origin: str | None) -> bool:
        if not origin:
            return True
        return self.allow_all or origin in self.origins

    def cors_headers(self, origin: str | None) -> dict[str, str]:
        headers = {
            "Access-Control-Allow-Methods": ", ".join(self.methods),
            "Access-Control-Allow-Headers": ", ".join(self.allowed_headers),
            "Access-Control-Expose-Headers": ", ".join(self.exposed_headers),
            "Access-Control-Max-Age": str(self.max_age),
        }
        if origin:
            headers["Access-Control-Allow-Origin"] = origin
            headers["Vary"] = "Origin"
        elif self.allow_all:
            headers["Access-Control-Allow-Origin"] = "*"
        if self.credentials:
            headers["Access-Control-Allow-Credentials"] = "true"
        return headers

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        origin = request.headers.get("origin")

        if not self.is_allowed_origin(origin):
            return ForbiddenError(f"CORS origin '{origin}' not allowed.").to_response()

        headers = self.cors_headers(origin)

        if request.method == "OPTIONS":
            return Response(status_code=204, headers=headers)

        response = await call_next(request)
        response.headers.update(headers)
        return response
