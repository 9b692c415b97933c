# =============================================================================
# app/middleware/content_type.py - Content-Type Enforcement
# =============================================================================
# Methods without a body must not declare one; POST/PUT/PATCH must declare
# a media type from the allowed set for their path (415 otherwise).
# =============================================================================

from collections.abc import Iterable

from starlette.requests import Request

from app.exceptions import UnsupportedMediaTypeError
from app.middleware.base import GuardMiddleware

NO_BODY_METHODS = frozenset({"GET", "DELETE", "HEAD", "OPTIONS"})
BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})

DEFAULT_ALLOWED = frozenset({"application/json", "multipart/form-data"})


class ContentTypeMiddleware(GuardMiddleware):
    def __init__(
        self,
        app,
        *,
        default_allowed: Iterable[str] = DEFAULT_ALLOWED,
        route_overrides: Iterable[tuple[str, Iterable[str]]] = (),
    ):
        super().__init__(app)
        self.default_allowed = frozenset(t.lower() for t in default_allowed)
        self.route_overrides = [
            (prefix, frozenset(t.lower() for t in allowed))
            for prefix, allowed in route_overrides
        ]

    def allowed_for_path(self, path: str) -> frozenset[str]:
        for prefix, allowed in self.route_overrides:
            if path.startswith(prefix):
                return allowed
        return self.default_allowed

    def check(self, request: Request) -> None:
        method = request.method.upper()
        content_type = request.headers.get("content-type")

        if method in NO_BODY_METHODS:
            if content_type is not None:
                raise UnsupportedMediaTypeError(
                    f"HTTP method '{method}' does not accept a request body."
                )
            return

        if method in BODY_METHODS:
            if not content_type:
                raise UnsupportedMediaTypeError("Missing Content-Type header.")

            allowed = self.allowed_for_path(request.url.path)
            media_type = content_type.split(";")[0].strip().lower()
            if media_type not in allowed:
                expected = ", ".join(sorted(allowed))
                raise UnsupportedMediaTypeError(
                    f"Content-Type '{content_type}' is not allowed on this endpoint. "
                    f"Expected one of: {expected}."
                )
