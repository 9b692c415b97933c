# =============================================================================
# app/middleware/header_sanitization.py - Header Sanitization
# =============================================================================
# Rejects requests carrying hop-by-hop or proxy headers, duplicate header
# names, malformed names, or CR/LF in values. Headers that pass the checks
# but are not on the allowlist are dropped before the request reaches the
# application.
# =============================================================================

import re

from starlette.requests import Request

from app.exceptions import BadRequestError
from app.middleware.base import GuardMiddleware

BLOCKLIST = frozenset({
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "te",
    "trailer",
    "transfer-encoding",
    "upgrade",
    "proxy-connection",
    "x-forwarded-for",
    "x-forwarded-host",
    "x-forwarded-proto",
    "forwarded",
    "via",
    "client-ip",
    "true-client-ip",
})

ALLOWLIST = frozenset({
    "host",
    "connection",
    "content-type",
    "content-length",
    "accept",
    "accept-language",
    "accept-encoding",
    "user-agent",
    "referer",
    "origin",
    "cookie",
    "sec-fetch-site",
    "sec-fetch-mode",
    "sec-fetch-dest",
    "sec-ch-ua",
    "sec-ch-ua-mobile",
    "sec-ch-ua-platform",
    "authorization",
    "x-csrf-token",
    "x-request-id",
    "x-api-key",
})

VALID_NAME_RE = re.compile(r"^[A-Za-z0-9-]+$")


class HeaderSanitizationMiddleware(GuardMiddleware):
    def __init__(self, app, *, allowlist=ALLOWLIST, blocklist=BLOCKLIST):
        super().__init__(app)
        self.allowlist = frozenset(h.lower() for h in allowlist)
        self.blocklist = frozenset(h.lower() for h in blocklist)

    def check(self, request: Request) -> None:
        seen: set[str] = set()
        cleaned: list[tuple[bytes, bytes]] = []

        for raw_name, raw_value in request.scope["headers"]:
            name = raw_name.decode("latin-1").lower()
            value = raw_value.decode("latin-1")

            if name in self.blocklist:
                raise BadRequestError(f"Header '{name}' is not allowed.")

            if name in seen:
                raise BadRequestError(f"Duplicate header '{name}' is not permitted.")
            seen.add(name)

            if not VALID_NAME_RE.match(name):
                raise BadRequestError(f"Header name '{name}' contains invalid characters.")

            if "\r" in value or "\n" in value:
                raise BadRequestError("Header value contains prohibited control characters.")

            if name in self.allowlist:
                cleaned.append((name.encode("latin-1"), raw_value))

        # Downstream Request objects read headers from the shared scope
        request.scope["headers"] = cleaned
