# =============================================================================
# app/middleware/header_limits.py - Header Size Limits
# =============================================================================
# 431 when a request has too many headers, one oversized header (name plus
# value bytes), or too many header bytes overall. 501 for chunked request
# bodies when they are not allowed.
# =============================================================================

from starlette.requests import Request

from app.exceptions import RequestHeaderFieldsTooLargeError, UnsupportedTransferEncodingError
from app.middleware.base import GuardMiddleware


class HeaderLimitsMiddleware(GuardMiddleware):
    def __init__(
        self,
        app,
        *,
        max_header_count: int = 100,
        max_single_header_bytes: int = 4_096,
        max_total_header_bytes: int = 8_192,
        allow_chunked: bool = False,
    ):
        super().__init__(app)
        self.max_header_count = max_header_count
        self.max_single_header_bytes = max_single_header_bytes
        self.max_total_header_bytes = max_total_header_bytes
        self.allow_chunked = allow_chunked

    def check(self, request: Request) -> None:
        headers = request.scope["headers"]

        if len(headers) > self.max_header_count:
            raise RequestHeaderFieldsTooLargeError(
                f"Too many headers (limit = {self.max_header_count})."
            )

        total = 0
        for name, value in headers:
            size = len(name) + len(value)
            if size > self.max_single_header_bytes:
                raise RequestHeaderFieldsTooLargeError(
                    f"Header exceeds per-header size limit ({self.max_single_header_bytes} bytes)."
                )
            total += size

        if total > self.max_total_header_bytes:
            raise RequestHeaderFieldsTooLargeError(
                f"Total header size exceeds limit ({self.max_total_header_bytes} bytes)."
            )

        transfer_encoding = request.headers.get("transfer-encoding", "")
        if not self.allow_chunked and "chunked" in transfer_encoding.lower():
            raise UnsupportedTransferEncodingError("Chunked request bodies are not allowed.")
