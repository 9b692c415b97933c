# =============================================================================
# app/exceptions.py - HTTP Errors and Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
#
# Every error response uses the same envelope:
#   {"status": 404, "code": "NOT_FOUND", "message": "...",
#    "timestamp": 1755172800000, "request_id": "A1b2C3d4E5f6G7h8"}
#
# HttpError extends Starlette's HTTPException so errors raised while the
# request body is being read (body limit, timeouts) pass through FastAPI's
# body parsing untouched and reach these handlers.
# =============================================================================

import logging
import time
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.context import get_request_id
from lib.utils import format_bytes

logger = logging.getLogger(__name__)


# =============================================================================
# Base Error
# =============================================================================

class HttpError(StarletteHTTPException):
    """
    Base class for errors that map to an HTTP status.

    Subclasses fix `status`, `code` and a default message. Raising one
    anywhere in a request produces the standard error envelope.
    """

    status: int = 500
    code: str = "INTERNAL_ERROR"
    default_message: str = "Internal Server Error"

    def __init__(
        self,
        message: str | None = None,
        *,
        code: str | None = None,
        details: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ):
        self.message = message or self.default_message
        if code:
            self.code = code
        self.details = details or {}
        super().__init__(status_code=self.status, detail=self.message, headers=headers)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        return error_body(self.status_code, self.code, self.message, self.details)

    def to_response(self) -> JSONResponse:
        return JSONResponse(
            status_code=self.status_code,
            content=self.to_dict(),
            headers=self.headers,
        )


class BadRequestError(HttpError):
    status = 400
    code = "BAD_REQUEST"
    default_message = "Bad Request"


class ForbiddenError(HttpError):
    status = 403
    code = "FORBIDDEN"
    default_message = "Forbidden"


class NotFoundError(HttpError):
    status = 404
    code = "NOT_FOUND"
    default_message = "Not Found"


class MethodNotAllowedError(HttpError):
    status = 405
    code = "METHOD_NOT_ALLOWED"

    def __init__(self, method: str, message: str | None = None, **kwargs):
        super().__init__(
            message or f"HTTP method '{method}' is not allowed on this server.",
            details={"method": method},
            **kwargs,
        )


class RequestTimeoutError(HttpError):
    status = 408
    code = "REQUEST_TIMEOUT"
    default_message = "Request timeout."


class RequestBodyTooLargeError(HttpError):
    status = 413
    code = "PAYLOAD_TOO_LARGE"

    def __init__(self, limit_bytes: int, **kwargs):
        super().__init__(
            f"Request body exceeds maximum allowed size (limit = {format_bytes(limit_bytes)}).",
            details={"limit_bytes": limit_bytes},
            **kwargs,
        )


class UnsupportedMediaTypeError(HttpError):
    status = 415
    code = "UNSUPPORTED_MEDIA_TYPE"
    default_message = "Unsupported Media Type"


class RateLimitError(HttpError):
    status = 429
    code = "RATE_LIMITED"
    default_message = "Too many requests."


class RequestHeaderFieldsTooLargeError(HttpError):
    status = 431
    code = "HEADER_FIELDS_TOO_LARGE"
    default_message = "Request header fields too large."


class OutputValidationError(HttpError):
    """Raised when a response DTO fails validation on the way out."""

    status = 500
    code = "OUTPUT_VALIDATION_ERROR"

    def __init__(self, message: str, issues: list[dict[str, Any]]):
        super().__init__(message, details={"issues": issues})
        self.issues = issues


class UnsupportedTransferEncodingError(HttpError):
    status = 501
    code = "UNSUPPORTED_TRANSFER_ENCODING"
    default_message = "Unsupported Transfer-Encoding."


class ServiceUnavailableError(HttpError):
    status = 503
    code = "SERVICE_UNAVAILABLE"
    default_message = "Service Unavailable"


# =============================================================================
# Envelope Helpers
# =============================================================================

_STATUS_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    413: "PAYLOAD_TOO_LARGE",
    415: "UNSUPPORTED_MEDIA_TYPE",
    429: "RATE_LIMITED",
    503: "SERVICE_UNAVAILABLE",
}


def error_body(
    status: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build the error envelope shared by every error response."""
    body: dict[str, Any] = {
        "status": status,
        "code": code,
        "message": message,
        "timestamp": int(time.time() * 1000),
        "request_id": get_request_id(),
    }
    if details:
        body["details"] = details
    return body


def format_validation_errors(errors: list[dict[str, Any]]) -> str:
    """
    Flatten pydantic errors into one line.

    Example:
        "body.price -> Input should be greater than 0; query.limit -> ..."
    """
    parts = []
    for error in errors:
        path = ".".join(str(part) for part in error.get("loc", ())) or "value"
        parts.append(f"{path} -> {error.get('msg', 'Invalid value')}")
    return "; ".join(parts)


def _log_error(status: int, message: str) -> None:
    if status >= 500:
        logger.error(message)
    else:
        logger.warning(message)


# =============================================================================
# Exception Handlers
# =============================================================================

async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """
    Convert HttpError and Starlette's own HTTPException to the envelope.

    Starlette raises plain HTTPException for unmatched routes (404) and
    methods a route does not accept (405).
    """
    if isinstance(exc, HttpError):
        _log_error(exc.status_code, exc.message)
        return exc.to_response()

    status = exc.status_code
    message = str(exc.detail)
    if status == 404 and message == "Not Found":
        message = f"Route not found - No route matches {request.method} {request.url.path}."
    elif status == 405 and message == "Method Not Allowed":
        message = f"HTTP method '{request.method}' is not allowed on this route."

    _log_error(status, message)
    return JSONResponse(
        status_code=status,
        content=error_body(status, _STATUS_CODES.get(status, "HTTP_ERROR"), message),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """
    Handle path, query and body validation errors.

    Malformed JSON is reported through the same path by FastAPI.
    """
    message = f"Validation failed - {format_validation_errors(exc.errors())}"
    _log_error(400, message)
    return JSONResponse(
        status_code=400,
        content=error_body(400, "VALIDATION_ERROR", message),
    )


def internal_error_response() -> JSONResponse:
    """The 500 envelope for unexpected exceptions."""
    return JSONResponse(
        status_code=500,
        content=error_body(500, "INTERNAL_ERROR", "Internal Server Error"),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Last resort for exceptions raised by the middleware themselves.

    Route handler exceptions are converted earlier by ErrorBoundaryMiddleware.
    """
    logger.exception(f"Unexpected error: {exc}")
    return internal_error_response()


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
