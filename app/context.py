# =============================================================================
# app/context.py - Request Context
# =============================================================================
# Per-request data (request id, path, method, client ip) kept in a
# ContextVar so that loggers and error handlers can read it without the
# Request object being passed around.
#
# Usage:
#   from app.context import get_request_id
#   logger.info("...", extra={"request_id": get_request_id()})
# =============================================================================

import re
import time
from contextvars import ContextVar, Token
from dataclasses import dataclass

from lib.utils import generate_id

SAFE_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")


@dataclass(frozen=True)
class RequestContextData:
    request_id: str
    timestamp: float
    path: str
    method: str
    ip: str | None


_request_context: ContextVar[RequestContextData | None] = ContextVar(
    "request_context", default=None
)


def clean_request_id(value: str | None) -> str:
    """Reuse a client supplied request id only if it is safe to log and echo."""
    if value:
        candidate = value.strip()
        if SAFE_REQUEST_ID_PATTERN.fullmatch(candidate):
            return candidate
    return generate_id()


def initialize(data: RequestContextData) -> Token:
    return _request_context.set(data)


def reset(token: Token) -> None:
    _request_context.reset(token)


def get_context() -> RequestContextData | None:
    return _request_context.get()


def get_request_id() -> str | None:
    context = _request_context.get()
    return context.request_id if context else None


def build_context(request_id: str, path: str, method: str, ip: str | None) -> RequestContextData:
    return RequestContextData(
        request_id=request_id,
        timestamp=time.time(),
        path=path,
        method=method,
        ip=ip,
    )
