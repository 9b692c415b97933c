# =============================================================================
# app/middleware/ - HTTP Hardening Middleware
# =============================================================================
# Each module holds one concern:
# - metrics.py: Prometheus request counter and duration histogram
# - request_context.py: request id and per-request context
# - http_logger.py: one access log line per request
# - rate_limit.py: sliding-window rate limiting per client
# - header_sanitization.py: blocklist/allowlist and header syntax checks
# - header_limits.py: header count and size limits, chunked bodies
# - request_timeout.py: header, chunk and total timeouts
# - content_type.py: Content-Type rules per method and path
# - method_whitelist.py: server-wide HTTP method whitelist
# - cors.py: origin allowlist and preflight handling
# - security_headers.py: hardened response headers
# - body_limit.py: streaming request body size limit
# - error_boundary.py: 500 envelope for unhandled route exceptions
#
# build_middleware() in app/main.py assembles them in order.
# =============================================================================

from .body_limit import BodyLimitMiddleware
from .content_type import ContentTypeMiddleware
from .cors import CORSGuardMiddleware
from .error_boundary import ErrorBoundaryMiddleware
from .header_limits import HeaderLimitsMiddleware
from .header_sanitization import HeaderSanitizationMiddleware
from .http_logger import HttpLoggerMiddleware
from .method_whitelist import MethodWhitelistMiddleware
from .metrics import MetricsMiddleware
from .rate_limit import RateLimitMiddleware
from .request_context import RequestContextMiddleware
from .request_timeout import RequestTimeoutMiddleware
from .security_headers import SecurityHeadersMiddleware

__all__ = [
    "BodyLimitMiddleware",
    "ContentTypeMiddleware",
    "CORSGuardMiddleware",
    "ErrorBoundaryMiddleware",
    "HeaderLimitsMiddleware",
    "HeaderSanitizationMiddleware",
    "HttpLoggerMiddleware",
    "MethodWhitelistMiddleware",
    "MetricsMiddleware",
    "RateLimitMiddleware",
    "RequestContextMiddleware",
    "RequestTimeoutMiddleware",
    "SecurityHeadersMiddleware",
]
