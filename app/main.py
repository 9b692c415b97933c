# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the QuickAPI service.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
#   python -m app.server
# =============================================================================

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from starlette.middleware import Middleware

import core.entities  # noqa: F401  registers ORM entities on Base
from app.config import Settings, get_settings
from app.exceptions import register_exception_handlers
from app.middleware import (
    BodyLimitMiddleware,
    ContentTypeMiddleware,
    CORSGuardMiddleware,
    ErrorBoundaryMiddleware,
    HeaderLimitsMiddleware,
    HeaderSanitizationMiddleware,
    HttpLoggerMiddleware,
    MethodWhitelistMiddleware,
    MetricsMiddleware,
    RateLimitMiddleware,
    RequestContextMiddleware,
    RequestTimeoutMiddleware,
    SecurityHeadersMiddleware,
)
from app.routers import items, system
from core.lifecycle import LifecycleHandler, LifecycleService, install_loop_exception_handler
from lib.database import DatabaseClient
from lib.rate_limit_store import MemoryRateLimitStore, RateLimitStore, RedisRateLimitStore

logger = logging.getLogger(__name__)


DESCRIPTION = """
## QuickAPI

A small item catalogue service with a hardened HTTP layer.

### Features

- **Items**: create, list, read, update, replace and delete
- **Listing**: pagination, search, sorting and price filters
- **Operations**: liveness, readiness, diagnostics and Prometheus metrics

### Errors

Every error uses the same envelope:

```json
{"status": 404, "code": "NOT_FOUND", "message": "...", "timestamp": 1755172800000, "request_id": "..."}
```
"""


# =============================================================================
# Lifespan
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    - Startup: start registered services (database, rate limit store)
    - Shutdown: stop them in reverse order with the configured time budget
    """
    lifecycle: LifecycleHandler = app.state.lifecycle
    settings: Settings = app.state.settings

    install_loop_exception_handler(asyncio.get_running_loop())

    names = ", ".join(service.name for service in lifecycle.services)
    logger.info(f"Starting {settings.APP_NAME} in {settings.ENVIRONMENT} mode (services: {names})")
    await lifecycle.startup()

    try:
        yield
    finally:
        await lifecycle.shutdown(lifecycle.signal or "LIFESPAN_SHUTDOWN")


# =============================================================================
# Builders
# =============================================================================

def build_rate_limit_store(settings: Settings) -> RateLimitStore:
    if settings.RATE_LIMIT_REDIS_URL:
        logger.info("Rate limiting backed by Redis")
        return RedisRateLimitStore.from_url(settings.RATE_LIMIT_REDIS_URL)
    return MemoryRateLimitStore()


def build_middleware(settings: Settings, store: RateLimitStore) -> list[Middleware]:
    """
    Hardening middleware, outermost first.

    Metrics and the request context wrap everything so rejected requests
    are still counted and logged with a request id. The error boundary is
    innermost so unexpected exceptions get the same headers as any other
    response.
    """
    return [
        Middleware(MetricsMiddleware),
        Middleware(RequestContextMiddleware),
        Middleware(HttpLoggerMiddleware),
        Middleware(
            RateLimitMiddleware,
            window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
            max_requests=settings.RATE_LIMIT_MAX,
            store=store,
        ),
        Middleware(HeaderSanitizationMiddleware),
        Middleware(
            HeaderLimitsMiddleware,
            max_header_count=settings.MAX_HEADER_COUNT,
            max_single_header_bytes=settings.MAX_SINGLE_HEADER_BYTES,
            max_total_header_bytes=settings.MAX_TOTAL_HEADER_BYTES,
            allow_chunked=settings.ALLOW_CHUNKED,
        ),
        Middleware(
            RequestTimeoutMiddleware,
            header_timeout=settings.HEADER_TIMEOUT_SECONDS,
            chunk_timeout=settings.CHUNK_TIMEOUT_SECONDS,
            total_timeout=settings.TOTAL_TIMEOUT_SECONDS,
        ),
        Middleware(ContentTypeMiddleware),
        Middleware(MethodWhitelistMiddleware),
        Middleware(CORSGuardMiddleware, origins=settings.cors_origins_list),
        Middleware(SecurityHeadersMiddleware),
        Middleware(BodyLimitMiddleware, default_limit=settings.BODY_LIMIT_BYTES),
        Middleware(ErrorBoundaryMiddleware),
    ]


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build a fully wired application.

    Each call creates its own database client, rate limit store and
    lifecycle handler, so tests can build isolated apps.

    Args:
        settings: Explicit settings; defaults to the cached environment settings

    Returns:
        FastAPI app ready to be served
    """
    settings = settings or get_settings()

    db = DatabaseClient(settings.DATABASE_URL)
    store = build_rate_limit_store(settings)

    lifecycle = LifecycleHandler(stop_timeout=settings.SHUTDOWN_TIMEOUT_SECONDS)
    lifecycle.register([
        LifecycleService("database", start=db.connect, stop=db.disconnect, check=db.ping),
        LifecycleService("rate-limit-store", stop=store.close, check=store.ping),
    ])

    app = FastAPI(
        title="QuickAPI",
        description=DESCRIPTION,
        version=settings.APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
        middleware=build_middleware(settings, store),
        openapi_tags=[
            {
                "name": "Items",
                "description": "Create and manage catalogue items",
            },
            {
                "name": "System",
                "description": "Health, readiness, diagnostics and metrics",
            },
        ],
    )

    app.state.settings = settings
    app.state.db = db
    app.state.rate_limit_store = store
    app.state.lifecycle = lifecycle

    # -------------------------------------------------------------------------
    # Exception Handlers
    # -------------------------------------------------------------------------

    register_exception_handlers(app)

    # -------------------------------------------------------------------------
    # Routers
    # -------------------------------------------------------------------------

    app.include_router(
        system.router,
        tags=["System"]
    )

    app.include_router(
        items.router,
        prefix="/api/v1/items",
        tags=["Items"]
    )

    @app.get("/docs-json", include_in_schema=False)
    async def openapi_document():
        """Same document as /openapi.json."""
        return JSONResponse(app.openapi())

    return app


app = create_app()
