# =============================================================================
# app/routers/system.py - Operational Endpoints
# =============================================================================
# Provides endpoints for monitoring, load balancers and humans:
# - /        greeting
# - /health  liveness (process up, not shut down)
# - /ready   readiness (startup done, every service healthy)
# - /info    service identity
# - /system  runtime diagnostics
# - /metrics Prometheus exposition
# =============================================================================

import os
import socket
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Response
from starlette.concurrency import run_in_threadpool

from app.dependencies import DatabaseDep, LifecycleDep, SettingsDep
from app.exceptions import ServiceUnavailableError
from app.metrics import render_metrics
from core.models.system import (
    ErrorResponse,
    HealthResponse,
    InfoResponse,
    ReadyResponse,
    RootResponse,
    SystemDiagnostics,
)
from lib.utils import get_event_loop_lag, process_uptime

router = APIRouter()


@router.get("/", response_model=RootResponse)
async def root():
    return RootResponse(message="Hello World! Welcome to QuickAPI")


@router.get("/health", response_model=HealthResponse)
async def health_check(lifecycle: LifecycleDep):
    """
    Liveness check.

    Stays up during startup; reports alive=false once shutdown completed.
    """
    return HealthResponse(
        alive=lifecycle.is_alive(),
        uptime=process_uptime(),
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


@router.get(
    "/ready",
    response_model=ReadyResponse,
    responses={503: {"model": ErrorResponse, "description": "Not ready"}},
)
async def readiness_check(lifecycle: LifecycleDep):
    """
    Readiness check.

    Ready once startup finished and every registered service health check
    passes. Returns 503 otherwise, including during shutdown.
    """
    if not lifecycle.is_ready() or not await lifecycle.are_all_services_healthy():
        raise ServiceUnavailableError("Application not ready")
    return ReadyResponse(ready=True)


@router.get("/info", response_model=InfoResponse)
async def info(settings: SettingsDep):
    return InfoResponse(
        name=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        hostname=socket.gethostname(),
        pid=os.getpid(),
    )


@router.get("/system", response_model=SystemDiagnostics)
async def system_diagnostics(db: DatabaseDep):
    """Uptime, event loop lag and database connectivity."""
    return SystemDiagnostics(
        uptime=process_uptime(),
        timestamp=int(time.time() * 1000),
        event_loop_lag=await get_event_loop_lag(),
        db="connected" if await run_in_threadpool(db.ping) else "disconnected",
    )


@router.get("/metrics", response_class=Response)
async def metrics():
    """Prometheus text exposition format."""
    payload, content_type = render_metrics()
    return Response(content=payload, media_type=content_type)
