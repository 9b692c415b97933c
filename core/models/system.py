# =============================================================================
# core/models/system.py - System Endpoint Schemas
# =============================================================================
# Response shapes for the operational endpoints (/, /health, /ready, /info,
# /system) and the shared error envelope documented in OpenAPI.
# =============================================================================

from typing import Any, Literal

from pydantic import BaseModel, Field


class RootResponse(BaseModel):
    message: str = Field(..., examples=["Hello World! Welcome to QuickAPI"])


class HealthResponse(BaseModel):
    """Liveness: the process is up and has not finished shutting down."""
    alive: bool
    uptime: float = Field(..., ge=0, description="Process uptime in seconds")
    timestamp: str = Field(..., description="ISO-8601 timestamp")


class ReadyResponse(BaseModel):
    """Readiness: startup finished and every service health check passes."""
    ready: bool


class InfoResponse(BaseModel):
    name: str = Field(..., examples=["quickapi"])
    version: str = Field(..., examples=["1.0.0"])
    environment: str = Field(..., examples=["development"])
    hostname: str
    pid: int


class SystemDiagnostics(BaseModel):
    uptime: float = Field(..., ge=0, description="Process uptime in seconds")
    timestamp: int = Field(..., description="Milliseconds since the UNIX epoch")
    event_loop_lag: float = Field(..., ge=0, description="Event loop delay in milliseconds")
    db: Literal["connected", "disconnected"]


class ErrorResponse(BaseModel):
    """Standard error envelope returned by every endpoint on failure."""
    status: int = Field(..., examples=[503])
    code: str = Field(..., examples=["SERVICE_UNAVAILABLE"])
    message: str = Field(..., examples=["Application not ready"])
    timestamp: int = Field(..., description="Milliseconds since the UNIX epoch")
    request_id: str | None = None
    details: dict[str, Any] | None = None
