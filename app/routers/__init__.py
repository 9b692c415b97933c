# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - system.py: Root, health, readiness, info, diagnostics and metrics
# - items.py: Item CRUD endpoints
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import items
from . import system

__all__ = [
    "items",
    "system",
]
