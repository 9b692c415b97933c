# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - pagination.py: Shared list query parameters and page container
# - item.py: Item CRUD schemas and list query
# - system.py: Operational endpoint responses and the error envelope
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Pagination Models
# -----------------------------------------------------------------------------
from .pagination import (
    ListPage,
    PaginationQuery,
    SortOrder,
)

# -----------------------------------------------------------------------------
# Item Models
# -----------------------------------------------------------------------------
from .item import (
    ItemCreate,
    ItemListQuery,
    ItemListResponse,
    ItemResponse,
    ItemSortField,
    ItemUpdate,
)

# -----------------------------------------------------------------------------
# System Models
# -----------------------------------------------------------------------------
from .system import (
    ErrorResponse,
    HealthResponse,
    InfoResponse,
    ReadyResponse,
    RootResponse,
    SystemDiagnostics,
)

__all__ = [
    # Pagination
    "ListPage",
    "PaginationQuery",
    "SortOrder",
    # Item
    "ItemCreate",
    "ItemListQuery",
    "ItemListResponse",
    "ItemResponse",
    "ItemSortField",
    "ItemUpdate",
    # System
    "ErrorResponse",
    "HealthResponse",
    "InfoResponse",
    "ReadyResponse",
    "RootResponse",
    "SystemDiagnostics",
]
