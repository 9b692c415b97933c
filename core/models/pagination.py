# =============================================================================
# core/models/pagination.py - Pagination Schemas
# =============================================================================
# Shared building blocks for list endpoints:
# - PaginationQuery: page/limit/search/order query parameters
# - ListPage: what a repository returns (rows + total + paging echo)
#
# Resource-specific queries extend PaginationQuery with their own sort
# fields and filters.
# =============================================================================

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class SortOrder(str, Enum):
    """Sort direction for list endpoints."""
    ASC = "asc"
    DESC = "desc"


class PaginationQuery(BaseModel):
    """
    Common query parameters for paginated lists.

    Example:
        GET /api/v1/items?page=2&limit=25&search=sword&order=desc
    """

    # 1-indexed page number
    page: int = Field(
        default=1,
        ge=1,
        description="Page number (1-indexed)",
        examples=[1],
    )

    # Page size, capped to keep responses small
    limit: int = Field(
        default=25,
        ge=1,
        le=100,
        description="Number of results per page",
        examples=[25],
    )

    search: str | None = Field(
        default=None,
        max_length=120,
        description="Case-insensitive text filter",
        examples=["sword"],
    )

    order: SortOrder = Field(
        default=SortOrder.ASC,
        description="Sort direction",
    )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class ListPage(Generic[T]):
    """One page of rows returned by a repository."""
    items: list[T] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 25
