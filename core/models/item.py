# =============================================================================
# core/models/item.py - Item Schemas
# =============================================================================
# These models define the API contract for item operations:
# - ItemCreate: Input for POST and PUT (full set of writable fields)
# - ItemUpdate: Input for PATCH (any subset, at least one field)
# - ItemResponse / ItemListResponse: Output shapes
# - ItemListQuery: Pagination, search, sort and price filters
# =============================================================================

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, model_validator

from lib.utils import ID_PATTERN
from .pagination import PaginationQuery

# Matches the decimal(10, 2) column: whole cents, at most 8 integer digits
Price = Annotated[Decimal, Field(gt=0, max_digits=10, decimal_places=2)]


class ItemSortField(str, Enum):
    """Columns a list of items can be sorted by."""
    NAME = "name"
    PRICE = "price"
    CREATED_AT = "created_at"


class ItemCreate(BaseModel):
    """
    Schema for creating (POST) or replacing (PUT) an item.

    Example:
        {
            "name": "Iron Sword",
            "price": 49.99,
            "description": "A finely crafted steel blade."
        }
    """

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str = Field(
        ...,
        min_length=1,
        max_length=120,
        description="Name of the item",
        examples=["Iron Sword"],
    )

    price: Price = Field(
        ...,
        description="Monetary cost of the item, a positive amount with at most 2 decimals",
        examples=[49.99],
    )

    description: str | None = Field(
        default=None,
        max_length=500,
        description="Optional descriptive text",
        examples=["A finely crafted steel blade."],
    )


class ItemUpdate(BaseModel):
    """
    Schema for partially updating an item.

    Only the fields present in the request body are applied. An empty body
    is rejected.

    Example:
        {"price": 39.99}
    """

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str | None = Field(default=None, min_length=1, max_length=120)
    price: Price | None = Field(default=None)
    description: str | None = Field(default=None, max_length=500)

    @model_validator(mode="after")
    def _require_one_field(self) -> "ItemUpdate":
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided for update.")
        if "name" in self.model_fields_set and self.name is None:
            raise ValueError("name cannot be null.")
        if "price" in self.model_fields_set and self.price is None:
            raise ValueError("price cannot be null.")
        return self

    def changes(self) -> dict:
        """Fields the client actually sent."""
        return self.model_dump(exclude_unset=True)


class ItemResponse(BaseModel):
    """
    Schema for returning a single item.

    Example:
        {
            "id": "A1b2C3d4E5f6G7h8",
            "name": "Iron Sword",
            "price": 49.99,
            "description": "A finely crafted steel blade.",
            "created_at": "2025-11-17T01:59:41.061333Z",
            "updated_at": "2025-11-17T01:59:41.061333Z"
        }
    """

    id: str = Field(..., pattern=ID_PATTERN, description="Unique 16-character identifier")
    name: str = Field(..., min_length=1, max_length=120)
    price: float = Field(..., gt=0)
    description: str | None = Field(default=None, max_length=500)
    created_at: datetime = Field(..., description="When the item was created")
    updated_at: datetime = Field(..., description="When the item was last modified")


class ItemListResponse(BaseModel):
    """Paginated list of items."""

    data: list[ItemResponse] = Field(default_factory=list)
    total: int = Field(..., ge=0, examples=[42])
    page: int = Field(..., ge=1, examples=[1])
    limit: int = Field(..., ge=1, examples=[25])


class ItemListQuery(PaginationQuery):
    """
    Query parameters for GET /items.

    Example:
        GET /api/v1/items?search=sword&sort=price&order=desc&min_price=10&max_price=100
    """

    sort: ItemSortField = Field(
        default=ItemSortField.PRICE,
        description="Field used to sort the result set",
    )

    min_price: float | None = Field(
        default=None,
        gt=0,
        description="Minimum price (inclusive)",
        examples=[10],
    )

    max_price: float | None = Field(
        default=None,
        gt=0,
        description="Maximum price (inclusive)",
        examples=[100],
    )

    @model_validator(mode="after")
    def _check_price_range(self) -> "ItemListQuery":
        if (
            self.min_price is not None
            and self.max_price is not None
            and self.min_price > self.max_price
        ):
            raise ValueError("min_price cannot be greater than max_price")
        return self
