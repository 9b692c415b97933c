# =============================================================================
# app/routers/items.py - Item CRUD Endpoints
# =============================================================================
# Mounted at /api/v1/items:
# - POST   /        create an item (201)
# - GET    /        paginated, searchable, sortable list
# - GET    /{id}    fetch one item
# - PATCH  /{id}    partial update
# - PUT    /{id}    replace all writable fields
# - DELETE /{id}    delete and return the removed item
#
# Handlers are plain functions: ItemService uses blocking SQLAlchemy
# sessions, so FastAPI runs them in its threadpool.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Path, Query, status

from app.dependencies import ItemServiceDep
from app.exceptions import NotFoundError
from app.mappers import to_item_dto, to_item_list_dto
from core.entities.item import ItemEntity
from core.models.item import (
    ItemCreate,
    ItemListQuery,
    ItemListResponse,
    ItemResponse,
    ItemUpdate,
)
from core.models.system import ErrorResponse
from lib.utils import ID_PATTERN

logger = logging.getLogger(__name__)

router = APIRouter(
    responses={
        400: {"model": ErrorResponse, "description": "Validation failed"},
        500: {"model": ErrorResponse, "description": "Internal error"},
    },
)

ItemId = Annotated[
    str,
    Path(pattern=ID_PATTERN, description="16-character alphanumeric item ID"),
]

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Item not found"}}


def _found(item: ItemEntity | None) -> ItemEntity:
    if item is None:
        raise NotFoundError("No item exists with the provided identifier.")
    return item


# =============================================================================
# Endpoints
# =============================================================================

@router.post("", response_model=ItemResponse, status_code=status.HTTP_201_CREATED)
def create_item(body: ItemCreate, service: ItemServiceDep):
    """
    Create a new item.

    Returns the stored item with its generated id and timestamps.
    """
    item = service.create(body.model_dump())
    return to_item_dto(item)


@router.get("", response_model=ItemListResponse)
def list_items(
    query: Annotated[ItemListQuery, Query()],
    service: ItemServiceDep,
):
    """
    List items.

    Supports:
    - page / limit pagination (limit capped at 100)
    - search across name and description (case-insensitive)
    - sort by name, price or created_at, in asc or desc order
    - inclusive min_price / max_price filters
    """
    page = service.get_many(query)
    return to_item_list_dto(page)


@router.get("/{item_id}", response_model=ItemResponse, responses=_NOT_FOUND)
def get_item(item_id: ItemId, service: ItemServiceDep):
    """Get a single item by id."""
    return to_item_dto(_found(service.get_by_id(item_id)))


@router.patch("/{item_id}", response_model=ItemResponse, responses=_NOT_FOUND)
def update_item(item_id: ItemId, body: ItemUpdate, service: ItemServiceDep):
    """
    Partially update an item.

    Only fields present in the body change. At least one field is required.
    """
    return to_item_dto(_found(service.update(item_id, body.changes())))


@router.put("/{item_id}", response_model=ItemResponse, responses=_NOT_FOUND)
def replace_item(item_id: ItemId, body: ItemCreate, service: ItemServiceDep):
    """
    Replace an item.

    Every writable field is overwritten; an omitted description is cleared.
    """
    return to_item_dto(_found(service.update(item_id, body.model_dump())))


@router.delete("/{item_id}", response_model=ItemResponse, responses=_NOT_FOUND)
def delete_item(item_id: ItemId, service: ItemServiceDep):
    """Delete an item and return it."""
    return to_item_dto(_found(service.remove(item_id)))
