# =============================================================================
# app/mappers.py - Entity to Response Mapping
# =============================================================================
# Converts ORM entities into response schemas and validates them on the way
# out. A response that does not match its schema is a server bug, reported
# as OutputValidationError (500) instead of leaking malformed data.
# =============================================================================

from datetime import datetime, timezone
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from app.exceptions import OutputValidationError
from core.entities.item import ItemEntity
from core.models.item import ItemListResponse, ItemResponse
from core.models.pagination import ListPage

ModelT = TypeVar("ModelT", bound=BaseModel)


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo; stored values are always UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def validate_output(model: type[ModelT], data: dict[str, Any]) -> ModelT:
    """
    Build a response model, raising OutputValidationError on failure.

    Example:
        validate_output(ItemResponse, {"id": "bad", ...})
        # OutputValidationError: Response validation failed for ItemResponse
    """
    try:
        return model.model_validate(data)
    except ValidationError as e:
        issues = [
            {
                "loc": ".".join(str(part) for part in error["loc"]),
                "msg": error["msg"],
                "type": error["type"],
            }
            for error in e.errors()
        ]
        raise OutputValidationError(
            f"Response validation failed for {model.__name__}",
            issues=issues,
        ) from e


def to_item_dto(item: ItemEntity) -> ItemResponse:
    return validate_output(ItemResponse, {
        "id": item.id,
        "name": item.name,
        "price": float(item.price),
        "description": item.description,
        "created_at": _as_utc(item.created_at),
        "updated_at": _as_utc(item.updated_at),
    })


def to_item_list_dto(page: ListPage[ItemEntity]) -> ItemListResponse:
    return ItemListResponse(
        data=[to_item_dto(item) for item in page.items],
        total=page.total,
        page=page.page,
        limit=page.limit,
    )
