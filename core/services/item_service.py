# =============================================================================
# core/services/item_service.py - Item Business Logic
# =============================================================================
# Handles item CRUD operations against the database.
# Separates HTTP concerns from database/business logic: methods return ORM
# entities (or None when a row does not exist) and the HTTP layer decides
# what a missing row means.
# =============================================================================

import logging
from decimal import Decimal
from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.sql import Select

from core.entities.item import ItemEntity
from core.models.item import ItemListQuery, ItemSortField
from core.models.pagination import ListPage, SortOrder
from lib.database import DatabaseClient

logger = logging.getLogger(__name__)

_SORT_COLUMNS = {
    ItemSortField.NAME: ItemEntity.name,
    ItemSortField.PRICE: ItemEntity.price,
    ItemSortField.CREATED_AT: ItemEntity.created_at,
}

_WRITABLE_FIELDS = ("name", "price", "description")


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _to_column_values(data: dict[str, Any]) -> dict[str, Any]:
    values = {key: data[key] for key in _WRITABLE_FIELDS if key in data}
    if values.get("price") is not None:
        values["price"] = Decimal(str(values["price"]))
    return values


class ItemService:
    """
    Service for item management operations.

    Provides a clean interface between API routes and database.

    Example:
        service = ItemService(db)
        item = service.create({"name": "Iron Sword", "price": 49.99})
        page = service.get_many(ItemListQuery(search="sword"))
    """

    def __init__(self, db: DatabaseClient):
        self.db = db

    # -------------------------------------------------------------------------
    # Create
    # -------------------------------------------------------------------------

    def create(self, data: dict[str, Any]) -> ItemEntity:
        """
        Create a new item.

        Args:
            data: Validated writable fields (name, price, description)

        Returns:
            The persisted entity with id and timestamps populated
        """
        with self.db.session() as session:
            item = ItemEntity(**_to_column_values(data))
            session.add(item)
            session.flush()
            session.refresh(item)

        logger.info(f"Created item: {item.id}")
        return item

    # -------------------------------------------------------------------------
    # Read
    # -------------------------------------------------------------------------

    def get_many(self, query: ItemListQuery) -> ListPage[ItemEntity]:
        """
        Return one page of items.

        Search matches name or description (case-insensitive substring).
        Price filters are inclusive. Sorting applies before paging; ties are
        broken by id so pages are stable.

        Args:
            query: Validated pagination, search, sort and filter parameters

        Returns:
            ListPage with the rows for the requested page and the total
            number of rows matching the filters
        """
        statement = self._filtered(select(ItemEntity), query)
        count_statement = self._filtered(select(func.count()).select_from(ItemEntity), query)

        column = _SORT_COLUMNS[query.sort]
        ordering = column.desc() if query.order == SortOrder.DESC else column.asc()
        statement = (
            statement
            .order_by(ordering, ItemEntity.id.asc())
            .offset(query.offset)
            .limit(query.limit)
        )

        with self.db.session() as session:
            total = session.scalar(count_statement) or 0
            items = list(session.scalars(statement))

        return ListPage(items=items, total=total, page=query.page, limit=query.limit)

    @staticmethod
    def _filtered(statement: Select, query: ItemListQuery) -> Select:
        search = (query.search or "").strip()
        if search:
            pattern = f"%{_escape_like(search)}%"
            statement = statement.where(or_(
                ItemEntity.name.ilike(pattern, escape="\\"),
                ItemEntity.description.ilike(pattern, escape="\\"),
            ))

        if query.min_price is not None:
            statement = statement.where(ItemEntity.price >= Decimal(str(query.min_price)))

        if query.max_price is not None:
            statement = statement.where(ItemEntity.price <= Decimal(str(query.max_price)))

        return statement

    def get_by_id(self, item_id: str) -> ItemEntity | None:
        """
        Get an item by ID.

        Returns:
            The entity, or None if no row has this id
        """
        with self.db.session() as session:
            return session.get(ItemEntity, item_id)

    # -------------------------------------------------------------------------
    # Update
    # -------------------------------------------------------------------------

    def update(self, item_id: str, data: dict[str, Any]) -> ItemEntity | None:
        """
        Merge the given fields into an existing item.

        Used by both PATCH (subset of fields) and PUT (all writable fields).

        Returns:
            The reloaded entity, or None if the item does not exist
        """
        with self.db.session() as session:
            item = session.get(ItemEntity, item_id)
            if item is None:
                return None

            for key, value in _to_column_values(data).items():
                setattr(item, key, value)

            session.flush()
            session.refresh(item)

        logger.info(f"Updated item: {item_id} fields={sorted(data)}")
        return item

    # -------------------------------------------------------------------------
    # Delete
    # -------------------------------------------------------------------------

    def remove(self, item_id: str) -> ItemEntity | None:
        """
        Delete an item.

        Returns:
            The removed entity (detached), or None if it did not exist
        """
        with self.db.session() as session:
            item = session.get(ItemEntity, item_id)
            if item is None:
                return None
            session.delete(item)

        logger.info(f"Removed item: {item_id}")
        return item
