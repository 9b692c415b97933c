# =============================================================================
# tests/test_item_service.py - ItemService Tests
# =============================================================================
# Tests item CRUD, search, filtering, sorting and pagination against an
# in-memory SQLite database.
# =============================================================================

from decimal import Decimal

import pytest

from core.models import ItemListQuery


@pytest.fixture
def catalogue(item_service):
    """Five items with distinct names and prices."""
    rows = [
        {"name": "Iron Sword", "price": 49.99, "description": "Steel blade"},
        {"name": "Wooden Shield", "price": 15.00, "description": None},
        {"name": "Health Potion", "price": 5.50, "description": "Restores a sword wound"},
        {"name": "Leather Boots", "price": 25.00, "description": "Light footwear"},
        {"name": "Great Sword", "price": 120.00, "description": "Two-handed"},
    ]
    return [item_service.create(row) for row in rows]


class TestCreate:
    """Tests for ItemService.create()."""

    def test_create_assigns_id_and_timestamps(self, item_service, sample_item):
        # Act
        item = item_service.create(sample_item)

        # Assert
        assert len(item.id) == 16
        assert item.id.isalnum()
        assert item.price == Decimal("49.99")
        assert item.created_at is not None
        assert item.updated_at is not None

    def test_created_item_is_persisted(self, item_service, sample_item):
        item = item_service.create(sample_item)

        fetched = item_service.get_by_id(item.id)

        assert fetched is not None
        assert fetched.name == "Iron Sword"


class TestRead:
    """Tests for get_by_id() and get_many()."""

    def test_get_by_id_missing(self, item_service):
        assert item_service.get_by_id("A" * 16) is None

    def test_default_sort_is_price_ascending(self, item_service, catalogue):
        page = item_service.get_many(ItemListQuery())

        prices = [item.price for item in page.items]
        assert prices == sorted(prices)
        assert page.total == 5

    def test_sort_by_name_descending(self, item_service, catalogue):
        page = item_service.get_many(ItemListQuery(sort="name", order="desc"))

        names = [item.name for item in page.items]
        assert names == sorted(names, reverse=True)

    def test_search_matches_name_or_description(self, item_service, catalogue):
        """'sword' is in two names and one description."""
        page = item_service.get_many(ItemListQuery(search="SWORD"))

        assert page.total == 3
        assert {item.name for item in page.items} == {
            "Iron Sword",
            "Great Sword",
            "Health Potion",
        }

    def test_search_combined_with_price_filter(self, item_service, catalogue):
        """Price filters apply to every search match."""
        page = item_service.get_many(ItemListQuery(search="sword", max_price=50))

        assert {item.name for item in page.items} == {"Iron Sword", "Health Potion"}

    def test_price_filters_are_inclusive(self, item_service, catalogue):
        page = item_service.get_many(ItemListQuery(min_price=15, max_price=49.99))

        assert {item.name for item in page.items} == {
            "Wooden Shield",
            "Leather Boots",
            "Iron Sword",
        }

    def test_search_wildcards_are_literal(self, item_service, catalogue):
        item_service.create({"name": "100% Cotton Tunic", "price": 12})

        page = item_service.get_many(ItemListQuery(search="%"))

        assert [item.name for item in page.items] == ["100% Cotton Tunic"]

    def test_pagination(self, item_service, catalogue):
        first = item_service.get_many(ItemListQuery(page=1, limit=2))
        third = item_service.get_many(ItemListQuery(page=3, limit=2))

        assert len(first.items) == 2
        assert len(third.items) == 1
        assert first.total == third.total == 5
        assert third.page == 3
        assert third.limit == 2

    def test_page_past_the_end_is_empty(self, item_service, catalogue):
        page = item_service.get_many(ItemListQuery(page=10, limit=25))

        assert page.items == []
        assert page.total == 5


class TestUpdate:
    """Tests for ItemService.update()."""

    def test_partial_update(self, item_service, sample_item):
        item = item_service.create(sample_item)

        updated = item_service.update(item.id, {"price": 39.99})

        assert updated.price == Decimal("39.99")
        assert updated.name == "Iron Sword"
        assert updated.description == "A finely crafted steel blade."

    def test_update_can_clear_description(self, item_service, sample_item):
        item = item_service.create(sample_item)

        updated = item_service.update(item.id, {"description": None})

        assert updated.description is None

    def test_update_missing_returns_none(self, item_service):
        assert item_service.update("A" * 16, {"price": 1}) is None


class TestRemove:
    """Tests for ItemService.remove()."""

    def test_remove_returns_deleted_item(self, item_service, sample_item):
        item = item_service.create(sample_item)

        removed = item_service.remove(item.id)

        assert removed.id == item.id
        assert removed.name == "Iron Sword"
        assert item_service.get_by_id(item.id) is None

    def test_remove_missing_returns_none(self, item_service):
        assert item_service.remove("A" * 16) is None
