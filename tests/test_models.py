# =============================================================================
# tests/test_models.py - Pydantic Model Tests
# =============================================================================
# Unit tests for the item and pagination schemas to ensure:
# - Valid data is accepted and parsed correctly
# - Invalid data raises ValidationError
# - Default values work as expected
#
# Run with: pytest tests/test_models.py -v
# =============================================================================

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from core.models import (
    ItemCreate,
    ItemListQuery,
    ItemResponse,
    ItemSortField,
    ItemUpdate,
    SortOrder,
)


# =============================================================================
# Item Input Models
# =============================================================================

class TestItemCreate:
    """Tests for ItemCreate model."""

    def test_valid_item(self, sample_item):
        """Test creating a valid ItemCreate."""
        # Act: Create the model
        item = ItemCreate(**sample_item)

        # Assert: Values are correct
        assert item.name == "Iron Sword"
        assert item.price == Decimal("49.99")
        assert item.description == "A finely crafted steel blade."

    def test_description_is_optional(self):
        item = ItemCreate(name="Shield", price=10)
        assert item.description is None

    def test_name_is_stripped(self):
        item = ItemCreate(name="  Shield  ", price=10)
        assert item.name == "Shield"

    def test_blank_name_rejected(self):
        """Whitespace-only names strip to empty and fail min_length."""
        with pytest.raises(ValidationError):
            ItemCreate(name="   ", price=10)

    def test_name_too_long_rejected(self):
        with pytest.raises(ValidationError):
            ItemCreate(name="x" * 121, price=10)

    @pytest.mark.parametrize("price", [0, -1, -0.01])
    def test_non_positive_price_rejected(self, price):
        with pytest.raises(ValidationError):
            ItemCreate(name="Shield", price=price)

    @pytest.mark.parametrize("price", [0.001, 49.999, "1.005"])
    def test_sub_cent_price_rejected(self, price):
        """Prices are stored as decimal(10, 2); fractions of a cent are refused."""
        with pytest.raises(ValidationError):
            ItemCreate(name="Shield", price=price)

    @pytest.mark.parametrize("price", [1e12, 100_000_000])
    def test_price_over_ten_digits_rejected(self, price):
        with pytest.raises(ValidationError):
            ItemCreate(name="Shield", price=price)

    def test_largest_storable_price(self):
        item = ItemCreate(name="Crown", price="99999999.99")
        assert item.price == Decimal("99999999.99")

    def test_description_too_long_rejected(self):
        with pytest.raises(ValidationError):
            ItemCreate(name="Shield", price=10, description="x" * 501)

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            ItemCreate(name="Shield", price=10, color="red")


class TestItemUpdate:
    """Tests for ItemUpdate model."""

    def test_single_field(self):
        update = ItemUpdate(price=39.99)
        assert update.changes() == {"price": Decimal("39.99")}

    def test_empty_update_rejected(self):
        """At least one field must be sent."""
        with pytest.raises(ValidationError) as exc_info:
            ItemUpdate()

        assert "At least one field must be provided for update." in str(exc_info.value)

    def test_sub_cent_price_rejected(self):
        with pytest.raises(ValidationError):
            ItemUpdate(price=0.001)

    def test_null_name_rejected(self):
        with pytest.raises(ValidationError):
            ItemUpdate(name=None)

    def test_null_description_clears(self):
        """description may be explicitly cleared."""
        update = ItemUpdate(description=None)
        assert update.changes() == {"description": None}


# =============================================================================
# Item Output Models
# =============================================================================

class TestItemResponse:
    """Tests for ItemResponse model."""

    def test_valid_response(self):
        now = datetime.now(timezone.utc)
        response = ItemResponse(
            id="A1b2C3d4E5f6G7h8",
            name="Iron Sword",
            price=49.99,
            created_at=now,
            updated_at=now,
        )
        assert response.description is None

    def test_malformed_id_rejected(self):
        now = datetime.now(timezone.utc)
        with pytest.raises(ValidationError):
            ItemResponse(id="not-an-id", name="x", price=1, created_at=now, updated_at=now)


# =============================================================================
# List Query
# =============================================================================

class TestItemListQuery:
    """Tests for ItemListQuery model."""

    def test_defaults(self):
        query = ItemListQuery()

        assert query.page == 1
        assert query.limit == 25
        assert query.search is None
        assert query.sort == ItemSortField.PRICE
        assert query.order == SortOrder.ASC
        assert query.offset == 0

    def test_offset(self):
        assert ItemListQuery(page=3, limit=10).offset == 20

    @pytest.mark.parametrize("limit", [0, 101])
    def test_limit_bounds(self, limit):
        with pytest.raises(ValidationError):
            ItemListQuery(limit=limit)

    def test_page_must_be_positive(self):
        with pytest.raises(ValidationError):
            ItemListQuery(page=0)

    def test_price_range_rejected_when_inverted(self):
        with pytest.raises(ValidationError) as exc_info:
            ItemListQuery(min_price=50, max_price=10)

        assert "min_price cannot be greater than max_price" in str(exc_info.value)

    def test_equal_price_bounds_allowed(self):
        query = ItemListQuery(min_price=10, max_price=10)
        assert query.min_price == query.max_price

    def test_unknown_sort_field_rejected(self):
        with pytest.raises(ValidationError):
            ItemListQuery(sort="color")
