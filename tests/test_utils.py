# =============================================================================
# tests/test_utils.py - Shared Utility Tests
# =============================================================================
# Tests for lib.utils helpers, request id handling in app.context, and
# output validation in app.mappers.
# =============================================================================

import asyncio
import re
from datetime import datetime
from decimal import Decimal

import pytest

from app import context
from app.exceptions import OutputValidationError
from app.mappers import to_item_dto
from core.entities.item import ItemEntity
from lib.utils import ID_PATTERN, format_bytes, generate_id, get_event_loop_lag, shorten_path


class TestIdentifiers:
    def test_generate_id(self):
        value = generate_id()

        assert len(value) == 16
        assert re.match(ID_PATTERN, value)

    def test_ids_differ(self):
        assert generate_id() != generate_id()

    @pytest.mark.parametrize("value", ["short", "A" * 17, "A" * 15 + "-"])
    def test_invalid_ids(self, value):
        assert not re.match(ID_PATTERN, value)


class TestFormatting:
    @pytest.mark.parametrize("size,expected", [
        (10, "10 B"),
        (1536, "1.5 KB"),
        (1_048_576, "1 MB"),
    ])
    def test_format_bytes(self, size, expected):
        assert format_bytes(size) == expected

    def test_shorten_path(self):
        assert shorten_path("/short") == "/short"
        assert shorten_path("/" + "a" * 30, max_length=10) == "/aaaaaaaa…"

    def test_event_loop_lag_is_non_negative(self):
        assert asyncio.run(get_event_loop_lag()) >= 0


class TestRequestContext:
    """Tests for app.context."""

    def test_safe_request_id_reused(self):
        assert context.clean_request_id("abc-123:def.ghi_") != "abc-123:def.ghi_"
        assert context.clean_request_id("trace-123") == "trace-123"

    @pytest.mark.parametrize("value", [None, "", "has space", "x" * 129])
    def test_unsafe_request_id_replaced(self, value):
        assert len(context.clean_request_id(value)) == 16

    def test_context_lifecycle(self):
        data = context.build_context("req-1", "/health", "GET", "127.0.0.1")

        token = context.initialize(data)
        try:
            assert context.get_request_id() == "req-1"
            assert context.get_context().path == "/health"
        finally:
            context.reset(token)

        assert context.get_request_id() is None


class TestItemMapper:
    """Tests for app.mappers.to_item_dto()."""

    def make_entity(self, **overrides) -> ItemEntity:
        values = {
            "id": "A1b2C3d4E5f6G7h8",
            "name": "Iron Sword",
            "price": Decimal("49.99"),
            "description": None,
            "created_at": datetime(2025, 1, 1, 12, 0, 0),
            "updated_at": datetime(2025, 1, 1, 12, 0, 0),
        }
        values.update(overrides)
        return ItemEntity(**values)

    def test_maps_entity(self):
        dto = to_item_dto(self.make_entity())

        assert dto.price == 49.99
        assert dto.created_at.tzinfo is not None

    def test_invalid_entity_raises_output_validation_error(self):
        with pytest.raises(OutputValidationError) as exc_info:
            to_item_dto(self.make_entity(id="bad"))

        assert exc_info.value.status_code == 500
        assert exc_info.value.issues[0]["loc"] == "id"
