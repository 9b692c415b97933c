# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up test environment variables before any imports
# - Builds isolated apps backed by in-memory SQLite
# - Provides common fixtures for testing
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# app.main builds a module-level app from the environment on import

os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_LEVEL"] = "debug"
os.environ.pop("RATE_LIMIT_REDIS_URL", None)

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.main import create_app
from core.services.item_service import ItemService
from lib.database import DatabaseClient


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def make_settings():
    """Factory for Settings that ignores any local .env file."""

    def _make(**overrides) -> Settings:
        values = {"ENVIRONMENT": "test", "DATABASE_URL": "sqlite://"}
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def settings(make_settings):
    return make_settings()


@pytest.fixture
def client(settings):
    """TestClient with lifespan started (database connected, app ready)."""
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def db():
    """Connected in-memory database."""
    database = DatabaseClient("sqlite://")
    database.connect()
    yield database
    database.disconnect()


@pytest.fixture
def item_service(db):
    return ItemService(db)


@pytest.fixture
def sample_item():
    """Valid create payload."""
    return {
        "name": "Iron Sword",
        "price": 49.99,
        "description": "A finely crafted steel blade.",
    }


@pytest.fixture
def created_item(client, sample_item):
    """An item created through the API."""
    response = client.post("/api/v1/items", json=sample_item)
    assert response.status_code == 201
    return response.json()
