# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
#
# Resources are created once by create_app() and stored on app.state, so
# each app instance (and each test client) has its own database and
# lifecycle.
# =============================================================================

from typing import Annotated

from fastapi import Depends, Request

from app.config import Settings
from core.lifecycle import LifecycleHandler
from core.services.item_service import ItemService
from lib.database import DatabaseClient


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was built with."""
    return request.app.state.settings


def get_db(request: Request) -> DatabaseClient:
    """Get the app's database client."""
    return request.app.state.db


def get_lifecycle(request: Request) -> LifecycleHandler:
    return request.app.state.lifecycle


def get_item_service(db: DatabaseClient = Depends(get_db)) -> ItemService:
    """
    Get an ItemService bound to the app's database.

    Cheap to build; one per request.
    """
    return ItemService(db)


# Type aliases for dependency injection
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
DatabaseDep = Annotated[DatabaseClient, Depends(get_db)]
LifecycleDep = Annotated[LifecycleHandler, Depends(get_lifecycle)]
ItemServiceDep = Annotated[ItemService, Depends(get_item_service)]
