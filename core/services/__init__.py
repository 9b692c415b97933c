# =============================================================================
# core/services/ - Business Logic Services
# =============================================================================
# - item_service.py: Item CRUD, search, sorting and pagination
# =============================================================================

from .item_service import ItemService

__all__ = ["ItemService"]
