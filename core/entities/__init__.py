# =============================================================================
# core/entities/ - ORM Entities
# =============================================================================
# SQLAlchemy mapped classes. Importing this package registers every entity
# on lib.database.Base so DatabaseClient.connect() creates their tables.
# =============================================================================

from .item import ItemEntity

__all__ = [
    "ItemEntity",
]
