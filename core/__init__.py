# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains framework-agnostic business logic:
# - entities/: SQLAlchemy ORM entities
# - models/: Pydantic schemas for data validation
# - services/: Business operations on top of the database client
# - lifecycle.py: Service startup/shutdown coordination
#
# Code in this package should NOT import from FastAPI.
# This keeps the logic testable and reusable.
# =============================================================================
