# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the QuickAPI service:
# - test_models.py: Pydantic model validation
# - test_item_service.py: Item CRUD, search and paging on SQLite
# - test_items_api.py / test_system_api.py: Endpoints through the full stack
# - test_middleware.py: Each hardening middleware in isolation
# - test_lifecycle.py, test_rate_limit_store.py, test_config.py,
#   test_exceptions.py, test_utils.py: Supporting modules
#
# Run tests with: pytest
# =============================================================================
