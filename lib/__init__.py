# =============================================================================
# lib/ - Shared Libraries
# =============================================================================
# Standalone helpers with no dependency on the app or core packages:
# - database.py: SQLAlchemy engine/session wrapper with connect/ping
# - rate_limit_store.py: In-memory and Redis sliding-window stores
# - utils.py: IDs, formatting, uptime and event loop lag
# =============================================================================
