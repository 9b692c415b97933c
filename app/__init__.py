# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# This package contains the FastAPI web application:
# - main.py: App factory, middleware stack, lifespan
# - server.py: uvicorn entry point (python -m app.server)
# - config.py: Environment variable loading and settings
# - middleware/: HTTP hardening middleware
# - routers/: API endpoint definitions organized by feature
#
# The app layer is thin - it handles HTTP concerns and delegates
# business logic to the core/ package.
# =============================================================================
