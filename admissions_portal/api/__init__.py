"""
API module - FastAPI routers and endpoint definitions.

Usage:
    from admissions_portal.api import api_router
    app.include_router(api_router, prefix="/api")
"""

from admissions_portal.api.routes import api_router

__all__ = ["api_router"]
