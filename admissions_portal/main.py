"""
Admissions Portal - Main Application

FastAPI backend with:
- MongoDB document store (applications, documents, notifications)
- Transactional admission lifecycle engine
- JWT identity from the external identity service

Run: uvicorn admissions_portal.main:app --reload
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from admissions_portal.api.routes import api_router
from admissions_portal.core.config import get_settings
from admissions_portal.core.errors import PortalError
from admissions_portal.core.logging import configure_logging
from admissions_portal.db import get_document_store

logger = logging.getLogger(__name__)


async def portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
    """Each error kind gets its own status code and message."""
    if exc.retryable:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Admissions Portal",
        description="""
        Student-facing admissions portal.

        ## Features
        - **Courses**: Browse institutions and courses
        - **Applications**: Apply (max 2 courses per institution), track status
        - **Admissions**: Choose one offer when several institutions admit you
        - **Documents**: Upload transcripts and certificates
        - **Notifications**: Status-change notifications with read tracking
        """,
        version="1.0.0",
        debug=settings.debug,
        docs_url="/docs",
        redoc_url="/redoc"
    )

    # CORS middleware (allow all for development)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(PortalError, portal_error_handler)

    # Include API routes
    app.include_router(api_router, prefix="/api")

    @app.on_event("startup")
    def startup_event():
        """Initialize MongoDB indexes on startup."""
        if settings.store_backend != "mongo":
            return
        from pymongo.errors import PyMongoError
        from admissions_portal.db.mongodb import init_mongo_indexes
        try:
            init_mongo_indexes()
        except PyMongoError as e:
            # The API still starts; store calls will report STORE_UNAVAILABLE
            logger.error("MongoDB index initialization failed: %s", e)

    @app.get("/health", tags=["Health"])
    def health_check():
        """Detailed health check."""
        store_ok = get_document_store().ping()
        return {
            "status": "healthy" if store_ok else "degraded",
            "store": settings.store_backend,
            "store_connected": store_ok,
        }

    return app


app = create_app()
