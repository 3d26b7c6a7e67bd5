"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from admissions_portal.api.routes.catalog_routes import router as catalog_router
from admissions_portal.api.routes.application_routes import router as application_router
from admissions_portal.api.routes.admission_routes import router as admission_router
from admissions_portal.api.routes.institution_routes import router as institution_router
from admissions_portal.api.routes.notification_routes import router as notification_router
from admissions_portal.api.routes.document_routes import router as document_router
from admissions_portal.api.routes.student_routes import router as student_router
from admissions_portal.schemas.schemas import ERROR_RESPONSES

# Main API router; every route documents the shared error payload
api_router = APIRouter(responses=ERROR_RESPONSES)

# Include all sub-routers
api_router.include_router(catalog_router)
api_router.include_router(application_router)
api_router.include_router(admission_router)
api_router.include_router(institution_router)
api_router.include_router(notification_router)
api_router.include_router(document_router)
api_router.include_router(student_router)
