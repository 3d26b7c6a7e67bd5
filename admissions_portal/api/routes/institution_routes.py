"""
Institution Review Routes

The review UI lives elsewhere; these endpoints are where its decisions
arrive.

GET /institutions/me/applications - Applications to my institution
PUT /institutions/me/applications/{application_id}/status - Admit or reject
"""

from fastapi import APIRouter, Depends, Query
from typing import Optional

from admissions_portal.core.auth import get_current_institution
from admissions_portal.models import ApplicationStatus
from admissions_portal.services import PortalServices, get_services
from admissions_portal.schemas.schemas import (
    ApplicationListResponse, ApplicationStatusUpdate, StatusUpdateResponse
)

router = APIRouter(prefix="/institutions/me", tags=["Institution Review"])


@router.get("/applications", response_model=ApplicationListResponse)
def list_institution_applications(
    status: Optional[ApplicationStatus] = Query(None),
    institution: dict = Depends(get_current_institution),
    services: PortalServices = Depends(get_services),
):
    applications = services.applications.list_by_institution(institution["institution_id"], status)
    return ApplicationListResponse(applications=applications, total=len(applications))


@router.put("/applications/{application_id}/status", response_model=StatusUpdateResponse)
def review_application(
    application_id: str,
    update: ApplicationStatusUpdate,
    institution: dict = Depends(get_current_institution),
    services: PortalServices = Depends(get_services),
):
    """Record a review decision (admitted or rejected)."""
    result = services.applications.update_status(
        application_id, update.status, institution_id=institution["institution_id"]
    )
    return StatusUpdateResponse(**result.model_dump())
