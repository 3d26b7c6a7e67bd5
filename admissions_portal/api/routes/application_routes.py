"""
Application Routes (students)

POST /applications - Apply to a course
GET /applications - My applications, newest first
GET /applications/quota - Applications used per institution (max 2)
GET /applications/summary - Counts per status for the overview panel
POST /applications/{application_id}/accept - Accept a sole admission offer
POST /applications/{application_id}/decline - Decline an admission offer
"""

from fastapi import APIRouter, Depends

from admissions_portal.core.auth import get_current_student
from admissions_portal.models import Application, ApplicationStatus
from admissions_portal.services import PortalServices, get_services
from admissions_portal.schemas.schemas import (
    ApplicationCreate, ApplicationListResponse, QuotaResponse, StatusUpdateResponse
)

router = APIRouter(prefix="/applications", tags=["Applications"])


@router.post("", response_model=Application, status_code=201)
def apply_to_course(
    data: ApplicationCreate,
    student: dict = Depends(get_current_student),
    services: PortalServices = Depends(get_services),
):
    """Apply to a course. Max 2 courses per institution; a transcript or certificate is required."""
    course = services.catalog.get_course(data.course_id)
    return services.applications.submit(student["student_id"], course)


@router.get("", response_model=ApplicationListResponse)
def list_my_applications(
    student: dict = Depends(get_current_student),
    services: PortalServices = Depends(get_services),
):
    """Get all course applications for current student."""
    applications = services.applications.list_by_student(student["student_id"])
    return ApplicationListResponse(applications=applications, total=len(applications))


@router.get("/quota", response_model=QuotaResponse)
def application_quota(
    student: dict = Depends(get_current_student),
    services: PortalServices = Depends(get_services),
):
    """Applications used per institution."""
    return QuotaResponse(institutions=services.applications.quota_status(student["student_id"]))


@router.get("/summary")
def application_summary(
    student: dict = Depends(get_current_student),
    services: PortalServices = Depends(get_services),
):
    """Counts per status plus total."""
    return services.applications.summary(student["student_id"])


@router.post("/{application_id}/accept", response_model=StatusUpdateResponse)
def accept_offer(
    application_id: str,
    student: dict = Depends(get_current_student),
    services: PortalServices = Depends(get_services),
):
    """Accept an admission offer. With several offers use /admissions/selection instead."""
    update = services.applications.update_status(
        application_id, ApplicationStatus.accepted, student_id=student["student_id"]
    )
    return StatusUpdateResponse(**update.model_dump())


@router.post("/{application_id}/decline", response_model=StatusUpdateResponse)
def decline_offer(
    application_id: str,
    student: dict = Depends(get_current_student),
    services: PortalServices = Depends(get_services),
):
    """Decline an admission offer."""
    update = services.applications.update_status(
        application_id, ApplicationStatus.declined, student_id=student["student_id"]
    )
    return StatusUpdateResponse(**update.model_dump())
