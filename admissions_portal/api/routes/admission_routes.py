"""
Admission Selection Routes

GET /admissions/selection - Admitted offers awaiting a choice
POST /admissions/selection - Keep one offer, decline the rest
"""

from fastapi import APIRouter, Depends

from admissions_portal.core.auth import get_current_student
from admissions_portal.services import PortalServices, get_services
from admissions_portal.schemas.schemas import (
    AdmissionOffersResponse, AdmissionSelectionRequest, AdmissionSelectionResponse
)

router = APIRouter(prefix="/admissions", tags=["Admissions"])


@router.get("/selection", response_model=AdmissionOffersResponse)
def pending_selection(
    student: dict = Depends(get_current_student),
    services: PortalServices = Depends(get_services),
):
    """Offers to choose from. selection_required is false with fewer than two."""
    offers = services.admissions.pending_selection(student["student_id"])
    return AdmissionOffersResponse(selection_required=bool(offers), offers=offers)


@router.post("/selection", response_model=AdmissionSelectionResponse)
def select_admission(
    data: AdmissionSelectionRequest,
    student: dict = Depends(get_current_student),
    services: PortalServices = Depends(get_services),
):
    """Accept the chosen offer; every other admitted offer is declined in the same step."""
    result = services.admissions.reconcile(student["student_id"], data.application_id)
    return AdmissionSelectionResponse(accepted=result.accepted, declined=result.declined)
