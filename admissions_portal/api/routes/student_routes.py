"""
Student Routes

GET /students/profile - Get own profile
PUT /students/profile - Update profile (only provided fields)
"""

from fastapi import APIRouter, Depends, HTTPException

from admissions_portal.core.auth import get_current_student
from admissions_portal.models import StudentProfile
from admissions_portal.services import PortalServices, get_services
from admissions_portal.schemas.schemas import StudentProfileUpdate

router = APIRouter(prefix="/students", tags=["Students"])


@router.get("/profile", response_model=StudentProfile)
def get_profile(
    student: dict = Depends(get_current_student),
    services: PortalServices = Depends(get_services),
):
    """Get current student's profile. Empty until the student saves it."""
    return services.profiles.get(student["student_id"])


@router.put("/profile", response_model=StudentProfile)
def update_profile(
    data: StudentProfileUpdate,
    student: dict = Depends(get_current_student),
    services: PortalServices = Depends(get_services),
):
    """Update student profile. Only provided fields are updated."""
    changes = data.model_dump(exclude_none=True)
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")
    return services.profiles.update(student["student_id"], changes)
