"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
Entity payloads reuse the domain models from admissions_portal.models.
"""

from datetime import date

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional

from admissions_portal.models import (
    Application,
    ApplicationStatus,
    Course,
    Document,
    Institution,
    Job,
    Notification,
)


# ============================================================
# CATALOG SCHEMAS
# ============================================================

class CourseListResponse(BaseModel):
    courses: List[Course]
    faculties: List[str] = []
    total: int


class InstitutionListResponse(BaseModel):
    institutions: List[Institution]


class JobListResponse(BaseModel):
    jobs: List[Job]
    total: int


# ============================================================
# STUDENT PROFILE SCHEMAS
# ============================================================

class StudentProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    phone: Optional[str] = None
    high_school: Optional[str] = None
    graduation_year: Optional[int] = Field(None, ge=1950, le=2100)
    address: Optional[str] = None
    date_of_birth: Optional[date] = None


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class ApplicationCreate(BaseModel):
    course_id: str = Field(..., min_length=1)


class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatus


class ApplicationListResponse(BaseModel):
    applications: List[Application]
    total: int


class QuotaEntry(BaseModel):
    count: int
    limit: int
    can_apply: bool


class QuotaResponse(BaseModel):
    institutions: Dict[str, QuotaEntry]


class StatusUpdateResponse(BaseModel):
    application: Application
    selection_required: bool = False
    admitted_offers: List[Application] = []


# ============================================================
# ADMISSION SELECTION SCHEMAS
# ============================================================

class AdmissionSelectionRequest(BaseModel):
    application_id: str = Field(..., min_length=1)


class AdmissionOffersResponse(BaseModel):
    selection_required: bool
    offers: List[Application]


class AdmissionSelectionResponse(BaseModel):
    accepted: Application
    declined: List[Application] = []
    message: str = "Admission selection confirmed! You have been enrolled in your chosen program."


# ============================================================
# NOTIFICATION SCHEMAS
# ============================================================

class NotificationListResponse(BaseModel):
    notifications: List[Notification]
    unread_count: int


class UnreadCountResponse(BaseModel):
    unread_count: int


# ============================================================
# DOCUMENT SCHEMAS
# ============================================================

class DocumentListResponse(BaseModel):
    documents: List[Document]


class DocumentTypeOption(BaseModel):
    value: str
    label: str


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True


class ErrorResponse(BaseModel):
    error: str
    detail: str
    context: Optional[Dict[str, Any]] = None


ERROR_RESPONSES = {
    403: {"model": ErrorResponse, "description": "Not allowed for this user"},
    404: {"model": ErrorResponse, "description": "Record not found"},
    409: {"model": ErrorResponse, "description": "Conflicts with the current application state"},
    422: {"model": ErrorResponse, "description": "Eligibility or validation failure"},
    503: {"model": ErrorResponse, "description": "Data store unavailable, retry later"},
}
