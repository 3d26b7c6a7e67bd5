"""
Domain entities returned by the services.

Stored records use the same snake_case field names, so a record dict from
the document store validates straight into these models.
"""

from datetime import date, datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ============================================================
# ENUMS
# ============================================================

class ApplicationStatus(str, Enum):
    pending = "pending"
    admitted = "admitted"
    accepted = "accepted"
    declined = "declined"
    rejected = "rejected"


class DocumentStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class DocumentType(str, Enum):
    high_school_transcript = "high_school_transcript"
    birth_certificate = "birth_certificate"
    id_copy = "id_copy"
    academic_transcript = "academic_transcript"
    degree_certificate = "degree_certificate"
    professional_certificate = "professional_certificate"
    certificate = "certificate"
    other = "other"


DOCUMENT_TYPE_LABELS = {
    DocumentType.high_school_transcript: "High School Transcript",
    DocumentType.birth_certificate: "Birth Certificate",
    DocumentType.id_copy: "ID Copy",
    DocumentType.academic_transcript: "Academic Transcript",
    DocumentType.degree_certificate: "Degree Certificate",
    DocumentType.professional_certificate: "Professional Certificate",
    DocumentType.certificate: "Certificate",
    DocumentType.other: "Other Document",
}


# ============================================================
# ENTITIES
# ============================================================

class _Entity(BaseModel):
    model_config = ConfigDict(use_enum_values=False, extra="ignore")


class Institution(_Entity):
    id: str
    name: str
    location: Optional[str] = None


class Course(_Entity):
    id: str
    institution_id: str
    name: str
    faculty_name: Optional[str] = None
    requirements: Optional[str] = None
    capacity: Optional[int] = None
    duration: Optional[str] = None
    status: str = "active"


class Job(_Entity):
    """Job posting, read-only here; employers manage postings elsewhere."""
    id: str
    title: str
    company_name: Optional[str] = None
    department: Optional[str] = None
    type: Optional[str] = None
    location: Optional[str] = None
    salary: Optional[str] = None
    description: Optional[str] = None
    requirements: Optional[str] = None
    qualifications: Optional[str] = None
    deadline: Optional[datetime] = None
    status: str = "active"
    created_at: Optional[datetime] = None


class StudentProfile(_Entity):
    id: str
    name: Optional[str] = None
    phone: Optional[str] = None
    high_school: Optional[str] = None
    graduation_year: Optional[int] = None
    address: Optional[str] = None
    date_of_birth: Optional[date] = None
    updated_at: Optional[datetime] = None


class Application(_Entity):
    id: str
    student_id: str
    institution_id: str
    course_id: str
    course_name: Optional[str] = None
    status: ApplicationStatus
    applied_at: datetime
    updated_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    accepted_at: Optional[datetime] = None
    declined_at: Optional[datetime] = None


class Document(_Entity):
    id: str
    student_id: str
    type: DocumentType
    status: DocumentStatus = DocumentStatus.pending
    file_name: Optional[str] = None
    storage_ref: Optional[str] = None
    uploaded_at: datetime


class Notification(_Entity):
    id: str
    user_id: str
    message: str
    read: bool = False
    created_at: datetime
    read_at: Optional[datetime] = None
    event_key: Optional[str] = None
    application_id: Optional[str] = None


# ============================================================
# OPERATION RESULTS
# ============================================================

class StatusUpdate(_Entity):
    """Outcome of ApplicationStore.update_status."""
    application: Application
    selection_required: bool = False
    admitted_offers: List[Application] = []


class ReconciliationResult(_Entity):
    accepted: Application
    declined: List[Application] = []
