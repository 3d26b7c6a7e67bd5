"""
Models module - domain entities shared by services and routes.
"""

from admissions_portal.models.entities import (
    DOCUMENT_TYPE_LABELS,
    Application,
    ApplicationStatus,
    Course,
    Document,
    DocumentStatus,
    DocumentType,
    Institution,
    Job,
    Notification,
    ReconciliationResult,
    StatusUpdate,
    StudentProfile,
    utcnow,
)

__all__ = [
    "DOCUMENT_TYPE_LABELS",
    "Application",
    "ApplicationStatus",
    "Course",
    "Document",
    "DocumentStatus",
    "DocumentType",
    "Institution",
    "Job",
    "Notification",
    "ReconciliationResult",
    "StatusUpdate",
    "StudentProfile",
    "utcnow",
]
