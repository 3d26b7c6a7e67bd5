# tests/conftest.py
"""
Pytest configuration and fixtures.

Everything runs on MemoryDocumentStore, so no MongoDB is needed.
"""

import os
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

# Must be set before settings are first read
os.environ.setdefault("STORE_BACKEND", "memory")

from admissions_portal.db import COLLECTIONS, MemoryDocumentStore  # noqa: E402
from admissions_portal.models import DocumentType  # noqa: E402
from admissions_portal.services import PortalServices  # noqa: E402
from admissions_portal.services.file_storage import LocalFileStorage  # noqa: E402

INSTITUTIONS = {
    "i1": "National University",
    "i2": "Polytechnic College",
}

COURSES = [
    ("c1", "i1", "BSc Computer Science", "Science"),
    ("c2", "i1", "BSc Mathematics", "Science"),
    ("c3", "i1", "BA History", "Humanities"),
    ("c4", "i2", "Diploma in Engineering", "Engineering"),
    ("c5", "i2", "Diploma in Accounting", "Business"),
]

JOBS = [
    ("j1", "Junior Developer", "TechCorp", "active", datetime(2026, 2, 1, tzinfo=timezone.utc)),
    ("j2", "Accounts Clerk", "LeBank", "active", datetime(2026, 3, 1, tzinfo=timezone.utc)),
    ("j3", "Lab Assistant", "BioLab", "closed", datetime(2026, 4, 1, tzinfo=timezone.utc)),
]


def seed_catalog(store):
    for institution_id, name in INSTITUTIONS.items():
        store.put(COLLECTIONS["institutions"], institution_id, {"name": name, "location": "Maseru"})
    for course_id, institution_id, name, faculty in COURSES:
        store.put(COLLECTIONS["courses"], course_id, {
            "institution_id": institution_id,
            "name": name,
            "faculty_name": faculty,
            "requirements": "High school transcript",
            "capacity": 30,
            "duration": "4 years",
            "status": "active",
        })
    for job_id, title, company, status, created_at in JOBS:
        store.put(COLLECTIONS["jobs"], job_id, {
            "title": title,
            "company_name": company,
            "location": "Maseru",
            "status": status,
            "created_at": created_at,
        })


@pytest.fixture
def store():
    memory = MemoryDocumentStore(default_timeout=2.0)
    seed_catalog(memory)
    return memory


@pytest.fixture
def services(store, tmp_path):
    return PortalServices(store, LocalFileStorage(str(tmp_path / "uploads")))


@pytest.fixture
def eligible_student(services):
    """Student s1 with a high school transcript on file."""
    services.documents.upload("s1", DocumentType.high_school_transcript, "s1/transcript.pdf", "transcript.pdf")
    return "s1"


@pytest.fixture
def make_eligible(services):
    def _make(student_id):
        services.documents.upload(student_id, DocumentType.certificate, f"{student_id}/cert.pdf", "cert.pdf")
        return student_id
    return _make


@pytest.fixture
def admit(services):
    """Submit to a course and have the institution admit it."""
    def _admit(student_id, course_id):
        course = services.catalog.get_course(course_id)
        app = services.applications.submit(student_id, course)
        return services.applications.update_status(app.id, "admitted", institution_id=course.institution_id)
    return _admit
