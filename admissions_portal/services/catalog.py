"""
Catalog - read-only access to institutions, courses and job postings.

Institutions and employers own these records; the portal never writes them.
"""

from typing import List, Optional

from admissions_portal.core.errors import NotFound
from admissions_portal.db import COLLECTIONS, DocumentStore, get_document_store
from admissions_portal.models import Course, Institution, Job


class CatalogService:

    def __init__(self, store: DocumentStore = None, timeout: float = None):
        self.store = store or get_document_store()
        self.timeout = timeout

    def get_course(self, course_id: str, timeout: float = None) -> Course:
        doc = self.store.get(COLLECTIONS["courses"], course_id, self._timeout(timeout))
        if doc is None:
            raise NotFound("Course not found")
        return Course.model_validate(doc)

    def list_courses(self, institution_id: Optional[str] = None,
                     faculty: Optional[str] = None, timeout: float = None) -> List[Course]:
        """Active courses, optionally filtered like the browse panel."""
        filters = {"status": "active"}
        if institution_id:
            filters["institution_id"] = institution_id
        if faculty:
            filters["faculty_name"] = faculty
        docs = self.store.query(COLLECTIONS["courses"], filters, sort=[("name", 1)],
                                timeout=self._timeout(timeout))
        return [Course.model_validate(d) for d in docs]

    def list_faculties(self, timeout: float = None) -> List[str]:
        return sorted({c.faculty_name for c in self.list_courses(timeout=timeout) if c.faculty_name})

    def get_institution(self, institution_id: str, timeout: float = None) -> Institution:
        doc = self.store.get(COLLECTIONS["institutions"], institution_id, self._timeout(timeout))
        if doc is None:
            raise NotFound("Institution not found")
        return Institution.model_validate(doc)

    def list_institutions(self, timeout: float = None) -> List[Institution]:
        docs = self.store.query(COLLECTIONS["institutions"], sort=[("name", 1)],
                                timeout=self._timeout(timeout))
        return [Institution.model_validate(d) for d in docs]

    def list_jobs(self, timeout: float = None) -> List[Job]:
        """Active postings, newest first."""
        docs = self.store.query(COLLECTIONS["jobs"], {"status": "active"},
                                sort=[("created_at", -1)], timeout=self._timeout(timeout))
        return [Job.model_validate(d) for d in docs]

    def _timeout(self, timeout: Optional[float]) -> Optional[float]:
        return self.timeout if timeout is None else timeout
