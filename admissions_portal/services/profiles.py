"""
Student profiles - the personal details a student keeps on file.

Accounts themselves belong to the identity service; a student who has
never saved their details gets an empty profile rather than an error.
"""

import logging
from typing import Optional

from admissions_portal.db import COLLECTIONS, DocumentStore, get_document_store
from admissions_portal.models import StudentProfile, utcnow

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("name", "phone", "high_school", "graduation_year", "address", "date_of_birth")


class StudentProfileService:

    def __init__(self, store: DocumentStore = None, timeout: float = None):
        self.store = store or get_document_store()
        self.timeout = timeout
        self.collection = COLLECTIONS["students"]

    def get(self, student_id: str, timeout: float = None) -> StudentProfile:
        doc = self.store.get(self.collection, student_id, self._timeout(timeout))
        if doc is None:
            return StudentProfile(id=student_id)
        return StudentProfile.model_validate(doc)

    def update(self, student_id: str, changes: dict, timeout: float = None) -> StudentProfile:
        """
        Apply the given profile fields and stamp updated_at.

        Unknown keys and None values are ignored, so a partial form only
        touches what it sends.
        """
        timeout = self._timeout(timeout)
        doc = self.store.get(self.collection, student_id, timeout) or {"id": student_id}
        for field in PROFILE_FIELDS:
            value = changes.get(field)
            if value is None:
                continue
            # Stored as ISO text; BSON has no plain date type
            doc[field] = value.isoformat() if field == "date_of_birth" and hasattr(value, "isoformat") else value
        doc["updated_at"] = utcnow()

        profile = StudentProfile.model_validate(doc)
        self.store.put(self.collection, student_id, doc, timeout)
        logger.info("Student %s updated their profile", student_id)
        return profile

    def _timeout(self, timeout: Optional[float]) -> Optional[float]:
        return self.timeout if timeout is None else timeout
