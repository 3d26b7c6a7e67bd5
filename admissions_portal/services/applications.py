"""
Application Store - system of record for course applications.

Lifecycle:
    pending --review--> admitted | rejected
    admitted --student--> accepted | declined
accepted, declined and rejected are terminal.

Every write runs in a transaction scoped to the student, so the quota,
duplicate and single-acceptance checks are made against committed state
at write time, never against a stale list the caller fetched earlier.
"""

import logging
from collections import Counter
from typing import Dict, List, Optional

from admissions_portal.core.errors import (
    AcceptanceConflict,
    DuplicateApplication,
    IneligibleStudent,
    InvalidTransition,
    NotFound,
    QuotaExceeded,
    Unauthorized,
)
from admissions_portal.db import COLLECTIONS, DocumentStore, Transaction, get_document_store, student_lock_key
from admissions_portal.models import Application, ApplicationStatus, Course, StatusUpdate, utcnow
from admissions_portal.services.documents import DocumentRegistry
from admissions_portal.services.eligibility import is_eligible, missing_requirements
from admissions_portal.services.notifications import NotificationService

logger = logging.getLogger(__name__)

MAX_APPLICATIONS_PER_INSTITUTION = 2

LEGAL_TRANSITIONS = {
    ApplicationStatus.pending: {ApplicationStatus.admitted, ApplicationStatus.rejected},
    ApplicationStatus.admitted: {ApplicationStatus.accepted, ApplicationStatus.declined},
}

# Who may set which status
REVIEW_STATUSES = {ApplicationStatus.admitted, ApplicationStatus.rejected}
STUDENT_STATUSES = {ApplicationStatus.accepted, ApplicationStatus.declined}

TIMESTAMP_FIELDS = {
    ApplicationStatus.admitted: "reviewed_at",
    ApplicationStatus.rejected: "reviewed_at",
    ApplicationStatus.accepted: "accepted_at",
    ApplicationStatus.declined: "declined_at",
}


def _with_status(apps: List[dict], status: ApplicationStatus) -> List[dict]:
    return [a for a in apps if a["status"] == status.value]


class ApplicationStore:

    def __init__(self, store: DocumentStore = None, documents: DocumentRegistry = None,
                 notifications: NotificationService = None, timeout: float = None):
        self.store = store or get_document_store()
        self.documents = documents or DocumentRegistry(self.store)
        self.notifications = notifications or NotificationService(self.store)
        self.timeout = timeout
        self.collection = COLLECTIONS["applications"]

    # ============================================================
    # SUBMIT
    # ============================================================

    def submit(self, student_id: str, course: Course, timeout: float = None) -> Application:
        """
        Create a pending application for `course`.

        Only active courses take applications. Checked in order: duplicate
        (same student, institution and course), per-institution quota, then
        document eligibility.
        """
        if course.status != "active":
            raise NotFound("Course not found")

        documents = self.documents.list_by_student(student_id, timeout=self._timeout(timeout))

        def work(tx: Transaction) -> dict:
            existing = tx.query(self.collection, {
                "student_id": student_id,
                "institution_id": course.institution_id,
            })
            if any(a["course_id"] == course.id for a in existing):
                raise DuplicateApplication(f"You have already applied for {course.name}")

            if len(existing) >= MAX_APPLICATIONS_PER_INSTITUTION:
                raise QuotaExceeded(
                    f"You can only apply for a maximum of {MAX_APPLICATIONS_PER_INSTITUTION} courses "
                    f"per institution. You already have {len(existing)} application(s) for this institution.",
                    context={
                        "institution_id": course.institution_id,
                        "count": len(existing),
                        "limit": MAX_APPLICATIONS_PER_INSTITUTION,
                    },
                )

            if not is_eligible(documents, course):
                missing = missing_requirements(documents, course)
                raise IneligibleStudent(
                    f"You do not meet the requirements for this course. Missing: {', '.join(missing)}",
                    context={"missing": missing},
                )

            now = utcnow()
            record = {
                "student_id": student_id,
                "institution_id": course.institution_id,
                "course_id": course.id,
                "course_name": course.name,
                "status": ApplicationStatus.pending.value,
                "applied_at": now,
                "updated_at": now,
                "reviewed_at": None,
                "accepted_at": None,
                "declined_at": None,
            }
            record["id"] = tx.insert(self.collection, record)
            return record

        try:
            record = self.store.run_transaction(student_lock_key(student_id), work, self._timeout(timeout))
        except (DuplicateApplication, QuotaExceeded, IneligibleStudent) as e:
            logger.info("Submit rejected for student %s, course %s: %s", student_id, course.id, e.code)
            raise

        logger.info("Student %s applied to course %s (application %s)", student_id, course.id, record["id"])
        return Application.model_validate(record)

    # ============================================================
    # STATUS TRANSITIONS
    # ============================================================

    def update_status(self, application_id: str, new_status: ApplicationStatus, *,
                      student_id: str = None, institution_id: str = None,
                      timeout: float = None) -> StatusUpdate:
        """
        Move an application to `new_status`.

        student_id / institution_id identify the caller when the request comes
        from a student (accept/decline) or an institution (admit/reject).
        Direct acceptance is only allowed for the student's sole admitted
        offer; with several offers the student must go through
        AdmissionReconciler.reconcile.
        """
        try:
            new_status = ApplicationStatus(new_status)
        except ValueError:
            raise InvalidTransition(f"Unknown application status '{new_status}'")

        # Identity fields never change, so the owner read outside the
        # transaction is safe to lock on.
        owner = self.store.get(self.collection, application_id, self._timeout(timeout))
        if owner is None:
            raise NotFound("Application not found")

        def work(tx: Transaction):
            current = tx.get(self.collection, application_id)
            if current is None:
                raise NotFound("Application not found")
            self._check_actor(current, new_status, student_id, institution_id)

            old_status = ApplicationStatus(current["status"])
            if new_status not in LEGAL_TRANSITIONS.get(old_status, set()):
                raise InvalidTransition(
                    f"Cannot change application status from '{old_status.value}' to '{new_status.value}'"
                )

            others = [a for a in tx.query(self.collection, {"student_id": current["student_id"]})
                      if a["id"] != application_id]

            if new_status == ApplicationStatus.accepted:
                if _with_status(others, ApplicationStatus.accepted):
                    raise AcceptanceConflict()
                competing = _with_status(others, ApplicationStatus.admitted)
                if competing:
                    raise AcceptanceConflict(
                        f"You hold {len(competing) + 1} admission offers. "
                        "Choose one through admission selection."
                    )

            now = utcnow()
            fields = {
                "status": new_status.value,
                "updated_at": now,
                TIMESTAMP_FIELDS[new_status]: now,
            }
            tx.update(self.collection, application_id, fields)
            current.update(fields)
            entry = self.notifications.stage(tx, current, new_status, now)

            admitted = _with_status(others + [current], ApplicationStatus.admitted)
            return current, entry, admitted

        record, entry, admitted = self.store.run_transaction(
            student_lock_key(owner["student_id"]), work, self._timeout(timeout)
        )
        logger.info("Application %s -> %s", application_id, new_status.value)

        self.notifications.dispatch([entry], timeout=self._timeout(timeout))

        selection_required = new_status == ApplicationStatus.admitted and len(admitted) > 1
        if selection_required:
            logger.info("Student %s holds %d admitted offers; selection required",
                        record["student_id"], len(admitted))
        return StatusUpdate(
            application=Application.model_validate(record),
            selection_required=selection_required,
            admitted_offers=[Application.model_validate(a) for a in admitted] if selection_required else [],
        )

    @staticmethod
    def _check_actor(record: dict, new_status: ApplicationStatus,
                     student_id: Optional[str], institution_id: Optional[str]) -> None:
        if student_id is not None:
            if record["student_id"] != student_id:
                raise Unauthorized("This application belongs to another student")
            if new_status not in STUDENT_STATUSES:
                raise Unauthorized("Only the institution can review an application")
        if institution_id is not None:
            if record["institution_id"] != institution_id:
                raise Unauthorized("This application was made to another institution")
            if new_status not in REVIEW_STATUSES:
                raise Unauthorized("Only the student can accept or decline an offer")

    # ============================================================
    # READS
    # ============================================================

    def get(self, application_id: str, timeout: float = None) -> Application:
        doc = self.store.get(self.collection, application_id, self._timeout(timeout))
        if doc is None:
            raise NotFound("Application not found")
        return Application.model_validate(doc)

    def list_by_student(self, student_id: str, timeout: float = None) -> List[Application]:
        """Most recently applied first."""
        docs = self.store.query(self.collection, {"student_id": student_id},
                                sort=[("applied_at", -1)], timeout=self._timeout(timeout))
        return [Application.model_validate(d) for d in docs]

    def list_by_institution(self, institution_id: str, status: Optional[ApplicationStatus] = None,
                            timeout: float = None) -> List[Application]:
        filters = {"institution_id": institution_id}
        if status is not None:
            filters["status"] = ApplicationStatus(status).value
        docs = self.store.query(self.collection, filters, sort=[("applied_at", -1)],
                                timeout=self._timeout(timeout))
        return [Application.model_validate(d) for d in docs]

    def count_by_institution(self, student_id: str, institution_id: str, timeout: float = None) -> int:
        return self.store.count(self.collection, {"student_id": student_id, "institution_id": institution_id},
                                timeout=self._timeout(timeout))

    def quota_status(self, student_id: str, timeout: float = None) -> Dict[str, dict]:
        """Per-institution "n of 2" figures for the course browser."""
        counts = Counter(a.institution_id for a in self.list_by_student(student_id, timeout))
        return {
            institution_id: {
                "count": count,
                "limit": MAX_APPLICATIONS_PER_INSTITUTION,
                "can_apply": count < MAX_APPLICATIONS_PER_INSTITUTION,
            }
            for institution_id, count in counts.items()
        }

    def summary(self, student_id: str, timeout: float = None) -> Dict[str, int]:
        """Counts per status for the dashboard overview."""
        counts = Counter(a.status.value for a in self.list_by_student(student_id, timeout))
        result = {status.value: counts.get(status.value, 0) for status in ApplicationStatus}
        result["total"] = sum(counts.values())
        return result

    def _timeout(self, timeout: Optional[float]) -> Optional[float]:
        return self.timeout if timeout is None else timeout
