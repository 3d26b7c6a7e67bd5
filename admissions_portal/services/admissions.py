"""
Admission Reconciler

When a student holds two or more admitted offers they must keep exactly
one. reconcile() accepts the chosen offer and declines every other
admitted offer in a single student-scoped transaction, so no caller ever
observes the chosen offer accepted with a sibling still admitted, and two
concurrent selections for the same student cannot both succeed.

The system never chooses for the student: ApplicationStore only reports
that a selection is required.
"""

import logging
from typing import List, Optional

from admissions_portal.core.errors import AcceptanceConflict, NotAdmitted, NotFound, Unauthorized
from admissions_portal.db import COLLECTIONS, DocumentStore, Transaction, get_document_store, student_lock_key
from admissions_portal.models import Application, ApplicationStatus, ReconciliationResult, utcnow
from admissions_portal.services.notifications import NotificationService

logger = logging.getLogger(__name__)


class AdmissionReconciler:

    def __init__(self, store: DocumentStore = None, notifications: NotificationService = None,
                 timeout: float = None):
        self.store = store or get_document_store()
        self.notifications = notifications or NotificationService(self.store)
        self.timeout = timeout
        self.collection = COLLECTIONS["applications"]

    def pending_selection(self, student_id: str, timeout: float = None) -> List[Application]:
        """Admitted offers awaiting a choice; empty unless there are at least two."""
        docs = self.store.query(
            self.collection,
            {"student_id": student_id, "status": ApplicationStatus.admitted.value},
            sort=[("applied_at", -1)],
            timeout=self._timeout(timeout),
        )
        if len(docs) < 2:
            return []
        return [Application.model_validate(d) for d in docs]

    def reconcile(self, student_id: str, chosen_application_id: str,
                  timeout: float = None) -> ReconciliationResult:
        """
        Accept `chosen_application_id` and decline the student's other admitted offers.

        Raises:
            NotAdmitted: the student has no admitted offers
            NotFound: the chosen application is not one of the admitted offers
            Unauthorized: the chosen application belongs to another student
            AcceptanceConflict: the student already accepted another offer
        """
        def work(tx: Transaction):
            apps = tx.query(self.collection, {"student_id": student_id})
            admitted = [a for a in apps if a["status"] == ApplicationStatus.admitted.value]
            if not admitted:
                raise NotAdmitted()

            chosen = next((a for a in admitted if a["id"] == chosen_application_id), None)
            if chosen is None:
                other = tx.get(self.collection, chosen_application_id)
                if other is not None and other["student_id"] != student_id:
                    raise Unauthorized("This application belongs to another student")
                raise NotFound("The selected application is not one of your admission offers")

            if any(a["status"] == ApplicationStatus.accepted.value for a in apps):
                raise AcceptanceConflict()

            now = utcnow()
            entries = []
            declined = []
            for app in admitted:
                if app["id"] == chosen_application_id:
                    status, stamp = ApplicationStatus.accepted, "accepted_at"
                else:
                    status, stamp = ApplicationStatus.declined, "declined_at"
                fields = {"status": status.value, "updated_at": now, stamp: now}
                tx.update(self.collection, app["id"], fields)
                app.update(fields)
                entries.append(self.notifications.stage(tx, app, status, now))
                if status == ApplicationStatus.declined:
                    declined.append(app)
            return chosen, declined, entries

        chosen, declined, entries = self.store.run_transaction(
            student_lock_key(student_id), work, self._timeout(timeout)
        )
        logger.info("Student %s accepted %s, declined %d other offer(s)",
                    student_id, chosen_application_id, len(declined))

        self.notifications.dispatch(entries, timeout=self._timeout(timeout))
        return ReconciliationResult(
            accepted=Application.model_validate(chosen),
            declined=[Application.model_validate(a) for a in declined],
        )

    def _timeout(self, timeout: Optional[float]) -> Optional[float]:
        return self.timeout if timeout is None else timeout
