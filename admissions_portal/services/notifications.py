"""
Notification Service

Notifications are advisory: the application record is the source of
truth. Transition notifications are therefore written in two steps:

1. stage()    - inside the transition's transaction, an outbox entry keyed
                by the transition event ("{application_id}:{status}") is
                written alongside the status change. Both commit or neither.
2. dispatch() - after commit, each entry becomes a notification whose id
                is the event key, and the entry is removed.

A failed dispatch leaves the entry in the outbox for flush_outbox().
Because the notification id is the event key, delivering an entry twice
writes the same notification twice instead of creating a duplicate.
"""

import logging
from typing import List, Optional

from admissions_portal.core.config import get_settings
from admissions_portal.core.errors import NotFound, Unauthorized
from admissions_portal.db import COLLECTIONS, DocumentStore, Transaction, get_document_store
from admissions_portal.db.base import new_id
from admissions_portal.models import ApplicationStatus, Notification, utcnow

logger = logging.getLogger(__name__)

TRANSITION_MESSAGES = {
    ApplicationStatus.admitted: "Congratulations! You have been admitted to {course}.",
    ApplicationStatus.rejected: "Your application for {course} was not successful.",
    ApplicationStatus.accepted: "You are now enrolled in {course}.",
    ApplicationStatus.declined: "Your admission offer for {course} has been declined.",
}


def event_key(application_id: str, status: ApplicationStatus) -> str:
    return f"{application_id}:{ApplicationStatus(status).value}"


def transition_message(application: dict, status: ApplicationStatus) -> str:
    course = application.get("course_name") or "your chosen course"
    return TRANSITION_MESSAGES[ApplicationStatus(status)].format(course=course)


class NotificationService:
    """
    Emits and tracks read/unread notifications.
    """

    def __init__(self, store: DocumentStore = None, timeout: float = None):
        self.store = store or get_document_store()
        self.timeout = timeout
        self.collection = COLLECTIONS["notifications"]
        self.outbox = COLLECTIONS["outbox"]

    # ------------------------------------------------------------
    # Emission
    # ------------------------------------------------------------

    def notify(self, user_id: str, message: str, *, event_key: str = None,
               application_id: str = None, created_at=None, timeout: float = None) -> Notification:
        """
        Create a notification. With an event_key the call is idempotent:
        an existing notification for that event is returned untouched.
        """
        timeout = self._timeout(timeout)
        if event_key:
            existing = self.store.get(self.collection, event_key, timeout)
            if existing is not None:
                return Notification.model_validate(existing)

        doc = {
            "id": event_key or new_id(),
            "user_id": user_id,
            "message": message,
            "read": False,
            "created_at": created_at or utcnow(),
            "read_at": None,
            "event_key": event_key,
            "application_id": application_id,
        }
        notification = Notification.model_validate(doc)
        self.store.put(self.collection, doc["id"], doc, timeout)
        return notification

    def stage(self, tx: Transaction, application: dict, status: ApplicationStatus, at=None) -> dict:
        """Write the outbox entry for a status transition inside `tx`."""
        key = event_key(application["id"], status)
        entry = {
            "id": key,
            "user_id": application["student_id"],
            "message": transition_message(application, status),
            "application_id": application["id"],
            "created_at": at or utcnow(),
            "attempts": 0,
            "last_error": None,
        }
        tx.put(self.outbox, key, entry)
        return entry

    def dispatch(self, entries: List[dict], timeout: float = None) -> int:
        """
        Deliver outbox entries. The transitions behind them are already
        committed, so no failure is raised to the caller: it is logged and
        recorded on the entry for flush_outbox().
        """
        timeout = self._timeout(timeout)
        delivered = 0
        for entry in entries:
            try:
                self.notify(
                    entry["user_id"],
                    entry["message"],
                    event_key=entry["id"],
                    application_id=entry.get("application_id"),
                    created_at=entry.get("created_at"),
                    timeout=timeout,
                )
                self.store.delete(self.outbox, entry["id"], timeout)
                delivered += 1
            except Exception as e:
                logger.error("Notification delivery failed for %s: %s", entry["id"], e)
                self._record_failure(entry, e, timeout)
        return delivered

    def _record_failure(self, entry: dict, error: Exception, timeout: float = None) -> None:
        try:
            self.store.update(self.outbox, entry["id"], {
                "attempts": entry.get("attempts", 0) + 1,
                "last_error": str(error),
            }, timeout)
        except Exception as e:
            logger.error("Could not record delivery failure for %s: %s", entry["id"], e)

    def pending_outbox(self, limit: int = 100, timeout: float = None) -> List[dict]:
        return self.store.query(self.outbox, sort=[("created_at", 1)], limit=limit,
                                timeout=self._timeout(timeout))

    def flush_outbox(self, limit: int = 100, timeout: float = None) -> int:
        """Re-deliver entries left behind by failed dispatches."""
        entries = self.pending_outbox(limit, timeout)
        if not entries:
            return 0
        delivered = self.dispatch(entries, timeout)
        logger.info("Outbox flush delivered %d of %d entries", delivered, len(entries))
        return delivered

    # ------------------------------------------------------------
    # Read state
    # ------------------------------------------------------------

    def get(self, notification_id: str, timeout: float = None) -> Notification:
        doc = self.store.get(self.collection, notification_id, self._timeout(timeout))
        if doc is None:
            raise NotFound("Notification not found")
        return Notification.model_validate(doc)

    def mark_read(self, notification_id: str, user_id: str = None, timeout: float = None) -> Notification:
        """Idempotent: an already-read notification is returned unchanged."""
        notification = self.get(notification_id, timeout)
        if user_id is not None and notification.user_id != user_id:
            raise Unauthorized("This notification belongs to another user")
        if notification.read:
            return notification

        read_at = utcnow()
        self.store.update(self.collection, notification_id, {"read": True, "read_at": read_at},
                          self._timeout(timeout))
        return notification.model_copy(update={"read": True, "read_at": read_at})

    def mark_all_read(self, user_id: str, timeout: float = None) -> int:
        """Mark every unread notification for user_id; returns how many changed."""
        return self.store.update_many(
            self.collection,
            {"user_id": user_id, "read": False},
            {"read": True, "read_at": utcnow()},
            self._timeout(timeout),
        )

    def unread_count(self, user_id: str, timeout: float = None) -> int:
        return self.store.count(self.collection, {"user_id": user_id, "read": False},
                                self._timeout(timeout))

    def list(self, user_id: str, limit: Optional[int] = None, timeout: float = None) -> List[Notification]:
        """Newest first."""
        limit = limit or get_settings().notification_page_size
        docs = self.store.query(
            self.collection,
            {"user_id": user_id},
            sort=[("created_at", -1)],
            limit=limit,
            timeout=self._timeout(timeout),
        )
        return [Notification.model_validate(doc) for doc in docs]

    def _timeout(self, timeout: Optional[float]) -> Optional[float]:
        return self.timeout if timeout is None else timeout
