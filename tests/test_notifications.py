"""
NotificationService tests: read state, ordering, outbox delivery
"""

from datetime import datetime, timedelta, timezone

import pytest

from admissions_portal.core.errors import NotFound, StoreUnavailable, Unauthorized
from admissions_portal.db import COLLECTIONS, MemoryDocumentStore
from admissions_portal.services import PortalServices
from admissions_portal.services.file_storage import LocalFileStorage
from admissions_portal.services.notifications import event_key
from tests.conftest import seed_catalog


class FlakyStore(MemoryDocumentStore):
    """Memory store whose notification writes fail while `failing` is set."""

    def __init__(self):
        super().__init__(default_timeout=2.0)
        self.failing = False

    def put(self, collection, doc_id, doc, timeout=None):
        if self.failing and collection == COLLECTIONS["notifications"]:
            raise StoreUnavailable("notifications offline")
        return super().put(collection, doc_id, doc, timeout)


class TestReadState:

    def test_mark_read_is_idempotent(self, services):
        n = services.notifications.notify("u1", "hello")
        first = services.notifications.mark_read(n.id)
        assert first.read is True
        assert first.read_at is not None

        second = services.notifications.mark_read(n.id)
        assert second.read is True
        assert second.read_at == first.read_at
        assert services.notifications.unread_count("u1") == 0

    def test_mark_read_checks_owner(self, services):
        n = services.notifications.notify("u1", "hello")
        with pytest.raises(Unauthorized):
            services.notifications.mark_read(n.id, user_id="u2")
        assert services.notifications.unread_count("u1") == 1

    def test_mark_read_unknown(self, services):
        with pytest.raises(NotFound):
            services.notifications.mark_read("missing")

    def test_mark_all_read_twice(self, services):
        for i in range(3):
            services.notifications.notify("u1", f"message {i}")
        services.notifications.notify("u2", "someone else")

        assert services.notifications.mark_all_read("u1") == 3
        assert services.notifications.unread_count("u1") == 0
        assert services.notifications.mark_all_read("u1") == 0
        assert services.notifications.unread_count("u1") == 0
        assert services.notifications.unread_count("u2") == 1

    def test_list_newest_first_with_limit(self, services):
        base = datetime(2026, 3, 1, tzinfo=timezone.utc)
        for i in range(5):
            services.notifications.notify("u1", f"m{i}", created_at=base + timedelta(hours=i))

        listed = services.notifications.list("u1", limit=3)
        assert [n.message for n in listed] == ["m4", "m3", "m2"]
        assert len(services.notifications.list("u1")) == 5

    def test_notify_with_event_key_is_idempotent(self, services):
        first = services.notifications.notify("u1", "admitted", event_key="app1:admitted")
        services.notifications.mark_read(first.id)
        again = services.notifications.notify("u1", "admitted", event_key="app1:admitted")
        assert again.id == first.id
        assert again.read is True
        assert len(services.notifications.list("u1")) == 1


class TestOutbox:

    @pytest.fixture
    def flaky(self, tmp_path):
        store = FlakyStore()
        seed_catalog(store)
        return PortalServices(store, LocalFileStorage(str(tmp_path / "uploads")))

    def test_delivery_failure_keeps_transition_and_entry(self, flaky):
        flaky.documents.upload("s1", "certificate", "s1/cert.pdf")
        app = flaky.applications.submit("s1", flaky.catalog.get_course("c1"))

        flaky.store.failing = True
        update = flaky.applications.update_status(app.id, "admitted")

        assert update.application.status.value == "admitted"
        assert flaky.applications.get(app.id).status.value == "admitted"
        assert flaky.notifications.unread_count("s1") == 0

        pending = flaky.notifications.pending_outbox()
        assert [e["id"] for e in pending] == [event_key(app.id, "admitted")]
        assert pending[0]["attempts"] == 1
        assert "notifications offline" in pending[0]["last_error"]

        # Still down: flush delivers nothing and keeps the entry
        assert flaky.notifications.flush_outbox() == 0
        assert flaky.notifications.pending_outbox()[0]["attempts"] == 2

        flaky.store.failing = False
        assert flaky.notifications.flush_outbox() == 1
        assert flaky.notifications.unread_count("s1") == 1
        assert flaky.notifications.pending_outbox() == []

        # Nothing left to deliver, nothing duplicated
        assert flaky.notifications.flush_outbox() == 0
        assert len(flaky.notifications.list("s1")) == 1

    def test_unexpected_delivery_error_keeps_transition(self, services, eligible_student, monkeypatch):
        app = services.applications.submit("s1", services.catalog.get_course("c1"))

        def broken(*args, **kwargs):
            raise ValueError("bad notification payload")

        monkeypatch.setattr(services.notifications, "notify", broken)
        update = services.applications.update_status(app.id, "admitted")

        assert update.application.status.value == "admitted"
        assert services.applications.get(app.id).status.value == "admitted"
        pending = services.notifications.pending_outbox()
        assert [e["id"] for e in pending] == [event_key(app.id, "admitted")]
        assert pending[0]["attempts"] == 1
        assert "bad notification payload" in pending[0]["last_error"]

        monkeypatch.undo()
        assert services.notifications.flush_outbox() == 1
        assert services.notifications.unread_count("s1") == 1

    def test_redelivery_does_not_duplicate(self, services, eligible_student):
        app = services.applications.submit("s1", services.catalog.get_course("c1"))
        services.applications.update_status(app.id, "admitted")
        notification = services.notifications.list("s1")[0]
        assert notification.id == event_key(app.id, "admitted")
        assert notification.application_id == app.id

        # Same entry delivered a second time (e.g. a crash before the outbox delete)
        services.notifications.dispatch([{
            "id": notification.id,
            "user_id": "s1",
            "message": notification.message,
            "application_id": app.id,
            "created_at": notification.created_at,
        }])
        assert len(services.notifications.list("s1")) == 1
