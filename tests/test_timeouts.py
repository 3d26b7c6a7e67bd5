"""
Per-call store timeouts: every service operation hands its timeout to the store
"""

import pytest

from admissions_portal.db import MemoryDocumentStore
from admissions_portal.services import PortalServices
from admissions_portal.services.file_storage import LocalFileStorage
from tests.conftest import seed_catalog


class RecordingStore(MemoryDocumentStore):
    """Memory store that remembers the timeout of every call."""

    def __init__(self):
        super().__init__(default_timeout=2.0)
        self.timeouts = []

    def get(self, collection, doc_id, timeout=None):
        self.timeouts.append(("get", collection, timeout))
        return super().get(collection, doc_id, timeout)

    def query(self, collection, filters=None, sort=None, limit=None, timeout=None):
        self.timeouts.append(("query", collection, timeout))
        return super().query(collection, filters, sort, limit, timeout)

    def count(self, collection, filters=None, timeout=None):
        self.timeouts.append(("count", collection, timeout))
        return super().count(collection, filters, timeout)

    def insert(self, collection, doc, timeout=None):
        self.timeouts.append(("insert", collection, timeout))
        return super().insert(collection, doc, timeout)

    def put(self, collection, doc_id, doc, timeout=None):
        self.timeouts.append(("put", collection, timeout))
        return super().put(collection, doc_id, doc, timeout)

    def update(self, collection, doc_id, fields, timeout=None):
        self.timeouts.append(("update", collection, timeout))
        return super().update(collection, doc_id, fields, timeout)

    def update_many(self, collection, filters, fields, timeout=None):
        self.timeouts.append(("update_many", collection, timeout))
        return super().update_many(collection, filters, fields, timeout)

    def delete(self, collection, doc_id, timeout=None):
        self.timeouts.append(("delete", collection, timeout))
        return super().delete(collection, doc_id, timeout)

    def run_transaction(self, lock_key, fn, timeout=None):
        self.timeouts.append(("transaction", lock_key, timeout))
        return super().run_transaction(lock_key, fn, timeout)

    def reset(self):
        self.timeouts = []

    def seen(self):
        return {t for _, _, t in self.timeouts}


@pytest.fixture
def recording(tmp_path):
    store = RecordingStore()
    seed_catalog(store)
    services = PortalServices(store, LocalFileStorage(str(tmp_path / "uploads")))
    services.documents.upload("s1", "high_school_transcript", "s1/t.pdf")
    store.reset()
    return services


def test_application_reads_pass_timeout(recording):
    store = recording.store
    app = recording.applications.submit("s1", recording.catalog.get_course("c1"), timeout=0.7)
    assert store.seen() == {None, 0.7}  # get_course uses the service default

    store.reset()
    recording.applications.get(app.id, timeout=0.3)
    recording.applications.list_by_student("s1", timeout=0.3)
    recording.applications.list_by_institution("i1", timeout=0.3)
    recording.applications.count_by_institution("s1", "i1", timeout=0.3)
    recording.applications.quota_status("s1", timeout=0.3)
    recording.applications.summary("s1", timeout=0.3)
    recording.admissions.pending_selection("s1", timeout=0.3)
    assert store.seen() == {0.3}


def test_transition_and_delivery_share_timeout(recording):
    store = recording.store
    app = recording.applications.submit("s1", recording.catalog.get_course("c1"))

    store.reset()
    recording.applications.update_status(app.id, "admitted", timeout=0.4)
    kinds = {kind for kind, _, _ in store.timeouts}
    assert {"transaction", "put", "delete"} <= kinds
    assert store.seen() == {0.4}


def test_notification_and_document_calls_pass_timeout(recording):
    store = recording.store
    n = recording.notifications.notify("s1", "hello", event_key="k1", timeout=0.2)
    recording.notifications.get(n.id, timeout=0.2)
    recording.notifications.mark_read(n.id, "s1", timeout=0.2)
    recording.notifications.mark_all_read("s1", timeout=0.2)
    recording.notifications.unread_count("s1", timeout=0.2)
    recording.notifications.list("s1", timeout=0.2)
    recording.notifications.flush_outbox(timeout=0.2)

    doc = recording.documents.upload("s1", "certificate", "s1/c.pdf", timeout=0.2)
    recording.documents.list_by_student("s1", timeout=0.2)
    recording.documents.set_status(doc.id, "approved", timeout=0.2)
    recording.documents.delete(doc.id, "s1", timeout=0.2)

    recording.profiles.update("s1", {"name": "Lerato"}, timeout=0.2)
    recording.catalog.list_jobs(timeout=0.2)
    assert store.seen() == {0.2}


def test_service_default_timeout_applies(tmp_path):
    store = RecordingStore()
    seed_catalog(store)
    services = PortalServices(store, LocalFileStorage(str(tmp_path / "uploads")), timeout=1.5)
    store.reset()

    services.notifications.unread_count("s1")
    services.documents.list_by_student("s1")
    services.applications.list_by_student("s1")
    services.catalog.list_courses()
    assert store.seen() == {1.5}
