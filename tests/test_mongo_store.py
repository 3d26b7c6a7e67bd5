"""
MongoDocumentStore transaction path, against a stubbed pymongo client
"""

import pytest
from pymongo.errors import ConnectionFailure, OperationFailure, ServerSelectionTimeoutError

from admissions_portal.core.errors import AcceptanceConflict, StoreUnavailable
from admissions_portal.db.mongodb import MongoDocumentStore


class FakeCollection:

    def __init__(self, name, log, docs):
        self.name = name
        self.log = log
        self.docs = docs

    def find_one(self, filters, session=None):
        self.log.append(("find_one", self.name, session))
        doc = self.docs.get(filters["_id"])
        return dict(doc) if doc is not None else None

    def update_one(self, filters, update, upsert=False, session=None):
        self.log.append(("update_one", self.name, filters, update, upsert, session))


class FakeDatabase:

    def __init__(self, log, docs):
        self.log = log
        self.docs = docs

    def __getitem__(self, name):
        return FakeCollection(name, self.log, self.docs.setdefault(name, {}))


class FakeSession:
    """with_transaction that runs the callback `attempts` times, like a driver retry."""

    def __init__(self, error=None, attempts=1):
        self.error = error
        self.attempts = attempts

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def with_transaction(self, callback):
        if self.error is not None:
            raise self.error
        result = None
        for _ in range(self.attempts):
            result = callback(self)
        return result


class FakeAdmin:

    def __init__(self, error=None):
        self.error = error

    def command(self, name):
        if self.error is not None:
            raise self.error
        return {"ok": 1}


class FakeClient:

    def __init__(self, session=None, docs=None, admin_error=None):
        self.log = []
        self.session = session or FakeSession()
        self.db = FakeDatabase(self.log, docs if docs is not None else {})
        self.admin = FakeAdmin(admin_error)

    def __getitem__(self, name):
        return self.db

    def start_session(self):
        return self.session


def _store(client):
    return MongoDocumentStore(client=client, db_name="admissions_test", default_timeout=2.0)


def test_guard_is_touched_before_callback():
    client = FakeClient()
    store = _store(client)

    def work(tx):
        client.log.append(("fn",))
        return "done"

    assert store.run_transaction("student:s1", work) == "done"
    assert client.log[0] == (
        "update_one", "locks", {"_id": "student:s1"}, {"$inc": {"version": 1}}, True, client.session
    )
    assert client.log[1] == ("fn",)


def test_retried_callback_touches_guard_each_attempt():
    client = FakeClient(session=FakeSession(attempts=2))
    store = _store(client)
    store.run_transaction("student:s1", lambda tx: client.log.append(("fn",)))

    assert [entry[0] for entry in client.log] == ["update_one", "fn", "update_one", "fn"]


def test_transaction_reads_use_session_and_map_ids():
    docs = {"applications": {"a1": {"_id": "a1", "status": "pending"}}}
    client = FakeClient(docs=docs)
    store = _store(client)

    record = store.run_transaction("student:s1", lambda tx: tx.get("applications", "a1"))
    assert record == {"id": "a1", "status": "pending"}
    assert ("find_one", "applications", client.session) in client.log


@pytest.mark.parametrize("error", [
    OperationFailure("WriteConflict", code=112),
    ConnectionFailure("connection reset"),
])
def test_driver_errors_become_store_unavailable(error):
    store = _store(FakeClient(session=FakeSession(error=error)))
    with pytest.raises(StoreUnavailable) as excinfo:
        store.run_transaction("student:s1", lambda tx: None)
    assert excinfo.value.retryable is True
    assert excinfo.value.__cause__ is error


def test_domain_errors_pass_through():
    store = _store(FakeClient())

    def work(tx):
        raise AcceptanceConflict()

    with pytest.raises(AcceptanceConflict):
        store.run_transaction("student:s1", work)


def test_ping():
    assert _store(FakeClient()).ping() is True
    down = FakeClient(admin_error=ServerSelectionTimeoutError("no servers"))
    assert _store(down).ping() is False
