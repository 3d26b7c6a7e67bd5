"""
MongoDB Connection Utility + document store

MongoDB stores every collection the portal uses:
- applications, courses, institutions, jobs, students (profiles)
- documents (credential metadata; bytes live in file storage)
- notifications + notification_outbox
- locks (per-student guard documents)

Multi-record changes use client sessions with with_transaction(), which
needs a replica set (a single-node rs0 is enough for development).
Snapshot isolation alone allows write skew between two transactions that
read the same applications but write different ones, so every student
transaction also bumps that student's guard document in `locks`. Two
concurrent transactions for one student then always write a common
document; the loser gets a WriteConflict and the driver re-runs it
against the committed state.
"""
import logging
from contextlib import contextmanager
from typing import Optional

import pymongo
from pymongo import MongoClient
from pymongo.client_session import ClientSession
from pymongo.database import Database
from pymongo.errors import PyMongoError

from admissions_portal.core.config import get_settings
from admissions_portal.core.errors import StoreUnavailable
from admissions_portal.db.base import COLLECTIONS, DocumentStore, Transaction, new_id

logger = logging.getLogger(__name__)

settings = get_settings()

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(
            settings.mongodb_uri,
            serverSelectionTimeoutMS=int(settings.store_timeout_seconds * 1000),
            tz_aware=True,
        )
    return _client


def get_mongo_db() -> Database:
    """Get the portal database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[settings.mongodb_db]
    return _db


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        client = get_mongo_client()
        # ping command checks connection
        client.admin.command('ping')
        return True
    except PyMongoError as e:
        logger.error("MongoDB connection failed: %s", e)
        return False


def init_mongo_indexes(db: Database = None):
    """
    Create indexes for the query patterns the services use.
    Call this once during app startup.
    """
    db = db if db is not None else get_mongo_db()

    # Student dashboards: applications newest first, per-institution quota
    db[COLLECTIONS["applications"]].create_index([("student_id", 1), ("applied_at", -1)])
    db[COLLECTIONS["applications"]].create_index([
        ("student_id", 1),
        ("institution_id", 1),
        ("course_id", 1)
    ])
    db[COLLECTIONS["applications"]].create_index([("institution_id", 1), ("status", 1)])

    db[COLLECTIONS["documents"]].create_index([("student_id", 1), ("uploaded_at", -1)])

    db[COLLECTIONS["notifications"]].create_index([("user_id", 1), ("created_at", -1)])
    db[COLLECTIONS["notifications"]].create_index([("user_id", 1), ("read", 1)])

    db[COLLECTIONS["courses"]].create_index([("institution_id", 1), ("status", 1)])
    db[COLLECTIONS["jobs"]].create_index([("status", 1), ("created_at", -1)])
    db[COLLECTIONS["outbox"]].create_index("created_at")

    # Collections cannot always be created implicitly inside a transaction
    existing = set(db.list_collection_names())
    for name in (COLLECTIONS["locks"], COLLECTIONS["applications"], COLLECTIONS["outbox"]):
        if name not in existing:
            db.create_collection(name)

    logger.info("MongoDB indexes created successfully")


# ============================================================
# HELPER: map between Mongo "_id" and record "id"
# ============================================================

def serialize_doc(doc: dict) -> Optional[dict]:
    """Convert MongoDB document to a record with a string "id"."""
    if doc is None:
        return None
    doc["id"] = str(doc.pop("_id"))
    return doc


def _to_mongo(doc_id: str, doc: dict) -> dict:
    body = {k: v for k, v in doc.items() if k != "id"}
    body["_id"] = doc_id
    return body


@contextmanager
def _store_call(timeout: float):
    """Bound a store call by `timeout` and surface driver failures as StoreUnavailable."""
    try:
        with pymongo.timeout(timeout):
            yield
    except PyMongoError as e:
        logger.warning("MongoDB call failed: %s", e)
        raise StoreUnavailable(f"Data store unavailable: {e.__class__.__name__}") from e


class _MongoTransaction(Transaction):

    def __init__(self, db: Database, session: ClientSession):
        self._db = db
        self._session = session

    def get(self, collection, doc_id):
        return serialize_doc(self._db[collection].find_one({"_id": doc_id}, session=self._session))

    def query(self, collection, filters=None, sort=None, limit=None):
        cursor = self._db[collection].find(filters or {}, session=self._session)
        if sort:
            cursor = cursor.sort(sort)
        if limit:
            cursor = cursor.limit(limit)
        return [serialize_doc(doc) for doc in cursor]

    def insert(self, collection, doc):
        doc_id = doc.get("id") or new_id()
        self._db[collection].insert_one(_to_mongo(doc_id, doc), session=self._session)
        return doc_id

    def put(self, collection, doc_id, doc):
        self._db[collection].replace_one(
            {"_id": doc_id}, _to_mongo(doc_id, doc), upsert=True, session=self._session
        )

    def update(self, collection, doc_id, fields):
        result = self._db[collection].update_one(
            {"_id": doc_id}, {"$set": fields}, session=self._session
        )
        return result.matched_count > 0

    def touch_guard(self, lock_key: str) -> None:
        self._db[COLLECTIONS["locks"]].update_one(
            {"_id": lock_key}, {"$inc": {"version": 1}}, upsert=True, session=self._session
        )


class MongoDocumentStore(DocumentStore):
    """
    DocumentStore backed by MongoDB.

    Record ids are stored as the string `_id`, so no ObjectId conversion is
    needed anywhere above this layer.
    """

    def __init__(self, client: MongoClient = None, db_name: str = None, default_timeout: float = None):
        self.client = client or get_mongo_client()
        self.db: Database = self.client[db_name or settings.mongodb_db]
        self.default_timeout = default_timeout or settings.store_timeout_seconds

    def _timeout(self, timeout: Optional[float]) -> float:
        return self.default_timeout if timeout is None else timeout

    def get(self, collection, doc_id, timeout=None):
        with _store_call(self._timeout(timeout)):
            return serialize_doc(self.db[collection].find_one({"_id": doc_id}))

    def query(self, collection, filters=None, sort=None, limit=None, timeout=None):
        with _store_call(self._timeout(timeout)):
            cursor = self.db[collection].find(filters or {})
            if sort:
                cursor = cursor.sort(sort)
            if limit:
                cursor = cursor.limit(limit)
            return [serialize_doc(doc) for doc in cursor]

    def count(self, collection, filters=None, timeout=None):
        with _store_call(self._timeout(timeout)):
            return self.db[collection].count_documents(filters or {})

    def insert(self, collection, doc, timeout=None):
        doc_id = doc.get("id") or new_id()
        with _store_call(self._timeout(timeout)):
            self.db[collection].insert_one(_to_mongo(doc_id, doc))
        return doc_id

    def put(self, collection, doc_id, doc, timeout=None):
        with _store_call(self._timeout(timeout)):
            self.db[collection].replace_one({"_id": doc_id}, _to_mongo(doc_id, doc), upsert=True)

    def update(self, collection, doc_id, fields, timeout=None):
        with _store_call(self._timeout(timeout)):
            result = self.db[collection].update_one({"_id": doc_id}, {"$set": fields})
            return result.matched_count > 0

    def update_many(self, collection, filters, fields, timeout=None):
        with _store_call(self._timeout(timeout)):
            result = self.db[collection].update_many(filters, {"$set": fields})
            return result.modified_count

    def delete(self, collection, doc_id, timeout=None):
        with _store_call(self._timeout(timeout)):
            result = self.db[collection].delete_one({"_id": doc_id})
            return result.deleted_count > 0

    def run_transaction(self, lock_key, fn, timeout=None):
        def callback(session: ClientSession):
            tx = _MongoTransaction(self.db, session)
            tx.touch_guard(lock_key)
            return fn(tx)

        with _store_call(self._timeout(timeout)):
            with self.client.start_session() as session:
                return session.with_transaction(callback)

    def ping(self) -> bool:
        try:
            with _store_call(self.default_timeout):
                self.client.admin.command("ping")
            return True
        except StoreUnavailable:
            return False
