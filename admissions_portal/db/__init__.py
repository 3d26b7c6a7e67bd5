"""
Database module - document store selection.
"""
from functools import lru_cache

from admissions_portal.core.config import get_settings
from admissions_portal.db.base import COLLECTIONS, DocumentStore, Transaction, student_lock_key
from admissions_portal.db.memory import MemoryDocumentStore


@lru_cache()
def get_document_store() -> DocumentStore:
    """Build the store named by STORE_BACKEND (one per process)."""
    settings = get_settings()
    if settings.store_backend == "memory":
        return MemoryDocumentStore(default_timeout=settings.store_timeout_seconds)

    from admissions_portal.db.mongodb import MongoDocumentStore
    return MongoDocumentStore()


__all__ = [
    "COLLECTIONS",
    "DocumentStore",
    "Transaction",
    "MemoryDocumentStore",
    "get_document_store",
    "student_lock_key",
]
