"""
In-process document store.

Used by the test suite and for local runs without MongoDB
(STORE_BACKEND=memory). Transactions serialize on a per-key lock and
stage their writes, which are applied to the shared data only when the
callback returns normally.
"""

import copy
import logging
import threading
from collections import defaultdict
from typing import Callable, Dict, List, Optional

from admissions_portal.core.errors import StoreUnavailable
from admissions_portal.db.base import DocumentStore, Filters, Sort, T, Transaction, new_id

logger = logging.getLogger(__name__)

_DELETED = object()


def _matches(doc: dict, filters: Optional[Filters]) -> bool:
    if not filters:
        return True
    return all(doc.get(key) == value for key, value in filters.items())


def _sorted(docs: List[dict], sort: Optional[Sort]) -> List[dict]:
    # Apply keys right-to-left so the first key wins (stable sort)
    for field, direction in reversed(sort or []):
        docs.sort(key=lambda d: (d.get(field) is not None, d.get(field)), reverse=direction < 0)
    return docs


class _MemoryTransaction(Transaction):

    def __init__(self, store: "MemoryDocumentStore"):
        self._store = store
        self._staged: Dict[tuple, object] = {}

    def get(self, collection, doc_id):
        key = (collection, doc_id)
        if key in self._staged:
            doc = self._staged[key]
            return None if doc is _DELETED else copy.deepcopy(doc)
        with self._store._mutex:
            doc = self._store._data[collection].get(doc_id)
        return copy.deepcopy(doc) if doc is not None else None

    def query(self, collection, filters=None, sort=None, limit=None):
        with self._store._mutex:
            merged = dict(self._store._data[collection])
        for (coll, doc_id), doc in self._staged.items():
            if coll != collection:
                continue
            if doc is _DELETED:
                merged.pop(doc_id, None)
            else:
                merged[doc_id] = doc
        docs = [copy.deepcopy(d) for d in merged.values() if _matches(d, filters)]
        docs = _sorted(docs, sort)
        return docs[:limit] if limit else docs

    def insert(self, collection, doc):
        doc_id = doc.get("id") or new_id()
        self.put(collection, doc_id, doc)
        return doc_id

    def put(self, collection, doc_id, doc):
        self._staged[(collection, doc_id)] = dict(copy.deepcopy(doc), id=doc_id)

    def update(self, collection, doc_id, fields):
        current = self.get(collection, doc_id)
        if current is None:
            return False
        current.update(copy.deepcopy(fields))
        self._staged[(collection, doc_id)] = current
        return True

    def commit(self) -> None:
        with self._store._mutex:
            for (collection, doc_id), doc in self._staged.items():
                if doc is _DELETED:
                    self._store._data[collection].pop(doc_id, None)
                else:
                    self._store._data[collection][doc_id] = doc


class MemoryDocumentStore(DocumentStore):

    def __init__(self, default_timeout: float = 5.0):
        self.default_timeout = default_timeout
        self._data: Dict[str, Dict[str, dict]] = defaultdict(dict)
        self._mutex = threading.RLock()
        self._locks: Dict[str, threading.Lock] = {}

    def get(self, collection, doc_id, timeout=None):
        with self._mutex:
            doc = self._data[collection].get(doc_id)
            return copy.deepcopy(doc) if doc is not None else None

    def query(self, collection, filters=None, sort=None, limit=None, timeout=None):
        with self._mutex:
            docs = [copy.deepcopy(d) for d in self._data[collection].values() if _matches(d, filters)]
        docs = _sorted(docs, sort)
        return docs[:limit] if limit else docs

    def count(self, collection, filters=None, timeout=None):
        with self._mutex:
            return sum(1 for d in self._data[collection].values() if _matches(d, filters))

    def insert(self, collection, doc, timeout=None):
        doc_id = doc.get("id") or new_id()
        self.put(collection, doc_id, doc, timeout)
        return doc_id

    def put(self, collection, doc_id, doc, timeout=None):
        with self._mutex:
            self._data[collection][doc_id] = dict(copy.deepcopy(doc), id=doc_id)

    def update(self, collection, doc_id, fields, timeout=None):
        with self._mutex:
            doc = self._data[collection].get(doc_id)
            if doc is None:
                return False
            doc.update(copy.deepcopy(fields))
            return True

    def update_many(self, collection, filters, fields, timeout=None):
        changed = 0
        with self._mutex:
            for doc in self._data[collection].values():
                if _matches(doc, filters):
                    doc.update(copy.deepcopy(fields))
                    changed += 1
        return changed

    def delete(self, collection, doc_id, timeout=None):
        with self._mutex:
            return self._data[collection].pop(doc_id, None) is not None

    def _lock_for(self, lock_key: str) -> threading.Lock:
        with self._mutex:
            if lock_key not in self._locks:
                self._locks[lock_key] = threading.Lock()
            return self._locks[lock_key]

    def run_transaction(self, lock_key: str, fn: Callable[[Transaction], T], timeout: float = None) -> T:
        lock = self._lock_for(lock_key)
        wait = self.default_timeout if timeout is None else timeout
        if not lock.acquire(timeout=wait):
            logger.warning("Timed out after %.1fs waiting for %s", wait, lock_key)
            raise StoreUnavailable(f"Timed out waiting for {lock_key}")
        try:
            tx = _MemoryTransaction(self)
            result = fn(tx)
            tx.commit()
            return result
        finally:
            lock.release()

    def clear(self) -> None:
        with self._mutex:
            self._data.clear()
