"""
Document store contract consumed by the services.

Records are plain dicts keyed by a string "id". Filters are equality
matches on top-level fields; sort is a list of (field, direction) pairs
in pymongo style (1 ascending, -1 descending).

Cross-record consistency goes through run_transaction(): the callback
receives a Transaction, reads and writes through it, and either all of
its writes commit or none do. Transactions that share a lock_key never
interleave, so a read-validate-write inside one is authoritative.
"""

import uuid
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar

Filters = Dict[str, Any]
Sort = List[Tuple[str, int]]
T = TypeVar("T")


# Collection name constants (avoid typos)
COLLECTIONS = {
    "applications": "applications",
    "courses": "courses",
    "institutions": "institutions",
    "jobs": "jobs",
    "students": "students",
    "documents": "documents",
    "notifications": "notifications",
    "outbox": "notification_outbox",
    "locks": "locks",
}


def new_id() -> str:
    return uuid.uuid4().hex


def student_lock_key(student_id: str) -> str:
    return f"student:{student_id}"


class Transaction(ABC):
    """Read/write handle valid only inside run_transaction()."""

    @abstractmethod
    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        ...

    @abstractmethod
    def query(self, collection: str, filters: Filters = None, sort: Sort = None,
              limit: int = None) -> List[dict]:
        ...

    @abstractmethod
    def insert(self, collection: str, doc: dict) -> str:
        ...

    @abstractmethod
    def put(self, collection: str, doc_id: str, doc: dict) -> None:
        ...

    @abstractmethod
    def update(self, collection: str, doc_id: str, fields: dict) -> bool:
        ...


class DocumentStore(ABC):
    """Every call takes an optional timeout in seconds; None means the store default."""

    @abstractmethod
    def get(self, collection: str, doc_id: str, timeout: float = None) -> Optional[dict]:
        ...

    @abstractmethod
    def query(self, collection: str, filters: Filters = None, sort: Sort = None,
              limit: int = None, timeout: float = None) -> List[dict]:
        ...

    @abstractmethod
    def count(self, collection: str, filters: Filters = None, timeout: float = None) -> int:
        ...

    @abstractmethod
    def insert(self, collection: str, doc: dict, timeout: float = None) -> str:
        ...

    @abstractmethod
    def put(self, collection: str, doc_id: str, doc: dict, timeout: float = None) -> None:
        ...

    @abstractmethod
    def update(self, collection: str, doc_id: str, fields: dict, timeout: float = None) -> bool:
        ...

    @abstractmethod
    def update_many(self, collection: str, filters: Filters, fields: dict,
                    timeout: float = None) -> int:
        ...

    @abstractmethod
    def delete(self, collection: str, doc_id: str, timeout: float = None) -> bool:
        ...

    @abstractmethod
    def run_transaction(self, lock_key: str, fn: Callable[[Transaction], T],
                        timeout: float = None) -> T:
        """
        Run fn atomically. fn may be invoked more than once when the backend
        retries after a write conflict, so it must not have side effects
        outside the transaction.
        """
        ...

    def ping(self) -> bool:
        return True
