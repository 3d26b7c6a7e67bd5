"""
Document Registry - credential metadata per student.

Bytes are handed to a FileStorage collaborator; this registry persists
only the metadata and the storage reference. Review status is set by the
external reviewer. The only business rule is ownership: a student may
delete only their own documents.
"""

import logging
from typing import List, Optional

from admissions_portal.core.errors import NotFound, Unauthorized
from admissions_portal.db import COLLECTIONS, DocumentStore, get_document_store
from admissions_portal.models import (
    DOCUMENT_TYPE_LABELS,
    Document,
    DocumentStatus,
    DocumentType,
    utcnow,
)
from admissions_portal.services.file_storage import FileStorage

logger = logging.getLogger(__name__)


class DocumentRegistry:

    def __init__(self, store: DocumentStore = None, storage: Optional[FileStorage] = None,
                 timeout: float = None):
        self.store = store or get_document_store()
        self.storage = storage
        self.timeout = timeout
        self.collection = COLLECTIONS["documents"]

    def upload(self, student_id: str, type: DocumentType, storage_ref: str,
               file_name: str = None, timeout: float = None) -> Document:
        """
        Record an uploaded credential.

        Args:
            student_id: Owner, as supplied by the identity layer
            type: One of DocumentType
            storage_ref: Reference returned by the file storage
            file_name: Original client filename (display only)
            timeout: Store call bound in seconds (default: service timeout)
        """
        doc = {
            "student_id": student_id,
            "type": DocumentType(type).value,
            "status": DocumentStatus.pending.value,
            "file_name": file_name,
            "storage_ref": storage_ref,
            "uploaded_at": utcnow(),
        }
        doc["id"] = self.store.insert(self.collection, doc, self._timeout(timeout))
        logger.info("Student %s uploaded %s document %s", student_id, doc["type"], doc["id"])
        return Document.model_validate(doc)

    def get(self, document_id: str, timeout: float = None) -> Document:
        doc = self.store.get(self.collection, document_id, self._timeout(timeout))
        if doc is None:
            raise NotFound("Document not found")
        return Document.model_validate(doc)

    def list_by_student(self, student_id: str, timeout: float = None) -> List[Document]:
        """Newest upload first."""
        docs = self.store.query(self.collection, {"student_id": student_id},
                                sort=[("uploaded_at", -1)], timeout=self._timeout(timeout))
        return [Document.model_validate(d) for d in docs]

    def delete(self, document_id: str, student_id: str, timeout: float = None) -> None:
        document = self.get(document_id, timeout)
        if document.student_id != student_id:
            raise Unauthorized("You can only delete your own documents")

        self.store.delete(self.collection, document_id, self._timeout(timeout))
        logger.info("Student %s deleted document %s", student_id, document_id)

        # Metadata is gone; leftover bytes are only wasted space
        if self.storage and document.storage_ref:
            if not self.storage.delete(document.storage_ref):
                logger.warning("No stored file for %s (%s)", document_id, document.storage_ref)

    def set_status(self, document_id: str, status: DocumentStatus, timeout: float = None) -> Document:
        """Review outcome from the external reviewer."""
        status = DocumentStatus(status)
        if not self.store.update(self.collection, document_id, {"status": status.value},
                                 self._timeout(timeout)):
            raise NotFound("Document not found")
        return self.get(document_id, timeout)

    @staticmethod
    def document_types() -> List[dict]:
        return [{"value": t.value, "label": label} for t, label in DOCUMENT_TYPE_LABELS.items()]

    def _timeout(self, timeout: Optional[float]) -> Optional[float]:
        return self.timeout if timeout is None else timeout
