"""
Services - the admissions engine components, wired over one document store.
"""

from functools import lru_cache

from admissions_portal.db import DocumentStore, get_document_store
from admissions_portal.services.admissions import AdmissionReconciler
from admissions_portal.services.applications import ApplicationStore
from admissions_portal.services.catalog import CatalogService
from admissions_portal.services.documents import DocumentRegistry
from admissions_portal.services.file_storage import FileStorage, LocalFileStorage
from admissions_portal.services.notifications import NotificationService
from admissions_portal.services.profiles import StudentProfileService


class PortalServices:
    """
    All services sharing a store.

    Usage:
        services = get_services()
        services.applications.submit(student_id, course)
    """

    def __init__(self, store: DocumentStore, file_storage: FileStorage = None, timeout: float = None):
        self.store = store
        self.file_storage = file_storage or LocalFileStorage()
        self.catalog = CatalogService(store, timeout=timeout)
        self.profiles = StudentProfileService(store, timeout=timeout)
        self.notifications = NotificationService(store, timeout=timeout)
        self.documents = DocumentRegistry(store, self.file_storage, timeout=timeout)
        self.applications = ApplicationStore(store, self.documents, self.notifications, timeout=timeout)
        self.admissions = AdmissionReconciler(store, self.notifications, timeout=timeout)


@lru_cache()
def get_services() -> PortalServices:
    """FastAPI dependency - process-wide services."""
    return PortalServices(get_document_store())


__all__ = [
    "AdmissionReconciler",
    "ApplicationStore",
    "CatalogService",
    "DocumentRegistry",
    "NotificationService",
    "PortalServices",
    "StudentProfileService",
    "get_services",
]
