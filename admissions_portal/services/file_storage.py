"""
File storage collaborator for document bytes.

The registry only keeps the reference returned by save(); where the bytes
live is this module's business. LocalFileStorage writes under
settings.upload_dir, one sub-directory per student.
"""

import logging
import os
import uuid
from abc import ABC, abstractmethod
from typing import Optional

from admissions_portal.core.config import get_settings
from admissions_portal.core.errors import Unauthorized

logger = logging.getLogger(__name__)


class FileStorage(ABC):

    @abstractmethod
    def save(self, student_id: str, filename: str, content: bytes) -> str:
        """Store bytes and return an opaque reference."""

    @abstractmethod
    def delete(self, reference: str) -> bool:
        ...


class LocalFileStorage(FileStorage):

    def __init__(self, root: str = None):
        self.root = os.path.abspath(root or get_settings().upload_dir)

    def _inside_root(self, relative: str) -> Optional[str]:
        """Absolute path for `relative`, or None when it resolves outside the root."""
        path = os.path.abspath(os.path.join(self.root, relative))
        if not path.startswith(self.root + os.sep):
            return None
        return path

    def save(self, student_id: str, filename: str, content: bytes) -> str:
        directory = self._inside_root(student_id)
        if directory is None:
            logger.warning("Refusing to store outside upload dir for owner %r", student_id)
            raise Unauthorized("Invalid document owner")
        os.makedirs(directory, exist_ok=True)
        # Keep the extension, drop the client-supplied name
        ext = os.path.splitext(filename)[1].lower()
        stored_name = f"{uuid.uuid4().hex}{ext}"
        with open(os.path.join(directory, stored_name), "wb") as f:
            f.write(content)
        return f"{student_id}/{stored_name}"

    def delete(self, reference: str) -> bool:
        path = self._inside_root(reference)
        if path is None:
            logger.warning("Refusing to delete outside upload dir: %s", reference)
            return False
        try:
            os.remove(path)
            return True
        except FileNotFoundError:
            return False
