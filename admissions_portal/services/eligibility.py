"""
Eligibility Evaluator

Minimum-bar check run before a course application is accepted for
submission: the student must hold at least one transcript-class
credential. Course requirement text is shown to students but is advisory
only and is not parsed here.
"""

from typing import Iterable, List, Optional, Union

from admissions_portal.models import Course, Document, DocumentType

TRANSCRIPT_CLASS = frozenset({
    DocumentType.high_school_transcript.value,
    DocumentType.certificate.value,
})


def _doc_type(document: Union[Document, dict, None]) -> Optional[str]:
    if document is None:
        return None
    if isinstance(document, dict):
        value = document.get("type")
    else:
        value = getattr(document, "type", None)
    return getattr(value, "value", value)


def is_eligible(student_documents: Iterable[Union[Document, dict]], course: Optional[Course] = None) -> bool:
    """True if any document is a transcript-class credential. Never raises."""
    return any(_doc_type(doc) in TRANSCRIPT_CLASS for doc in (student_documents or ()))


def missing_requirements(student_documents: Iterable[Union[Document, dict]], course: Optional[Course] = None) -> List[str]:
    """Human-readable list of what is missing; empty when eligible."""
    if is_eligible(student_documents, course):
        return []
    return ["High School Transcript or Certificate"]
