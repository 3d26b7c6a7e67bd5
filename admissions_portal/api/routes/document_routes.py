"""
Document Routes

POST /documents - Upload a credential (multipart: type + file)
GET /documents - My documents, newest first
GET /documents/types - Document types for the upload picker
GET /documents/formats - Accepted file formats
DELETE /documents/{document_id} - Delete one of my documents
"""

from typing import List

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.concurrency import run_in_threadpool

from admissions_portal.core.auth import get_current_student
from admissions_portal.models import Document, DocumentType
from admissions_portal.services import DocumentRegistry, PortalServices, get_services
from admissions_portal.utils.file_upload import read_upload, get_supported_formats
from admissions_portal.schemas.schemas import DocumentListResponse, DocumentTypeOption, MessageResponse

router = APIRouter(prefix="/documents", tags=["Documents"])


@router.post("", response_model=Document, status_code=201)
async def upload_document(
    type: DocumentType = Form(...),
    file: UploadFile = File(..., description="Credential file (PDF, DOCX, TXT, JPG or PNG)"),
    student: dict = Depends(get_current_student),
    services: PortalServices = Depends(get_services),
):
    """
    Upload a credential document.

    Process:
    1. Validate type and size
    2. Hand the bytes to file storage
    3. Record metadata (status starts as pending review)
    """
    content, filename = await read_upload(file)
    storage_ref = await run_in_threadpool(
        services.file_storage.save, student["student_id"], filename, content
    )
    return await run_in_threadpool(
        services.documents.upload, student["student_id"], type, storage_ref, filename
    )


@router.get("", response_model=DocumentListResponse)
def list_documents(
    student: dict = Depends(get_current_student),
    services: PortalServices = Depends(get_services),
):
    """Get all documents for current student."""
    return DocumentListResponse(documents=services.documents.list_by_student(student["student_id"]))


@router.get("/types", response_model=List[DocumentTypeOption])
def document_types():
    """Document types for the upload picker."""
    return DocumentRegistry.document_types()


@router.get("/formats")
def document_formats():
    """Get supported upload formats."""
    return get_supported_formats()


@router.delete("/{document_id}", response_model=MessageResponse)
def delete_document(
    document_id: str,
    student: dict = Depends(get_current_student),
    services: PortalServices = Depends(get_services),
):
    """Delete a document. Students can only delete their own."""
    services.documents.delete(document_id, student["student_id"])
    return MessageResponse(message="Document deleted successfully.")
