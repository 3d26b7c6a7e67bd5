"""
File Upload Utility - validate credential uploads before storage.

Supported formats:
- PDF (.pdf)
- Word (.docx)
- Plain Text (.txt)
- Images (.jpg, .jpeg, .png) for scanned certificates

Max file size comes from settings.max_upload_mb (5MB by default).
"""

from typing import Tuple
from fastapi import UploadFile, HTTPException

from admissions_portal.core.config import get_settings

ALLOWED_EXTENSIONS = {'.pdf', '.docx', '.txt', '.jpg', '.jpeg', '.png'}


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension."""
    if '.' not in filename:
        return ''
    return '.' + filename.rsplit('.', 1)[1].lower()


async def read_upload(file: UploadFile) -> Tuple[bytes, str]:
    """
    Read and validate an uploaded credential.

    Args:
        file: FastAPI UploadFile

    Returns:
        Tuple of (content, filename)

    Raises:
        HTTPException on validation errors
    """
    settings = get_settings()

    # Validate filename
    if not file.filename:
        raise HTTPException(status_code=400, detail="No filename provided")

    ext = get_file_extension(file.filename)
    if ext not in ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type '{ext}'. Allowed: PDF, DOCX, TXT, JPG, PNG"
        )

    content = await file.read()

    if not content:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")

    if len(content) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size: {settings.max_upload_mb}MB"
        )

    return content, file.filename


def get_supported_formats() -> dict:
    """Get info about supported file formats."""
    return {
        "supported_formats": sorted(ALLOWED_EXTENSIONS),
        "max_size_mb": get_settings().max_upload_mb
    }
