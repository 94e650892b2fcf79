"""
Router for PDF uploads.

Handles:
- Storing an uploaded PDF as a new document
"""

import logging
import uuid

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from ..config import Settings
from ..dependencies import get_app_settings, get_store
from ..models import Document, UploadResponse
from ..services.pdf_service import is_pdf
from ..store import Store, StoreError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["upload"])


@router.post("/upload", response_model=UploadResponse)
async def upload_pdf(
    file: UploadFile | None = File(default=None, description="PDF file to store"),
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> UploadResponse:
    """
    Upload a PDF and store it as a new document.

    The payload must start with the PDF header and fit within the configured
    upload limit.
    """
    if file is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No file provided",
        )

    try:
        # Read one byte past the limit to detect oversized uploads
        pdf_data = await file.read(settings.max_upload_bytes + 1)
    finally:
        await file.close()

    if len(pdf_data) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File exceeds the {settings.max_upload_bytes} byte upload limit",
        )

    if not pdf_data:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Empty file provided",
        )

    if not is_pdf(pdf_data):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid PDF file",
        )

    doc = Document(
        id=str(uuid.uuid4()),
        filename=file.filename or "document.pdf",
        content_type="application/pdf",
        size=len(pdf_data),
        pdf_data=pdf_data,
    )

    try:
        store.save_document(doc)
    except StoreError as e:
        logger.error("Failed to save uploaded document %s: %s", doc.filename, e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to save document: {e}",
        )

    logger.info("Stored PDF %s as document %s (%d bytes)", doc.filename, doc.id, doc.size)
    return UploadResponse(id=doc.id, filename=doc.filename, size=doc.size)
