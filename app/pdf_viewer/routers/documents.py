"""
Router for document retrieval.

Handles:
- Paged document listing
- Full document retrieval including the PDF payload
"""

import base64
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..dependencies import get_store
from ..models import Document, DocumentListResponse, DocumentResponse, DocumentSummary
from ..store import NotFoundError, Store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])


def _summarize(doc: Document) -> DocumentSummary:
    return DocumentSummary(
        id=doc.id,
        filename=doc.filename,
        content_type=doc.content_type,
        size=doc.size,
        document_type=doc.classification.document_type if doc.classification else None,
        has_extraction=doc.extraction is not None,
        created_at=doc.created_at.isoformat(),
    )


@router.get("", response_model=DocumentListResponse)
async def list_documents(
    store: Store = Depends(get_store),
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
) -> DocumentListResponse:
    """
    List stored documents, newest first.

    Args:
        store: Document store.
        limit: Maximum number of documents to return.
        offset: Number of documents to skip.

    Returns:
        Document summaries without the PDF payload.
    """
    docs = store.list_documents(limit=limit, offset=offset)
    return DocumentListResponse(
        documents=[_summarize(doc) for doc in docs],
        limit=limit,
        offset=offset,
    )


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: str,
    store: Store = Depends(get_store),
) -> DocumentResponse:
    """
    Retrieve a document with its PDF payload and AI results.

    Args:
        document_id: ID of the document.
        store: Document store.

    Returns:
        The document, with the PDF encoded as base64.
    """
    try:
        doc = store.get_document(document_id)
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Document {document_id} not found",
        )

    return DocumentResponse(
        id=doc.id,
        filename=doc.filename,
        content_type=doc.content_type,
        size=doc.size,
        pdf_base64=base64.b64encode(doc.pdf_data).decode("ascii"),
        classification=doc.classification,
        extraction=doc.extraction,
        created_at=doc.created_at.isoformat(),
    )
