"""
Router for document types and their extraction schemas.
"""

import json

from fastapi import APIRouter

from ..models import DocumentTypesResponse
from ..services.ai import get_available_document_types, get_schema_for_document_type

router = APIRouter(prefix="", tags=["schemas"])


@router.get("/document-types", response_model=DocumentTypesResponse)
async def list_document_types() -> DocumentTypesResponse:
    """List the document types the classifier chooses from."""
    return DocumentTypesResponse(document_types=get_available_document_types())


@router.get("/schemas/{document_type}")
async def get_schema(document_type: str) -> dict:
    """
    Return the extraction schema used for a document type.

    Unknown types return the generic schema.
    """
    return json.loads(get_schema_for_document_type(document_type))
