"""
Router for structured data extraction.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from ..dependencies import get_agent_client, get_store
from ..models import AgentType, ExtractRequest, ExtractResponse
from ..services.ai import AgentClient, AIServiceError, get_schema_for_document_type
from ..services.prompt_log import build_prompt_record, record_prompt
from ..store import NotFoundError, Store, StoreError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["extract"])


@router.post("/extract", response_model=ExtractResponse)
async def extract_data(
    request: ExtractRequest,
    store: Store = Depends(get_store),
    agent: AgentClient = Depends(get_agent_client),
) -> ExtractResponse:
    """
    Extract structured data from a stored document.

    The document type comes from the request when given, otherwise from the
    document's classification. The matching schema is sent to the model and
    recorded with the prompt.
    """
    try:
        doc = store.get_document(request.document_id)
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Document {request.document_id} not found",
        )

    document_type = request.document_type
    if not document_type:
        if doc.classification is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Document must be classified first or document_type must be provided",
            )
        document_type = doc.classification.document_type

    schema = get_schema_for_document_type(document_type)

    try:
        outcome = await agent.extract_data(doc.pdf_data, document_type, schema)
    except AIServiceError as e:
        logger.error("Extraction failed for document %s: %s", doc.id, e)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Extraction failed: {e}",
        )

    try:
        store.attach_extraction(doc.id, outcome.result)
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Document {doc.id} was deleted during extraction",
        )
    except StoreError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to save extraction: {e}",
        )

    record = build_prompt_record(doc.id, AgentType.EXTRACTION, outcome, schema=schema)
    record_prompt(store, record)

    return ExtractResponse(
        document_id=doc.id,
        extraction=outcome.result,
        prompt_id=record.id,
        schema_used=schema,
    )
