"""
Router for document classification.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from ..dependencies import get_agent_client, get_store
from ..models import AgentType, ClassifyRequest, ClassifyResponse
from ..services.ai import AgentClient, AIServiceError
from ..services.prompt_log import build_prompt_record, record_prompt
from ..store import NotFoundError, Store, StoreError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["classify"])


@router.post("/classify", response_model=ClassifyResponse)
async def classify_document(
    request: ClassifyRequest,
    store: Store = Depends(get_store),
    agent: AgentClient = Depends(get_agent_client),
) -> ClassifyResponse:
    """
    Classify a stored document and attach the result to it.

    Also records the prompt, response and cost of the AI call.
    """
    try:
        doc = store.get_document(request.document_id)
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Document {request.document_id} not found",
        )

    try:
        outcome = await agent.classify_document(doc.pdf_data)
    except AIServiceError as e:
        logger.error("Classification failed for document %s: %s", doc.id, e)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Classification failed: {e}",
        )

    # Only the classification column is written, so a concurrent extraction is kept
    try:
        store.attach_classification(doc.id, outcome.result)
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Document {doc.id} was deleted during classification",
        )
    except StoreError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to save classification: {e}",
        )

    record = build_prompt_record(doc.id, AgentType.CLASSIFICATION, outcome)
    record_prompt(store, record)

    return ClassifyResponse(
        document_id=doc.id,
        classification=outcome.result,
        prompt_id=record.id,
    )
