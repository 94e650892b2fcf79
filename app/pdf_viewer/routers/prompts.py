"""
Router for the prompt audit trail.
"""

import logging

from fastapi import APIRouter, Depends

from ..dependencies import get_store
from ..models import PromptRecord
from ..store import NotFoundError, Store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/prompts", tags=["prompts"])


@router.get("/{record_id}", response_model=PromptRecord | list[PromptRecord])
async def get_prompt_history(
    record_id: str,
    store: Store = Depends(get_store),
) -> PromptRecord | list[PromptRecord]:
    """
    Look up prompt records.

    If ``record_id`` names a prompt record it is returned on its own;
    otherwise it is treated as a document ID and every prompt record for
    that document is returned in creation order (possibly none).
    """
    try:
        return store.get_prompt(record_id)
    except NotFoundError:
        pass

    prompts = store.get_prompts_by_document(record_id)
    logger.debug("Found %d prompt record(s) for document %s", len(prompts), record_id)
    return prompts
