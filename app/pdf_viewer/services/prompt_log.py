"""
Prompt audit trail helpers.

Every AI call made for a document is recorded as a PromptRecord. Recording is
best effort: the document update is what callers depend on, so a failure to
store the audit entry is logged and not propagated.
"""

import logging
import uuid

from ..models import AgentType, PromptRecord
from ..store import Store, StoreError
from .ai import AgentResult

logger = logging.getLogger(__name__)


def build_prompt_record(
    document_id: str,
    agent_type: AgentType,
    outcome: AgentResult,
    schema: str | None = None,
) -> PromptRecord:
    """Create the audit record for one completed AI call."""
    return PromptRecord(
        id=str(uuid.uuid4()),
        document_id=document_id,
        agent_type=agent_type,
        prompt=outcome.prompt,
        response=outcome.response_text,
        schema_text=schema,
        model=outcome.usage.model,
        input_tokens=outcome.usage.input_tokens,
        output_tokens=outcome.usage.output_tokens,
        total_cost=outcome.usage.total_cost,
    )


def record_prompt(store: Store, record: PromptRecord) -> bool:
    """
    Save a prompt record, logging instead of raising on storage failure.

    Returns:
        True if the record was stored.
    """
    try:
        store.save_prompt(record)
    except StoreError as e:
        logger.error(
            "Failed to save %s prompt record %s for document %s: %s",
            record.agent_type.value,
            record.id,
            record.document_id,
            e,
        )
        return False

    logger.info(
        "Recorded %s prompt %s for document %s (%s, $%.4f)",
        record.agent_type.value,
        record.id,
        record.document_id,
        record.model,
        record.total_cost,
    )
    return True
