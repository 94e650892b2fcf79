"""
AI agent package for document classification and data extraction.

This package provides:
- client: the AgentClient interface and AgentResult record
- openai_client: OpenAI vision implementation
- mock_client: canned implementation for development and tests
- parsing: recovery of JSON payloads from free-form model output
- prompts / schemas: prompt templates and per-type extraction schemas
"""

import logging

from ...config import Settings
from ..pdf_service import PDFService
from .client import AgentClient, AgentResult
from .exceptions import AIServiceError
from .mock_client import MockAgentClient
from .openai_client import OpenAIAgentClient
from .parsing import extract_json, parse_classification_response, parse_extraction_response
from .prompts import build_classification_prompt, build_extraction_prompt
from .schemas import get_available_document_types, get_schema_for_document_type

logger = logging.getLogger(__name__)

__all__ = [
    "AIServiceError",
    "AgentClient",
    "AgentResult",
    "MockAgentClient",
    "OpenAIAgentClient",
    "build_classification_prompt",
    "build_extraction_prompt",
    "create_agent_client",
    "extract_json",
    "get_available_document_types",
    "get_schema_for_document_type",
    "parse_classification_response",
    "parse_extraction_response",
]


def create_agent_client(settings: Settings) -> AgentClient:
    """
    Build the agent client for the configured environment.

    Falls back to the mock client when no OpenAI API key is configured.
    """
    if not settings.openai_api_key:
        logger.warning(
            "AI agent running in MOCK MODE. Set OPENAI_API_KEY in .env for real classification."
        )
        return MockAgentClient()

    return OpenAIAgentClient(
        api_key=settings.openai_api_key,
        model=settings.openai_model,
        pdf_service=PDFService(dpi=settings.pdf_dpi),
    )
