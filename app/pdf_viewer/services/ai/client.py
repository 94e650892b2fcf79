"""
Agent client interface for document classification and extraction.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, TypeVar

from ...models import Classification, Extraction, TokenUsage

T = TypeVar("T")


@dataclass
class AgentResult(Generic[T]):
    """
    Outcome of one successful AI call.

    Attributes:
        result: Parsed classification or extraction.
        prompt: Prompt text that was sent.
        response_text: Raw text the model replied with.
        usage: Token counts and cost of the call.
    """

    result: T
    prompt: str
    response_text: str
    usage: TokenUsage


class AgentClient(ABC):
    """Classifies documents and extracts structured data from them."""

    @abstractmethod
    async def classify_document(self, pdf_data: bytes) -> AgentResult[Classification]:
        """
        Classify a PDF document.

        Raises:
            AIServiceError: If the call fails or the reply cannot be parsed.
        """

    @abstractmethod
    async def extract_data(
        self,
        pdf_data: bytes,
        document_type: str,
        schema: str,
    ) -> AgentResult[Extraction]:
        """
        Extract structured data from a PDF document according to a schema.

        Raises:
            AIServiceError: If the call fails or the reply cannot be parsed.
        """
