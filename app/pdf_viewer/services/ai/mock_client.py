"""
Deterministic agent client for development and tests.
"""

import logging
from collections.abc import Callable

from ...models import Classification, ExtractedField, Extraction, TokenUsage, calculate_cost
from .client import AgentClient, AgentResult
from .prompts import build_classification_prompt, build_extraction_prompt

logger = logging.getLogger(__name__)

MOCK_MODEL = "gpt-4.1"

ClassifyFunc = Callable[[bytes], AgentResult[Classification]]
ExtractFunc = Callable[[bytes, str, str], AgentResult[Extraction]]


def _usage(input_tokens: int, output_tokens: int) -> TokenUsage:
    return TokenUsage(
        model=MOCK_MODEL,
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        total_cost=calculate_cost(MOCK_MODEL, input_tokens, output_tokens),
    )


class MockAgentClient(AgentClient):
    """
    Agent client returning canned results without calling any API.

    Either behaviour can be replaced by passing a callable, which receives the
    same arguments as the corresponding method and may raise to simulate a
    provider failure.
    """

    def __init__(
        self,
        classify_func: ClassifyFunc | None = None,
        extract_func: ExtractFunc | None = None,
    ):
        self.classify_func = classify_func
        self.extract_func = extract_func

    async def classify_document(self, pdf_data: bytes) -> AgentResult[Classification]:
        if self.classify_func is not None:
            return self.classify_func(pdf_data)

        logger.info("Classifying document (MOCK MODE, %d bytes)", len(pdf_data))
        classification = Classification(
            document_type="invoice",
            confidence=0.95,
            reasoning="Mock classification",
            language="en",
        )
        return AgentResult(
            result=classification,
            prompt=build_classification_prompt(),
            response_text=classification.model_dump_json(exclude_none=True, indent=2),
            usage=_usage(1000, 200),
        )

    async def extract_data(
        self,
        pdf_data: bytes,
        document_type: str,
        schema: str,
    ) -> AgentResult[Extraction]:
        if self.extract_func is not None:
            return self.extract_func(pdf_data, document_type, schema)

        logger.info("Extracting data (MOCK MODE) for document type: %s", document_type)
        extraction = Extraction(
            schema_used=document_type,
            data={"total": 100.00},
            fields=[
                ExtractedField(
                    name="total",
                    value=100.00,
                    source_text="$100.00",
                    page_number=1,
                    confidence=0.95,
                ),
            ],
        )
        return AgentResult(
            result=extraction,
            prompt=build_extraction_prompt(document_type, schema),
            response_text=extraction.model_dump_json(indent=2),
            usage=_usage(2000, 500),
        )
