"""
Agent client backed by OpenAI vision models.

Renders PDF pages to images, sends them with the classification or extraction
prompt, and recovers the JSON object from the reply.
"""

import asyncio
import logging
from typing import Any

from openai import AsyncOpenAI, OpenAIError

from ...models import Classification, Extraction, TokenUsage, calculate_cost
from ..pdf_service import PDFService
from .client import AgentClient, AgentResult
from .exceptions import AIServiceError
from .parsing import parse_classification_response, parse_extraction_response
from .prompts import build_classification_prompt, build_extraction_prompt

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a meticulous document analyst.
You read scanned or digital document pages and answer ONLY with a single JSON object
in the exact structure requested by the user. Never invent values that are not in the document."""

CLASSIFY_MAX_TOKENS = 1024
EXTRACT_MAX_TOKENS = 4096


class OpenAIAgentClient(AgentClient):
    """Classifies and extracts documents with an OpenAI chat completion model."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4.1",
        pdf_service: PDFService | None = None,
        client: Any = None,
    ):
        """
        Initialize the agent client.

        Args:
            api_key: OpenAI API key.
            model: OpenAI model to use (must support vision).
            pdf_service: Renderer for page images; a default one is created if omitted.
            client: Pre-built AsyncOpenAI client, mainly for tests.
        """
        self.api_key = api_key
        self.model = model
        self.pdf_service = pdf_service or PDFService()
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        """Lazy-load the OpenAI client."""
        if self._client is None:
            if not self.api_key:
                raise AIServiceError(
                    "OpenAI API key not provided. Set OPENAI_API_KEY environment variable."
                )
            self._client = AsyncOpenAI(api_key=self.api_key)
        return self._client

    async def classify_document(self, pdf_data: bytes) -> AgentResult[Classification]:
        prompt = build_classification_prompt()
        response_text, usage = await self._complete(pdf_data, prompt, CLASSIFY_MAX_TOKENS)
        classification = parse_classification_response(response_text)

        logger.info(
            "Classified document as '%s' (confidence %.2f, %d+%d tokens)",
            classification.document_type,
            classification.confidence,
            usage.input_tokens,
            usage.output_tokens,
        )
        return AgentResult(
            result=classification,
            prompt=prompt,
            response_text=response_text,
            usage=usage,
        )

    async def extract_data(
        self,
        pdf_data: bytes,
        document_type: str,
        schema: str,
    ) -> AgentResult[Extraction]:
        prompt = build_extraction_prompt(document_type, schema)
        response_text, usage = await self._complete(pdf_data, prompt, EXTRACT_MAX_TOKENS)
        extraction = parse_extraction_response(response_text)

        logger.info(
            "Extracted %d field(s) from %s document (%d+%d tokens)",
            len(extraction.fields),
            document_type,
            usage.input_tokens,
            usage.output_tokens,
        )
        return AgentResult(
            result=extraction,
            prompt=prompt,
            response_text=response_text,
            usage=usage,
        )

    def _build_content(self, pdf_data: bytes, prompt: str) -> list[dict[str, Any]]:
        """Build the user message content: the prompt followed by every page image."""
        images = self.pdf_service.convert_pdf_to_images(pdf_data)
        media_type = f"image/{self.pdf_service.image_format.lower()}"

        content: list[dict[str, Any]] = [{"type": "text", "text": prompt}]
        for image in images:
            content.append({
                "type": "image_url",
                "image_url": {
                    "url": f"data:{media_type};base64,{self.pdf_service.image_to_base64(image)}",
                    "detail": "high",
                },
            })
        return content

    async def _complete(
        self,
        pdf_data: bytes,
        prompt: str,
        max_tokens: int,
    ) -> tuple[str, TokenUsage]:
        """
        Send one prompt with the document pages and return the reply text and usage.

        Raises:
            AIServiceError: If the API call fails or returns no text.
            PDFConversionError: If the document cannot be rendered.
        """
        # poppler and Pillow calls block
        content = await asyncio.to_thread(self._build_content, pdf_data, prompt)

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": content},
                ],
                response_format={"type": "json_object"},
                max_tokens=max_tokens,
            )
        except OpenAIError as e:
            logger.error("OpenAI API error: %s", e)
            raise AIServiceError(f"OpenAI API error: {e}") from e

        response_text = response.choices[0].message.content if response.choices else None
        if not response_text:
            raise AIServiceError("Empty response from OpenAI")

        input_tokens = response.usage.prompt_tokens if response.usage else 0
        output_tokens = response.usage.completion_tokens if response.usage else 0
        usage = TokenUsage(
            model=self.model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            total_cost=calculate_cost(self.model, input_tokens, output_tokens),
        )
        return response_text, usage
