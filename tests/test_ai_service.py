"""Tests for the AI agent clients, response parsing, prompts and schemas."""

import json
import threading
from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

import pytest
from openai import OpenAIError
from PIL import Image

from app.pdf_viewer.config import Settings
from app.pdf_viewer.models import Classification, Extraction, TokenUsage
from app.pdf_viewer.services.ai import (
    AgentResult,
    AIServiceError,
    MockAgentClient,
    OpenAIAgentClient,
    build_classification_prompt,
    build_extraction_prompt,
    create_agent_client,
    extract_json,
    get_available_document_types,
    get_schema_for_document_type,
    parse_classification_response,
    parse_extraction_response,
)
from app.pdf_viewer.services.ai.schemas import DOCUMENT_SCHEMAS, GENERIC_SCHEMA
from app.pdf_viewer.services.pdf_service import PDFService


class TestExtractJSON:
    """Tests for recovering JSON objects from model output."""

    def test_plain_object(self):
        """Test that a bare object is returned unchanged."""
        assert extract_json('{"key": "value"}') == '{"key": "value"}'

    def test_json_code_block(self):
        """Test extraction from a ```json fenced block with surrounding text."""
        text = 'Here is the result:\n```json\n{"key": "value"}\n```\nEnd of response.'

        assert extract_json(text) == '{"key": "value"}'

    def test_generic_code_block(self):
        """Test extraction from an unlabelled fenced block."""
        assert extract_json('```\n{"key": "value"}\n```') == '{"key": "value"}'

    def test_nested_objects(self):
        """Test that the full nested structure is kept."""
        text = '{"outer": {"inner": {"value": 123}}}'

        assert extract_json(text) == text

    def test_text_before_and_after(self):
        """Test that commentary around the object is dropped."""
        text = (
            "Based on my analysis, here is the classification:\n\n"
            '{\n  "document_type": "invoice",\n  "confidence": 0.95\n}\n\n'
            "This appears to be an invoice."
        )

        result = extract_json(text)

        assert result.startswith("{")
        assert result.endswith("}")
        assert json.loads(result) == {"document_type": "invoice", "confidence": 0.95}

    def test_arrays_of_objects(self):
        """Test that braces inside arrays are balanced correctly."""
        text = '{"items": [{"name": "item1"}, {"name": "item2"}]}'

        assert extract_json(text) == text

    def test_braces_inside_strings(self):
        """Test that braces in string values do not end the object early."""
        text = 'Result: {"note": "use } and { freely", "escaped": "say \\"}\\""} trailing'

        result = extract_json(text)

        assert json.loads(result) == {"note": "use } and { freely", "escaped": 'say "}"'}

    def test_first_object_wins(self):
        """Test that only the first complete object is returned."""
        assert extract_json('{"a": 1} {"b": 2}') == '{"a": 1}'

    def test_empty_input(self):
        """Test that empty input yields an empty string."""
        assert extract_json("") == ""

    def test_no_json(self):
        """Test that text without braces is returned as-is."""
        text = "This is just plain text with no JSON"

        assert extract_json(text) == text

    def test_unclosed_object(self):
        """Test that an unclosed object runs to the end of the text."""
        assert extract_json('prefix {"key": "val') == '{"key": "val'

    def test_unclosed_fence(self):
        """Test that an unterminated fence still yields its object."""
        assert extract_json('```json\n{"key": 1}') == '{"key": 1}'


class TestParseResponses:
    """Tests for validating parsed replies into result models."""

    def test_parse_classification(self):
        """Test parsing a fenced classification reply."""
        text = '```json\n{"document_type": "receipt", "confidence": 0.8, "reasoning": "Store name"}\n```'

        result = parse_classification_response(text)

        assert result.document_type == "receipt"
        assert result.confidence == 0.8
        assert result.reasoning == "Store name"

    def test_parse_classification_invalid_json(self):
        """Test that malformed JSON raises AIServiceError."""
        with pytest.raises(AIServiceError, match="classification"):
            parse_classification_response("I could not read the document")

    def test_parse_classification_out_of_range_confidence(self):
        """Test that a confidence above 1 is rejected."""
        with pytest.raises(AIServiceError):
            parse_classification_response('{"document_type": "invoice", "confidence": 1.5}')

    def test_parse_extraction(self):
        """Test parsing an extraction reply with field provenance."""
        text = json.dumps(
            {
                "schema_used": "invoice",
                "data": {"total": 42.0, "currency": None},
                "fields": [
                    {
                        "name": "total",
                        "value": 42.0,
                        "source_text": "Total: $42.00",
                        "page_number": 2,
                        "confidence": 0.9,
                    }
                ],
            }
        )

        result = parse_extraction_response(text)

        assert result.schema_used == "invoice"
        assert result.data == {"total": 42.0, "currency": None}
        assert result.fields[0].page_number == 2

    def test_parse_extraction_missing_schema_used(self):
        """Test that a reply without schema_used is rejected."""
        with pytest.raises(AIServiceError, match="extraction"):
            parse_extraction_response('{"data": {}}')


class TestSchemas:
    """Tests for the per-type extraction schemas."""

    def test_all_schemas_are_valid_json(self):
        """Test that every schema parses as a JSON object schema."""
        for document_type, schema in {**DOCUMENT_SCHEMAS, "generic": GENERIC_SCHEMA}.items():
            parsed = json.loads(schema)
            assert parsed["type"] == "object", document_type
            assert parsed["properties"], document_type

    def test_known_type(self):
        """Test that a known type returns its dedicated schema."""
        assert get_schema_for_document_type("invoice") == DOCUMENT_SCHEMAS["invoice"]

    def test_lookup_is_case_insensitive(self):
        """Test that type lookup ignores case and surrounding whitespace."""
        assert get_schema_for_document_type("  Invoice ") == DOCUMENT_SCHEMAS["invoice"]

    def test_unknown_type_gets_generic(self):
        """Test that unrecognised types fall back to the generic schema."""
        assert get_schema_for_document_type("spaceship manual") == GENERIC_SCHEMA

    def test_available_types(self):
        """Test that every dedicated schema type is offered to the classifier."""
        types = get_available_document_types()

        assert set(DOCUMENT_SCHEMAS) <= set(types)
        assert "other" in types

    def test_available_types_is_a_copy(self):
        """Test that callers cannot mutate the shared type list."""
        get_available_document_types().append("bogus")

        assert "bogus" not in get_available_document_types()


class TestPrompts:
    """Tests for prompt construction."""

    def test_classification_prompt_lists_fields(self):
        """Test that the classification prompt asks for every result field."""
        prompt = build_classification_prompt()

        for field in ("document_type", "confidence", "reasoning", "subtypes", "language"):
            assert field in prompt

    def test_extraction_prompt_embeds_type_and_schema(self):
        """Test that the extraction prompt includes the type and schema text."""
        schema = DOCUMENT_SCHEMAS["receipt"]

        prompt = build_extraction_prompt("receipt", schema)

        assert schema in prompt
        assert '"schema_used": "receipt"' in prompt
        assert '"source_text"' in prompt
        assert "{{" not in prompt


class TestMockAgentClient:
    """Tests for the canned agent client."""

    @pytest.mark.asyncio
    async def test_classify_defaults(self):
        """Test the default classification result and usage."""
        outcome = await MockAgentClient().classify_document(b"%PDF-1.4")

        assert outcome.result.document_type == "invoice"
        assert outcome.result.confidence == 0.95
        assert outcome.prompt == build_classification_prompt()
        assert json.loads(outcome.response_text)["document_type"] == "invoice"
        assert outcome.usage.input_tokens == 1000
        assert outcome.usage.output_tokens == 200
        assert outcome.usage.total_cost == pytest.approx(0.0036)

    @pytest.mark.asyncio
    async def test_extract_defaults(self):
        """Test the default extraction result and usage."""
        outcome = await MockAgentClient().extract_data(b"%PDF-1.4", "invoice", "{}")

        assert outcome.result.schema_used == "invoice"
        assert outcome.result.data == {"total": 100.0}
        assert outcome.result.fields[0].source_text == "$100.00"
        assert outcome.usage.input_tokens == 2000
        assert outcome.usage.output_tokens == 500

    @pytest.mark.asyncio
    async def test_classify_override(self):
        """Test that a custom classify function replaces the default."""
        expected = AgentResult(
            result=Classification(document_type="letter", confidence=0.5),
            prompt="p",
            response_text="r",
            usage=TokenUsage(model="test"),
        )
        calls = []

        def classify(pdf_data):
            calls.append(pdf_data)
            return expected

        outcome = await MockAgentClient(classify_func=classify).classify_document(b"data")

        assert outcome is expected
        assert calls == [b"data"]

    @pytest.mark.asyncio
    async def test_extract_override_can_fail(self):
        """Test that a custom extract function may raise to simulate failures."""

        def extract(pdf_data, document_type, schema):
            raise AIServiceError("provider down")

        with pytest.raises(AIServiceError, match="provider down"):
            await MockAgentClient(extract_func=extract).extract_data(b"data", "invoice", "{}")


def _completion(content, prompt_tokens=1000, completion_tokens=200):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=SimpleNamespace(prompt_tokens=prompt_tokens, completion_tokens=completion_tokens),
    )


class TestOpenAIAgentClient:
    """Tests for the OpenAI-backed client with the API and renderer mocked."""

    @pytest.fixture
    def pdf_service(self):
        service = PDFService()
        service.convert_pdf_to_images = Mock(
            return_value=[Image.new("RGB", (20, 20), "white"), Image.new("RGB", (20, 20), "black")]
        )
        return service

    @pytest.fixture
    def api(self):
        api = Mock()
        api.chat.completions.create = AsyncMock()
        return api

    @pytest.fixture
    def agent(self, api, pdf_service):
        return OpenAIAgentClient(api_key="sk-test", model="gpt-4.1", pdf_service=pdf_service, client=api)

    @pytest.mark.asyncio
    async def test_classify(self, agent, api):
        """Test classification parses the reply and prices the usage."""
        reply = 'Sure!\n```json\n{"document_type": "contract", "confidence": 0.88, "reasoning": "Signatures"}\n```'
        api.chat.completions.create.return_value = _completion(reply)

        outcome = await agent.classify_document(b"%PDF-1.4 data")

        assert outcome.result.document_type == "contract"
        assert outcome.response_text == reply
        assert outcome.prompt == build_classification_prompt()
        assert outcome.usage.model == "gpt-4.1"
        assert outcome.usage.input_tokens == 1000
        assert outcome.usage.output_tokens == 200
        assert outcome.usage.total_cost == pytest.approx(0.0036)

    @pytest.mark.asyncio
    async def test_request_contains_prompt_and_pages(self, agent, api):
        """Test that the prompt and one image per page are sent."""
        api.chat.completions.create.return_value = _completion(
            '{"document_type": "invoice", "confidence": 0.9}'
        )

        await agent.classify_document(b"%PDF-1.4 data")

        kwargs = api.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4.1"
        assert kwargs["response_format"] == {"type": "json_object"}
        user_content = kwargs["messages"][1]["content"]
        assert user_content[0] == {"type": "text", "text": build_classification_prompt()}
        images = [part for part in user_content if part["type"] == "image_url"]
        assert len(images) == 2
        assert images[0]["image_url"]["url"].startswith("data:image/png;base64,")

    @pytest.mark.asyncio
    async def test_pages_render_off_the_event_loop(self, agent, api, pdf_service):
        """Test that page rendering runs in a worker thread, not the loop's thread."""
        render_threads = []

        def render(pdf_bytes):
            render_threads.append(threading.get_ident())
            return [Image.new("RGB", (20, 20), "white")]

        pdf_service.convert_pdf_to_images = Mock(side_effect=render)
        api.chat.completions.create.return_value = _completion(
            '{"document_type": "invoice", "confidence": 0.9}'
        )

        await agent.classify_document(b"%PDF-1.4 data")

        assert render_threads
        assert render_threads[0] != threading.get_ident()

    @pytest.mark.asyncio
    async def test_extract(self, agent, api):
        """Test extraction sends the schema and parses the reply."""
        schema = get_schema_for_document_type("invoice")
        api.chat.completions.create.return_value = _completion(
            '{"schema_used": "invoice", "data": {"total": 9.5}, "fields": []}',
            prompt_tokens=3000,
            completion_tokens=1000,
        )

        outcome = await agent.extract_data(b"%PDF-1.4 data", "invoice", schema)

        assert isinstance(outcome.result, Extraction)
        assert outcome.result.data == {"total": 9.5}
        assert schema in outcome.prompt
        assert outcome.usage.total_cost == pytest.approx(0.014)

    @pytest.mark.asyncio
    async def test_api_error_is_wrapped(self, agent, api):
        """Test that provider errors surface as AIServiceError."""
        api.chat.completions.create.side_effect = OpenAIError("rate limited")

        with pytest.raises(AIServiceError, match="rate limited"):
            await agent.classify_document(b"%PDF-1.4 data")

    @pytest.mark.asyncio
    async def test_empty_reply(self, agent, api):
        """Test that an empty reply is an error."""
        api.chat.completions.create.return_value = _completion("")

        with pytest.raises(AIServiceError, match="Empty response"):
            await agent.classify_document(b"%PDF-1.4 data")

    @pytest.mark.asyncio
    async def test_unparseable_reply(self, agent, api):
        """Test that a reply without valid JSON is an error."""
        api.chat.completions.create.return_value = _completion("I cannot help with that.")

        with pytest.raises(AIServiceError):
            await agent.extract_data(b"%PDF-1.4 data", "invoice", "{}")

    def test_missing_api_key(self):
        """Test that using the client without a key fails clearly."""
        agent = OpenAIAgentClient(api_key="")

        with pytest.raises(AIServiceError, match="API key"):
            agent.client


class TestCreateAgentClient:
    """Tests for choosing an agent client from settings."""

    def test_mock_without_api_key(self):
        """Test that the mock client is used when no key is configured."""
        client = create_agent_client(Settings(openai_api_key=None))

        assert isinstance(client, MockAgentClient)

    def test_openai_with_api_key(self):
        """Test that a configured key selects the OpenAI client."""
        client = create_agent_client(
            Settings(openai_api_key="sk-test", openai_model="gpt-4o-mini", pdf_dpi=100)
        )

        assert isinstance(client, OpenAIAgentClient)
        assert client.model == "gpt-4o-mini"
        assert client.pdf_service.dpi == 100
