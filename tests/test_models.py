"""Tests for Pydantic models."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from app.pdf_viewer.models import (
    AgentType,
    Classification,
    Document,
    ExtractedField,
    PromptRecord,
    calculate_cost,
)


class TestClassification:
    """Tests for Classification model."""

    def test_valid_classification(self):
        """Test creating a classification with defaults."""
        classification = Classification(document_type="invoice", confidence=0.9)
        assert classification.reasoning == ""
        assert classification.subtypes is None
        assert classification.language is None

    def test_confidence_bounds(self):
        """Test that confidence must lie between 0 and 1."""
        with pytest.raises(ValidationError):
            Classification(document_type="invoice", confidence=1.1)
        with pytest.raises(ValidationError):
            Classification(document_type="invoice", confidence=-0.1)


class TestExtractedField:
    """Tests for ExtractedField model."""

    def test_defaults(self):
        """Test that provenance defaults to page 1 with no source text."""
        field = ExtractedField(name="total", value=10)
        assert field.page_number == 1
        assert field.source_text == ""

    def test_page_numbers_are_one_indexed(self):
        """Test that page 0 is rejected."""
        with pytest.raises(ValidationError):
            ExtractedField(name="total", page_number=0)


class TestDocument:
    """Tests for Document model."""

    def test_pdf_data_excluded_from_dump(self):
        """Test that the raw payload never appears in serialized output."""
        doc = Document(id="d1", filename="a.pdf", size=3, pdf_data=b"%PDF")

        assert "pdf_data" not in doc.model_dump()
        assert "pdf_data" not in doc.model_dump_json()
        assert "PDF" not in repr(doc)

    def test_created_at_defaults_to_utc_now(self):
        """Test that new documents get an aware UTC timestamp."""
        doc = Document(id="d1", filename="a.pdf", size=0)
        assert doc.created_at.tzinfo is not None
        assert doc.created_at.utcoffset() == timedelta(0)

    def test_naive_created_at_treated_as_utc(self):
        """Test that naive timestamps are interpreted as UTC."""
        doc = Document(id="d1", filename="a.pdf", size=0, created_at=datetime(2025, 1, 1, 9, 30))
        assert doc.created_at == datetime(2025, 1, 1, 9, 30, tzinfo=timezone.utc)

    def test_offset_created_at_converted_to_utc(self):
        """Test that timestamps in other zones are converted to UTC."""
        plus_two = timezone(timedelta(hours=2))
        doc = Document(
            id="d1",
            filename="a.pdf",
            size=0,
            created_at=datetime(2025, 1, 1, 12, 0, tzinfo=plus_two),
        )
        assert doc.created_at.utcoffset() == timedelta(0)
        assert doc.created_at.hour == 10

    def test_negative_size_rejected(self):
        """Test that sizes cannot be negative."""
        with pytest.raises(ValidationError):
            Document(id="d1", filename="a.pdf", size=-1)


class TestPromptRecord:
    """Tests for PromptRecord model."""

    def test_schema_alias(self):
        """Test that the schema text serializes under the 'schema' key."""
        record = PromptRecord(
            id="p1",
            document_id="d1",
            agent_type=AgentType.EXTRACTION,
            schema_text='{"type": "object"}',
        )

        dumped = record.model_dump(by_alias=True)
        assert dumped["schema"] == '{"type": "object"}'
        assert "schema_text" not in dumped

    def test_populate_by_alias(self):
        """Test that records can be built from JSON using the 'schema' key."""
        record = PromptRecord.model_validate(
            {"id": "p1", "document_id": "d1", "agent_type": "extraction", "schema": "{}"}
        )
        assert record.schema_text == "{}"
        assert record.agent_type is AgentType.EXTRACTION

    def test_unknown_agent_type_rejected(self):
        """Test that only classification and extraction are accepted."""
        with pytest.raises(ValidationError):
            PromptRecord(id="p1", document_id="d1", agent_type="summarization")


class TestCalculateCost:
    """Tests for token cost calculation."""

    def test_default_model(self):
        """Test pricing for the default model."""
        assert calculate_cost("gpt-4.1", 1_000_000, 1_000_000) == pytest.approx(10.0)

    def test_small_call(self):
        """Test a typical classification call."""
        assert calculate_cost("gpt-4.1", 1000, 200) == pytest.approx(0.0036)

    def test_cheaper_model(self):
        """Test that per-model rates are applied."""
        assert calculate_cost("gpt-4o-mini", 1_000_000, 0) == pytest.approx(0.15)

    def test_unknown_model_uses_default_rates(self):
        """Test that unknown models are priced like the default model."""
        assert calculate_cost("some-new-model", 1000, 200) == calculate_cost("gpt-4.1", 1000, 200)

    def test_zero_tokens(self):
        """Test that an empty call costs nothing."""
        assert calculate_cost("gpt-4.1", 0, 0) == 0.0
