"""
Pydantic models for the document processing backend.

Defines the stored entities (documents, AI results, prompt audit records)
and the request/response models used by the HTTP API.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Normalize a datetime to UTC, treating naive values as already UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class AgentType(str, Enum):
    """Kind of AI call a prompt record was captured for."""

    CLASSIFICATION = "classification"
    EXTRACTION = "extraction"


# =============================================================================
# Entities
# =============================================================================


class Classification(BaseModel):
    """
    AI-assigned document type for a single document.

    Attributes:
        document_type: Primary type label (e.g. "invoice", "contract").
        confidence: Model confidence in the label (0.0 to 1.0).
        reasoning: Free-text explanation of the indicators found.
        subtypes: More specific labels, when the model offers any.
        language: Primary language detected in the document.
    """

    document_type: str = Field(..., description="Primary document type label")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Confidence score")
    reasoning: str = Field(default="", description="Why this type was chosen")
    subtypes: list[str] | None = Field(default=None, description="More specific labels")
    language: str | None = Field(default=None, description="Detected language")


class ExtractedField(BaseModel):
    """A single extracted value together with where it was found."""

    name: str = Field(..., description="Field name")
    value: Any = Field(default=None, description="Extracted value")
    source_text: str = Field(default="", description="Verbatim text the value came from")
    page_number: int = Field(default=1, ge=1, description="1-indexed page number")
    confidence: float = Field(default=0.0, ge=0.0, le=1.0, description="Confidence score")


class Extraction(BaseModel):
    """
    Structured data extracted from a document.

    The shape of ``data`` is defined by the schema used for the pass,
    so it is kept as a free-form mapping.
    """

    schema_used: str = Field(..., description="Schema identifier used for extraction")
    data: dict[str, Any] = Field(default_factory=dict, description="Extracted data")
    fields: list[ExtractedField] = Field(
        default_factory=list,
        description="Per-field provenance and confidence",
    )


class Document(BaseModel):
    """
    One uploaded PDF plus its derived AI results.

    The raw payload is never serialized with the rest of the model; the API
    exposes it separately as base64.
    """

    id: str = Field(..., description="Unique document identifier")
    filename: str = Field(..., description="Original filename")
    content_type: str = Field(default="application/pdf", description="Declared content type")
    size: int = Field(..., ge=0, description="Payload size in bytes")
    pdf_data: bytes = Field(default=b"", exclude=True, repr=False)
    classification: Classification | None = None
    extraction: Extraction | None = None
    created_at: datetime = Field(default_factory=utc_now)

    @field_validator("created_at")
    @classmethod
    def normalize_created_at(cls, v: datetime) -> datetime:
        """Store timestamps in UTC so backends order them consistently."""
        return as_utc(v)


class PromptRecord(BaseModel):
    """Audit entry capturing one AI call's prompt, response and cost."""

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    id: str = Field(..., description="Unique prompt record identifier")
    document_id: str = Field(..., description="Owning document identifier")
    agent_type: AgentType = Field(..., description="classification or extraction")
    prompt: str = Field(default="", description="Full prompt text sent")
    response: str = Field(default="", description="Full response text received")
    schema_text: str | None = Field(
        default=None,
        alias="schema",
        description="JSON schema used for extraction",
    )
    model: str = Field(default="", description="Model identifier")
    input_tokens: int = Field(default=0, ge=0)
    output_tokens: int = Field(default=0, ge=0)
    total_cost: float = Field(default=0.0, ge=0.0, description="Cost in USD")
    created_at: datetime = Field(default_factory=utc_now)

    @field_validator("created_at")
    @classmethod
    def normalize_created_at(cls, v: datetime) -> datetime:
        return as_utc(v)


class TokenUsage(BaseModel):
    """Token counts and cost reported for one AI call."""

    model_config = ConfigDict(protected_namespaces=())

    model: str
    input_tokens: int = 0
    output_tokens: int = 0
    total_cost: float = 0.0


# =============================================================================
# Pricing
# =============================================================================

# USD per million tokens: (input, output)
MODEL_PRICING: dict[str, tuple[float, float]] = {
    "gpt-4.1": (2.0, 8.0),
    "gpt-4.1-mini": (0.4, 1.6),
    "gpt-4o": (2.5, 10.0),
    "gpt-4o-mini": (0.15, 0.6),
}
DEFAULT_PRICING = MODEL_PRICING["gpt-4.1"]


def calculate_cost(model: str, input_tokens: int, output_tokens: int) -> float:
    """
    Compute the USD cost of a call from its token counts.

    Unknown models are priced at the default model's rates.
    """
    input_price, output_price = MODEL_PRICING.get(model, DEFAULT_PRICING)
    return (input_tokens * input_price + output_tokens * output_price) / 1_000_000


# =============================================================================
# API Models
# =============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(default="healthy")
    version: str = Field(default="1.0.0")


class UploadResponse(BaseModel):
    """Response model for the upload endpoint."""

    id: str = Field(..., description="New document ID")
    filename: str = Field(..., description="Original filename")
    size: int = Field(..., ge=0, description="Size in bytes")


class ClassifyRequest(BaseModel):
    """Request model for classifying a stored document."""

    document_id: str = Field(..., min_length=1)


class ClassifyResponse(BaseModel):
    """Response model for the classify endpoint."""

    document_id: str
    classification: Classification
    prompt_id: str


class ExtractRequest(BaseModel):
    """Request model for extracting data from a stored document."""

    document_id: str = Field(..., min_length=1)
    document_type: str | None = Field(
        default=None,
        description="Overrides the stored classification when provided",
    )


class ExtractResponse(BaseModel):
    """Response model for the extract endpoint."""

    document_id: str
    extraction: Extraction
    prompt_id: str
    schema_used: str = Field(..., description="JSON schema text sent to the model")


class DocumentResponse(BaseModel):
    """Full document, including the PDF payload as base64."""

    id: str
    filename: str
    content_type: str
    size: int
    pdf_base64: str
    classification: Classification | None = None
    extraction: Extraction | None = None
    created_at: str = Field(..., description="Creation timestamp (ISO format)")


class DocumentSummary(BaseModel):
    """Document listing entry without the payload."""

    id: str
    filename: str
    content_type: str
    size: int
    document_type: str | None = Field(default=None, description="Classified type, if any")
    has_extraction: bool = False
    created_at: str


class DocumentListResponse(BaseModel):
    """Response model for listing documents."""

    documents: list[DocumentSummary] = Field(default_factory=list)
    limit: int
    offset: int


class DocumentTypesResponse(BaseModel):
    """Document types that have a dedicated extraction schema or are recognised."""

    document_types: list[str]
