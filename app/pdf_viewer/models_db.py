"""
SQLAlchemy table models for the SQLite storage backend.

Classification and extraction results are stored as JSON text in their own
columns; they are only ever read back whole, never queried by field.
"""

from datetime import datetime

from sqlalchemy import (
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    LargeBinary,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from .database import Base


class DocumentRow(Base):
    """A stored PDF document and its attached AI results."""

    __tablename__ = "documents"

    id: Mapped[str] = mapped_column(
        String,
        primary_key=True,
    )
    filename: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    content_type: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    size: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    pdf_data: Mapped[bytes | None] = mapped_column(
        LargeBinary,
        nullable=True,
    )
    classification_json: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Classification as JSON",
    )
    extraction_json: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Extraction as JSON",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        comment="UTC",
    )

    __table_args__ = (
        Index("idx_documents_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<DocumentRow(id={self.id}, filename='{self.filename}')>"


class PromptRow(Base):
    """Audit record of one AI call made for a document."""

    __tablename__ = "prompts"

    id: Mapped[str] = mapped_column(
        String,
        primary_key=True,
    )
    document_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
    )
    agent_type: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    prompt: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    response: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    schema: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    model: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    input_tokens: Mapped[int] = mapped_column(
        Integer,
        default=0,
        server_default="0",
    )
    output_tokens: Mapped[int] = mapped_column(
        Integer,
        default=0,
        server_default="0",
    )
    total_cost: Mapped[float] = mapped_column(
        Float,
        default=0.0,
        server_default="0",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        comment="UTC",
    )

    __table_args__ = (
        Index("idx_prompts_document_id", "document_id"),
    )

    def __repr__(self) -> str:
        return f"<PromptRow(id={self.id}, document_id={self.document_id}, agent_type='{self.agent_type}')>"
