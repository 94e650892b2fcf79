"""
Storage interfaces for documents and prompt records.

Backends implement both capability groups; callers depend only on ``Store``
so the in-memory and SQLite implementations are interchangeable.
"""

from abc import ABC, abstractmethod

from ..models import Classification, Document, Extraction, PromptRecord


class DocumentStore(ABC):
    """Persistence for documents."""

    @abstractmethod
    def save_document(self, doc: Document) -> None:
        """
        Insert or replace a document by its identifier.

        Replacing keeps the creation time of the stored document.
        """

    @abstractmethod
    def get_document(self, document_id: str) -> Document:
        """
        Fetch a document by identifier.

        Raises:
            NotFoundError: If no document has this identifier.
        """

    @abstractmethod
    def delete_document(self, document_id: str) -> None:
        """
        Remove a document and any prompt records it owns.

        Raises:
            NotFoundError: If no document has this identifier.
        """

    @abstractmethod
    def list_documents(self, limit: int = 0, offset: int = 0) -> list[Document]:
        """List documents, most recent first, skipping ``offset`` and capped at ``limit``."""

    @abstractmethod
    def attach_classification(self, document_id: str, classification: Classification) -> None:
        """
        Set a stored document's classification, leaving every other field as stored.

        Raises:
            NotFoundError: If no document has this identifier.
        """

    @abstractmethod
    def attach_extraction(self, document_id: str, extraction: Extraction) -> None:
        """
        Set a stored document's extraction, leaving every other field as stored.

        Raises:
            NotFoundError: If no document has this identifier.
        """


class PromptStore(ABC):
    """Persistence for prompt audit records."""

    @abstractmethod
    def save_prompt(self, prompt: PromptRecord) -> None:
        """Insert or replace a prompt record by its identifier."""

    @abstractmethod
    def get_prompt(self, prompt_id: str) -> PromptRecord:
        """
        Fetch a prompt record by identifier.

        Raises:
            NotFoundError: If no prompt record has this identifier.
        """

    @abstractmethod
    def get_prompts_by_document(self, document_id: str) -> list[PromptRecord]:
        """Return every prompt record for a document in creation order (empty if none)."""


class Store(DocumentStore, PromptStore):
    """Combined document and prompt storage."""

    def close(self) -> None:
        """Release any resources held by the backend."""
