"""
SQLite storage backend.

Persists documents and prompt records in a local SQLite file using two
tables. Nested classification/extraction objects are stored as JSON text.
"""

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager, nullcontext
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ..database import MEMORY_PATH, create_sqlite_engine, init_db
from ..models import AgentType, Classification, Document, Extraction, PromptRecord, as_utc
from ..models_db import DocumentRow, PromptRow
from .base import Store
from .exceptions import BackendUnavailableError, NotFoundError, SerializationError, StoreError

logger = logging.getLogger(__name__)

# Used when list_documents is called with a zero or negative limit
DEFAULT_LIST_LIMIT = 100


def _to_db_time(value: datetime) -> datetime:
    return as_utc(value).replace(tzinfo=None)


def _from_db_time(value: datetime) -> datetime:
    return value.replace(tzinfo=timezone.utc)


class SQLiteStore(Store):
    """
    Store backed by a SQLite database file.

    Each operation runs in its own session and commits a single statement,
    so an operation either fully applies or leaves the database unchanged.
    """

    def __init__(self, db_path: str | Path, echo: bool = False):
        """
        Open (or create) the database and make sure the schema exists.

        Args:
            db_path: Path to the database file, or ":memory:".
            echo: Log SQL statements.

        Raises:
            BackendUnavailableError: If the database cannot be opened or initialized.
        """
        self.db_path = str(db_path)
        try:
            self._engine = create_sqlite_engine(self.db_path, echo=echo)
            init_db(self._engine)
        except SQLAlchemyError as e:
            logger.error("Could not open SQLite database at %s: %s", self.db_path, e)
            raise BackendUnavailableError(f"failed to open database {self.db_path}: {e}") from e

        self._session = sessionmaker(
            bind=self._engine,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
        )
        # ":memory:" shares one connection between threads; sessions on it must not overlap
        self._guard = threading.Lock() if self.db_path == MEMORY_PATH else nullcontext()
        logger.info("SQLite store ready at %s", self.db_path)

    @contextmanager
    def _session_scope(self) -> Iterator[Session]:
        with self._guard, self._session() as db:
            yield db

    def close(self) -> None:
        """Dispose of the engine and its pooled connections."""
        self._engine.dispose()

    # -------------------------------------------------------------------------
    # Documents
    # -------------------------------------------------------------------------

    def save_document(self, doc: Document) -> None:
        values = {
            "id": doc.id,
            "filename": doc.filename,
            "content_type": doc.content_type,
            "size": doc.size,
            "pdf_data": doc.pdf_data,
            "classification_json": (
                doc.classification.model_dump_json(exclude_none=True)
                if doc.classification is not None
                else None
            ),
            "extraction_json": (
                doc.extraction.model_dump_json(exclude_none=True)
                if doc.extraction is not None
                else None
            ),
            "created_at": _to_db_time(doc.created_at),
        }
        stmt = sqlite_insert(DocumentRow.__table__).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=["id"],
            set_={
                "filename": stmt.excluded.filename,
                "content_type": stmt.excluded.content_type,
                "size": stmt.excluded.size,
                "pdf_data": stmt.excluded.pdf_data,
                "classification_json": stmt.excluded.classification_json,
                "extraction_json": stmt.excluded.extraction_json,
            },
        )
        self._execute_write(stmt, f"failed to save document {doc.id}")

    def get_document(self, document_id: str) -> Document:
        try:
            with self._session_scope() as db:
                row = db.query(DocumentRow).filter(DocumentRow.id == document_id).first()
        except SQLAlchemyError as e:
            raise StoreError(f"failed to get document {document_id}: {e}") from e

        if row is None:
            raise NotFoundError("document", document_id)
        return self._row_to_document(row)

    def delete_document(self, document_id: str) -> None:
        try:
            with self._session_scope() as db:
                deleted = (
                    db.query(DocumentRow)
                    .filter(DocumentRow.id == document_id)
                    .delete(synchronize_session=False)
                )
                db.commit()
        except SQLAlchemyError as e:
            raise StoreError(f"failed to delete document {document_id}: {e}") from e

        if deleted == 0:
            raise NotFoundError("document", document_id)
        logger.debug("Deleted document %s", document_id)

    def list_documents(self, limit: int = 0, offset: int = 0) -> list[Document]:
        """
        List documents ordered by creation time, newest first.

        A zero or negative ``limit`` falls back to ``DEFAULT_LIST_LIMIT``.
        """
        if limit <= 0:
            limit = DEFAULT_LIST_LIMIT
        offset = max(offset, 0)

        try:
            with self._session_scope() as db:
                rows = (
                    db.query(DocumentRow)
                    .order_by(DocumentRow.created_at.desc())
                    .offset(offset)
                    .limit(limit)
                    .all()
                )
        except SQLAlchemyError as e:
            raise StoreError(f"failed to list documents: {e}") from e

        return [self._row_to_document(row) for row in rows]

    def attach_classification(self, document_id: str, classification: Classification) -> None:
        self._update_document_column(
            document_id,
            DocumentRow.classification_json,
            classification.model_dump_json(exclude_none=True),
        )

    def attach_extraction(self, document_id: str, extraction: Extraction) -> None:
        self._update_document_column(
            document_id,
            DocumentRow.extraction_json,
            extraction.model_dump_json(exclude_none=True),
        )

    # -------------------------------------------------------------------------
    # Prompts
    # -------------------------------------------------------------------------

    def save_prompt(self, prompt: PromptRecord) -> None:
        values = {
            "id": prompt.id,
            "document_id": prompt.document_id,
            "agent_type": prompt.agent_type.value,
            "prompt": prompt.prompt,
            "response": prompt.response,
            # Empty schema text is stored as NULL
            "schema": prompt.schema_text or None,
            "model": prompt.model,
            "input_tokens": prompt.input_tokens,
            "output_tokens": prompt.output_tokens,
            "total_cost": prompt.total_cost,
            "created_at": _to_db_time(prompt.created_at),
        }
        stmt = sqlite_insert(PromptRow.__table__).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=["id"],
            set_={
                "prompt": stmt.excluded.prompt,
                "response": stmt.excluded.response,
                "schema": stmt.excluded["schema"],
                "model": stmt.excluded.model,
                "input_tokens": stmt.excluded.input_tokens,
                "output_tokens": stmt.excluded.output_tokens,
                "total_cost": stmt.excluded.total_cost,
            },
        )
        self._execute_write(stmt, f"failed to save prompt {prompt.id}")

    def get_prompt(self, prompt_id: str) -> PromptRecord:
        try:
            with self._session_scope() as db:
                row = db.query(PromptRow).filter(PromptRow.id == prompt_id).first()
        except SQLAlchemyError as e:
            raise StoreError(f"failed to get prompt {prompt_id}: {e}") from e

        if row is None:
            raise NotFoundError("prompt", prompt_id)
        return self._row_to_prompt(row)

    def get_prompts_by_document(self, document_id: str) -> list[PromptRecord]:
        try:
            with self._session_scope() as db:
                rows = (
                    db.query(PromptRow)
                    .filter(PromptRow.document_id == document_id)
                    .order_by(PromptRow.created_at.asc())
                    .all()
                )
        except SQLAlchemyError as e:
            raise StoreError(f"failed to get prompts for document {document_id}: {e}") from e

        return [self._row_to_prompt(row) for row in rows]

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _update_document_column(self, document_id: str, column, value: str) -> None:
        """Write a single column of one document row."""
        try:
            with self._session_scope() as db:
                updated = (
                    db.query(DocumentRow)
                    .filter(DocumentRow.id == document_id)
                    .update({column: value}, synchronize_session=False)
                )
                db.commit()
        except SQLAlchemyError as e:
            logger.error("Failed to update %s of document %s: %s", column.key, document_id, e)
            raise StoreError(f"failed to update document {document_id}: {e}") from e

        if updated == 0:
            raise NotFoundError("document", document_id)

    def _execute_write(self, stmt, error_message: str) -> None:
        try:
            with self._session_scope() as db:
                db.execute(stmt)
                db.commit()
        except SQLAlchemyError as e:
            logger.error("%s: %s", error_message, e)
            raise StoreError(f"{error_message}: {e}") from e

    @staticmethod
    def _row_to_document(row: DocumentRow) -> Document:
        classification = None
        if row.classification_json is not None:
            try:
                classification = Classification.model_validate_json(row.classification_json)
            except ValidationError as e:
                raise SerializationError(
                    f"failed to decode classification for document {row.id}: {e}"
                ) from e

        extraction = None
        if row.extraction_json is not None:
            try:
                extraction = Extraction.model_validate_json(row.extraction_json)
            except ValidationError as e:
                raise SerializationError(
                    f"failed to decode extraction for document {row.id}: {e}"
                ) from e

        return Document(
            id=row.id,
            filename=row.filename,
            content_type=row.content_type,
            size=row.size,
            pdf_data=row.pdf_data or b"",
            classification=classification,
            extraction=extraction,
            created_at=_from_db_time(row.created_at),
        )

    @staticmethod
    def _row_to_prompt(row: PromptRow) -> PromptRecord:
        return PromptRecord(
            id=row.id,
            document_id=row.document_id,
            agent_type=AgentType(row.agent_type),
            prompt=row.prompt,
            response=row.response,
            schema_text=row.schema,
            model=row.model or "",
            input_tokens=row.input_tokens or 0,
            output_tokens=row.output_tokens or 0,
            total_cost=row.total_cost or 0.0,
            created_at=_from_db_time(row.created_at),
        )
