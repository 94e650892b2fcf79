"""
In-memory storage backend.

Useful for development and testing. Data is lost on restart.
"""

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from ..models import Classification, Document, Extraction, PromptRecord
from .base import Store
from .exceptions import NotFoundError

logger = logging.getLogger(__name__)


class ReadWriteLock:
    """
    Lock allowing many concurrent readers or a single writer.

    Writers are given priority once waiting so a steady stream of readers
    cannot starve them.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            while self._writer or self._readers:
                self._cond.wait()
            self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class MemoryStore(Store):
    """
    Map-based store guarded by a single reader/writer lock.

    The lock covers both maps for the full duration of every operation.
    Records are copied on the way in and out so callers never share
    mutable state with the store.
    """

    def __init__(self) -> None:
        self._documents: dict[str, Document] = {}
        self._prompts: dict[str, PromptRecord] = {}
        self._lock = ReadWriteLock()

    def save_document(self, doc: Document) -> None:
        stored = doc.model_copy(deep=True)
        with self._lock.write():
            existing = self._documents.get(doc.id)
            if existing is not None:
                stored.created_at = existing.created_at
            self._documents[doc.id] = stored

    def get_document(self, document_id: str) -> Document:
        with self._lock.read():
            doc = self._documents.get(document_id)
            if doc is None:
                raise NotFoundError("document", document_id)
            return doc.model_copy(deep=True)

    def delete_document(self, document_id: str) -> None:
        with self._lock.write():
            if document_id not in self._documents:
                raise NotFoundError("document", document_id)
            del self._documents[document_id]
            owned = [pid for pid, p in self._prompts.items() if p.document_id == document_id]
            for prompt_id in owned:
                del self._prompts[prompt_id]
        logger.debug("Deleted document %s and %d prompt record(s)", document_id, len(owned))

    def list_documents(self, limit: int = 0, offset: int = 0) -> list[Document]:
        """
        List documents, newest first.

        A zero or negative ``limit`` returns every document after ``offset``.
        """
        with self._lock.read():
            docs = sorted(
                self._documents.values(),
                key=lambda d: d.created_at,
                reverse=True,
            )
            offset = max(offset, 0)
            if offset >= len(docs):
                return []
            docs = docs[offset:]
            if 0 < limit < len(docs):
                docs = docs[:limit]
            return [d.model_copy(deep=True) for d in docs]

    def attach_classification(self, document_id: str, classification: Classification) -> None:
        with self._lock.write():
            doc = self._documents.get(document_id)
            if doc is None:
                raise NotFoundError("document", document_id)
            doc.classification = classification.model_copy(deep=True)

    def attach_extraction(self, document_id: str, extraction: Extraction) -> None:
        with self._lock.write():
            doc = self._documents.get(document_id)
            if doc is None:
                raise NotFoundError("document", document_id)
            doc.extraction = extraction.model_copy(deep=True)

    def save_prompt(self, prompt: PromptRecord) -> None:
        with self._lock.write():
            self._prompts[prompt.id] = prompt.model_copy(deep=True)

    def get_prompt(self, prompt_id: str) -> PromptRecord:
        with self._lock.read():
            prompt = self._prompts.get(prompt_id)
            if prompt is None:
                raise NotFoundError("prompt", prompt_id)
            return prompt.model_copy(deep=True)

    def get_prompts_by_document(self, document_id: str) -> list[PromptRecord]:
        with self._lock.read():
            prompts = [p for p in self._prompts.values() if p.document_id == document_id]
            prompts.sort(key=lambda p: p.created_at)
            return [p.model_copy(deep=True) for p in prompts]
