"""
Storage layer for documents and prompt audit records.

Two interchangeable backends implement ``Store``:
- MemoryStore: dict-based, process-local, for tests and development
- SQLiteStore: persistent, backed by a local SQLite file
"""

import logging

from ..config import Settings
from .base import DocumentStore, PromptStore, Store
from .exceptions import (
    BackendUnavailableError,
    NotFoundError,
    SerializationError,
    StoreError,
    StoreNotInitializedError,
)
from .memory import MemoryStore
from .sqlite import SQLiteStore

logger = logging.getLogger(__name__)

__all__ = [
    "BackendUnavailableError",
    "DocumentStore",
    "MemoryStore",
    "NotFoundError",
    "PromptStore",
    "SQLiteStore",
    "SerializationError",
    "Store",
    "StoreError",
    "StoreNotInitializedError",
    "create_store",
]


def create_store(settings: Settings) -> Store:
    """
    Build the storage backend selected by the settings.

    Raises:
        BackendUnavailableError: If the SQLite database cannot be opened.
    """
    if settings.store_backend == "sqlite":
        logger.info("Using SQLite store at %s", settings.sqlite_path)
        return SQLiteStore(settings.sqlite_path, echo=settings.sql_debug)

    logger.info("Using in-memory store (data is lost on restart)")
    return MemoryStore()
