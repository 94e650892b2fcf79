"""
Database engine setup for the SQLite storage backend.

Builds SQLAlchemy engines with foreign-key enforcement switched on for every
connection and creates the schema idempotently.
"""

from pathlib import Path

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

MEMORY_PATH = ":memory:"


class Base(DeclarativeBase):
    """Base class for declarative models."""

    pass


def _set_sqlite_pragmas(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_sqlite_engine(db_path: str | Path, echo: bool = False) -> Engine:
    """
    Create an engine for a SQLite file.

    Args:
        db_path: Path to the database file, or ":memory:" for a private
            in-memory database shared by all sessions of this engine. That
            database lives on one connection, so callers must not run
            sessions on it from several threads at once (``SQLiteStore``
            serializes them).
        echo: Log every SQL statement.

    Returns:
        Engine with foreign keys enforced on each new connection.
    """
    path = str(db_path)
    if path == MEMORY_PATH:
        # A single shared connection, otherwise each connection gets its own empty database
        engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=echo,
        )
    else:
        engine = create_engine(
            f"sqlite:///{path}",
            connect_args={"check_same_thread": False},
            echo=echo,
        )
    event.listen(engine, "connect", _set_sqlite_pragmas)
    return engine


def init_db(engine: Engine) -> None:
    """
    Create all tables and indexes that do not exist yet.

    Safe to run on every startup.
    """
    # Import models to ensure they are registered with Base
    from . import models_db  # noqa: F401

    Base.metadata.create_all(bind=engine)
