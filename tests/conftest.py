"""Pytest configuration and fixtures."""

from collections.abc import Callable, Generator
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from app.pdf_viewer.config import Settings
from app.pdf_viewer.main import create_app
from app.pdf_viewer.models import AgentType, Document, PromptRecord
from app.pdf_viewer.services.ai import MockAgentClient
from app.pdf_viewer.store import MemoryStore, SQLiteStore, Store

BASE_TIME = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def sample_pdf_bytes() -> bytes:
    """
    Create a minimal valid PDF for testing.

    This is a minimal PDF structure that should be recognized as a valid PDF.
    """
    pdf_content = b"""%PDF-1.4
1 0 obj
<< /Type /Catalog /Pages 2 0 R >>
endobj
2 0 obj
<< /Type /Pages /Kids [3 0 R] /Count 1 >>
endobj
3 0 obj
<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] /Contents 4 0 R >>
endobj
4 0 obj
<< /Length 44 >>
stream
BT
/F1 12 Tf
100 700 Td
(Test) Tj
ET
endstream
endobj
xref
0 5
0000000000 65535 f
0000000009 00000 n
0000000058 00000 n
0000000115 00000 n
0000000214 00000 n
trailer
<< /Size 5 /Root 1 0 R >>
startxref
306
%%EOF"""
    return pdf_content


@pytest.fixture
def invalid_file_bytes() -> bytes:
    """Create invalid (non-PDF) file bytes for testing."""
    return b"This is not a PDF file"


@pytest.fixture
def make_document() -> Callable[..., Document]:
    """Factory for documents with distinct, increasing creation times."""

    def _make(doc_id: str, minutes: int = 0, **overrides) -> Document:
        pdf_data = overrides.pop("pdf_data", b"%PDF-1.4 " + doc_id.encode())
        fields = {
            "id": doc_id,
            "filename": f"{doc_id}.pdf",
            "content_type": "application/pdf",
            "size": len(pdf_data),
            "pdf_data": pdf_data,
            "created_at": BASE_TIME + timedelta(minutes=minutes),
        }
        fields.update(overrides)
        return Document(**fields)

    return _make


@pytest.fixture
def make_prompt() -> Callable[..., PromptRecord]:
    """Factory for prompt records."""

    def _make(prompt_id: str, document_id: str, minutes: int = 0, **overrides) -> PromptRecord:
        fields = {
            "id": prompt_id,
            "document_id": document_id,
            "agent_type": AgentType.CLASSIFICATION,
            "prompt": "Classify this document",
            "response": '{"document_type": "invoice"}',
            "model": "gpt-4.1",
            "input_tokens": 1000,
            "output_tokens": 200,
            "total_cost": 0.0036,
            "created_at": BASE_TIME + timedelta(minutes=minutes),
        }
        fields.update(overrides)
        return PromptRecord(**fields)

    return _make


@pytest.fixture
def memory_store() -> MemoryStore:
    """Create an empty in-memory store."""
    return MemoryStore()


@pytest.fixture
def sqlite_store(tmp_path) -> Generator[SQLiteStore, None, None]:
    """Create a SQLite store backed by a temporary file."""
    store = SQLiteStore(tmp_path / "test.db")
    yield store
    store.close()


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path) -> Generator[Store, None, None]:
    """Run a test once against each storage backend."""
    if request.param == "memory":
        yield MemoryStore()
        return

    sqlite = SQLiteStore(tmp_path / "param.db")
    yield sqlite
    sqlite.close()


@pytest.fixture
def test_settings() -> Settings:
    """Settings that never touch the network or the working directory."""
    return Settings(
        openai_api_key=None,
        store_backend="memory",
        max_upload_bytes=1024 * 1024,
    )


@pytest.fixture
def mock_agent() -> MockAgentClient:
    """Create an agent client returning canned results."""
    return MockAgentClient()


@pytest.fixture
def app_store() -> MemoryStore:
    """Store installed on the test application."""
    return MemoryStore()


@pytest.fixture
def client(
    test_settings: Settings,
    app_store: MemoryStore,
    mock_agent: MockAgentClient,
) -> Generator[TestClient, None, None]:
    """Create a test client for an application wired to an in-memory store and mock agent."""
    app = create_app(settings=test_settings, store=app_store, agent_client=mock_agent)
    with TestClient(app) as test_client:
        yield test_client
