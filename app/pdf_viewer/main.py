"""
FastAPI application for the document processing backend.

Provides endpoints for:
- Uploading PDF documents
- AI classification and structured data extraction
- Document retrieval and the prompt/cost audit trail
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import Settings, get_settings
from .models import HealthResponse
from .routers import classify, documents, extract, prompts, schemas, upload
from .services.ai import AgentClient, AIServiceError, create_agent_client
from .services.pdf_service import PDFConversionError
from .store import NotFoundError, Store, StoreError, create_store

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build missing collaborators on startup and release them on shutdown."""
    logger.info("Starting PDF Viewer backend...")
    settings: Settings = app.state.settings
    owns_store = app.state.store is None

    if owns_store:
        # BackendUnavailableError aborts startup: the service never runs without storage
        app.state.store = create_store(settings)
    if app.state.agent_client is None:
        app.state.agent_client = create_agent_client(settings)

    logger.info("Services initialized successfully")
    yield
    logger.info("Shutting down PDF Viewer backend...")
    if owns_store:
        app.state.store.close()
        app.state.store = None


def create_app(
    settings: Settings | None = None,
    store: Store | None = None,
    agent_client: AgentClient | None = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        settings: Configuration; loaded from the environment if omitted.
        store: Storage backend to use. If omitted one is built from settings
            at startup and closed at shutdown.
        agent_client: AI agent client. If omitted one is built from settings
            at startup.

    Returns:
        Configured FastAPI application.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="PDF Viewer API",
        description="PDF upload, AI classification and structured data extraction",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.agent_client = agent_client

    # Configure CORS for the frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log method, path, status and duration of every request."""
        start = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "%s %s %d %.1fms",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - start) * 1000,
        )
        return response

    # =========================================================================
    # Health Endpoints
    # =========================================================================

    @app.get("/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="healthy", version=__version__)

    # =========================================================================
    # Include Routers
    # =========================================================================

    app.include_router(upload.router, prefix="/api")
    app.include_router(classify.router, prefix="/api")
    app.include_router(extract.router, prefix="/api")
    app.include_router(documents.router, prefix="/api")
    app.include_router(prompts.router, prefix="/api")
    app.include_router(schemas.router, prefix="/api")

    # =========================================================================
    # Exception Handlers
    # =========================================================================

    @app.exception_handler(NotFoundError)
    async def not_found_error_handler(request: Request, exc: NotFoundError):
        """Handle lookups of unknown identifiers."""
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": str(exc)},
        )

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        """Handle storage failures."""
        logger.error("Storage error on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": str(exc)},
        )

    @app.exception_handler(PDFConversionError)
    async def pdf_conversion_error_handler(request: Request, exc: PDFConversionError):
        """Handle PDF conversion errors."""
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": str(exc)},
        )

    @app.exception_handler(AIServiceError)
    async def ai_service_error_handler(request: Request, exc: AIServiceError):
        """Handle AI service errors."""
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": str(exc)},
        )

    return app


app = create_app()
