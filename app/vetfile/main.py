"""
FastAPI application for the VetFile claims service.

Provides endpoints for:
- Uploading service documents (DD214, medical records, ...)
- AI analysis of potential VA disability claims
- Generating pre-filled VA Form 21-526EZ data
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import get_settings
from .exceptions import NotReadyError, VetFileError
from .models import HealthResponse, utcnow
from .routers import documents
from .services.ai import get_ai_service
from .services.lifecycle import get_tracker
from .services.pdf_service import get_pdf_service

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

_started_at = time.monotonic()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    logger.info("Starting VetFile API...")
    settings.upload_dir.mkdir(parents=True, exist_ok=True)
    # Initialize services on startup
    get_pdf_service()
    get_ai_service()
    get_tracker()
    logger.info("Services initialized (uploads in %s)", settings.upload_dir)
    yield
    logger.info("Shutting down VetFile API...")


# Create FastAPI application
app = FastAPI(
    title="VetFile API",
    description="Identify potential VA disability claims from military service documents",
    version=__version__,
    lifespan=lifespan,
    debug=settings.debug,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
)


# =============================================================================
# Health Endpoints
# =============================================================================


def _health() -> HealthResponse:
    return HealthResponse(
        uptime=round(time.monotonic() - _started_at, 3),
        timestamp=utcnow(),
    )


@app.get("/", response_model=HealthResponse)
async def root() -> HealthResponse:
    """Root endpoint - health check."""
    return _health()


@app.get("/health", response_model=HealthResponse)
@app.get("/api/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    return _health()


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(documents.router)


# =============================================================================
# Exception Handlers
# =============================================================================


@app.exception_handler(VetFileError)
async def vetfile_error_handler(request: Request, exc: VetFileError) -> JSONResponse:
    """Render lifecycle errors with their mapped status code."""
    content: dict[str, str] = {"error": exc.message, "detail": exc.message}
    if isinstance(exc, NotReadyError):
        content["status"] = exc.status

    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=content)
