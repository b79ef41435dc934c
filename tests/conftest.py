"""Pytest configuration and fixtures."""

import io
import os
import tempfile
from collections.abc import Generator
from pathlib import Path

# Settings are cached on first import of the app; keep tests offline and out of the source tree.
os.environ["USE_MOCK_AI"] = "true"
os.environ["OPENAI_API_KEY"] = ""
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="vetfile-tests-")

import pytest
from fastapi.testclient import TestClient
from PIL import Image
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from app.vetfile.config import Settings, get_settings
from app.vetfile.main import app
from app.vetfile.repositories import InMemoryAnalysisRepository, InMemoryUploadRepository
from app.vetfile.services.ai import AIService
from app.vetfile.services.lifecycle import IncomingFile, LifecycleTracker, get_tracker
from app.vetfile.services.pdf_service import PDFService
from app.vetfile.services.text_extractor import TextExtractor


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Mock-mode settings writing uploads under a temporary directory."""
    return Settings(
        _env_file=None,
        use_mock_ai=True,
        openai_api_key=None,
        upload_dir=tmp_path / "uploads",
    )


@pytest.fixture
def mock_ai_service() -> AIService:
    return AIService(api_key="", use_mock=True)


@pytest.fixture
def tracker(mock_ai_service: AIService) -> LifecycleTracker:
    """A tracker with fresh in-memory stores and mock analysis."""
    return LifecycleTracker(
        InMemoryUploadRepository(),
        InMemoryAnalysisRepository(),
        TextExtractor(PDFService(), ai_service=mock_ai_service),
        mock_ai_service,
    )


@pytest.fixture
def client(settings: Settings, tracker: LifecycleTracker) -> Generator[TestClient, None, None]:
    """Create a test client whose routes share the test's tracker and settings."""
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_tracker] = lambda: tracker
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _pdf(*pages: str) -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    for text in pages:
        if text:
            c.drawString(72, 720, text)
        c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture
def sample_pdf_bytes() -> bytes:
    """A single-page PDF resembling a DD214 excerpt."""
    return _pdf("CERTIFICATE OF RELEASE OR DISCHARGE FROM ACTIVE DUTY")


@pytest.fixture
def multi_page_pdf_bytes() -> bytes:
    return _pdf("Page one content", "Page two content")


@pytest.fixture
def blank_pdf_bytes() -> bytes:
    """A valid PDF without a text layer, like a scanned document."""
    return _pdf("")


@pytest.fixture
def sample_png_bytes() -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (120, 80), color="white").save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def invalid_file_bytes() -> bytes:
    """Create invalid (non-PDF) file bytes for testing."""
    return b"This is not a PDF file"


@pytest.fixture
def stored_pdf(tmp_path: Path, sample_pdf_bytes: bytes) -> IncomingFile:
    """A PDF already written to disk, ready to register with the tracker."""
    path = tmp_path / "dd214.pdf"
    path.write_bytes(sample_pdf_bytes)
    return IncomingFile(
        path=path,
        media_type="application/pdf",
        original_name="dd214.pdf",
        size_bytes=len(sample_pdf_bytes),
    )
