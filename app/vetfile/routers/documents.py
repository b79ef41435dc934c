"""
Router for document endpoints.

Handles:
- Uploading service documents
- Single-document text preview
- Claims analysis and retrieval
- VA form generation
"""

import asyncio
import logging
import uuid
from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, UploadFile

from ..config import Settings, get_settings
from ..exceptions import ValidationError
from ..models import (
    AnalysisView,
    AnalyzeResponse,
    GenerateFormRequest,
    GenerateFormResponse,
    ProcessDocumentResponse,
    UploadedFileView,
    UploadResponse,
    UploadStatusResponse,
)
from ..services.lifecycle import IncomingFile, LifecycleTracker, get_tracker
from ..services.text_extractor import SUPPORTED_MEDIA_TYPES

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/documents", tags=["documents"])


# =============================================================================
# Helpers
# =============================================================================


async def _read_validated(file: UploadFile, settings: Settings) -> bytes:
    """Read an uploaded file, enforcing media type and size limits."""
    if file.content_type not in SUPPORTED_MEDIA_TYPES:
        raise ValidationError(
            f"Invalid file type for {file.filename}. Only PDF, JPEG, and PNG files are allowed."
        )

    content = await file.read()
    if not content:
        raise ValidationError(f"Empty file provided: {file.filename}")
    if len(content) > settings.max_file_size_bytes:
        raise ValidationError(
            f"File {file.filename} exceeds the {settings.max_file_size_mb}MB limit"
        )
    return content


def _store(content: bytes, original_name: str, upload_dir: Path) -> Path:
    """Write content under a generated name that keeps the original extension."""
    upload_dir.mkdir(parents=True, exist_ok=True)
    path = upload_dir / f"{uuid.uuid4()}{Path(original_name).suffix.lower()}"
    path.write_bytes(content)
    return path


# =============================================================================
# Uploads
# =============================================================================


@router.post("/upload", response_model=UploadResponse)
async def upload_documents(
    documents: Annotated[
        list[UploadFile] | None, File(description="Service documents (PDF, JPEG, PNG)")
    ] = None,
    document_types: Annotated[
        list[str] | None,
        Form(alias="documentType", description="One tag for all files, or one per file"),
    ] = None,
    settings: Settings = Depends(get_settings),
    tracker: LifecycleTracker = Depends(get_tracker),
) -> UploadResponse:
    """
    Upload a batch of service documents.

    Every file is validated before any is written, so a rejected request
    leaves nothing behind.
    """
    documents = documents or []
    if len(documents) > settings.max_upload_files:
        raise ValidationError(
            f"Too many files. At most {settings.max_upload_files} files per upload."
        )

    try:
        contents = [await _read_validated(file, settings) for file in documents]
    finally:
        for file in documents:
            await file.close()

    incoming = []
    try:
        for file, content in zip(documents, contents):
            name = file.filename or "document"
            path = await asyncio.to_thread(_store, content, name, settings.upload_dir)
            incoming.append(
                IncomingFile(
                    path=path,
                    media_type=file.content_type,
                    original_name=name,
                    size_bytes=len(content),
                )
            )
            logger.info("Stored %s (%d bytes) as %s", name, len(content), path.name)

        upload = tracker.create_upload(incoming, document_types)
    except Exception:
        logger.warning("Upload failed, removing %d stored file(s)", len(incoming))
        for stored in incoming:
            stored.path.unlink(missing_ok=True)
        raise

    return UploadResponse(
        upload_id=upload.id,
        files=[UploadedFileView.from_record(record) for record in upload.files],
    )


@router.get("/uploads/{upload_id}", response_model=UploadStatusResponse)
async def get_upload_status(
    upload_id: str,
    tracker: LifecycleTracker = Depends(get_tracker),
) -> UploadStatusResponse:
    """Return the lifecycle status of an upload."""
    upload = tracker.get_upload(upload_id)
    return UploadStatusResponse(
        upload_id=upload.id,
        status=upload.status,
        files=[UploadedFileView.from_record(record) for record in upload.files],
        analysis_id=upload.analysis_id,
        error=upload.error,
        uploaded_at=upload.uploaded_at,
        analyzed_at=upload.analyzed_at,
    )


@router.post("/process-pdf", response_model=ProcessDocumentResponse)
async def process_document(
    document: Annotated[UploadFile, File(description="Document to extract text from")],
    document_type: Annotated[str, Form(alias="documentType")] = "unknown",
    settings: Settings = Depends(get_settings),
    tracker: LifecycleTracker = Depends(get_tracker),
) -> ProcessDocumentResponse:
    """
    Extract the text of a single document without creating an upload.

    The file is removed again once its text has been read.
    """
    try:
        content = await _read_validated(document, settings)
    finally:
        await document.close()

    name = document.filename or "document"
    path = await asyncio.to_thread(_store, content, name, settings.upload_dir)
    try:
        text = await tracker.extractor.extract_text(path, document.content_type)
    finally:
        path.unlink(missing_ok=True)

    return ProcessDocumentResponse(
        filename=name,
        document_type=document_type,
        characters=len(text),
        text=text,
    )


# =============================================================================
# Analysis
# =============================================================================


@router.post("/analyze/{upload_id}", response_model=AnalyzeResponse)
async def analyze_documents(
    upload_id: str,
    tracker: LifecycleTracker = Depends(get_tracker),
) -> AnalyzeResponse:
    """
    Analyze an upload's documents for potential disability claims.

    Provider failures still return a payload (the fallback analysis) with
    ``degraded`` set.
    """
    analysis = await tracker.analyze(upload_id)
    return AnalyzeResponse(
        upload_id=upload_id,
        analysis_id=analysis.id,
        analysis=analysis.payload,
        source=analysis.source,
        degraded=analysis.degraded_reason is not None,
    )


@router.get("/analysis/{upload_id}", response_model=AnalysisView)
async def get_analysis(
    upload_id: str,
    tracker: LifecycleTracker = Depends(get_tracker),
) -> AnalysisView:
    """Retrieve the current analysis of an upload."""
    return tracker.get_analysis(upload_id)


# =============================================================================
# Forms
# =============================================================================


@router.post("/generate-form/{upload_id}", response_model=GenerateFormResponse)
async def generate_form(
    upload_id: str,
    request: GenerateFormRequest | None = None,
    tracker: LifecycleTracker = Depends(get_tracker),
) -> GenerateFormResponse:
    """Generate VA Form 21-526EZ data for the selected claims."""
    selected = request.selected_claims if request is not None else []
    form = tracker.build_form(upload_id, selected)
    return GenerateFormResponse(form=form)
