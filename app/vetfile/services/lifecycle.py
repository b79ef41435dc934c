"""
Upload/analysis lifecycle tracker.

Owns Upload and Analysis records and decides which operations are legal
for an upload's current status:

    uploaded -> analyzing -> analyzed
                          -> failed

``begin_analysis`` may restart an upload from any status. Analyses of the
same upload are serialized by a per-upload lock; sequential runs each
create a new Analysis and the latest one is bound to the upload.
"""

import asyncio
import logging
import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from ..config import get_settings
from ..exceptions import InternalError, NotFoundError, NotReadyError, ValidationError
from ..models import (
    Analysis,
    AnalysisView,
    FileRecord,
    GeneratedForm,
    Upload,
)
from ..repositories import (
    AnalysisRepository,
    InMemoryAnalysisRepository,
    InMemoryUploadRepository,
    UploadRepository,
)
from . import form_builder
from .ai import AIService, get_ai_service
from .pdf_service import get_pdf_service
from .text_extractor import TextExtractor

logger = logging.getLogger(__name__)

DEFAULT_DOCUMENT_TYPE = "unknown"


@dataclass(frozen=True)
class IncomingFile:
    """A file already written to storage, waiting to be registered."""

    path: Path
    media_type: str
    original_name: str
    size_bytes: int


def _document_type_for(index: int, document_types: Sequence[str]) -> str:
    """A single tag applies to every file; otherwise tags align by index."""
    if len(document_types) == 1:
        tag = document_types[0]
    elif index < len(document_types):
        tag = document_types[index]
    else:
        tag = None
    return tag.strip() if tag and tag.strip() else DEFAULT_DOCUMENT_TYPE


class LifecycleTracker:
    """
    Tracks uploads through analysis and form generation.

    Args:
        uploads: Upload storage.
        analyses: Analysis storage.
        extractor: Text extractor for stored files.
        ai_service: Claims analysis provider.
    """

    def __init__(
        self,
        uploads: UploadRepository,
        analyses: AnalysisRepository,
        extractor: TextExtractor,
        ai_service: AIService,
    ):
        self.uploads = uploads
        self.analyses = analyses
        self.extractor = extractor
        self.ai_service = ai_service
        self._locks: dict[str, asyncio.Lock] = {}

    # -------------------------------------------------------------------------
    # Uploads
    # -------------------------------------------------------------------------

    def create_upload(
        self,
        files: Sequence[IncomingFile],
        document_types: Sequence[str] | None = None,
    ) -> Upload:
        """
        Register a batch of stored files as a new upload.

        Raises:
            ValidationError: If no files are supplied.
        """
        if not files:
            raise ValidationError("No files uploaded")

        document_types = document_types or []
        records = [
            FileRecord(
                id=str(uuid.uuid4()),
                original_name=incoming.original_name,
                stored_name=incoming.path.name,
                path=incoming.path,
                size_bytes=incoming.size_bytes,
                media_type=incoming.media_type,
                document_type=_document_type_for(index, document_types),
            )
            for index, incoming in enumerate(files)
        ]
        upload = Upload(id=str(uuid.uuid4()), files=records)
        self.uploads.put(upload)

        logger.info("Created upload %s with %d file(s)", upload.id, len(records))
        return upload

    def get_upload(self, upload_id: str) -> Upload:
        """
        Raises:
            NotFoundError: If the upload does not exist.
        """
        upload = self.uploads.get(upload_id)
        if upload is None:
            raise NotFoundError("Upload not found")
        return upload

    # -------------------------------------------------------------------------
    # Analysis
    # -------------------------------------------------------------------------

    def begin_analysis(self, upload_id: str) -> Upload:
        """
        Move an upload to ``analyzing`` regardless of its current status.

        Raises:
            NotFoundError: If the upload does not exist.
        """
        upload = self.get_upload(upload_id).mark_analyzing()
        self.uploads.put(upload)
        logger.info("Upload %s is analyzing", upload_id)
        return upload

    async def run_analysis(self, upload_id: str) -> Analysis:
        """
        Extract text, call the analysis provider and bind a new Analysis.

        Provider failures come back as a degraded outcome with the fallback
        payload and still complete the analysis. Any other failure marks the
        upload ``failed``.

        Raises:
            NotFoundError: If the upload does not exist.
            InternalError: If extraction or storage fails unexpectedly.
        """
        upload = self.get_upload(upload_id)

        try:
            combined_text = await self.extractor.extract_documents(upload.files)
            outcome = await self.ai_service.analyze(combined_text)
            analysis = Analysis(
                id=str(uuid.uuid4()),
                upload_id=upload_id,
                payload=outcome.payload,
                source=outcome.source,
                degraded_reason=outcome.reason,
            )
            self.analyses.put(analysis)
        except Exception as e:
            logger.exception("Analysis failed for upload %s", upload_id)
            self.uploads.put(upload.mark_failed(str(e)))
            raise InternalError(f"Analysis failed: {e}") from e

        if outcome.is_degraded:
            logger.warning(
                "Upload %s analyzed with fallback payload: %s", upload_id, outcome.reason
            )

        self.uploads.put(upload.mark_analyzed(analysis.id))
        logger.info(
            "Upload %s analyzed (analysis=%s, source=%s, claims=%d)",
            upload_id,
            analysis.id,
            analysis.source.value,
            len(analysis.payload.potential_claims),
        )
        return analysis

    async def analyze(self, upload_id: str) -> Analysis:
        """
        Begin and run an analysis while holding the upload's lock.

        Raises:
            NotFoundError: If the upload does not exist.
            InternalError: If the analysis fails unexpectedly.
        """
        self.get_upload(upload_id)
        lock = self._locks.setdefault(upload_id, asyncio.Lock())
        async with lock:
            self.begin_analysis(upload_id)
            return await self.run_analysis(upload_id)

    def get_analysis(self, upload_id: str) -> AnalysisView:
        """
        Return the upload's current analysis without changing anything.

        Raises:
            NotFoundError: If the upload or its analysis record is missing.
            NotReadyError: If the upload has not been analyzed.
        """
        upload = self.get_upload(upload_id)
        if upload.analysis_id is None:
            raise NotReadyError(
                "Analysis not yet performed for this upload", status=upload.status.value
            )

        analysis = self.analyses.get(upload.analysis_id)
        if analysis is None:
            raise NotFoundError("Analysis not found")

        return AnalysisView(
            upload_id=upload_id,
            analysis_id=analysis.id,
            status=upload.status,
            analysis=analysis.payload,
            created_at=analysis.created_at,
        )

    # -------------------------------------------------------------------------
    # Forms
    # -------------------------------------------------------------------------

    def build_form(
        self, upload_id: str, selected_conditions: Sequence[str]
    ) -> GeneratedForm:
        """
        Generate form data for the selected claims of the upload's analysis.

        Raises:
            ValidationError: If no claims are selected.
            NotFoundError: If the upload or its analysis is missing.
        """
        if not selected_conditions:
            raise ValidationError("No claims selected")

        upload = self.uploads.get(upload_id)
        if upload is None or upload.analysis_id is None:
            raise NotFoundError("Upload or analysis not found")

        analysis = self.analyses.get(upload.analysis_id)
        if analysis is None:
            raise NotFoundError("Analysis not found")

        form = form_builder.build_form(analysis.payload, selected_conditions)
        logger.info(
            "Generated form %s for upload %s with %d disability claim(s)",
            form.form_data.form_id,
            upload_id,
            len(form.form_data.disabilities),
        )
        return form


# =============================================================================
# Singleton Factory
# =============================================================================

_tracker: LifecycleTracker | None = None


def get_tracker() -> LifecycleTracker:
    """Get or create the process-wide lifecycle tracker."""
    global _tracker
    if _tracker is None:
        ai_service = get_ai_service()
        extractor = TextExtractor(
            get_pdf_service(),
            ai_service=ai_service,
            vision_max_pages=get_settings().vision_max_pages,
        )
        _tracker = LifecycleTracker(
            InMemoryUploadRepository(),
            InMemoryAnalysisRepository(),
            extractor,
            ai_service,
        )
    return _tracker
