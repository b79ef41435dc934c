"""
Repositories for upload and analysis records.

The in-memory implementations keep records for the lifetime of the
process only. Records are deep-copied on the way in and out so callers
never share mutable state with the store.
"""

from abc import ABC, abstractmethod

from .models import Analysis, Upload


class UploadRepository(ABC):
    """Contract for upload storage."""

    @abstractmethod
    def get(self, upload_id: str) -> Upload | None:
        """Return the upload, or None if the id is unknown."""

    @abstractmethod
    def put(self, upload: Upload) -> None:
        """Insert or replace an upload keyed by its id."""


class AnalysisRepository(ABC):
    """Contract for analysis storage."""

    @abstractmethod
    def get(self, analysis_id: str) -> Analysis | None:
        """Return the analysis, or None if the id is unknown."""

    @abstractmethod
    def put(self, analysis: Analysis) -> None:
        """Store a new analysis. Analyses are never overwritten."""


class InMemoryUploadRepository(UploadRepository):
    """Process-wide upload store without eviction."""

    def __init__(self) -> None:
        self._uploads: dict[str, Upload] = {}

    def get(self, upload_id: str) -> Upload | None:
        upload = self._uploads.get(upload_id)
        return upload.model_copy(deep=True) if upload is not None else None

    def put(self, upload: Upload) -> None:
        self._uploads[upload.id] = upload.model_copy(deep=True)

    def __len__(self) -> int:
        return len(self._uploads)


class InMemoryAnalysisRepository(AnalysisRepository):
    """Process-wide analysis store without eviction."""

    def __init__(self) -> None:
        self._analyses: dict[str, Analysis] = {}

    def get(self, analysis_id: str) -> Analysis | None:
        analysis = self._analyses.get(analysis_id)
        return analysis.model_copy(deep=True) if analysis is not None else None

    def put(self, analysis: Analysis) -> None:
        if analysis.id in self._analyses:
            raise ValueError(f"Analysis {analysis.id} already stored")
        self._analyses[analysis.id] = analysis.model_copy(deep=True)

    def __len__(self) -> int:
        return len(self._analyses)
