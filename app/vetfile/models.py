"""
Pydantic models for the claims-analysis pipeline.

Defines the upload/analysis records owned by the lifecycle tracker,
the structured claims payload returned by the analysis provider, and
the request/response bodies of the HTTP API. Wire format is camelCase.
"""

from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _coerce_str_list(value: Any) -> list[str]:
    """Accept a list, a single string or null where a string list is expected."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    return [str(item) for item in value if item is not None and str(item).strip()]


class CamelModel(BaseModel):
    """Base model serializing field names as camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True
    )


# =============================================================================
# Enums
# =============================================================================


class UploadStatus(str, Enum):
    """Lifecycle status of an upload."""

    UPLOADED = "uploaded"
    ANALYZING = "analyzing"
    ANALYZED = "analyzed"
    FAILED = "failed"


class AnalysisSource(str, Enum):
    """Where an analysis payload came from."""

    OPENAI = "openai"
    MOCK = "mock"
    FALLBACK = "fallback"


class ClaimCategory(str, Enum):
    """Claim category tags recognised in analysis payloads."""

    PHYSICAL = "physical"
    MENTAL = "mental"
    ENVIRONMENTAL = "environmental"
    OTHER = "other"


# =============================================================================
# Claims Analysis Payload
# =============================================================================


class VeteranInfo(CamelModel):
    """
    Veteran details extracted from the documents.

    A value of None means the field was not extracted.
    """

    name: str | None = None
    service_number: str | None = None
    branch: str | None = None
    service_start_date: str | None = None
    service_end_date: str | None = None
    rank: str | None = None
    discharge_type: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class ClaimCandidate(CamelModel):
    """
    One potential disability condition identified in the documents.

    Attributes:
        condition: Condition name as recognised by the VA.
        description: Short description of the condition.
        evidence: Supporting evidence quoted from the documents.
        cfr_reference: Relevant 38 CFR reference, if any.
        confidence_score: Strength of the evidence (0-100).
        category: physical, mental, environmental or other.
        is_presumed: Whether the condition is presumptive.
        is_primary: Whether the condition is primary rather than secondary.
    """

    condition: str = Field(..., min_length=1)
    description: str | None = None
    evidence: list[str] = Field(default_factory=list)
    cfr_reference: str | None = None
    confidence_score: int = Field(default=0, ge=0, le=100)
    category: ClaimCategory = ClaimCategory.OTHER
    is_presumed: bool = False
    is_primary: bool = True

    @field_validator("evidence", mode="before")
    @classmethod
    def coerce_evidence(cls, v: Any) -> list[str]:
        return _coerce_str_list(v)

    @field_validator("confidence_score", mode="before")
    @classmethod
    def clamp_confidence(cls, v: Any) -> int:
        """Round and clamp the score into 0-100; unparseable values become 0."""
        try:
            score = round(float(v))
        except (TypeError, ValueError):
            return 0
        return max(0, min(100, score))

    @field_validator("category", mode="before")
    @classmethod
    def normalize_category(cls, v: Any) -> ClaimCategory:
        if isinstance(v, ClaimCategory):
            return v
        try:
            return ClaimCategory(str(v).strip().lower())
        except ValueError:
            return ClaimCategory.OTHER

    @field_validator("is_presumed", "is_primary", mode="before")
    @classmethod
    def null_flag_to_default(cls, v: Any, info) -> Any:
        if v is None:
            return info.field_name == "is_primary"
        return v


class ServiceInfo(CamelModel):
    """Service history details supporting the claims."""

    deployments: list[str] = Field(default_factory=list)
    mos: list[str] = Field(default_factory=list)
    combat_experience: bool = False
    awards_decorations: list[str] = Field(default_factory=list)
    incidents: list[str] = Field(default_factory=list)

    @field_validator(
        "deployments", "mos", "awards_decorations", "incidents", mode="before"
    )
    @classmethod
    def coerce_lists(cls, v: Any) -> list[str]:
        return _coerce_str_list(v)

    @field_validator("combat_experience", mode="before")
    @classmethod
    def null_to_false(cls, v: Any) -> Any:
        return False if v is None else v


class Recommendations(CamelModel):
    """Suggestions for strengthening the claims."""

    additional_evidence: list[str] = Field(default_factory=list)
    priority_claims: list[str] = Field(default_factory=list)

    @field_validator("additional_evidence", "priority_claims", mode="before")
    @classmethod
    def coerce_lists(cls, v: Any) -> list[str]:
        return _coerce_str_list(v)


class ClaimsAnalysis(CamelModel):
    """Structured claims analysis produced for one upload."""

    veteran_info: VeteranInfo = Field(default_factory=VeteranInfo)
    potential_claims: list[ClaimCandidate] = Field(default_factory=list)
    service_info: ServiceInfo = Field(default_factory=ServiceInfo)
    recommendations: Recommendations = Field(default_factory=Recommendations)

    @field_validator("veteran_info", "service_info", "recommendations", mode="before")
    @classmethod
    def null_section_to_empty(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator("potential_claims", mode="before")
    @classmethod
    def drop_unnamed_claims(cls, v: Any) -> Any:
        """Skip claim entries without a condition name instead of failing the payload."""
        if v is None:
            return []
        return [
            claim
            for claim in v
            if not isinstance(claim, dict) or str(claim.get("condition") or "").strip()
        ]


class AnalysisOutcome(BaseModel):
    """
    Result of one provider call.

    ``success`` carries a genuine (or mock) payload; ``degraded`` carries the
    fallback payload together with the reason the provider failed.
    """

    outcome: Literal["success", "degraded"]
    payload: ClaimsAnalysis
    source: AnalysisSource
    reason: str | None = None

    @classmethod
    def success(
        cls, payload: ClaimsAnalysis, source: AnalysisSource = AnalysisSource.OPENAI
    ) -> "AnalysisOutcome":
        return cls(outcome="success", payload=payload, source=source)

    @classmethod
    def degraded(cls, payload: ClaimsAnalysis, reason: str) -> "AnalysisOutcome":
        return cls(
            outcome="degraded",
            payload=payload,
            source=AnalysisSource.FALLBACK,
            reason=reason,
        )

    @property
    def is_degraded(self) -> bool:
        return self.outcome == "degraded"


# =============================================================================
# Lifecycle Records
# =============================================================================


class FileRecord(CamelModel):
    """One stored file belonging to an upload."""

    id: str
    original_name: str
    stored_name: str
    path: Path
    size_bytes: int = Field(..., ge=0)
    media_type: str
    document_type: str = "unknown"
    uploaded_at: datetime = Field(default_factory=utcnow)


class Upload(CamelModel):
    """
    A batch of files submitted together and tracked through analysis.

    Invariant: ``analysis_id`` is set if and only if ``status`` is analyzed.
    Status changes go through the ``mark_*`` helpers, which return copies.
    """

    id: str
    files: list[FileRecord] = Field(..., min_length=1)
    status: UploadStatus = UploadStatus.UPLOADED
    analysis_id: str | None = None
    error: str | None = None
    uploaded_at: datetime = Field(default_factory=utcnow)
    analyzed_at: datetime | None = None

    @model_validator(mode="after")
    def check_analysis_binding(self) -> "Upload":
        if (self.analysis_id is not None) != (self.status == UploadStatus.ANALYZED):
            raise ValueError("analysis_id must be set exactly when status is analyzed")
        if self.error is not None and self.status != UploadStatus.FAILED:
            raise ValueError("error is only recorded for failed uploads")
        return self

    def mark_analyzing(self) -> "Upload":
        return self.model_copy(
            update={"status": UploadStatus.ANALYZING, "analysis_id": None, "error": None}
        )

    def mark_analyzed(self, analysis_id: str) -> "Upload":
        return self.model_copy(
            update={
                "status": UploadStatus.ANALYZED,
                "analysis_id": analysis_id,
                "error": None,
                "analyzed_at": utcnow(),
            }
        )

    def mark_failed(self, error: str) -> "Upload":
        return self.model_copy(
            update={"status": UploadStatus.FAILED, "analysis_id": None, "error": error}
        )


class Analysis(CamelModel):
    """Immutable analysis result bound to one upload."""

    model_config = ConfigDict(frozen=True)

    id: str
    upload_id: str
    payload: ClaimsAnalysis
    source: AnalysisSource
    degraded_reason: str | None = None
    created_at: datetime = Field(default_factory=utcnow)


# =============================================================================
# API Models
# =============================================================================


class UploadedFileView(CamelModel):
    """Client-facing view of a stored file (no storage paths)."""

    id: str
    original_name: str
    size: int
    document_type: str

    @classmethod
    def from_record(cls, record: FileRecord) -> "UploadedFileView":
        return cls(
            id=record.id,
            original_name=record.original_name,
            size=record.size_bytes,
            document_type=record.document_type,
        )


class UploadResponse(CamelModel):
    """Response model for the upload endpoint."""

    message: str = "Files uploaded successfully"
    upload_id: str
    files: list[UploadedFileView]


class UploadStatusResponse(CamelModel):
    """Current lifecycle state of an upload."""

    upload_id: str
    status: UploadStatus
    files: list[UploadedFileView]
    analysis_id: str | None = None
    error: str | None = None
    uploaded_at: datetime
    analyzed_at: datetime | None = None


class AnalyzeResponse(CamelModel):
    """Response model for the analyze endpoint."""

    message: str = "Documents analyzed successfully"
    upload_id: str
    analysis_id: str
    analysis: ClaimsAnalysis
    source: AnalysisSource
    degraded: bool = False


class AnalysisView(CamelModel):
    """Read-only projection of an upload's current analysis."""

    upload_id: str
    analysis_id: str
    status: UploadStatus
    analysis: ClaimsAnalysis
    created_at: datetime


class ProcessDocumentResponse(CamelModel):
    """Response model for the single-document text preview endpoint."""

    message: str = "Document processed successfully"
    filename: str
    document_type: str
    characters: int = Field(..., ge=0)
    text: str


class GenerateFormRequest(CamelModel):
    """Request model for form generation."""

    selected_claims: list[str] = Field(
        default_factory=list,
        description="Condition names chosen by the user",
    )

    @field_validator("selected_claims", mode="before")
    @classmethod
    def drop_malformed_selection(cls, v: Any) -> list[str]:
        """Anything other than a list of names counts as no selection."""
        if not isinstance(v, list):
            return []
        return [item for item in v if isinstance(item, str)]


# =============================================================================
# Generated Form (VA Form 21-526EZ)
# =============================================================================


class FormAddress(CamelModel):
    street: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""


class FormVeteran(CamelModel):
    """Veteran section of the form. SSN, DOB and contact details stay empty."""

    name: str = ""
    service_number: str = ""
    ssn: str = ""
    dob: str = ""
    branch: str = ""
    service_start_date: str = ""
    service_end_date: str = ""
    rank: str = ""
    discharge_type: str = ""
    address: FormAddress = Field(default_factory=FormAddress)
    phone: str = ""
    email: str = ""


class FormDisability(CamelModel):
    id: str
    sequence: int = Field(..., ge=1)
    condition: str
    description: str = ""
    evidence: list[str] = Field(default_factory=list)
    cfr_reference: str = ""
    confidence_score: int = 0
    category: ClaimCategory = ClaimCategory.OTHER
    is_primary: bool = True
    is_presumed: bool = False
    date_of_onset: str = ""
    related_military_service: bool = True


class FormServiceDetails(CamelModel):
    deployments: list[str] = Field(default_factory=list)
    mos: list[str] = Field(default_factory=list)
    combat_experience: bool = False
    awards_decorations: list[str] = Field(default_factory=list)
    incidents: list[str] = Field(default_factory=list)


class FormData(CamelModel):
    form_id: str
    form_type: str
    generated_date: datetime
    veteran: FormVeteran
    disabilities: list[FormDisability]
    service_details: FormServiceDetails


class GeneratedForm(CamelModel):
    form_data: FormData


class GenerateFormResponse(CamelModel):
    """Response model for the generate-form endpoint."""

    message: str = "Form generated successfully"
    form: GeneratedForm


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(default="ok")
    uptime: float = Field(..., ge=0.0, description="Seconds since startup")
    timestamp: datetime
    message: str = "VetFile API is running"
