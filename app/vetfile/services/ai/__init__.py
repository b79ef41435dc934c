"""
AI service package for claims analysis and document transcription.

This package provides modular AI functionality split into:
- analysis: Claims analysis of combined document text
- vision: Transcription of document images
- payloads: Mock and fallback analysis payloads
- prompts: Prompt text

The AIService class wraps these modules and decides between live,
mock and fallback results.
"""

import asyncio
import logging

from openai import AsyncOpenAI

from ...config import get_settings
from ...models import AnalysisOutcome, AnalysisSource
from .analysis import analyze_documents as _analyze_documents
from .analysis import parse_analysis_response
from .exceptions import AIServiceError, ProviderTimeoutError
from .payloads import get_fallback_analysis, get_mock_analysis
from .vision import transcribe_image as _transcribe_image

logger = logging.getLogger(__name__)

__all__ = [
    "AIService",
    "AIServiceError",
    "ProviderTimeoutError",
    "get_ai_service",
    "get_fallback_analysis",
    "get_mock_analysis",
    "parse_analysis_response",
]


class AIService:
    """
    Service for AI-powered claims analysis.

    Uses OpenAI's GPT-4o model for:
    - Identifying potential disability claims in document text
    - Transcribing document images (vision)

    Provider failures never escape ``analyze``: they are turned into a
    degraded outcome carrying the fallback payload.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        use_mock: bool | None = None,
        timeout_seconds: float | None = None,
    ):
        """
        Initialize the AI service.

        Args:
            api_key: OpenAI API key. If None, reads from config/environment.
            model: OpenAI model to use (must support vision).
            use_mock: If True, return mock data instead of calling OpenAI.
            timeout_seconds: Upper bound for a single provider call.
        """
        settings = get_settings()
        if api_key is None:
            api_key = settings.openai_api_key
        if use_mock is None:
            use_mock = settings.use_mock_ai

        self.api_key = api_key
        self.model = model or settings.openai_model
        self.timeout_seconds = timeout_seconds or settings.provider_timeout_seconds
        self.use_mock = use_mock or not self.api_key
        self._client: AsyncOpenAI | None = None

        if self.use_mock:
            logger.warning(
                "AI Service running in MOCK MODE. Set OPENAI_API_KEY and USE_MOCK_AI=false for real analysis."
            )

    @property
    def client(self) -> AsyncOpenAI:
        """Lazy-load the OpenAI client."""
        if self._client is None:
            if not self.api_key:
                raise AIServiceError(
                    "OpenAI API key not provided. Set OPENAI_API_KEY environment variable."
                )
            self._client = AsyncOpenAI(api_key=self.api_key, timeout=self.timeout_seconds)
        return self._client

    async def analyze(self, document_text: str) -> AnalysisOutcome:
        """
        Analyze combined document text for potential claims.

        Args:
            document_text: Text of every document in the upload.

        Returns:
            A success outcome with the live or mock payload, or a degraded
            outcome with the fallback payload if the provider failed.
        """
        if self.use_mock:
            logger.info("Using mock analysis data")
            return AnalysisOutcome.success(get_mock_analysis(), AnalysisSource.MOCK)

        logger.info("Using OpenAI for analysis (model=%s)", self.model)
        try:
            payload = await asyncio.wait_for(
                _analyze_documents(document_text, client=self.client, model=self.model),
                timeout=self.timeout_seconds,
            )
        except (asyncio.TimeoutError, ProviderTimeoutError):
            logger.warning(
                "Analysis provider timed out after %.1fs, serving fallback analysis",
                self.timeout_seconds,
            )
            return AnalysisOutcome.degraded(
                get_fallback_analysis(),
                f"Analysis provider timed out after {self.timeout_seconds:g}s",
            )
        except AIServiceError as e:
            logger.warning("Analysis provider failed, serving fallback analysis: %s", e)
            return AnalysisOutcome.degraded(get_fallback_analysis(), str(e))

        return AnalysisOutcome.success(payload, AnalysisSource.OPENAI)

    async def transcribe_image(self, image_bytes: bytes, media_type: str) -> str:
        """
        Transcribe a document image with the vision model.

        Raises:
            AIServiceError: In mock mode, or if the provider call fails.
        """
        if self.use_mock:
            raise AIServiceError("Vision transcription is unavailable in mock mode")

        try:
            return await asyncio.wait_for(
                _transcribe_image(
                    image_bytes, media_type, client=self.client, model=self.model
                ),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise ProviderTimeoutError(
                f"Vision request timed out after {self.timeout_seconds:g}s"
            ) from e


# =============================================================================
# Singleton Factory
# =============================================================================

_ai_service: AIService | None = None


def get_ai_service() -> AIService:
    """Get or create the AI service singleton."""
    global _ai_service
    if _ai_service is None:
        _ai_service = AIService()
    return _ai_service
