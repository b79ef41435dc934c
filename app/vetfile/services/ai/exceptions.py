"""
Shared exceptions for AI service modules.
"""

from ...exceptions import UpstreamError


class AIServiceError(UpstreamError):
    """Raised when AI service operations fail."""

    pass


class ProviderTimeoutError(AIServiceError):
    """Raised when the provider does not answer within the configured timeout."""

    pass
