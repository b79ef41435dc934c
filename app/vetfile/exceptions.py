"""
Domain exceptions for the upload/analysis lifecycle.

Each error maps onto one HTTP status in ``main.py``.
"""


class VetFileError(Exception):
    """Base class for lifecycle errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(VetFileError):
    """Raised when request input is missing or malformed."""

    status_code = 400


class NotFoundError(VetFileError):
    """Raised when an upload or analysis identifier is unknown."""

    status_code = 404


class NotReadyError(VetFileError):
    """Raised when an upload exists but its analysis has not been produced."""

    status_code = 400

    def __init__(self, message: str, status: str):
        super().__init__(message)
        self.status = status


class UpstreamError(VetFileError):
    """Raised when text extraction or the analysis provider fails."""

    status_code = 502


class InternalError(VetFileError):
    """Raised for unexpected failures during analysis."""

    status_code = 500
