"""Error taxonomy shared by the processor and the API layers.

Collaborators raise one of the ``ServiceError`` subclasses below; the API
turns the category into an HTTP status through ``status_for_category`` and
renders ``ServiceError.body`` as the JSON payload.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from fastapi import status


class ErrorCategory(str, Enum):
    CLIENT_INPUT = "client_input"
    AUTH = "auth"
    UPSTREAM_FETCH = "upstream_fetch"
    EXTRACTION = "extraction"
    UNCLASSIFIED = "unclassified"


_CATEGORY_STATUS: dict[ErrorCategory, int] = {
    ErrorCategory.CLIENT_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorCategory.AUTH: status.HTTP_401_UNAUTHORIZED,
    ErrorCategory.UPSTREAM_FETCH: status.HTTP_502_BAD_GATEWAY,
    ErrorCategory.EXTRACTION: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCategory.UNCLASSIFIED: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for_category(category: ErrorCategory) -> int:
    """Map an error category to the HTTP status code returned to the caller."""
    return _CATEGORY_STATUS[category]


class ServiceError(Exception):
    """Base class for failures that are reported to the caller as JSON."""

    category: ErrorCategory = ErrorCategory.UNCLASSIFIED

    def __init__(self, error: str, message: str | None = None, expose_message: bool = True) -> None:
        super().__init__(message or error)
        self.error = error
        self.message = message
        self.expose_message = expose_message

    @property
    def status_code(self) -> int:
        return status_for_category(self.category)

    @property
    def body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.error}
        if self.message is not None and self.expose_message:
            body["message"] = self.message
        return body


class ClientInputError(ServiceError):
    category = ErrorCategory.CLIENT_INPUT


class AuthError(ServiceError):
    category = ErrorCategory.AUTH

    def __init__(self, error: str = "Unauthorized") -> None:
        super().__init__(error)


class UpstreamFetchError(ServiceError):
    category = ErrorCategory.UPSTREAM_FETCH

    def __init__(self, status_code: int, url: str = "") -> None:
        super().__init__(f"Failed to fetch PDF ({status_code})")
        self.upstream_status = status_code
        self.url = url


class ExtractionError(ServiceError):
    """Raised when the PDF extractor or the OCR engine fails on a document."""

    category = ErrorCategory.EXTRACTION

    def __init__(self, message: str, error: str = "Failed to process file", expose_message: bool = True) -> None:
        super().__init__(error, message, expose_message)


class UnclassifiedError(ServiceError):
    category = ErrorCategory.UNCLASSIFIED

    def __init__(self, error: str = "Unexpected error", message: str | None = None) -> None:
        super().__init__(error, message, expose_message=False)
