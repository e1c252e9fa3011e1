"""
Error Taxonomy - Consistent error codes across the application.

Usage:
    from siteanalyst.config.errors import ErrorCode, SiteAnalystError

    raise SiteAnalystError(ErrorCode.EXTRACTION_INVALID_PDF, "Document is empty")
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from siteanalyst.domains.extraction.models import SectionFailure


class ErrorCode(str, Enum):
    """Standardized error codes for machine-readable error responses."""

    # Extraction errors
    EXTRACTION_INCOMPLETE = "EXTRACTION_INCOMPLETE"
    EXTRACTION_INVALID_PDF = "EXTRACTION_INVALID_PDF"
    EXTRACTION_TOO_LARGE = "EXTRACTION_TOO_LARGE"
    SECTION_UNKNOWN = "SECTION_UNKNOWN"

    # LLM/Model errors
    LLM_UNAVAILABLE = "LLM_UNAVAILABLE"
    LLM_INVALID_RESPONSE = "LLM_INVALID_RESPONSE"

    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class SiteAnalystError(Exception):
    """Base exception with error code support."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(f"[{code.value}] {message}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to API-friendly dictionary."""
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }


class UnknownSectionError(SiteAnalystError):
    """Section identifier is not registered."""

    def __init__(self, section: str) -> None:
        super().__init__(
            ErrorCode.SECTION_UNKNOWN,
            f"No schema registered for section: {section}",
            {"section": section},
        )
        self.section = section


class InvalidDocumentError(SiteAnalystError):
    """Document buffer rejected before extraction."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.EXTRACTION_INVALID_PDF, message, details)


class BackendUnavailableError(SiteAnalystError):
    """Extraction backend could not be reached or refused the request."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.LLM_UNAVAILABLE, message, details)


class MalformedResponseError(SiteAnalystError):
    """Backend text could not be coerced into JSON."""

    def __init__(self, message: str, raw_text: str = "") -> None:
        super().__init__(
            ErrorCode.LLM_INVALID_RESPONSE,
            message,
            {"preview": raw_text[:200]},
        )
        self.raw_text = raw_text


class AggregateExtractionError(SiteAnalystError):
    """One or more sections failed; carries every section failure."""

    SUMMARY = (
        "Failed to extract some sections from the PDF. "
        "Please check the data quality and try uploading again."
    )

    def __init__(self, failures: list[SectionFailure]) -> None:
        if not failures:
            raise ValueError("AggregateExtractionError requires at least one failure")
        self.failures = list(failures)
        super().__init__(
            ErrorCode.EXTRACTION_INCOMPLETE,
            self.SUMMARY,
            {"failures": [f.model_dump(mode="json") for f in self.failures]},
        )

    @property
    def failed_sections(self) -> list[str]:
        """Section identifiers that failed, in canonical order."""
        return [f.section.value for f in self.failures]
