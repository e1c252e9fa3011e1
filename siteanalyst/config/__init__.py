"""
Configuration - Application settings and error taxonomy.
"""

from .errors import (
    AggregateExtractionError,
    BackendUnavailableError,
    ErrorCode,
    InvalidDocumentError,
    MalformedResponseError,
    SiteAnalystError,
    UnknownSectionError,
)
from .settings import Settings, get_settings

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    # Errors
    "ErrorCode",
    "SiteAnalystError",
    "UnknownSectionError",
    "InvalidDocumentError",
    "BackendUnavailableError",
    "MalformedResponseError",
    "AggregateExtractionError",
]
