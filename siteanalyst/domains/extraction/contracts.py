"""
Extraction Contracts - Interfaces for extraction domain.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .models import ExtractionOutcome, LocationAnalysisRecord, SectionId


@runtime_checkable
class ExtractionBackend(Protocol):
    """
    Contract for document-understanding backends.

    Tests substitute a fake that satisfies this protocol instead of patching
    process-wide client state.

    Example:
        >>> class FakeBackend:
        ...     async def extract(self, document: bytes, section: SectionId) -> ExtractionOutcome:
        ...         ...
        >>> assert isinstance(FakeBackend(), ExtractionBackend)
    """

    async def extract(self, document: bytes, section: SectionId) -> ExtractionOutcome:
        """
        Ask the backend for one section of the document.

        Args:
            document: Raw document bytes (non-empty)
            section: Section to extract

        Returns:
            Raw text answer with a coarse confidence

        Raises:
            BackendUnavailableError: backend could not be reached
            UnknownSectionError: section is not registered
        """
        ...


@runtime_checkable
class LocationAnalyzer(Protocol):
    """Contract for turning one document into a complete location analysis."""

    async def extract_all(self, document: bytes) -> LocationAnalysisRecord:
        """
        Extract every section concurrently.

        Args:
            document: Raw document bytes

        Returns:
            Fully populated location analysis record

        Raises:
            AggregateExtractionError: one or more sections failed
            InvalidDocumentError: document is empty
        """
        ...
