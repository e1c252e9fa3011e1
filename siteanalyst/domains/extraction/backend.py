"""
Gemini Section Backend - Extraction backend adapter over the Gemini client.

Turns (document bytes, section) into an ExtractionOutcome: builds the
instruction from the section's schema descriptor plus the JSON-only output
constraints, sends the document inline, and returns the raw text with a
coarse confidence.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from siteanalyst.adapters.gemini import (
    BlockedResponseError,
    DocumentPart,
    GeminiAPIError,
    RateLimitError,
)
from siteanalyst.config.errors import (
    BackendUnavailableError,
    InvalidDocumentError,
    MalformedResponseError,
)

from .json_parser import parse_json_response
from .models import ExtractionOutcome, ParsedSection, SectionId
from .prompts import OUTPUT_REQUIREMENTS
from .schemas import DEFAULT_REGISTRY, SchemaDescriptor, SchemaRegistry

if TYPE_CHECKING:
    from siteanalyst.adapters.gemini import GeminiClient

logger = logging.getLogger(__name__)

__all__ = ["GeminiSectionBackend", "build_instruction", "parse_outcome"]

EXTRACTOR_VERSION = "1.0"
CLEAN_CONFIDENCE = 0.95
TRUNCATED_CONFIDENCE = 0.7


def build_instruction(descriptor: SchemaDescriptor) -> str:
    """Combine a section's shape contract with the output-format constraints."""
    return "\n\n".join(
        [
            "You are a real estate data extraction expert. Please analyze this PDF "
            f"and extract {descriptor.section.value} information.",
            "YOUR RESPONSE MUST BE VALID JSON AND EXACTLY MATCH THIS STRUCTURE - "
            "NO ADDITIONAL TEXT OR FORMATTING:",
            descriptor.prompt,
            OUTPUT_REQUIREMENTS,
        ]
    )


def parse_outcome(outcome: ExtractionOutcome) -> ParsedSection:
    """
    Parse a raw outcome into a ParsedSection.

    Raises:
        MalformedResponseError: raw text holds no decodable JSON
    """
    return ParsedSection(
        section=outcome.section,
        data=parse_json_response(outcome.raw_text),
        confidence=outcome.confidence,
    )


class GeminiSectionBackend:
    """
    Extraction backend backed by Gemini.

    Example:
        >>> client = GeminiClient(GeminiConfig.from_settings(get_settings()))
        >>> backend = GeminiSectionBackend(client)
        >>> outcome = await backend.extract(pdf_bytes, SectionId.DEMOGRAPHICS)
    """

    def __init__(
        self,
        client: GeminiClient,
        registry: SchemaRegistry | None = None,
        mime_type: str = "application/pdf",
    ) -> None:
        """
        Initialize backend.

        Args:
            client: Shared Gemini client (one per process)
            registry: Schema registry; defaults to the built-in sections
            mime_type: MIME type sent with the document bytes
        """
        self._client = client
        self._registry = registry or DEFAULT_REGISTRY
        self._mime_type = mime_type

    async def extract(self, document: bytes, section: SectionId) -> ExtractionOutcome:
        """
        Extract one section's raw answer from the document.

        Args:
            document: Raw document bytes
            section: Section to extract

        Returns:
            ExtractionOutcome with raw text, confidence and metadata

        Raises:
            InvalidDocumentError: document is empty
            UnknownSectionError: section is not registered
            BackendUnavailableError: the Gemini call failed
            MalformedResponseError: the reply was blocked or carried no text
        """
        if not document:
            raise InvalidDocumentError("Document is empty")

        descriptor = self._registry.lookup(section)
        prompt = build_instruction(descriptor)

        try:
            response = await self._client.generate(
                prompt,
                document=DocumentPart(data=document, mime_type=self._mime_type),
            )
        except (GeminiAPIError, RateLimitError, ConnectionError) as e:
            logger.warning("Backend call failed for %s: %s", descriptor.section.value, e)
            raise BackendUnavailableError(
                f"Extraction backend unavailable: {e}",
                {"section": descriptor.section.value},
            ) from e
        except BlockedResponseError as e:
            logger.warning("Blocked reply for %s: %s", descriptor.section.value, e)
            raise MalformedResponseError(f"AI response was blocked or empty: {e}") from e

        return ExtractionOutcome(
            section=descriptor.section,
            raw_text=response.text,
            confidence=CLEAN_CONFIDENCE if response.completed_cleanly else TRUNCATED_CONFIDENCE,
            metadata={
                "extractor_version": EXTRACTOR_VERSION,
                "processing_timestamp": datetime.now(timezone.utc).isoformat(),
                "section": descriptor.section.value,
                "model": response.model,
                "finish_reason": response.finish_reason,
                "total_tokens": response.total_tokens,
            },
        )
