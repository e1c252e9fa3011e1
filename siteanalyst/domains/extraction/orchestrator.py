"""
Section Orchestrator - Concurrent fan-out of one document to every section.

Each section runs extract -> parse -> validate as an independent task on the
event loop. All tasks settle before any decision is made; one slow or failing
section never cancels the others. The run is all-or-nothing: any failure
discards every success and raises AggregateExtractionError.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass

from siteanalyst.config.errors import (
    AggregateExtractionError,
    BackendUnavailableError,
    InvalidDocumentError,
    MalformedResponseError,
)

from .backend import parse_outcome
from .contracts import ExtractionBackend
from .models import (
    FieldError,
    LocationAnalysisRecord,
    ParsedSection,
    SectionFailure,
    SectionId,
)
from .normalizer import build_record
from .schemas import DEFAULT_REGISTRY, SchemaRegistry
from .validator import SectionValidator

logger = logging.getLogger(__name__)

__all__ = ["SectionOrchestrator"]


@dataclass
class _SectionOutcome:
    """Terminal state of one section task."""

    section: SectionId
    parsed: ParsedSection | None = None
    failure: SectionFailure | None = None
    duration_ms: float = 0.0


class SectionOrchestrator:
    """
    Extract a complete location analysis from one document.

    The backend is injected once (typically per process) and shared by every
    run; nothing mutable is shared between the concurrent section tasks.

    Example:
        >>> orchestrator = SectionOrchestrator(GeminiSectionBackend(client))
        >>> try:
        ...     record = await orchestrator.extract_all(pdf_bytes)
        ... except AggregateExtractionError as e:
        ...     for failure in e.failures:
        ...         print(failure.section, failure.errors)
    """

    def __init__(
        self,
        backend: ExtractionBackend,
        registry: SchemaRegistry | None = None,
        validator: SectionValidator | None = None,
    ) -> None:
        """
        Initialize orchestrator.

        Args:
            backend: Extraction backend adapter
            registry: Schema registry; defaults to the built-in sections
            validator: Section validator; defaults to one over `registry`
        """
        self._backend = backend
        self._registry = registry or DEFAULT_REGISTRY
        self._validator = validator or SectionValidator(self._registry)

    @property
    def registry(self) -> SchemaRegistry:
        return self._registry

    @property
    def sections(self) -> list[SectionId]:
        """Sections extracted per run, in canonical order."""
        return self._registry.sections()

    async def extract_all(self, document: bytes) -> LocationAnalysisRecord:
        """
        Extract every registered section concurrently.

        Args:
            document: Raw document bytes

        Returns:
            Fully populated LocationAnalysisRecord

        Raises:
            InvalidDocumentError: document is empty
            AggregateExtractionError: one or more sections failed
        """
        if not document:
            raise InvalidDocumentError("Document is empty")

        sections = self.sections
        start_time = time.perf_counter()
        logger.info(
            "Starting extraction: %d bytes, %d sections", len(document), len(sections)
        )

        results = await asyncio.gather(
            *(self._run_section(document, section) for section in sections),
            return_exceptions=True,
        )

        outcomes: list[_SectionOutcome] = []
        for section, result in zip(sections, results):
            if isinstance(result, BaseException):
                # _run_section converts Exception; only BaseException subclasses land here
                logger.error("Section %s aborted: %r", section.value, result)
                result = _failed(section, "unknown", str(result) or type(result).__name__)
            outcomes.append(result)

        failures = [o.failure for o in outcomes if o.failure is not None]
        elapsed_ms = (time.perf_counter() - start_time) * 1000

        if failures:
            logger.warning(
                "Extraction incomplete: %d/%d sections failed (%s) in %.0fms",
                len(failures),
                len(sections),
                ", ".join(f.section.value for f in failures),
                elapsed_ms,
            )
            raise AggregateExtractionError(failures)

        record = build_record({o.section: o.parsed for o in outcomes if o.parsed is not None})
        logger.info("Extraction complete: %d sections in %.0fms", len(sections), elapsed_ms)
        return record

    async def extract_section(self, document: bytes, section: SectionId) -> ParsedSection:
        """
        Run the extract -> parse -> validate pipeline for a single section.

        Raises:
            BackendUnavailableError: backend call failed
            MalformedResponseError: response holds no JSON
            AggregateExtractionError: payload violates the section's shape
        """
        outcome = await self._backend.extract(document, section)
        parsed = parse_outcome(outcome)
        validation = self._validator.validate(section, parsed.data)
        if not validation.is_valid:
            raise AggregateExtractionError(
                [SectionFailure(section=section, errors=validation.errors)]
            )
        return parsed

    async def _run_section(self, document: bytes, section: SectionId) -> _SectionOutcome:
        start_time = time.perf_counter()
        try:
            parsed = await self.extract_section(document, section)
        except AggregateExtractionError as e:
            outcome = _SectionOutcome(section=section, failure=e.failures[0])
        except MalformedResponseError as e:
            logger.warning("Section %s returned malformed JSON: %s", section.value, e.message)
            outcome = _failed(section, "format", e.message)
        except BackendUnavailableError as e:
            outcome = _failed(section, "backend", e.message)
        except Exception as e:
            logger.exception("Unexpected error extracting %s", section.value)
            outcome = _failed(section, "unknown", str(e) or type(e).__name__)
        else:
            outcome = _SectionOutcome(section=section, parsed=parsed)

        outcome.duration_ms = (time.perf_counter() - start_time) * 1000
        if outcome.failure is not None:
            logger.info(
                "Section %s failed with %d error(s) in %.0fms",
                section.value,
                len(outcome.failure.errors),
                outcome.duration_ms,
            )
        else:
            logger.info(
                "Section %s extracted: confidence=%.2f in %.0fms",
                section.value,
                outcome.parsed.confidence if outcome.parsed else 0.0,
                outcome.duration_ms,
            )
        return outcome


def _failed(section: SectionId, field: str, message: str) -> _SectionOutcome:
    return _SectionOutcome(
        section=section,
        failure=SectionFailure(section=section, errors=[FieldError(field=field, message=message)]),
    )
