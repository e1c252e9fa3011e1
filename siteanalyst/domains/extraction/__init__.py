"""
Extraction Domain - PDF to location analysis record.

This domain handles:
- Section schemas and the read-only registry
- Per-section backend calls and tolerant JSON recovery
- Field-level validation with accumulated errors
- Concurrent all-or-nothing orchestration
- Normalization into the Location Analysis Record
"""

from .backend import GeminiSectionBackend, build_instruction, parse_outcome
from .contracts import ExtractionBackend, LocationAnalyzer
from .json_parser import parse_json_response
from .models import (
    CANONICAL_ORDER,
    ExtractionOutcome,
    FieldError,
    LocationAnalysisRecord,
    ParsedSection,
    SectionFailure,
    SectionId,
    Severity,
    ValidationResult,
)
from .normalizer import build_record, normalize
from .orchestrator import SectionOrchestrator
from .schemas import DEFAULT_REGISTRY, SchemaDescriptor, SchemaRegistry
from .validator import SectionValidator

__all__ = [
    # Contracts
    "ExtractionBackend",
    "LocationAnalyzer",
    # Models
    "CANONICAL_ORDER",
    "ExtractionOutcome",
    "FieldError",
    "LocationAnalysisRecord",
    "ParsedSection",
    "SectionFailure",
    "SectionId",
    "Severity",
    "ValidationResult",
    # Schemas
    "DEFAULT_REGISTRY",
    "SchemaDescriptor",
    "SchemaRegistry",
    # Implementations
    "GeminiSectionBackend",
    "SectionOrchestrator",
    "SectionValidator",
    "build_instruction",
    "build_record",
    "normalize",
    "parse_json_response",
    "parse_outcome",
]
