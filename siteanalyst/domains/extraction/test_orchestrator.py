"""
Tests for the concurrent section orchestrator.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import pytest

from siteanalyst.config.errors import (
    AggregateExtractionError,
    BackendUnavailableError,
    ErrorCode,
    InvalidDocumentError,
)

from .contracts import ExtractionBackend, LocationAnalyzer
from .models import CANONICAL_ORDER, FieldError, LocationAnalysisRecord, SectionId
from .orchestrator import SectionOrchestrator
from .schemas import DEFAULT_REGISTRY, SchemaRegistry

PDF = b"%PDF-1.7 fake document"


def test_fakes_satisfy_contracts(scripted_backend: Callable[..., Any]) -> None:
    assert isinstance(scripted_backend(), ExtractionBackend)
    assert isinstance(SectionOrchestrator(scripted_backend()), LocationAnalyzer)


async def test_all_sections_valid(scripted_backend: Callable[..., Any]) -> None:
    """Test every section valid yields a fully populated record."""
    backend = scripted_backend()
    orchestrator = SectionOrchestrator(backend)

    record = await orchestrator.extract_all(PDF)

    assert isinstance(record, LocationAnalysisRecord)
    assert sorted(backend.calls) == sorted(CANONICAL_ORDER)
    assert record.supply_pipeline.yearly_supply[0].office == 120000
    assert record.land_sales.market_trends.number_of_transactions == 14
    assert record.demographics.income_stats.growth_rate == "3.2%"
    assert record.proximity_insights.scores.transit_score == 78
    assert record.zoning_overlays.current.far == "4:1"
    assert len(record.risk_factors) == 1
    assert record.submarket.submarket == "Pearl District"
    assert record.property_type.property_type == "Mixed-Use"
    assert record.property_name.property_name == "The Marshall"
    assert record.confidence == {s.value: 0.95 for s in CANONICAL_ORDER}


async def test_prose_response_fails_only_that_section(
    scripted_backend: Callable[..., Any],
) -> None:
    """Test one prose answer aborts the run with a single format failure."""
    backend = scripted_backend(
        {SectionId.ZONING_OVERLAYS: "The property is zoned EX with a 4:1 FAR."}
    )

    with pytest.raises(AggregateExtractionError) as exc_info:
        await SectionOrchestrator(backend).extract_all(PDF)

    error = exc_info.value
    assert error.code == ErrorCode.EXTRACTION_INCOMPLETE
    assert error.failed_sections == [SectionId.ZONING_OVERLAYS]
    assert error.failures[0].errors == [
        FieldError(field="format", message="AI response was not valid JSON")
    ]
    # All other sections still ran to completion
    assert sorted(backend.completed) == sorted(CANONICAL_ORDER)


async def test_validation_failure_is_reported_with_paths(
    scripted_backend: Callable[..., Any], valid_payloads: dict[SectionId, Any]
) -> None:
    """Test a schema violation lists the exact field paths."""
    demographics = valid_payloads[SectionId.DEMOGRAPHICS]
    demographics["population"][1]["year"] = "2025"
    backend = scripted_backend({SectionId.DEMOGRAPHICS: json.dumps(demographics)})

    with pytest.raises(AggregateExtractionError) as exc_info:
        await SectionOrchestrator(backend).extract_all(PDF)

    (failure,) = exc_info.value.failures
    assert failure.section is SectionId.DEMOGRAPHICS
    assert failure.errors == [FieldError(field="population[1].year", message="Year must be a number")]


async def test_backend_failure(scripted_backend: Callable[..., Any]) -> None:
    """Test an unreachable backend is reported under the backend field."""
    backend = scripted_backend(
        {SectionId.LAND_SALES: BackendUnavailableError("Extraction backend unavailable: 503")}
    )

    with pytest.raises(AggregateExtractionError) as exc_info:
        await SectionOrchestrator(backend).extract_all(PDF)

    (failure,) = exc_info.value.failures
    assert failure.section is SectionId.LAND_SALES
    assert failure.errors == [
        FieldError(field="backend", message="Extraction backend unavailable: 503")
    ]


async def test_unexpected_exception(scripted_backend: Callable[..., Any]) -> None:
    """Test an unexpected error is captured rather than cancelling siblings."""
    backend = scripted_backend({SectionId.SUBMARKET: RuntimeError("socket exploded")})

    with pytest.raises(AggregateExtractionError) as exc_info:
        await SectionOrchestrator(backend).extract_all(PDF)

    assert exc_info.value.failures[0].errors == [
        FieldError(field="unknown", message="socket exploded")
    ]
    assert sorted(backend.completed) == sorted(CANONICAL_ORDER)


async def test_failures_in_canonical_order(scripted_backend: Callable[..., Any]) -> None:
    """Test failure order ignores completion order."""
    backend = scripted_backend(
        script={
            SectionId.SUPPLY_PIPELINE: "no data",
            SectionId.RISK_FACTORS: "no data",
            SectionId.PROPERTY_NAME: "no data",
        },
        delays={SectionId.SUPPLY_PIPELINE: 0.05, SectionId.RISK_FACTORS: 0.02},
    )

    with pytest.raises(AggregateExtractionError) as exc_info:
        await SectionOrchestrator(backend).extract_all(PDF)

    assert backend.completed.index(SectionId.PROPERTY_NAME) < backend.completed.index(
        SectionId.SUPPLY_PIPELINE
    )
    assert exc_info.value.failed_sections == [
        SectionId.SUPPLY_PIPELINE,
        SectionId.RISK_FACTORS,
        SectionId.PROPERTY_NAME,
    ]


async def test_error_payload(scripted_backend: Callable[..., Any]) -> None:
    """Test the aggregate error serializes every failure."""
    backend = scripted_backend({SectionId.PROPERTY_TYPE: json.dumps({"propertyType": ""})})

    with pytest.raises(AggregateExtractionError) as exc_info:
        await SectionOrchestrator(backend).extract_all(PDF)

    payload = exc_info.value.to_dict()
    assert payload["code"] == "EXTRACTION_INCOMPLETE"
    assert payload["details"]["failures"] == [
        {
            "section": "propertyType",
            "errors": [
                {"field": "propertyType", "message": "Property type must be a non-empty string"}
            ],
        }
    ]


async def test_empty_document(scripted_backend: Callable[..., Any]) -> None:
    backend = scripted_backend()
    with pytest.raises(InvalidDocumentError):
        await SectionOrchestrator(backend).extract_all(b"")
    assert backend.calls == []


def test_custom_registry_limits_sections(scripted_backend: Callable[..., Any]) -> None:
    """Test only registered sections are requested."""
    registry = SchemaRegistry([DEFAULT_REGISTRY.lookup(SectionId.SUBMARKET)])
    orchestrator = SectionOrchestrator(scripted_backend(), registry=registry)
    assert orchestrator.sections == [SectionId.SUBMARKET]


async def test_extract_section(scripted_backend: Callable[..., Any]) -> None:
    """Test a single section runs the full pipeline."""
    parsed = await SectionOrchestrator(scripted_backend()).extract_section(
        PDF, SectionId.PROPERTY_NAME
    )
    assert parsed.data == {"propertyName": "The Marshall"}
    assert parsed.confidence == 0.95


async def test_prose_wrapped_risk_array_keeps_every_risk(
    scripted_backend: Callable[..., Any],
) -> None:
    """Test a risk array surrounded by prose yields every risk in the record."""
    risks = [
        {"title": "Flood zone", "description": "100-year floodplain", "severity": "high"},
        {"title": "Rising costs", "description": "Materials up 12%", "severity": "medium"},
        {"title": "Parking", "description": "Limited structured parking", "severity": "low"},
    ]
    backend = scripted_backend(
        {SectionId.RISK_FACTORS: f"Here are the key risks: {json.dumps(risks)} Hope this helps."}
    )

    record = await SectionOrchestrator(backend).extract_all(PDF)

    assert [r.title for r in record.risk_factors] == ["Flood zone", "Rising costs", "Parking"]


async def test_nan_number_fails_section(
    scripted_backend: Callable[..., Any], valid_payloads: dict[SectionId, Any]
) -> None:
    """Test a NaN in a required number fails the section instead of passing through."""
    text = json.dumps(valid_payloads[SectionId.DEMOGRAPHICS]).replace("78476", "NaN")
    backend = scripted_backend({SectionId.DEMOGRAPHICS: text})

    with pytest.raises(AggregateExtractionError) as exc_info:
        await SectionOrchestrator(backend).extract_all(PDF)

    assert exc_info.value.failed_sections == [SectionId.DEMOGRAPHICS]
