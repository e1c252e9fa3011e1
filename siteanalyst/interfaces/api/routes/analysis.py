"""
Analysis Routes - Location analysis extraction and geocoding endpoints.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, File, UploadFile
from pydantic import BaseModel, Field

from siteanalyst.adapters.geocoding import GeocodeResult, GeocodingClient
from siteanalyst.config import Settings, get_settings
from siteanalyst.config.errors import ErrorCode, InvalidDocumentError, SiteAnalystError
from siteanalyst.domains.extraction import SectionOrchestrator

from ..deps import get_geocoder, get_orchestrator

logger = logging.getLogger(__name__)

router = APIRouter()


class SectionInfo(BaseModel):
    """Registered section and its shape name."""

    id: str
    data_schema: str


class AnalysisResponse(BaseModel):
    """Complete location analysis for one uploaded document."""

    filename: str
    extracted_at: datetime
    confidence: dict[str, float]
    data: dict[str, Any]


class GeocodeRequest(BaseModel):
    """Addresses to place on the map."""

    addresses: list[str] = Field(..., min_length=1, max_length=50)


@router.get("/sections", response_model=list[SectionInfo])
async def list_sections(
    orchestrator: SectionOrchestrator = Depends(get_orchestrator),
) -> list[SectionInfo]:
    """List the sections extracted per document, in reporting order."""
    return [
        SectionInfo(id=d.section.value, data_schema=d.data_schema)
        for d in orchestrator.registry
    ]


@router.post("/extract", response_model=AnalysisResponse)
async def extract_analysis(
    file: UploadFile = File(...),
    orchestrator: SectionOrchestrator = Depends(get_orchestrator),
    settings: Settings = Depends(get_settings),
) -> AnalysisResponse:
    """
    Extract a location analysis from a PDF upload.

    Every section must succeed; otherwise the response is a 422 listing each
    failed section with its field errors.
    """
    if not file.filename or not file.filename.lower().endswith(".pdf"):
        raise InvalidDocumentError("File must be a PDF", {"filename": file.filename})

    max_bytes = settings.max_upload_mb * 1024 * 1024
    if file.size is not None and file.size > max_bytes:
        raise _too_large(file.filename, settings.max_upload_mb, file.size)

    # Never buffer more than one byte past the limit
    document = await file.read(max_bytes + 1)
    if len(document) > max_bytes:
        raise _too_large(file.filename, settings.max_upload_mb, len(document))
    if not document:
        raise InvalidDocumentError("Uploaded file is empty", {"filename": file.filename})

    logger.info("Extracting %s (%d bytes)", file.filename, len(document))
    record = await orchestrator.extract_all(document)

    return AnalysisResponse(
        filename=file.filename,
        extracted_at=record.extracted_at,
        confidence=record.confidence,
        data=record.to_payload(),
    )


@router.post("/geocode", response_model=list[GeocodeResult])
async def geocode_addresses(
    request: GeocodeRequest,
    geocoder: GeocodingClient = Depends(get_geocoder),
) -> list[GeocodeResult]:
    """Geocode addresses in order; misses come back with `success=false`."""
    return await geocoder.geocode_many(request.addresses)


def _too_large(filename: str, limit_mb: int, size_bytes: int) -> SiteAnalystError:
    return SiteAnalystError(
        ErrorCode.EXTRACTION_TOO_LARGE,
        f"File exceeds {limit_mb} MB limit",
        {"filename": filename, "size_bytes": size_bytes},
    )
