"""
API Dependencies - Dependency injection for FastAPI routes.

Provides per-process instances of the adapters and the orchestrator.
Tests swap them through `app.dependency_overrides`.
"""

from __future__ import annotations

from functools import lru_cache

from siteanalyst.adapters.gemini import GeminiClient, GeminiConfig
from siteanalyst.adapters.geocoding import GeocodingClient, GeocodingConfig
from siteanalyst.config import get_settings
from siteanalyst.domains.extraction import GeminiSectionBackend, SectionOrchestrator


@lru_cache
def get_gemini_client() -> GeminiClient:
    """Get Gemini client singleton."""
    return GeminiClient(GeminiConfig.from_settings(get_settings()))


@lru_cache
def get_orchestrator() -> SectionOrchestrator:
    """Get section orchestrator singleton."""
    return SectionOrchestrator(GeminiSectionBackend(get_gemini_client()))


@lru_cache
def get_geocoder() -> GeocodingClient:
    """Get geocoding client singleton."""
    return GeocodingClient(GeocodingConfig.from_settings(get_settings()))


async def cleanup_services() -> None:
    """Cleanup services on shutdown."""
    if get_geocoder.cache_info().currsize:
        await get_geocoder().close()
