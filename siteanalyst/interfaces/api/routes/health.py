"""
Health Routes - System health and status endpoints.
"""

from typing import Any

from fastapi import APIRouter

from siteanalyst import __version__

router = APIRouter()


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "service": "siteanalyst"}


@router.get("/api")
async def api_info() -> dict[str, Any]:
    """API info endpoint."""
    return {
        "name": "SiteAnalyst API",
        "version": __version__,
        "description": "Location analysis extraction from commercial real estate PDFs",
        "docs": "/docs",
    }
