"""
FastAPI Main Application - API entry point.

Run with: uvicorn siteanalyst.interfaces.api.main:app --reload
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from siteanalyst import __version__
from siteanalyst.config import get_settings

from .deps import cleanup_services
from .middleware import (
    ErrorHandlerMiddleware,
    LatencyMiddleware,
    RequestIDMiddleware,
)
from .routes import analysis, health

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings = get_settings()
    logger.info("Starting SiteAnalyst API...")
    logger.info("  Model: %s", settings.gemini_model)
    logger.info("  Max upload: %d MB", settings.max_upload_mb)

    yield

    logger.info("Shutting down SiteAnalyst API...")
    await cleanup_services()


def create_app() -> FastAPI:
    """Create FastAPI application."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="SiteAnalyst API",
        description="Location analysis extraction from commercial real estate PDFs",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters - last added = outermost)
    # 1. Error handling (innermost - wraps route exceptions)
    app.add_middleware(ErrorHandlerMiddleware)

    # 2. Latency tracking
    app.add_middleware(LatencyMiddleware)

    # 3. Request ID (outermost custom - runs first)
    app.add_middleware(RequestIDMiddleware)

    # 4. CORS (framework middleware)
    allowed_origins = [
        "http://localhost:5173",  # Vite dev server
        "http://localhost:8000",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:8000",
    ]
    if settings.api_debug:
        allowed_origins.append("http://localhost:*")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "X-Request-ID"],
    )

    app.include_router(health.router, tags=["Health"])
    app.include_router(analysis.router, prefix="/api/analysis", tags=["Analysis"])

    return app


# Create app instance
app = create_app()
