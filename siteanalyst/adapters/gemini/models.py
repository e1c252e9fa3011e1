"""
Gemini Models - Request/Response types for Gemini API.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from siteanalyst.config import Settings


class GeminiConfig(BaseModel):
    """Configuration for Gemini client."""

    model: str = Field(default="gemini-2.5-flash")
    api_key: str | None = None
    temperature: float = Field(default=1.0, ge=0.0, le=2.0)
    max_output_tokens: int = Field(default=8192)
    timeout_seconds: int = Field(default=300)
    max_retries: int = Field(default=3, ge=1)
    retry_min_wait_seconds: float = Field(default=2.0, ge=0.0)
    rate_limit_rpm: int = Field(default=60, ge=1)

    model_config = {"frozen": True}

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiConfig":
        """Build client config from application settings."""
        return cls(
            model=settings.gemini_model,
            api_key=settings.gemini_api_key,
            temperature=settings.gemini_temperature,
            timeout_seconds=settings.gemini_timeout_seconds,
            max_retries=settings.gemini_max_retries,
            rate_limit_rpm=settings.gemini_rate_limit_rpm,
        )


class DocumentPart(BaseModel):
    """Inline binary document sent alongside a prompt."""

    data: bytes
    mime_type: str = "application/pdf"

    model_config = {"frozen": True}


class GeminiResponse(BaseModel):
    """Generic Gemini API response."""

    text: str
    model: str
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0
    finish_reason: str = "STOP"

    @property
    def completed_cleanly(self) -> bool:
        """Whether the model stopped on its own rather than being cut off."""
        return self.finish_reason == "STOP"
