"""
Gemini Adapter - Unified Google Gemini API client.

This is the ONLY place that calls the Gemini API.
All domains use this adapter for LLM operations.
"""

from .client import BlockedResponseError, GeminiAPIError, GeminiClient, RateLimitError
from .models import DocumentPart, GeminiConfig, GeminiResponse

__all__ = [
    "GeminiClient",
    "GeminiConfig",
    "GeminiResponse",
    "DocumentPart",
    "GeminiAPIError",
    "RateLimitError",
    "BlockedResponseError",
]
