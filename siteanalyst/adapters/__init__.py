"""
Adapters - External service integrations.

All external API calls are wrapped here to isolate domains from third-party changes.
"""

from .gemini import GeminiClient, GeminiConfig
from .geocoding import GeocodeResult, GeocodingClient, GeocodingConfig

__all__ = [
    # Document understanding
    "GeminiClient",
    "GeminiConfig",
    # Map placement
    "GeocodingClient",
    "GeocodingConfig",
    "GeocodeResult",
]
