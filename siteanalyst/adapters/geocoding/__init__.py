"""
Geocoding Adapter - Address lookup for map placement.
"""

from .client import GeocodingClient
from .models import GeocodeResult, GeocodingConfig

__all__ = [
    "GeocodingClient",
    "GeocodingConfig",
    "GeocodeResult",
]
