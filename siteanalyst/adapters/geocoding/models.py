"""
Geocoding Models - Configuration and result types.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from siteanalyst.config import Settings


class GeocodingConfig(BaseModel):
    """Configuration for the geocoding client."""

    url: str = Field(default="https://geocode.maps.co/search")
    api_key: str | None = None
    min_delay_seconds: float = Field(default=2.0, ge=0.0)
    timeout_seconds: float = Field(default=30.0, gt=0.0)

    model_config = {"frozen": True}

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeocodingConfig":
        return cls(
            url=settings.geocoding_url,
            api_key=settings.geocoding_api_key,
            min_delay_seconds=settings.geocoding_min_delay_seconds,
            timeout_seconds=settings.geocoding_timeout_seconds,
        )


class GeocodeResult(BaseModel):
    """Coordinates for one address; `success=False` means no usable hit."""

    address: str
    lat: float = 0.0
    lng: float = 0.0
    success: bool = False
    display_name: str | None = None

    model_config = {"frozen": True}

    @classmethod
    def miss(cls, address: str) -> "GeocodeResult":
        return cls(address=address)
