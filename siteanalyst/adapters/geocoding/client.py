"""
Geocoding Client - Address to coordinates for map placement.

Features:
- Async HTTP client
- Serialized requests with a minimum spacing between calls
- Best-effort results (failures never raise)
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Iterable
from typing import Any

import httpx

from .models import GeocodeResult, GeocodingConfig

logger = logging.getLogger(__name__)

__all__ = ["GeocodingClient"]


class GeocodingClient:
    """
    Geocoding client for land-sale comparables and subject addresses.

    Example:
        >>> client = GeocodingClient(GeocodingConfig.from_settings(get_settings()))
        >>> result = await client.geocode("1200 NW Marshall St, Portland, OR")
        >>> if result.success:
        ...     print(result.lat, result.lng)
    """

    def __init__(
        self,
        config: GeocodingConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize geocoding client.

        Args:
            config: Client configuration
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.config = config or GeocodingConfig()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._lock = asyncio.Lock()
        self._last_request_time = 0.0

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.config.timeout_seconds,
                transport=self._transport,
            )
        return self._client

    async def _wait_for_slot(self) -> None:
        """Sleep until the minimum delay since the previous request has passed."""
        elapsed = time.monotonic() - self._last_request_time
        remaining = self.config.min_delay_seconds - elapsed
        if self._last_request_time and remaining > 0:
            logger.debug("Geocoding throttled, waiting %.2fs", remaining)
            await asyncio.sleep(remaining)
        self._last_request_time = time.monotonic()

    async def geocode(self, address: str) -> GeocodeResult:
        """
        Look up coordinates for an address.

        Args:
            address: Free-form street address

        Returns:
            GeocodeResult; `success=False` with zero coordinates on any failure
        """
        if not address.strip():
            return GeocodeResult.miss(address)

        params: dict[str, Any] = {"q": address}
        if self.config.api_key:
            params["api_key"] = self.config.api_key

        async with self._lock:
            await self._wait_for_slot()
            client = await self._get_client()
            try:
                response = await client.get(self.config.url, params=params)
                response.raise_for_status()
                hits = response.json()
            except (httpx.HTTPError, ValueError) as e:
                logger.warning("Geocoding failed for %r: %s", address, e)
                return GeocodeResult.miss(address)

        if not isinstance(hits, list) or not hits:
            logger.warning("No geocoding results for %r", address)
            return GeocodeResult.miss(address)

        first = hits[0]
        try:
            result = GeocodeResult(
                address=address,
                lat=float(first["lat"]),
                lng=float(first["lon"]),
                success=True,
                display_name=first.get("display_name"),
            )
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Unusable geocoding hit for %r: %s", address, e)
            return GeocodeResult.miss(address)

        logger.info("Geocoded %r -> (%.6f, %.6f)", address, result.lat, result.lng)
        return result

    async def geocode_many(self, addresses: Iterable[str]) -> list[GeocodeResult]:
        """Geocode addresses one after another, preserving input order."""
        return [await self.geocode(address) for address in addresses]

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
