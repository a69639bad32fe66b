"""Reverse geocoding through a Nominatim-compatible HTTP service."""

import asyncio
from typing import Any

import httpx

from video_atlas.adapters.geocoding.base import Address, GeocodingBackend
from video_atlas.errors import UpstreamError
from video_atlas.logging import get_logger

logger = get_logger(__name__)

NOMINATIM_URL = "https://nominatim.openstreetmap.org"


def _first(address: dict[str, Any], *keys: str) -> str | None:
    for key in keys:
        value = address.get(key)
        if value:
            return str(value)
    return None


def address_from_payload(payload: dict[str, Any]) -> Address:
    """Map Nominatim address keys onto the generic address components."""
    address = payload.get("address") or {}
    country_code = address.get("country_code")
    return Address(
        locality=_first(address, "city", "town", "village", "municipality"),
        sub_admin_area=_first(address, "county", "state_district"),
        admin_area=_first(address, "state", "region", "province"),
        sub_locality=_first(address, "suburb", "neighbourhood", "quarter", "city_district"),
        thoroughfare=_first(address, "road", "pedestrian", "footway"),
        country_name=_first(address, "country"),
        country_code=country_code.upper() if country_code else None,
    )


class NominatimGeocodingBackend(GeocodingBackend):
    """Resolves coordinates with the ``/reverse`` endpoint (jsonv2 format).

    Requests are throttled: at most ``max_concurrency`` are in flight, and
    consecutive request starts are spaced by ``min_interval`` seconds. The
    public service allows one request per second.
    """

    def __init__(
        self,
        base_url: str = NOMINATIM_URL,
        *,
        user_agent: str = "video-atlas",
        timeout: float = 10.0,
        max_concurrency: int = 1,
        min_interval: float = 0.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be positive, got {max_concurrency}")
        if min_interval < 0:
            raise ValueError(f"min_interval must not be negative, got {min_interval}")

        self._base_url = base_url.rstrip("/")
        self._user_agent = user_agent
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._semaphore = asyncio.Semaphore(max_concurrency)
        self._min_interval = min_interval
        self._spacing_lock = asyncio.Lock()
        self._last_request_at: float | None = None

    def is_present(self) -> bool:
        return bool(self._base_url)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                headers={"User-Agent": self._user_agent},
                transport=self._transport,
            )
        return self._client

    async def _wait_for_slot(self) -> None:
        if self._min_interval <= 0:
            return
        async with self._spacing_lock:
            loop = asyncio.get_running_loop()
            if self._last_request_at is not None:
                delay = self._last_request_at + self._min_interval - loop.time()
                if delay > 0:
                    await asyncio.sleep(delay)
            self._last_request_at = loop.time()

    async def get_from_location(
        self,
        latitude: float,
        longitude: float,
        max_results: int = 1,
    ) -> list[Address]:
        async with self._semaphore:
            await self._wait_for_slot()
            return await self._reverse(latitude, longitude, max_results)

    async def _reverse(self, latitude: float, longitude: float, max_results: int) -> list[Address]:
        client = await self._get_client()
        try:
            response = await client.get(
                f"{self._base_url}/reverse",
                params={
                    "format": "jsonv2",
                    "lat": latitude,
                    "lon": longitude,
                    "zoom": 18,
                    "addressdetails": 1,
                },
            )
        except httpx.HTTPError as e:
            raise UpstreamError(f"Reverse geocoding request failed: {e}") from e

        if response.status_code != 200:
            raise UpstreamError(
                f"Reverse geocoding error: {response.status_code}",
                status_code=response.status_code,
            )

        payload = response.json()
        # Nominatim answers unmatched coordinates with 200 and an error field
        if not isinstance(payload, dict) or "error" in payload:
            logger.debug("nominatim_no_match", latitude=latitude, longitude=longitude)
            return []
        return [address_from_payload(payload)][:max_results]

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
