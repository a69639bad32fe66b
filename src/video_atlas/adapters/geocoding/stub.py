"""Stub geocoding backend for testing."""

from video_atlas.adapters.geocoding.base import Address, GeocodingBackend
from video_atlas.errors import UpstreamError
from video_atlas.logging import get_logger

logger = get_logger(__name__)

NEW_YORK_CITY = Address(
    locality="New York",
    admin_area="New York",
    country_name="United States",
    country_code="US",
)


def _key(latitude: float, longitude: float) -> tuple[float, float]:
    return (round(latitude, 4), round(longitude, 4))


class StubGeocodingBackend(GeocodingBackend):
    """Stub backend resolving from a fixed coordinate table."""

    def __init__(
        self,
        addresses: dict[tuple[float, float], Address] | None = None,
        *,
        present: bool = True,
        fail: bool = False,
    ) -> None:
        table = addresses if addresses is not None else {(40.7128, -74.0060): NEW_YORK_CITY}
        self._addresses = {_key(*coords): address for coords, address in table.items()}
        self._present = present
        self._fail = fail
        self.calls: list[tuple[float, float]] = []

    def is_present(self) -> bool:
        return self._present

    async def get_from_location(
        self,
        latitude: float,
        longitude: float,
        max_results: int = 1,
    ) -> list[Address]:
        self.calls.append((latitude, longitude))
        logger.info("stub_reverse_geocode", latitude=latitude, longitude=longitude)
        if self._fail:
            raise UpstreamError("Stub geocoder failure")
        address = self._addresses.get(_key(latitude, longitude))
        return [address][:max_results] if address else []
