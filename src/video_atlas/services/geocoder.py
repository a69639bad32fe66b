"""Coordinate to place-name resolution that never fails the caller."""

from video_atlas.adapters.geocoding.base import Address, GeocodingBackend
from video_atlas.domain.models import Place
from video_atlas.logging import get_logger

logger = get_logger(__name__)

# Known coordinate used to check the backend end to end
SELF_TEST_COORDINATES = (40.7128, -74.0060)


def _first_non_empty(*values: str | None) -> str | None:
    for value in values:
        if value and value.strip():
            return value
    return None


def place_from_address(address: Address) -> Place:
    """Pick the most specific city name and the most readable country name."""
    city = _first_non_empty(
        address.locality,
        address.sub_admin_area,
        address.admin_area,
        address.sub_locality,
        address.thoroughfare,
    )
    country = _first_non_empty(address.country_name, address.country_code)
    return Place(city=city, country=country)


class Geocoder:
    """Resolves coordinates to a :class:`Place`.

    An absent backend, an empty match list and a backend error all yield an
    empty Place. Nothing is raised to the caller.
    """

    def __init__(self, backend: GeocodingBackend | None) -> None:
        self._backend = backend

    @property
    def available(self) -> bool:
        if self._backend is None:
            return False
        try:
            return self._backend.is_present()
        except Exception as e:
            logger.warning("geocoder_probe_failed", error=str(e))
            return False

    async def resolve(self, latitude: float, longitude: float) -> Place:
        if not self.available:
            logger.warning("geocoder_unavailable", latitude=latitude, longitude=longitude)
            return Place()

        try:
            addresses = await self._backend.get_from_location(latitude, longitude, 1)
        except Exception as e:
            logger.error(
                "reverse_geocoding_failed",
                latitude=latitude,
                longitude=longitude,
                error=str(e),
            )
            return Place()

        if not addresses:
            logger.info("reverse_geocoding_no_match", latitude=latitude, longitude=longitude)
            return Place()

        place = place_from_address(addresses[0])
        logger.debug(
            "reverse_geocoding_resolved",
            latitude=latitude,
            longitude=longitude,
            city=place.city,
            country=place.country,
        )
        return place

    async def self_test(self) -> Place:
        """Resolve a known coordinate (New York City) and log the outcome."""
        place = await self.resolve(*SELF_TEST_COORDINATES)
        logger.info("geocoder_self_test", city=place.city, country=place.country)
        return place

    async def close(self) -> None:
        if self._backend is not None:
            await self._backend.close()
