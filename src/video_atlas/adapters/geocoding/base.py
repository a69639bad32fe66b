"""Base interface for reverse geocoding backends."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class Address:
    """Address components of a reverse geocoding match."""

    locality: str | None = None
    sub_admin_area: str | None = None
    admin_area: str | None = None
    sub_locality: str | None = None
    thoroughfare: str | None = None
    country_name: str | None = None
    country_code: str | None = None


class GeocodingBackend(ABC):
    """Abstract base class for reverse geocoding backends.

    Implementations:
    - NominatimGeocodingBackend: Nominatim-compatible HTTP service
    - CallbackGeocodingBackend: Wraps a resolver that reports through a callback
    - BlockingGeocodingBackend: Wraps a resolver that returns directly
    - StubGeocodingBackend: Fixed coordinate table for testing
    """

    def is_present(self) -> bool:
        """Whether the backend can resolve at all on this host."""
        return True

    @abstractmethod
    async def get_from_location(
        self,
        latitude: float,
        longitude: float,
        max_results: int = 1,
    ) -> list[Address]:
        """Reverse-geocode a coordinate pair.

        Args:
            latitude: Latitude in decimal degrees.
            longitude: Longitude in decimal degrees.
            max_results: Upper bound on matches returned.

        Returns:
            Matches, best first. Empty if nothing matched.
        """
        ...

    async def close(self) -> None:
        """Release any held resources."""
        return None
