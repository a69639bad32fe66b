"""Reverse geocoding backends."""

from video_atlas.adapters.geocoding.base import Address, GeocodingBackend
from video_atlas.adapters.geocoding.nominatim import NominatimGeocodingBackend
from video_atlas.adapters.geocoding.stub import StubGeocodingBackend
from video_atlas.adapters.geocoding.wrappers import BlockingGeocodingBackend, CallbackGeocodingBackend

__all__ = [
    "Address",
    "BlockingGeocodingBackend",
    "CallbackGeocodingBackend",
    "GeocodingBackend",
    "NominatimGeocodingBackend",
    "StubGeocodingBackend",
]
