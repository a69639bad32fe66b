"""Acquisition, caching and query services."""

from video_atlas.services.cache import DEFAULT_CACHE_TTL, CacheCoordinator
from video_atlas.services.enrichment import DEFAULT_MAX_PAGES, EnrichmentPipeline, sort_newest_first
from video_atlas.services.geocoder import Geocoder, place_from_address
from video_atlas.services.query import QueryFacade
from video_atlas.services.video_list import VideoListController
from video_atlas.services.video_store import VideoStore

__all__ = [
    "DEFAULT_CACHE_TTL",
    "DEFAULT_MAX_PAGES",
    "CacheCoordinator",
    "EnrichmentPipeline",
    "Geocoder",
    "QueryFacade",
    "VideoListController",
    "VideoStore",
    "place_from_address",
    "sort_newest_first",
]
