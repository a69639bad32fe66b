"""Wiring of configured adapters and services."""

from datetime import timedelta

from video_atlas.adapters.geocoding.base import GeocodingBackend
from video_atlas.adapters.geocoding.nominatim import NominatimGeocodingBackend
from video_atlas.adapters.geocoding.stub import StubGeocodingBackend
from video_atlas.adapters.upstream.base import UpstreamClient
from video_atlas.adapters.upstream.stub import StubUpstreamClient
from video_atlas.adapters.upstream.youtube import YouTubeDataClient, signing_cert_fingerprint
from video_atlas.config import Settings, get_settings, resolve_api_key
from video_atlas.db.session import get_session_factory
from video_atlas.services.cache import CacheCoordinator
from video_atlas.services.enrichment import EnrichmentPipeline
from video_atlas.services.geocoder import Geocoder
from video_atlas.services.query import QueryFacade
from video_atlas.services.video_store import VideoStore


def get_cert_fingerprint(settings: Settings) -> str:
    """Configured fingerprint, or one computed from the configured certificate."""
    if settings.youtube_client_cert:
        return settings.youtube_client_cert
    if settings.youtube_client_cert_path is not None:
        return signing_cert_fingerprint(settings.youtube_client_cert_path.read_bytes())
    return ""


def get_upstream_client(settings: Settings | None = None) -> UpstreamClient:
    """Get the configured upstream client."""
    settings = settings or get_settings()
    provider = settings.upstream_provider.lower()

    if provider == "stub":
        return StubUpstreamClient(generate_samples=True)
    return YouTubeDataClient(
        resolve_api_key(settings),
        client_package=settings.youtube_client_package,
        cert_fingerprint=get_cert_fingerprint(settings),
        base_url=settings.youtube_base_url,
    )


def get_geocoding_backend(settings: Settings | None = None) -> GeocodingBackend | None:
    """Get the configured geocoding backend; ``None`` disables geocoding."""
    settings = settings or get_settings()
    provider = settings.geocoder_provider.lower()

    if provider == "none":
        return None
    if provider == "stub":
        return StubGeocodingBackend()
    return NominatimGeocodingBackend(
        settings.geocoder_base_url,
        user_agent=settings.geocoder_user_agent,
        max_concurrency=settings.geocoder_max_concurrency,
        min_interval=settings.geocoder_min_interval_seconds,
    )


def get_store() -> VideoStore:
    return VideoStore(get_session_factory())


def build_pipeline(
    store: VideoStore,
    settings: Settings | None = None,
) -> EnrichmentPipeline:
    settings = settings or get_settings()
    return EnrichmentPipeline(
        get_upstream_client(settings),
        Geocoder(get_geocoding_backend(settings)),
        store,
        source_ids=settings.channel_ids,
        max_pages=settings.max_pages_per_channel,
        batch_size=settings.detail_batch_size,
    )


def build_cache_coordinator(
    store: VideoStore,
    settings: Settings | None = None,
) -> CacheCoordinator:
    settings = settings or get_settings()
    return CacheCoordinator(
        build_pipeline(store, settings),
        store,
        ttl=timedelta(hours=settings.cache_ttl_hours),
        timeout=settings.pipeline_timeout_seconds,
    )


def build_query_facade(store: VideoStore) -> QueryFacade:
    return QueryFacade(store)
