"""Upstream content adapters."""

from video_atlas.adapters.upstream.base import DEFAULT_BATCH_SIZE, ListPage, UpstreamClient, chunked
from video_atlas.adapters.upstream.stub import StubUpstreamClient
from video_atlas.adapters.upstream.youtube import YouTubeDataClient, signing_cert_fingerprint

__all__ = [
    "DEFAULT_BATCH_SIZE",
    "ListPage",
    "StubUpstreamClient",
    "UpstreamClient",
    "YouTubeDataClient",
    "chunked",
    "signing_cert_fingerprint",
]
