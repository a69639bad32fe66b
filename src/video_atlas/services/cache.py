"""Cache-or-fetch coordination over the video store."""

from collections.abc import Callable
from datetime import timedelta

from video_atlas.domain.models import Video
from video_atlas.domain.state import Result
from video_atlas.logging import get_logger
from video_atlas.services.enrichment import EnrichmentPipeline
from video_atlas.services.video_store import VideoStore
from video_atlas.utils.dates import now_millis

logger = get_logger(__name__)

DEFAULT_CACHE_TTL = timedelta(hours=24)


class CacheCoordinator:
    """Serves cached videos while fresh and runs the pipeline otherwise.

    The gate is strict: any record cached within the TTL short-circuits the
    network path, and a hit never schedules a background refresh.
    """

    def __init__(
        self,
        pipeline: EnrichmentPipeline,
        store: VideoStore,
        *,
        ttl: timedelta = DEFAULT_CACHE_TTL,
        clock: Callable[[], int] = now_millis,
        timeout: float | None = None,
    ) -> None:
        self._pipeline = pipeline
        self._store = store
        self._ttl_millis = int(ttl.total_seconds() * 1000)
        self._clock = clock
        self._timeout = timeout

    @property
    def pipeline(self) -> EnrichmentPipeline:
        return self._pipeline

    def freshness_threshold(self) -> int:
        """Epoch millis after which a cached record counts as fresh."""
        return self._clock() - self._ttl_millis

    async def get_latest(self) -> Result[list[Video]]:
        """Return fresh cached videos, or fetch when the cache holds none."""
        try:
            cached = self._store.get_videos_newer_than(self.freshness_threshold())
        except Exception as e:
            logger.error("cache_lookup_failed", error=str(e))
            return Result.failure(e)

        if cached:
            logger.debug("cache_hit", videos=len(cached))
            return Result.success(cached)

        logger.info("cache_miss")
        return await self.refresh()

    async def refresh(self) -> Result[list[Video]]:
        """Run the pipeline regardless of cache state and persist its output."""
        try:
            videos = await self._pipeline.run(persist=False, timeout=self._timeout)
            if videos:
                self._store.upsert_videos(videos)
        except Exception as e:
            logger.error("refresh_failed", error=str(e), error_type=type(e).__name__)
            return Result.failure(e)

        logger.info("refresh_completed", videos=len(videos))
        return Result.success(videos)

    def purge_expired(self) -> int:
        """Delete records that fell out of the TTL window."""
        return self._store.delete_older_than(self.freshness_threshold())
