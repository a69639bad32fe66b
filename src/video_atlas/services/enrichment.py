"""Enrichment pipeline: list, detail, merge, geocode, sort and persist."""

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass, field, replace

from video_atlas.adapters.upstream.base import DEFAULT_BATCH_SIZE, UpstreamClient
from video_atlas.config import DEFAULT_CHANNEL_IDS
from video_atlas.domain.models import Video, VideoDetails, merge_with_details
from video_atlas.errors import PipelineError
from video_atlas.logging import get_logger
from video_atlas.services.geocoder import Geocoder
from video_atlas.services.video_store import VideoStore
from video_atlas.utils.dates import normalize_timestamp, published_sort_key

logger = get_logger(__name__)

# Safety limit on pages per source so a misbehaving token chain terminates
DEFAULT_MAX_PAGES = 5


@dataclass
class SourceListing:
    """Everything one source produced during the list phase."""

    source_id: str
    videos: list[Video] = field(default_factory=list)
    pages_fetched: int = 0
    error: str | None = None

    @property
    def usable(self) -> bool:
        return self.pages_fetched > 0


def sort_newest_first(videos: Sequence[Video]) -> list[Video]:
    """Stable sort by publication date, newest first; unparsable dates sort as oldest."""
    return sorted(videos, key=lambda video: published_sort_key(video.published_at), reverse=True)


def with_utc_timestamps(video: Video) -> Video:
    """Rewrite offset timestamps as UTC so the store's text ordering matches ``sort_newest_first``."""
    published_at = normalize_timestamp(video.published_at)
    recording_date = normalize_timestamp(video.recording_date)
    if published_at == video.published_at and recording_date == video.recording_date:
        return video
    return replace(video, published_at=published_at, recording_date=recording_date)


class EnrichmentPipeline:
    """Produces the canonical, enriched video set from the configured sources.

    Each phase launches its independent units concurrently and waits for all
    of them before the next phase starts:
    1. List: paginate every source (capped at ``max_pages``)
    2. Detail: batched detail requests for every listed id
    3. Merge: overlay tags and recording details, normalize timestamps to UTC
    4. Geocode: resolve city/country for every video with coordinates
    5. Sort: newest publication date first
    6. Persist: one bulk upsert, when a store is attached

    Failures of a single source, detail batch or geocode are logged and
    absorbed. The run fails only when no source produced anything.
    """

    def __init__(
        self,
        upstream: UpstreamClient,
        geocoder: Geocoder,
        store: VideoStore | None = None,
        *,
        source_ids: Sequence[str] = DEFAULT_CHANNEL_IDS,
        max_pages: int = DEFAULT_MAX_PAGES,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> None:
        """Initialize the pipeline with its collaborators.

        Args:
            upstream: Client for channel listings and video details.
            geocoder: Coordinate to place-name resolver.
            store: Optional store receiving the persist phase's bulk write.
            source_ids: Channels to aggregate.
            max_pages: Hard cap on list pages per source.
            batch_size: Ids per detail request.
        """
        if not source_ids:
            raise ValueError("At least one source id is required")
        if max_pages < 1:
            raise ValueError(f"max_pages must be positive, got {max_pages}")
        if batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {batch_size}")

        self._upstream = upstream
        self._geocoder = geocoder
        self._store = store
        self._source_ids = list(source_ids)
        self._max_pages = max_pages
        self._batch_size = batch_size

    async def run(self, *, persist: bool = True, timeout: float | None = None) -> list[Video]:
        """Run a full refresh.

        Args:
            persist: Write the result to the attached store, if any.
            timeout: Abandon the run after this many seconds. Nothing is
                persisted for an abandoned run.

        Returns:
            Enriched videos, newest first.

        Raises:
            PipelineError: If no source produced data, the run timed out, or
                the orchestration itself failed.
        """
        logger.info("enrichment_started", sources=len(self._source_ids))
        try:
            videos = await asyncio.wait_for(self._run_phases(), timeout)
        except PipelineError:
            raise
        except TimeoutError as e:
            logger.error("enrichment_timed_out", timeout=timeout)
            raise PipelineError(f"Enrichment abandoned after {timeout}s") from e
        except Exception as e:
            logger.error("enrichment_failed", error=str(e), error_type=type(e).__name__)
            raise PipelineError(f"Enrichment failed: {e}") from e

        if persist and self._store is not None and videos:
            self._store.upsert_videos(videos)

        logger.info(
            "enrichment_completed",
            videos=len(videos),
            located=sum(1 for video in videos if video.location_country or video.location_city),
        )
        return videos

    async def close(self) -> None:
        """Close the upstream client and the geocoder backend."""
        await self._upstream.close()
        await self._geocoder.close()

    async def _run_phases(self) -> list[Video]:
        videos = await self._list_phase()
        details = await self._detail_phase(videos)
        merged = [with_utc_timestamps(merge_with_details(video, details.get(video.id))) for video in videos]
        located = await self._geocode_phase(merged)
        return sort_newest_first(located)

    # =========================================================================
    # PHASE 1: List
    # =========================================================================

    async def _list_phase(self) -> list[Video]:
        listings = await asyncio.gather(
            *(self._paginate_source(source_id) for source_id in self._source_ids)
        )

        usable = [listing for listing in listings if listing.usable]
        if not usable:
            errors = {listing.source_id: listing.error for listing in listings}
            logger.error("list_phase_failed", errors=errors)
            raise PipelineError(f"No source returned any data ({len(listings)} sources failed)")

        videos: list[Video] = []
        seen: set[str] = set()
        for listing in listings:
            for video in listing.videos:
                if video.id in seen:
                    logger.debug("duplicate_video_dropped", video_id=video.id, source_id=listing.source_id)
                    continue
                seen.add(video.id)
                videos.append(video)

        logger.info(
            "list_phase_completed",
            videos=len(videos),
            sources_ok=len(usable),
            sources_failed=len(listings) - len(usable),
        )
        return videos

    async def _paginate_source(self, source_id: str) -> SourceListing:
        listing = SourceListing(source_id=source_id)
        page_token: str | None = None

        while listing.pages_fetched < self._max_pages:
            try:
                page = await self._upstream.list_items(source_id, page_token)
            except Exception as e:
                # Keep what earlier pages produced
                logger.warning(
                    "source_page_failed",
                    source_id=source_id,
                    page=listing.pages_fetched + 1,
                    error=str(e),
                )
                listing.error = str(e)
                break

            listing.pages_fetched += 1
            listing.videos.extend(page.items)
            page_token = page.next_page_token
            if not page_token:
                break
        else:
            logger.info("source_page_cap_reached", source_id=source_id, max_pages=self._max_pages)

        logger.debug(
            "source_listed",
            source_id=source_id,
            videos=len(listing.videos),
            pages=listing.pages_fetched,
        )
        return listing

    # =========================================================================
    # PHASE 2: Detail
    # =========================================================================

    async def _detail_phase(self, videos: Sequence[Video]) -> dict[str, VideoDetails]:
        if not videos:
            return {}
        details = await self._upstream.get_details(
            (video.id for video in videos),
            batch_size=self._batch_size,
        )
        logger.info("detail_phase_completed", requested=len(videos), found=len(details))
        return details

    # =========================================================================
    # PHASE 4: Geocode
    # =========================================================================

    async def _geocode_phase(self, videos: list[Video]) -> list[Video]:
        positions = [index for index, video in enumerate(videos) if video.has_coordinates]
        if not positions:
            return videos

        places = await asyncio.gather(
            *(
                self._geocoder.resolve(videos[index].location_latitude, videos[index].location_longitude)
                for index in positions
            )
        )

        located = list(videos)
        for index, place in zip(positions, places):
            located[index] = located[index].with_place(place)

        logger.info("geocode_phase_completed", located=len(positions))
        return located
