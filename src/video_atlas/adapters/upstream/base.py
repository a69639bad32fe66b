"""Base interface for upstream content adapters."""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from video_atlas.domain.models import Video, VideoDetails
from video_atlas.logging import get_logger

logger = get_logger(__name__)

# The upstream API rejects detail requests with more ids than this
DEFAULT_BATCH_SIZE = 50


@dataclass
class ListPage:
    """One page of a channel's video listing."""

    items: list[Video] = field(default_factory=list)
    next_page_token: str | None = None


def chunked(items: Sequence[str], size: int) -> list[list[str]]:
    """Split ``items`` into consecutive chunks of at most ``size`` elements."""
    if size < 1:
        raise ValueError(f"Batch size must be positive, got {size}")
    return [list(items[start : start + size]) for start in range(0, len(items), size)]


class UpstreamClient(ABC):
    """Abstract base class for upstream content adapters.

    Implementations:
    - YouTubeDataClient: YouTube Data API v3 (search.list / videos.list)
    - StubUpstreamClient: Canned pages and details for tests and offline runs
    """

    @abstractmethod
    async def list_items(self, source_id: str, page_token: str | None = None) -> ListPage:
        """Fetch one page of videos for a source, newest first.

        Args:
            source_id: The channel to list.
            page_token: Token from the previous page, or None for the first page.

        Returns:
            ListPage with the page's videos and the next page token, if any.

        Raises:
            UpstreamError: On transport, status or payload errors.
        """
        ...

    @abstractmethod
    async def fetch_details_batch(self, ids: Sequence[str]) -> list[VideoDetails]:
        """Fetch detail metadata for one batch of at most ``DEFAULT_BATCH_SIZE`` ids.

        Raises:
            UpstreamError: On transport, status or payload errors.
        """
        ...

    async def get_details(
        self,
        ids: Iterable[str],
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> dict[str, VideoDetails]:
        """Fetch details for every id, batching requests and running them concurrently.

        A failing batch contributes nothing; the other batches still count.

        Returns:
            Mapping of video id to its details. Ids the upstream did not return
            are absent.
        """
        unique_ids = list(dict.fromkeys(ids))
        batches = chunked(unique_ids, batch_size)
        logger.debug("detail_batches_planned", ids=len(unique_ids), batches=len(batches))

        results = await asyncio.gather(*(self._fetch_batch_isolated(batch) for batch in batches))

        details: dict[str, VideoDetails] = {}
        for batch_details in results:
            for item in batch_details:
                details[item.id] = item
        return details

    async def _fetch_batch_isolated(self, batch: list[str]) -> list[VideoDetails]:
        try:
            batch_details = await self.fetch_details_batch(batch)
        except Exception as e:
            logger.warning(
                "detail_batch_failed",
                batch_size=len(batch),
                first_id=batch[0] if batch else None,
                error=str(e),
            )
            return []
        logger.debug("detail_batch_fetched", requested=len(batch), returned=len(batch_details))
        return batch_details

    async def close(self) -> None:
        """Release any held resources."""
        return None
