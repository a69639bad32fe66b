"""Stub upstream adapter for testing and offline runs."""

from collections.abc import Iterable, Sequence

from video_atlas.adapters.upstream.base import ListPage, UpstreamClient
from video_atlas.domain.models import Video, VideoDetails
from video_atlas.errors import UpstreamError
from video_atlas.logging import get_logger

logger = get_logger(__name__)


def sample_videos(source_id: str, count: int = 2) -> list[Video]:
    """Deterministic placeholder videos for a channel."""
    return [
        Video(
            id=f"{source_id}-{index}",
            title=f"Sample video {index} from {source_id}",
            channel_name=f"Channel {source_id[-4:]}",
            channel_id=source_id,
            published_at=f"2024-01-{index + 1:02d}T12:00:00Z",
            thumbnail_url=f"https://i.ytimg.com/vi/{source_id}-{index}/hqdefault.jpg",
            description="Stub content",
        )
        for index in range(count)
    ]


class StubUpstreamClient(UpstreamClient):
    """Stub adapter serving canned pages and details.

    Page tokens are the stringified index of the next page. Every call is
    recorded so tests can assert on fan-out.
    """

    def __init__(
        self,
        pages: dict[str, list[list[Video]]] | None = None,
        details: Iterable[VideoDetails] = (),
        *,
        failing_sources: Iterable[str] = (),
        failing_pages: dict[str, int] | None = None,
        failing_detail_ids: Iterable[str] = (),
        generate_samples: bool = False,
    ) -> None:
        self._pages = pages or {}
        self._details = {item.id: item for item in details}
        self._failing_sources = set(failing_sources)
        self._failing_pages = failing_pages or {}
        self._failing_detail_ids = set(failing_detail_ids)
        self._generate_samples = generate_samples
        self.list_calls: list[tuple[str, str | None]] = []
        self.detail_batches: list[list[str]] = []

    def _pages_for(self, source_id: str) -> list[list[Video]]:
        if source_id in self._pages:
            return self._pages[source_id]
        if self._generate_samples:
            return [sample_videos(source_id)]
        return [[]]

    async def list_items(self, source_id: str, page_token: str | None = None) -> ListPage:
        if not source_id:
            raise ValueError("source_id must be non-empty")
        self.list_calls.append((source_id, page_token))

        index = int(page_token) if page_token else 0
        if source_id in self._failing_sources or self._failing_pages.get(source_id) == index:
            raise UpstreamError(f"Stub failure for {source_id} page {index}", status_code=503)

        pages = self._pages_for(source_id)
        items = list(pages[index]) if index < len(pages) else []
        next_token = str(index + 1) if index + 1 < len(pages) else None
        logger.info("stub_list_items", source_id=source_id, page=index, items=len(items))
        return ListPage(items=items, next_page_token=next_token)

    async def fetch_details_batch(self, ids: Sequence[str]) -> list[VideoDetails]:
        self.detail_batches.append(list(ids))
        if self._failing_detail_ids.intersection(ids):
            raise UpstreamError("Stub detail batch failure", status_code=500)
        return [self._details[video_id] for video_id in ids if video_id in self._details]
