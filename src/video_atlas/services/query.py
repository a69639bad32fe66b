"""Read-only views over the video store."""

import asyncio
from collections.abc import AsyncGenerator

from video_atlas.domain.enums import SortOption
from video_atlas.domain.models import FilterOptions, Video
from video_atlas.logging import get_logger
from video_atlas.services.video_store import VideoStore

logger = get_logger(__name__)


class QueryFacade:
    """Filter, sort and facet queries, independent of any fetch in flight."""

    def __init__(self, store: VideoStore) -> None:
        self._store = store

    def snapshot(
        self,
        filter_options: FilterOptions | None = None,
        sort_option: SortOption = SortOption.PUBLICATION_DATE_NEWEST,
    ) -> list[Video]:
        """One-shot read of the current matching videos."""
        return self._store.list_videos(filter_options, sort_option)

    async def list_videos(
        self,
        filter_options: FilterOptions | None = None,
        sort_option: SortOption = SortOption.PUBLICATION_DATE_NEWEST,
    ) -> AsyncGenerator[list[Video], None]:
        """Yield the matching videos now and again after every change that alters them.

        Runs until the consumer stops iterating; each call starts a fresh
        subscription.
        """
        loop = asyncio.get_running_loop()
        changed = asyncio.Event()

        def on_change() -> None:
            loop.call_soon_threadsafe(changed.set)

        unsubscribe = self._store.subscribe(on_change)
        try:
            previous: list[Video] | None = None
            while True:
                changed.clear()
                current = self._store.list_videos(filter_options, sort_option)
                if current != previous:
                    previous = current
                    yield current
                await changed.wait()
        finally:
            unsubscribe()

    def distinct_channels(self) -> set[str]:
        return self._store.distinct_channels()

    def distinct_countries(self) -> set[str]:
        return self._store.distinct_countries()

    def total_count(self) -> int:
        return self._store.count()
