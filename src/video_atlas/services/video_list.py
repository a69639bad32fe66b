"""State holder tying the cache coordinator and query facade to a video list view."""

from collections.abc import AsyncIterator
from contextlib import aclosing

from video_atlas.domain.enums import SortOption
from video_atlas.domain.models import FilterOptions
from video_atlas.domain.state import (
    Error,
    Loading,
    VideoListState,
    state_from_result,
    state_from_videos,
)
from video_atlas.errors import StoreError
from video_atlas.logging import get_logger
from video_atlas.services.cache import CacheCoordinator
from video_atlas.services.query import QueryFacade

logger = get_logger(__name__)


class VideoListController:
    """Keeps exactly one of Loading/Empty/Success/Error current for the list view.

    Facet and count lookups are best effort: a failure keeps their previous
    values and never changes the list state.
    """

    def __init__(self, coordinator: CacheCoordinator, facade: QueryFacade) -> None:
        self._coordinator = coordinator
        self._facade = facade
        self.state: VideoListState = Loading()
        self.filter_options = FilterOptions()
        self.sort_option = SortOption.PUBLICATION_DATE_NEWEST
        self.available_channels: list[str] = []
        self.available_countries: list[str] = []
        self.total_count = 0

    async def load(self) -> VideoListState:
        """Populate the list from the cache, fetching when it is stale."""
        self.state = Loading()
        result = await self._coordinator.get_latest()
        self._load_total_count()
        self._load_filter_options()
        self.state = state_from_result(result, self.total_count)
        return self.state

    async def refresh(self) -> VideoListState:
        """Force a fetch, then reload the count and facets."""
        self.state = Loading()
        result = await self._coordinator.refresh()
        if result.is_success:
            self._load_total_count()
            self._load_filter_options()
        self.state = state_from_result(result, self.total_count)
        return self.state

    def apply_filter(self, filter_options: FilterOptions) -> VideoListState:
        self.filter_options = filter_options
        return self._reload_view()

    def apply_sorting(self, sort_option: SortOption) -> VideoListState:
        self.sort_option = sort_option
        return self._reload_view()

    def clear_filters(self) -> VideoListState:
        self.filter_options = FilterOptions()
        return self._reload_view()

    async def watch(self) -> AsyncIterator[VideoListState]:
        """Follow store changes for the current filter and sort."""
        stream = self._facade.list_videos(self.filter_options, self.sort_option)
        async with aclosing(stream):
            async for videos in stream:
                self.state = state_from_videos(videos, self.total_count)
                yield self.state

    def _reload_view(self) -> VideoListState:
        try:
            videos = self._facade.snapshot(self.filter_options, self.sort_option)
        except StoreError as e:
            self.state = Error(message=str(e))
            return self.state
        self.state = state_from_videos(videos, self.total_count)
        return self.state

    def _load_total_count(self) -> None:
        try:
            self.total_count = self._facade.total_count()
        except StoreError as e:
            logger.warning("total_count_unavailable", error=str(e))

    def _load_filter_options(self) -> None:
        try:
            self.available_countries = sorted(self._facade.distinct_countries())
            self.available_channels = sorted(self._facade.distinct_channels())
        except StoreError as e:
            logger.warning("filter_options_unavailable", error=str(e))
